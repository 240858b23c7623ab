"""Lexicon routes - shared translation lookup and save."""

from flask import Blueprint, request, jsonify, current_app
from lexicon.errors import MalformedPayload, PersistenceWriteFailed
from lexicon.services import get_lexicon_service
from lexicon.utils import LexiconKey

lexicon_bp = Blueprint('lexicon', __name__)


@lexicon_bp.route('/health', methods=['GET'])
def api_health():
    return jsonify({'status': 'ok'}), 200


@lexicon_bp.route('/lookup', methods=['GET'])
def lookup():
    """Look up a translation in the hot cache, then the global lexicon.
    
    Query params:
    - term: Word or phrase as typed
    - src: Source language code (de, uz, en, ru)
    - trg: Target language code
    
    A miss is a normal answer: {"hit": false}.
    """
    try:
        key = LexiconKey.build(
            request.args.get('term'),
            request.args.get('src'),
            request.args.get('trg')
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    
    try:
        data = get_lexicon_service().lookup(key)
        if data is None:
            return jsonify({'hit': False}), 200
        return jsonify({'hit': True, 'data': data}), 200
    except Exception as e:
        current_app.logger.error(f"Lookup failed for {key.cache_key}: {e}")
        return jsonify({'error': 'Internal error'}), 500


@lexicon_bp.route('/save', methods=['POST'])
def save():
    """Save a generated translation to the global lexicon.
    
    Body: {term, sourceLang, targetLang, data}. Saving an existing key
    overwrites its payload.
    """
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
    
    try:
        key = LexiconKey.build(body.get('term'), body.get('sourceLang'), body.get('targetLang'))
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    
    try:
        get_lexicon_service().save(key, body.get('data'), display_term=body['term'].strip())
        return jsonify({'success': True}), 200
    except MalformedPayload as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except PersistenceWriteFailed as e:
        current_app.logger.warning(str(e))
        return jsonify({'success': False, 'error': 'Could not save translation'}), 500


@lexicon_bp.route('/stats', methods=['GET'])
def stats():
    """Hot cache diagnostics."""
    return jsonify(get_lexicon_service().stats()), 200
