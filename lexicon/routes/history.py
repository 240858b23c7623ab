"""History routes - per-client search history."""

from flask import Blueprint, request, jsonify, current_app
from lexicon.constants import validate_language_pair
from lexicon.errors import PersistenceWriteFailed
from lexicon.services import get_history_store

history_bp = Blueprint('history', __name__)


@history_bp.route('', methods=['POST'])
def add_history():
    """Record one lookup for a client.
    
    Body: {clientId (or telegramId), term, translation, sourceLang, targetLang, category}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    
    client_id = data.get('clientId') or data.get('telegramId')
    term = data.get('term')
    term = term.strip() if isinstance(term, str) else ''
    
    if not client_id or not term:
        return jsonify({'error': 'clientId and term are required'}), 400
    
    source_lang, target_lang, error = validate_language_pair(
        data.get('sourceLang'), data.get('targetLang')
    )
    if error:
        return jsonify({'error': error}), 400
    
    try:
        get_history_store().record(
            client_id,
            term,
            data.get('translation'),
            source_lang,
            target_lang,
            data.get('category')
        )
        return jsonify({'success': True}), 201
    except PersistenceWriteFailed as e:
        current_app.logger.warning(str(e))
        return jsonify({'error': 'Internal error'}), 500


@history_bp.route('/<client_id>', methods=['GET'])
def get_history(client_id):
    """Get a client's history, newest first.
    
    Query params:
    - limit: Max rows (capped by HISTORY_LIMIT)
    """
    limit = request.args.get('limit', type=int)
    rows = get_history_store().recent(client_id, limit=limit)
    return jsonify([row.to_dict() for row in rows]), 200
