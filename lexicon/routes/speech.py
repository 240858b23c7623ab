"""Speech routes - cached pronunciation audio."""

from flask import Blueprint, request, jsonify
from lexicon.constants import validate_language
from lexicon.errors import GenerationFailed
from lexicon.services import get_speech_service

speech_bp = Blueprint('speech', __name__)


@speech_bp.route('', methods=['POST'])
def speak():
    """Return base64 PCM audio (24kHz mono) for {text, lang}."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    text = data.get('text')
    text = text.strip() if isinstance(text, str) else ''
    if not text:
        return jsonify({'error': 'text is required'}), 400
    
    lang, error = validate_language(data.get('lang'))
    if error:
        return jsonify({'error': error}), 400
    
    speech = get_speech_service()
    if speech is None:
        return jsonify({'error': 'Speech synthesis is not configured'}), 503
    
    try:
        return jsonify({'audio': speech.speak(text, lang)}), 200
    except GenerationFailed as e:
        return jsonify({'error': str(e)}), 502
