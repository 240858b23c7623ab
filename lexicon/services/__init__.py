"""Services for the lexicon application.

``init_services`` builds the long-lived objects once per app and stores
them in ``app.extensions``; route handlers fetch them through the
accessors below instead of reaching for module globals.
"""

from flask import current_app

from lexicon.services.generation import build_gateway
from lexicon.services.history import HistoryStore
from lexicon.services.hot_cache import HotCache, build_hot_cache
from lexicon.services.lexicon_service import LexiconService
from lexicon.services.record_store import RecordStore
from lexicon.services.speech import SpeechService


def init_services(app):
    config = app.config

    lexicon_service = LexiconService(RecordStore(), build_hot_cache(config))
    gateway = config.get('GENERATION_GATEWAY') or build_gateway(config)
    speech = None
    if gateway is not None:
        speech = SpeechService(gateway, HotCache(capacity=config['SPEECH_CACHE_CAPACITY']))

    app.extensions['lexicon'] = lexicon_service
    app.extensions['lexicon_history'] = HistoryStore(limit=config['HISTORY_LIMIT'])
    app.extensions['lexicon_speech'] = speech


def get_lexicon_service() -> LexiconService:
    return current_app.extensions['lexicon']


def get_history_store() -> HistoryStore:
    return current_app.extensions['lexicon_history']


def get_speech_service():
    """The speech service, or None when no gateway is configured."""
    return current_app.extensions['lexicon_speech']
