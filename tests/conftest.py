"""
Pytest configuration and fixtures for testing the Lexicon API.
"""

import base64
import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from lexicon import create_app, db
from lexicon.client import HistoryList, LocalStore, LookupCoordinator, SessionCache

fake = Faker()


def build_payload(term='Haus', translation='uy', part_of_speech='Noun', **extra):
    """A translation payload with every required field."""
    payload = {
        'term': term,
        'termPhonetic': '/haʊs/',
        'mainTranslation': translation,
        'alternatives': [f'{translation}-joy'],
        'sourceSynonyms': ['Gebäude'],
        'level': 'A1',
        'grammar': {'partOfSpeech': part_of_speech, 'gender': 'n', 'plural': 'Häuser'},
        'examples': [{
            'text': f'Das {term} ist groß.',
            'translation': f'{translation} katta.',
            'sourceTitle': 'General',
            'sourceType': 'general',
        }],
        'etymology': 'From Old High German hūs.',
    }
    payload.update(extra)
    return payload


class FakeGateway:
    """Stands in for the Gemini gateway; records every call."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.calls = []
        self.speech_calls = []
        self.error = None
        self.result = None

    def generate(self, term, source_lang, target_lang):
        self.calls.append((term, source_lang, target_lang))
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return build_payload(term=term, translation=f'{term.lower()}-{target_lang}')

    def synthesize_speech(self, text, lang):
        self.speech_calls.append((text, lang))
        if self.error is not None:
            raise self.error
        return base64.b64encode(f'{lang}:{text}'.encode()).decode()


@pytest.fixture(scope='session')
def shared_gateway():
    return FakeGateway()


@pytest.fixture
def gateway(shared_gateway):
    """The app's fake gateway, cleared for this test."""
    shared_gateway.reset()
    return shared_gateway


@pytest.fixture(scope='session')
def app(shared_gateway):
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'

    app = create_app('testing', overrides={
        'GENERATION_GATEWAY': shared_gateway,
        'HISTORY_LIMIT': 5,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app, shared_gateway):
    """Fresh tables, empty server caches and a clean fake gateway per test."""
    shared_gateway.reset()
    app.extensions['lexicon'].hot_cache.clear()
    app.extensions['lexicon_speech'].cache.clear()
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def lexicon_service(app, db_session):
    return app.extensions['lexicon']


@pytest.fixture
def local_store():
    return LocalStore()


@pytest.fixture
def coordinator(lexicon_service, gateway, local_store):
    """Coordinator wired to the in-process server tier."""
    return LookupCoordinator(
        session_cache=SessionCache(local_store),
        remote=lexicon_service,
        gateway=gateway,
        history=HistoryList(local_store, limit=50),
    )


@pytest.fixture
def make_payload():
    """Factory for valid translation payloads."""
    return build_payload
