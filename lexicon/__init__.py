from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()

logger = logging.getLogger(__name__)


def create_app(config_name='development', overrides=None):
    app = Flask(__name__)
    
    # Config
    if config_name == 'testing':
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        app.config['TESTING'] = True
    else:
        app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv(
            'DATABASE_URL',
            'sqlite:///lexicon.db'  # SQLite for local development
        )
    
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['HOT_CACHE_CAPACITY'] = int(os.getenv('HOT_CACHE_CAPACITY', 2000))
    app.config['HOT_CACHE_BACKEND'] = os.getenv('HOT_CACHE_BACKEND', 'memory')
    app.config['REDIS_URL'] = os.getenv('REDIS_URL')
    app.config['HISTORY_LIMIT'] = int(os.getenv('HISTORY_LIMIT', 50))
    app.config['GEMINI_API_KEY'] = os.getenv('GEMINI_API_KEY', os.getenv('API_KEY', ''))
    app.config['GEMINI_MODEL'] = os.getenv('GEMINI_MODEL', 'gemini-3-flash-preview')
    app.config['GEMINI_TTS_MODEL'] = os.getenv('GEMINI_TTS_MODEL', 'gemini-2.5-flash-preview-tts')
    app.config['GENERATION_TIMEOUT'] = float(os.getenv('GENERATION_TIMEOUT', 30))
    app.config['SPEECH_CACHE_CAPACITY'] = int(os.getenv('SPEECH_CACHE_CAPACITY', 500))
    
    if overrides:
        app.config.update(overrides)
    
    # Initialize extensions
    db.init_app(app)
    CORS(app)
    
    # Create tables with error handling
    with app.app_context():
        from lexicon import models  # noqa: F401  (registers tables)
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")
    
    # Long-lived services, one set per app
    from lexicon.services import init_services
    init_services(app)
    
    # Register routes
    from lexicon.routes import register_routes
    register_routes(app)
    
    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200
    
    return app
