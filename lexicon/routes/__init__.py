"""Routes package for the lexicon application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .lexicon import lexicon_bp
    from .history import history_bp
    from .speech import speech_bp
    
    app.register_blueprint(lexicon_bp, url_prefix='/api')
    app.register_blueprint(history_bp, url_prefix='/api/history')
    app.register_blueprint(speech_bp, url_prefix='/api/speech')
