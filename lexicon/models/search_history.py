"""Search history model: append-only log of a client's lookups."""

from datetime import datetime
from lexicon import db


class SearchHistory(db.Model):
    __tablename__ = 'search_history'
    
    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.String(64), nullable=False, index=True)
    term = db.Column(db.String(255), nullable=False)
    translation = db.Column(db.Text, nullable=True)
    source_lang = db.Column(db.String(5), nullable=False)
    target_lang = db.Column(db.String(5), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    
    def to_dict(self):
        """Convert history row to the camelCase shape the client expects."""
        return {
            'id': self.id,
            'clientId': self.client_id,
            'term': self.term,
            'translation': self.translation,
            'sourceLang': self.source_lang,
            'targetLang': self.target_lang,
            'category': self.category or 'Other',
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }
