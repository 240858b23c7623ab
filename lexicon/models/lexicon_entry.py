"""Global lexicon model: the durable tier of the translation cache."""

from datetime import datetime
from lexicon import db


class LexiconEntry(db.Model):
    """One generated translation per (term, source_lang, target_lang)."""
    
    __tablename__ = 'global_lexicon'
    
    id = db.Column(db.Integer, primary_key=True)
    
    # Normalized (trimmed, case-folded) term; display form kept separately
    term = db.Column(db.String(255), nullable=False)
    display_term = db.Column(db.String(255), nullable=True)
    source_lang = db.Column(db.String(5), nullable=False)
    target_lang = db.Column(db.String(5), nullable=False)
    
    data = db.Column(db.JSON, nullable=False)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        db.UniqueConstraint('term', 'source_lang', 'target_lang', name='unique_lexicon_entry'),
    )
    
    def to_dict(self):
        """Convert entry to dictionary."""
        return {
            'id': self.id,
            'term': self.term,
            'display_term': self.display_term,
            'source_lang': self.source_lang,
            'target_lang': self.target_lang,
            'data': self.data,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
    
    @classmethod
    def find(cls, term, source_lang, target_lang):
        """Fetch the row for a normalized key, or None."""
        return cls.query.filter_by(
            term=term,
            source_lang=source_lang,
            target_lang=target_lang
        ).first()
