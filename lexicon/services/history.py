"""Server-side search history: an append-only log per client."""

import logging

from lexicon import db
from lexicon.errors import PersistenceWriteFailed
from lexicon.models import SearchHistory
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class HistoryStore:
    def __init__(self, limit=50):
        self.limit = limit

    def record(self, client_id, term, translation, source_lang, target_lang, category=None):
        """Append one lookup to ``client_id``'s history."""
        entry = SearchHistory(
            client_id=str(client_id),
            term=term,
            translation=translation,
            source_lang=source_lang,
            target_lang=target_lang,
            category=category or 'Other'
        )
        try:
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceWriteFailed(f"Could not record history: {e}") from e
        return entry

    def recent(self, client_id, limit=None):
        """Newest-first history rows, never more than the configured cap."""
        if not limit or limit < 1:
            limit = self.limit
        limit = min(limit, self.limit)
        return SearchHistory.query.filter_by(
            client_id=str(client_id)
        ).order_by(
            SearchHistory.timestamp.desc(),
            SearchHistory.id.desc()
        ).limit(limit).all()
