"""Durable record store for translations, backed by the global_lexicon table."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from lexicon import db
from lexicon.errors import PersistenceWriteFailed
from lexicon.models import LexiconEntry

logger = logging.getLogger(__name__)


class RecordStore:
    """Single-key reads and upserts against the relational store.

    Rows are never deleted here; an upsert on an existing key overwrites the
    payload (a corrected definition, not a new version).
    """

    def find_by_key(self, key):
        """Return the stored payload for ``key`` or None."""
        entry = LexiconEntry.find(key.term, key.source_lang, key.target_lang)
        return entry.data if entry else None

    def upsert(self, key, payload, display_term=None):
        """Insert or overwrite the payload for ``key``.

        Raises:
            PersistenceWriteFailed: the write could not be committed.
        """
        try:
            self._write(key, payload, display_term)
        except IntegrityError:
            # Lost an insert race to another request; the row exists now
            db.session.rollback()
            logger.debug(f"Upsert race on {key.cache_key}, retrying as update")
            try:
                self._write(key, payload, display_term)
            except SQLAlchemyError as e:
                db.session.rollback()
                raise PersistenceWriteFailed(f"Could not save {key.cache_key}: {e}") from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceWriteFailed(f"Could not save {key.cache_key}: {e}") from e

    def count(self, key=None) -> int:
        """Number of stored rows, optionally only those matching ``key``."""
        query = LexiconEntry.query
        if key is not None:
            query = query.filter_by(
                term=key.term,
                source_lang=key.source_lang,
                target_lang=key.target_lang
            )
        return query.count()

    def _write(self, key, payload, display_term):
        entry = LexiconEntry.find(key.term, key.source_lang, key.target_lang)
        if entry:
            entry.data = dict(payload)
            if display_term:
                entry.display_term = display_term
        else:
            entry = LexiconEntry(
                term=key.term,
                display_term=display_term or key.term,
                source_lang=key.source_lang,
                target_lang=key.target_lang,
                data=dict(payload)
            )
            db.session.add(entry)
        db.session.commit()
