"""Server half of the remote lookup tier: hot cache in front of the record store."""

import logging

from lexicon.services.generation import validate_payload

logger = logging.getLogger(__name__)


class LexiconService:
    """Look up and save translations for every request handled by this process.

    Built once in ``create_app`` and shared; it holds no request state.
    """

    def __init__(self, record_store, hot_cache):
        self.record_store = record_store
        self.hot_cache = hot_cache

    def lookup(self, key):
        """Return the payload for ``key`` from the cheapest tier that has it.

        A record store hit is copied into the hot cache. Read errors in
        either tier count as misses.
        """
        try:
            cached = self.hot_cache.get(key)
        except Exception as e:
            logger.warning(f"Hot cache read error for {key.cache_key}: {e}")
            cached = None
        if cached is not None:
            return cached

        try:
            stored = self.record_store.find_by_key(key)
        except Exception as e:
            logger.warning(f"Record store read error for {key.cache_key}: {e}")
            return None
        if stored is None:
            logger.debug(f"Lexicon miss: {key.cache_key}")
            return None

        self._remember(key, stored)
        return stored

    def save(self, key, payload, display_term=None):
        """Validate, persist, then cache ``payload`` for ``key``.

        Raises:
            MalformedPayload: payload lacks required fields; nothing is written.
            PersistenceWriteFailed: the record store write failed. The hot
                cache still receives the value.
        """
        payload = validate_payload(payload)
        try:
            self.record_store.upsert(key, payload, display_term=display_term)
        finally:
            self._remember(key, payload)

    def _remember(self, key, payload):
        try:
            self.hot_cache.put(key, payload)
        except Exception as e:
            logger.warning(f"Hot cache write error for {key.cache_key}: {e}")

    def stats(self) -> dict:
        return {
            'backend': self.hot_cache.backend,
            'size': len(self.hot_cache),
            'capacity': self.hot_cache.capacity,
            'evictions': self.hot_cache.evictions,
        }

