"""Per-device session cache: repeated queries never leave the client."""

from lexicon.client.local_store import LocalStore

STORAGE_KEY_CACHE = 'uzger_cache_v5'


class SessionCache:
    """Unbounded mapping from ``LexiconKey`` to payload.

    Stored under its flat ``cache_key`` so it survives reloads; ``clear``
    ends the session.
    """

    def __init__(self, store=None):
        self.store = store or LocalStore()
        self._entries = dict(self.store.load(STORAGE_KEY_CACHE, {}))

    def get(self, key):
        return self._entries.get(key.cache_key)

    def put(self, key, payload):
        self._entries[key.cache_key] = dict(payload)
        self.store.save(STORAGE_KEY_CACHE, self._entries)

    def clear(self):
        self._entries.clear()
        self.store.remove(STORAGE_KEY_CACHE)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key.cache_key in self._entries
