"""Bounded, process-wide hot cache in front of the record store.

Eviction is FIFO: when full, the oldest *inserted* key goes, regardless of
how recently it was read. Reads never reorder entries. This is an
approximation of LRU and is kept that way on purpose; callers and tests
rely on insertion order deciding eviction.
"""

import json
import logging
import threading

from lexicon.services.redis_client import get_redis

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 2000


class HotCache:
    """In-process FIFO cache keyed by ``LexiconKey`` (or any hashable)."""

    backend = 'memory'

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError('Hot cache capacity must be at least 1')
        self.capacity = capacity
        self.evictions = 0
        # dicts keep insertion order; the first key is the oldest
        self._entries = {}
        # Guards structural changes only; get+put sequences are not atomic
        self._lock = threading.Lock()

    def get(self, key):
        """Return the cached payload or None. No recency bump."""
        return self._entries.get(key)

    def put(self, key, payload):
        """Insert ``payload``, evicting the oldest entry first when full.

        Overwriting a present key replaces the value in place and keeps
        its original insertion position.
        """
        with self._lock:
            if key in self._entries:
                self._entries[key] = payload
                return
            if len(self._entries) >= self.capacity:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self.evictions += 1
                logger.debug(f"Hot cache evicted {oldest}")
            self._entries[key] = payload

    def keys(self) -> list:
        """Keys, oldest insertion first."""
        return list(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries


class RedisHotCache:
    """The same FIFO contract stored in Redis, shared by all workers.

    Payloads live in a hash; a list records insertion order so the oldest
    key can be popped on overflow. Keys must expose ``cache_key``.
    """

    backend = 'redis'

    def __init__(self, client, capacity: int = DEFAULT_CAPACITY, prefix: str = 'lexicon:hot'):
        if capacity < 1:
            raise ValueError('Hot cache capacity must be at least 1')
        self.client = client
        self.capacity = capacity
        self.evictions = 0
        self._data_key = prefix
        self._order_key = f"{prefix}:order"

    def get(self, key):
        raw = self.client.hget(self._data_key, key.cache_key)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key, payload):
        field = key.cache_key
        value = json.dumps(payload, ensure_ascii=False)
        if self.client.hexists(self._data_key, field):
            self.client.hset(self._data_key, field, value)
            return
        if self.client.hlen(self._data_key) >= self.capacity:
            oldest = self.client.lpop(self._order_key)
            if oldest is not None:
                self.client.hdel(self._data_key, oldest)
                self.evictions += 1
        pipe = self.client.pipeline()
        pipe.hset(self._data_key, field, value)
        pipe.rpush(self._order_key, field)
        pipe.execute()

    def keys(self) -> list:
        return list(self.client.lrange(self._order_key, 0, -1))

    def clear(self):
        self.client.delete(self._data_key, self._order_key)

    def __len__(self):
        return self.client.hlen(self._data_key)

    def __contains__(self, key):
        return bool(self.client.hexists(self._data_key, key.cache_key))


def build_hot_cache(config):
    """Pick the hot cache backend from app config.

    Falls back to the in-process cache when Redis is requested but
    cannot be reached.
    """
    capacity = config.get('HOT_CACHE_CAPACITY', DEFAULT_CAPACITY)

    if config.get('HOT_CACHE_BACKEND') == 'redis':
        client = get_redis(config.get('REDIS_URL'))
        if client is not None:
            return RedisHotCache(client, capacity=capacity)
        logger.warning("Redis hot cache unavailable, using in-process cache")

    return HotCache(capacity=capacity)

