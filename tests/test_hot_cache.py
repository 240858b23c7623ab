"""
Tests for the FIFO hot cache and its Redis-backed variant.
"""

import pytest

from lexicon.services.hot_cache import HotCache, RedisHotCache, build_hot_cache
from lexicon.utils import LexiconKey


def key(term, src='de', trg='uz'):
    return LexiconKey.build(term, src, trg)


class FakeRedis:
    """Just enough of the redis-py API for RedisHotCache."""

    def __init__(self):
        self.hashes = {}
        self.lists = {}

    def hget(self, name, field):
        return self.hashes.get(name, {}).get(field)

    def hset(self, name, field, value):
        self.hashes.setdefault(name, {})[field] = value

    def hexists(self, name, field):
        return field in self.hashes.get(name, {})

    def hlen(self, name):
        return len(self.hashes.get(name, {}))

    def hdel(self, name, field):
        self.hashes.get(name, {}).pop(field, None)

    def rpush(self, name, value):
        self.lists.setdefault(name, []).append(value)

    def lpop(self, name):
        items = self.lists.get(name, [])
        return items.pop(0) if items else None

    def lrange(self, name, start, end):
        return list(self.lists.get(name, []))

    def delete(self, *names):
        for name in names:
            self.hashes.pop(name, None)
            self.lists.pop(name, None)

    def pipeline(self):
        return self

    def execute(self):
        return []


class TestHotCache:
    """Tests for the in-process cache."""

    def test_get_miss_returns_none(self):
        cache = HotCache(capacity=3)
        assert cache.get(key('Haus')) is None

    def test_put_then_get(self):
        cache = HotCache(capacity=3)
        cache.put(key('Haus'), {'mainTranslation': 'uy'})
        assert cache.get(key(' haus ')) == {'mainTranslation': 'uy'}

    def test_overflow_evicts_exactly_the_oldest(self):
        cache = HotCache(capacity=3)
        for term in ('eins', 'zwei', 'drei', 'vier'):
            cache.put(key(term), {'term': term})

        assert len(cache) == 3
        assert cache.evictions == 1
        assert key('eins') not in cache
        assert cache.keys() == [key('zwei'), key('drei'), key('vier')]

    def test_reads_do_not_protect_from_eviction(self):
        cache = HotCache(capacity=2)
        cache.put(key('eins'), {'term': 'eins'})
        cache.put(key('zwei'), {'term': 'zwei'})
        # A read would promote the key in a true LRU; FIFO ignores it
        cache.get(key('eins'))
        cache.put(key('drei'), {'term': 'drei'})

        assert key('eins') not in cache
        assert key('zwei') in cache

    def test_overwrite_keeps_position_and_evicts_nothing(self):
        cache = HotCache(capacity=2)
        cache.put(key('eins'), {'v': 1})
        cache.put(key('zwei'), {'v': 1})
        cache.put(key('eins'), {'v': 2})

        assert cache.evictions == 0
        assert cache.get(key('eins')) == {'v': 2}
        assert cache.keys()[0] == key('eins')

    def test_language_pair_is_part_of_the_key(self):
        cache = HotCache(capacity=5)
        cache.put(key('Haus', 'de', 'uz'), {'v': 'uz'})
        assert cache.get(key('Haus', 'de', 'en')) is None

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HotCache(capacity=0)

    def test_clear(self):
        cache = HotCache(capacity=2)
        cache.put(key('eins'), {})
        cache.clear()
        assert len(cache) == 0


class TestRedisHotCache:
    """Tests for the shared Redis variant."""

    def test_round_trip_and_fifo_eviction(self):
        cache = RedisHotCache(FakeRedis(), capacity=2)
        cache.put(key('eins'), {'term': 'eins'})
        cache.put(key('zwei'), {'term': 'zwei'})
        cache.get(key('eins'))
        cache.put(key('drei'), {'term': 'drei'})

        assert cache.get(key('eins')) is None
        assert cache.get(key('drei')) == {'term': 'drei'}
        assert len(cache) == 2
        assert cache.evictions == 1
        assert cache.keys() == ['de_uz_zwei', 'de_uz_drei']

    def test_overwrite_does_not_duplicate_order(self):
        cache = RedisHotCache(FakeRedis(), capacity=2)
        cache.put(key('eins'), {'v': 1})
        cache.put(key('eins'), {'v': 2})

        assert cache.get(key('eins')) == {'v': 2}
        assert cache.keys() == ['de_uz_eins']


class TestBuildHotCache:
    """Tests for backend selection."""

    def test_memory_backend_by_default(self):
        cache = build_hot_cache({'HOT_CACHE_CAPACITY': 7})
        assert isinstance(cache, HotCache)
        assert cache.capacity == 7

    def test_redis_without_url_falls_back_to_memory(self):
        cache = build_hot_cache({'HOT_CACHE_BACKEND': 'redis', 'REDIS_URL': None})
        assert isinstance(cache, HotCache)
