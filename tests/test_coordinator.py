"""
Tests for the tiered lookup coordinator.
"""

import pytest

from lexicon.client import DisplayState, HistoryItem, HistoryList, LocalStore, LookupCoordinator, SessionCache
from lexicon.errors import GenerationFailed, MalformedPayload, PersistenceWriteFailed
from lexicon.models import LexiconEntry
from lexicon.utils import LexiconKey


class UnsavableRemote:
    """Remote tier whose reads miss and whose writes always fail."""

    def __init__(self):
        self.saves = 0

    def lookup(self, key):
        return None

    def save(self, key, payload, display_term=None):
        self.saves += 1
        raise PersistenceWriteFailed('server unreachable')


class UnreachableRemote:
    def lookup(self, key):
        raise ConnectionError('no route to host')

    def save(self, key, payload, display_term=None):
        raise PersistenceWriteFailed('no route to host')


class RecordingSink:
    def __init__(self, rows=None):
        self.recorded = []
        self.rows = rows or []

    def record_history(self, client_id, item):
        self.recorded.append((client_id, item.term))

    def fetch_history(self, client_id):
        return self.rows


class TestResolve:
    """Tier order and write-through."""

    def test_second_resolve_does_not_generate(self, coordinator, gateway):
        first = coordinator.resolve('Haus', 'de', 'uz')
        second = coordinator.resolve('Haus', 'de', 'uz')

        assert len(gateway.calls) == 1
        assert first.payload == second.payload
        assert coordinator.last_resolution_tier == 'session'

    def test_normalized_terms_share_an_entry(self, coordinator, gateway):
        coordinator.resolve('Haus', 'de', 'uz')
        entry = coordinator.resolve(' haus ', 'de', 'uz')

        assert len(gateway.calls) == 1
        assert entry.key == LexiconKey.build('HAUS', 'de', 'uz')
        assert entry.display_term == 'haus'

    def test_generation_writes_every_tier(self, coordinator, gateway, lexicon_service):
        entry = coordinator.resolve('Haus', 'de', 'uz')
        key = entry.key

        assert coordinator.last_resolution_tier == 'generated'
        assert lexicon_service.record_store.find_by_key(key)['mainTranslation'] == entry.main_translation
        assert lexicon_service.hot_cache.get(key) is not None
        assert coordinator.session_cache.get(key) is not None
        assert LexiconEntry.find('haus', 'de', 'uz').display_term == 'Haus'

    def test_remote_hit_fills_cheaper_tiers(self, coordinator, gateway, lexicon_service, make_payload):
        key = LexiconKey.build('Brot', 'de', 'uz')
        lexicon_service.record_store.upsert(key, make_payload(term='Brot', translation='non'))

        entry = coordinator.resolve('Brot', 'de', 'uz')

        assert gateway.calls == []
        assert coordinator.last_resolution_tier == 'remote'
        assert entry.main_translation == 'non'
        assert coordinator.session_cache.get(key)['mainTranslation'] == 'non'
        assert key in lexicon_service.hot_cache

    def test_new_session_reuses_server_tier(self, coordinator, gateway, lexicon_service):
        coordinator.resolve('Haus', 'de', 'uz')

        other_device = LookupCoordinator(SessionCache(LocalStore()), lexicon_service, gateway)
        other_device.resolve('Haus', 'de', 'uz')

        assert len(gateway.calls) == 1
        assert other_device.last_resolution_tier == 'remote'

    def test_each_pair_is_generated_once(self, coordinator, gateway):
        coordinator.resolve('Haus', 'de', 'uz')
        coordinator.resolve('Haus', 'de', 'en')
        coordinator.resolve('Haus', 'de', 'en')

        assert gateway.calls == [('Haus', 'de', 'uz'), ('Haus', 'de', 'en')]

    @pytest.mark.parametrize('term,src,trg', [
        ('   ', 'de', 'uz'),
        ('Haus', 'fr', 'uz'),
        ('Haus', 'de', 'de'),
    ])
    def test_invalid_query(self, coordinator, gateway, term, src, trg):
        with pytest.raises(ValueError):
            coordinator.resolve(term, src, trg)
        assert gateway.calls == []


class TestFailures:
    """Generation and persistence failures."""

    def test_generation_failure_caches_nothing(self, coordinator, gateway, lexicon_service):
        gateway.error = GenerationFailed('quota exceeded')
        key = LexiconKey.build('Haus', 'de', 'uz')

        with pytest.raises(GenerationFailed):
            coordinator.resolve('Haus', 'de', 'uz')

        assert coordinator.session_cache.get(key) is None
        assert lexicon_service.hot_cache.get(key) is None
        assert lexicon_service.record_store.find_by_key(key) is None
        assert len(coordinator.history) == 0

    def test_unexpected_gateway_error_becomes_generation_failed(self, coordinator, gateway):
        gateway.error = RuntimeError('socket closed')

        with pytest.raises(GenerationFailed):
            coordinator.resolve('Haus', 'de', 'uz')

    def test_malformed_generation_is_not_cached(self, coordinator, gateway, lexicon_service):
        gateway.result = {'term': 'Haus', 'mainTranslation': 'uy'}
        key = LexiconKey.build('Haus', 'de', 'uz')

        with pytest.raises(MalformedPayload):
            coordinator.resolve('Haus', 'de', 'uz')

        assert coordinator.session_cache.get(key) is None
        assert lexicon_service.record_store.find_by_key(key) is None

    def test_no_retry_after_failure(self, coordinator, gateway):
        gateway.error = GenerationFailed('timeout')

        with pytest.raises(GenerationFailed):
            coordinator.resolve('Haus', 'de', 'uz')

        assert len(gateway.calls) == 1

    def test_persistence_failure_still_returns_result(self, gateway):
        remote = UnsavableRemote()
        coordinator = LookupCoordinator(SessionCache(), remote, gateway)

        entry = coordinator.resolve('Haus', 'de', 'uz')

        assert entry.main_translation == 'haus-uz'
        assert remote.saves == 1
        assert coordinator.last_warnings == ['server unreachable']
        # The session tier still spares the next lookup
        coordinator.resolve('Haus', 'de', 'uz')
        assert len(gateway.calls) == 1

    def test_unreachable_remote_falls_through(self, gateway):
        coordinator = LookupCoordinator(SessionCache(), UnreachableRemote(), gateway)

        entry = coordinator.resolve('Haus', 'de', 'uz')

        assert coordinator.last_resolution_tier == 'generated'
        assert entry.category == 'Noun'


class TestHistory:
    """History side effects of resolve."""

    def test_history_dedup_by_term(self, coordinator):
        coordinator.resolve('Wasser', 'de', 'uz')
        coordinator.resolve('Wasser', 'de', 'uz')
        coordinator.resolve('Brot', 'de', 'uz')

        assert [h.term for h in coordinator.history.items()] == ['Brot', 'Wasser']

    def test_history_ignores_language_pair(self, coordinator):
        coordinator.resolve('Haus', 'de', 'uz')
        coordinator.resolve('Brot', 'de', 'uz')
        coordinator.resolve('haus', 'de', 'en')

        items = coordinator.history.items()
        assert [h.term for h in items] == ['haus', 'Brot']
        assert items[0].target_lang == 'en'

    def test_history_records_category_and_translation(self, coordinator):
        coordinator.resolve('Haus', 'de', 'uz')

        item = coordinator.history.items()[0]
        assert item.translation == 'haus-uz'
        assert item.category == 'Noun'

    def test_server_sink_receives_generated_lookups_only(self, lexicon_service, gateway, make_payload):
        lexicon_service.save(LexiconKey.build('Brot', 'de', 'uz'), make_payload(term='Brot', translation='non'))
        sink = RecordingSink()
        coordinator = LookupCoordinator(
            SessionCache(), lexicon_service, gateway,
            history=HistoryList(), history_sink=sink, client_id='42'
        )

        coordinator.resolve('Haus', 'de', 'uz')
        coordinator.resolve('Haus', 'de', 'uz')
        coordinator.resolve('Brot', 'de', 'uz')

        assert sink.recorded == [('42', 'Haus')]
        assert [h.term for h in coordinator.history.items()] == ['Brot', 'Haus']

    def test_sync_history_replaces_local_copy(self, gateway):
        sink = RecordingSink(rows=[
            {'id': 2, 'term': 'Brot', 'translation': 'non', 'category': 'Noun',
             'sourceLang': 'de', 'targetLang': 'uz', 'timestamp': '2026-01-02T10:00:00'},
            {'id': 1, 'term': 'Wasser', 'translation': 'suv', 'category': 'Noun',
             'sourceLang': 'de', 'targetLang': 'uz', 'timestamp': '2026-01-01T10:00:00'},
        ])
        history = HistoryList()
        history.add(HistoryItem('Haus', 'uy', 'Noun', 'de', 'uz'))
        coordinator = LookupCoordinator(
            SessionCache(), UnsavableRemote(), gateway,
            history=history, history_sink=sink, client_id='42'
        )

        assert coordinator.sync_history() == 2
        assert [h.term for h in history.items()] == ['Brot', 'Wasser']


class TestDisplay:
    """Last-issued query wins the display."""

    def test_submit_displays_result(self, coordinator):
        resolution = coordinator.submit('Haus', 'de', 'uz')

        assert resolution.displayed is True
        assert resolution.tier == 'generated'
        assert coordinator.display.current is resolution.entry

    def test_stale_result_is_not_displayed(self, coordinator, gateway):
        display = coordinator.display
        stale_seq = display.next_seq()
        fresh = coordinator.submit('Brot', 'de', 'uz')

        # The older query completes after the newer one was shown
        stale_entry = coordinator.resolve('Haus', 'de', 'uz')

        assert display.offer(stale_seq, stale_entry) is False
        assert display.current is fresh.entry
        # It still filled the caches
        assert coordinator.session_cache.get(stale_entry.key) is not None

    def test_sequence_numbers_increase(self):
        display = DisplayState()
        assert [display.next_seq() for _ in range(3)] == [1, 2, 3]
