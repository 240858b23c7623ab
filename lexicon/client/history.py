"""Local search history shown to the user, independent of the caches."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import time
import uuid

from lexicon.client.local_store import LocalStore
from lexicon.utils import normalize_term

STORAGE_KEY_HISTORY = 'uzger_history_v8'
DEFAULT_LIMIT = 50


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class HistoryItem:
    term: str
    translation: str
    category: str
    source_lang: str
    target_lang: str
    timestamp: int = field(default_factory=_now_ms)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_server(cls, row: dict) -> 'HistoryItem':
        """Build an item from a ``GET /api/history`` row."""
        timestamp = row.get('timestamp')
        if isinstance(timestamp, str):
            parsed = datetime.fromisoformat(timestamp)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            timestamp = int(parsed.timestamp() * 1000)
        return cls(
            term=row['term'],
            translation=row.get('translation') or '',
            category=row.get('category') or 'Other',
            source_lang=row['sourceLang'],
            target_lang=row['targetLang'],
            timestamp=timestamp or _now_ms(),
            id=str(row.get('id') or uuid.uuid4().hex),
        )


class HistoryList:
    """Newest-first, capped, one entry per term.

    Terms compare case-folded; the language pair is ignored, so looking a
    word up in another pair moves it to the top instead of adding a row.
    """

    def __init__(self, store=None, limit=DEFAULT_LIMIT):
        if limit < 1:
            raise ValueError('History limit must be at least 1')
        self.store = store or LocalStore()
        self.limit = limit
        self._items = [HistoryItem(**raw) for raw in self.store.load(STORAGE_KEY_HISTORY, [])]

    def add(self, item: HistoryItem) -> HistoryItem:
        term = normalize_term(item.term)
        kept = [h for h in self._items if normalize_term(h.term) != term]
        self._items = [item] + kept[:self.limit - 1]
        self._persist()
        return item

    def replace(self, items):
        """Swap in a server copy, applying the same dedup and cap."""
        self._items = []
        for item in sorted(items, key=lambda h: h.timestamp):
            term = normalize_term(item.term)
            self._items = [item] + [h for h in self._items if normalize_term(h.term) != term]
        self._items = self._items[:self.limit]
        self._persist()

    def items(self) -> list:
        return list(self._items)

    def clear(self):
        self._items = []
        self._persist()

    def __len__(self):
        return len(self._items)

    def _persist(self):
        self.store.save(STORAGE_KEY_HISTORY, [asdict(h) for h in self._items])
