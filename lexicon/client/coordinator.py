"""Tiered translation lookup.

A query is answered by the cheapest tier that has it, checked strictly in
order: the session cache, then the remote tier (server hot cache and
global lexicon), then generation. Whatever tier answers, every cheaper
tier is filled on the way back, so asking again never regenerates.
"""

from dataclasses import dataclass, field
import logging
import threading

from lexicon.client.history import HistoryItem
from lexicon.errors import GenerationFailed, PersistenceWriteFailed
from lexicon.services.generation import validate_payload
from lexicon.utils import LexiconKey, TranslationEntry

logger = logging.getLogger(__name__)

TIER_SESSION = 'session'
TIER_REMOTE = 'remote'
TIER_GENERATED = 'generated'


@dataclass
class Resolution:
    """Outcome of one submitted query."""

    seq: int
    entry: TranslationEntry
    tier: str
    displayed: bool
    warnings: list = field(default_factory=list)


class DisplayState:
    """What the user currently sees; the newest completed query wins.

    A query that finishes after a newer one has already been shown is not
    displayed, though it still filled the caches.
    """

    def __init__(self):
        self.current = None
        self._issued = 0
        self._displayed_seq = 0
        self._lock = threading.Lock()

    def next_seq(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def offer(self, seq, entry) -> bool:
        with self._lock:
            if seq <= self._displayed_seq:
                logger.debug(f"Dropping stale result #{seq} (showing #{self._displayed_seq})")
                return False
            self._displayed_seq = seq
            self.current = entry
            return True


class LookupCoordinator:
    """Resolve queries through session cache, remote tier and generation.

    ``remote`` needs ``lookup(key)`` and ``save(key, payload, display_term)``;
    ``LexiconApiClient`` and the server's ``LexiconService`` both fit.
    ``gateway`` needs ``generate(term, source_lang, target_lang)``.
    """

    def __init__(self, session_cache, remote, gateway, history=None,
                 history_sink=None, client_id=None, display=None):
        self.session_cache = session_cache
        self.remote = remote
        self.gateway = gateway
        self.history = history
        self.history_sink = history_sink
        self.client_id = client_id
        self.display = display or DisplayState()
        self.last_resolution_tier = None
        self.last_warnings = []

    def resolve(self, term, source_lang, target_lang) -> TranslationEntry:
        """Return the translation for the query.

        Raises:
            ValueError: empty term or unsupported language pair.
            GenerationFailed: every tier missed and generation failed;
                nothing was cached.
        """
        entry, tier, warnings = self._resolve(term, source_lang, target_lang)
        self.last_resolution_tier = tier
        self.last_warnings = warnings
        return entry

    def submit(self, term, source_lang, target_lang) -> Resolution:
        """Resolve a user-issued query and offer it to the display."""
        seq = self.display.next_seq()
        entry, tier, warnings = self._resolve(term, source_lang, target_lang)
        displayed = self.display.offer(seq, entry)
        return Resolution(seq=seq, entry=entry, tier=tier, displayed=displayed, warnings=warnings)

    def _resolve(self, term, source_lang, target_lang):
        key = LexiconKey.build(term, source_lang, target_lang)
        display_term = ' '.join(term.split())
        warnings = []

        payload = self.session_cache.get(key)
        tier = TIER_SESSION

        if payload is None:
            payload = self._lookup_remote(key)
            tier = TIER_REMOTE
            if payload is not None:
                self.session_cache.put(key, payload)

        if payload is None:
            payload = self._generate(key, display_term)
            tier = TIER_GENERATED
            try:
                self.remote.save(key, payload, display_term=display_term)
            except PersistenceWriteFailed as e:
                logger.warning(f"Keeping unsaved translation for {key.cache_key}: {e}")
                warnings.append(str(e))
            self.session_cache.put(key, payload)

        entry = TranslationEntry(key, display_term, payload)
        logger.debug(f"Resolved {key.cache_key} from {tier}")

        self._remember(entry, tier, warnings)
        return entry, tier, warnings

    def _lookup_remote(self, key):
        try:
            return self.remote.lookup(key)
        except Exception as e:
            logger.warning(f"Remote tier unavailable for {key.cache_key}: {e}")
            return None

    def _generate(self, key, display_term):
        try:
            data = self.gateway.generate(display_term, key.source_lang, key.target_lang)
        except GenerationFailed:
            raise
        except Exception as e:
            raise GenerationFailed(f"Generation failed for {key.cache_key}: {e}") from e
        return validate_payload(data)

    def _remember(self, entry, tier, warnings):
        """Add the query to local history.

        Only freshly generated entries go to the server log; cache hits
        were already recorded when they were first generated.
        """
        item = HistoryItem(
            term=entry.display_term,
            translation=entry.main_translation,
            category=entry.category,
            source_lang=entry.key.source_lang,
            target_lang=entry.key.target_lang,
        )
        if self.history is not None:
            self.history.add(item)

        if tier == TIER_GENERATED and self.history_sink is not None and self.client_id:
            try:
                self.history_sink.record_history(self.client_id, item)
            except PersistenceWriteFailed as e:
                logger.warning(str(e))
                warnings.append(str(e))

    def sync_history(self) -> int:
        """Replace local history with the server copy when it has any rows."""
        if self.history is None or self.history_sink is None or not self.client_id:
            return 0
        rows = self.history_sink.fetch_history(self.client_id)
        if rows:
            self.history.replace([HistoryItem.from_server(row) for row in rows])
        return len(rows)
