"""Client side of the lexicon: session cache, local history, tiered lookup."""

from lexicon.client.api_client import LexiconApiClient
from lexicon.client.coordinator import DisplayState, LookupCoordinator, Resolution
from lexicon.client.history import HistoryItem, HistoryList
from lexicon.client.local_store import LocalStore
from lexicon.client.session_cache import SessionCache
from lexicon.services.generation import GeminiGateway


def create_client(base_url, api_key, store_path=None, client_id=None, history_limit=50):
    """Wire a coordinator against a running backend and the Gemini API."""
    store = LocalStore(store_path)
    api = LexiconApiClient(base_url)
    return LookupCoordinator(
        session_cache=SessionCache(store),
        remote=api,
        gateway=GeminiGateway(api_key),
        history=HistoryList(store, limit=history_limit),
        history_sink=api,
        client_id=client_id,
    )


__all__ = [
    'DisplayState',
    'HistoryItem',
    'HistoryList',
    'LexiconApiClient',
    'LocalStore',
    'LookupCoordinator',
    'Resolution',
    'SessionCache',
    'create_client',
]
