"""HTTP client for the lexicon backend (the remote lookup tier)."""

import logging

import requests

from lexicon.errors import PersistenceWriteFailed

logger = logging.getLogger(__name__)


class LexiconApiClient:
    """Talks to ``/api/lookup``, ``/api/save`` and ``/api/history``.

    Reads fail open: any error is logged and reported as a miss so the
    caller can fall through to generation.
    """

    def __init__(self, base_url='http://localhost:5000', session=None, timeout=5):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def lookup(self, key):
        """Return the server's payload for ``key`` or None."""
        try:
            response = self.session.get(
                f'{self.base_url}/api/lookup',
                params={'term': key.term, 'src': key.source_lang, 'trg': key.target_lang},
                timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Remote lookup failed for {key.cache_key}: {e}")
            return None

        if not isinstance(body, dict):
            logger.warning(f"Remote lookup for {key.cache_key} returned a non-object body")
            return None
        if body.get('hit') and isinstance(body.get('data'), dict):
            return body['data']
        return None

    def save(self, key, payload, display_term=None):
        """Persist a generated payload on the server.

        Raises:
            PersistenceWriteFailed: transport error or ``success: false``.
        """
        try:
            response = self.session.post(
                f'{self.base_url}/api/save',
                json={
                    'term': display_term or key.term,
                    'sourceLang': key.source_lang,
                    'targetLang': key.target_lang,
                    'data': dict(payload),
                },
                timeout=self.timeout
            )
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise PersistenceWriteFailed(f"Could not save {key.cache_key}: {e}") from e

        if not isinstance(body, dict):
            raise PersistenceWriteFailed(f"Server sent an unexpected reply to save of {key.cache_key}")
        if not response.ok or not body.get('success'):
            raise PersistenceWriteFailed(
                f"Server rejected save of {key.cache_key}: {body.get('error', response.status_code)}"
            )

    def record_history(self, client_id, item):
        """Append a ``HistoryItem`` to the server-side history log."""
        try:
            response = self.session.post(
                f'{self.base_url}/api/history',
                json={
                    'clientId': client_id,
                    'term': item.term,
                    'translation': item.translation,
                    'sourceLang': item.source_lang,
                    'targetLang': item.target_lang,
                    'category': item.category,
                },
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise PersistenceWriteFailed(f"Could not record history: {e}") from e

    def fetch_history(self, client_id) -> list:
        """Server history rows, newest first; empty on any error."""
        try:
            response = self.session.get(
                f'{self.base_url}/api/history/{client_id}',
                timeout=self.timeout
            )
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch history for {client_id}: {e}")
            return []

        if not isinstance(rows, list):
            logger.warning(f"History for {client_id} is not a list")
            return []
        return [row for row in rows if isinstance(row, dict)]
