"""Client-local key-value store persisted as one JSON file."""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalStore:
    """Named JSON values in a single file, loaded at startup.

    With ``path=None`` the store lives in memory only.
    """

    def __init__(self, path=None):
        self.path = Path(path) if path else None
        self._data = self._read()

    def load(self, name, default=None):
        return self._data.get(name, default)

    def save(self, name, value):
        """Set ``name`` and write the whole store back to disk."""
        self._data[name] = value
        self._flush()

    def remove(self, name):
        if self._data.pop(name, None) is not None:
            self._flush()

    def _read(self) -> dict:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable local store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self):
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + '.tmp')
            tmp.write_text(json.dumps(self._data, ensure_ascii=False), encoding='utf-8')
            os.replace(tmp, self.path)
        except OSError as e:
            logger.warning(f"Could not write local store {self.path}: {e}")
