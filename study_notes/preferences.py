"""Key-value preference stores for persisting the chosen voice."""

import json
import logging
import os

from study_notes.constants import PREFS_FILE

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Minimal string key-value store."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryPreferenceStore(PreferenceStore):
    """In-process store, lost when the object goes away."""

    def __init__(self, initial: dict | None = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonPreferenceStore(PreferenceStore):
    """Preferences kept as a single JSON object on disk.

    A missing, unreadable or malformed file reads as empty. Write failures
    are logged and dropped.
    """

    def __init__(self, path: str = PREFS_FILE):
        self.path = path

    def _load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable preferences file: %s — ignoring", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preferences file is not a JSON object: %s — ignoring", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save preferences to %s: %s", self.path, e)
