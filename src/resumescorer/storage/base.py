"""Key-value stores backing the API key and model selection."""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Optional[str]], None]
Unsubscribe = Callable[[], None]


class KeyValueStore(ABC):
    """String key-value store with notifications for changes made elsewhere.

    ``on_external_change`` callbacks fire only for changes that another
    session made to the underlying storage, never for this store's own
    ``set`` and ``remove`` calls.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[ChangeCallback]] = defaultdict(list)

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""

    def on_external_change(self, key: str, callback: ChangeCallback) -> Unsubscribe:
        """Subscribe ``callback(key, new_value)`` to external changes of ``key``.

        Returns:
            A callable that removes the subscription.
        """
        self._listeners[key].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners[key]:
                self._listeners[key].remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Optional[str]) -> None:
        for callback in list(self._listeners.get(key, ())):
            callback(key, value)


class MemoryStore(KeyValueStore):
    """In-memory store, for tests and hosts that persist settings themselves."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def apply_external_change(self, key: str, value: Optional[str]) -> None:
        """Apply a change made by another session and notify subscribers."""
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        self._notify(key, value)


class JsonFileStore(KeyValueStore):
    """Store persisted as a JSON object in a single file.

    Writes replace the file atomically. Call :meth:`sync` to pick up changes
    another process wrote to the file.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: not a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._write()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._write()

    def sync(self) -> List[str]:
        """Reload the file and notify subscribers of keys that changed.

        Returns:
            Keys whose value differs from what this store held before.
        """
        with self._lock:
            previous, self._data = self._data, self._read()

        changed = sorted(
            key
            for key in set(previous) | set(self._data)
            if previous.get(key) != self._data.get(key)
        )
        for key in changed:
            logger.debug(f"Settings key changed externally: {key}")
            self._notify(key, self._data.get(key))
        return changed
