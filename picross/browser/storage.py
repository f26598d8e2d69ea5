"""
Saved progress in browser local storage.

The game layer hands over an opaque JSON value to save. On start the bridge
reads it back; only its first element (the completed level ids) is
interpreted.
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from picross.logging import get_logger
from .platform_compat import get_browser_storage

log = get_logger('storage')

STORAGE_KEY = 'picross-elm'


class LocalStore(ABC):
    """Key/value string store with the localStorage interface."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str):
        """Store a string value under key."""


class MemoryStorage(LocalStore):
    """In-process store used outside the browser."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value


class BrowserStorage(LocalStore):
    """window.localStorage wrapper."""

    def __init__(self, storage: Any):
        self._storage = storage

    def get_item(self, key: str) -> Optional[str]:
        value = self._storage.getItem(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str):
        self._storage.setItem(key, value)


def default_store() -> LocalStore:
    """localStorage in the browser, memory otherwise."""
    storage = get_browser_storage()
    if storage is None:
        return MemoryStorage()
    return BrowserStorage(storage)


@dataclass
class SavedState:
    """Flags handed to the game layer on start."""
    done_levels: List[Any] = field(default_factory=list)

    def to_flags(self) -> Dict[str, Any]:
        return {'doneLevels': list(self.done_levels)}


def save_state(store: LocalStore, data: Any, key: str = STORAGE_KEY):
    """Persist the game layer's state value as JSON."""
    store.set_item(key, json.dumps(data))


def load_state(store: LocalStore, key: str = STORAGE_KEY) -> SavedState:
    """
    Read saved progress.

    A missing key, malformed JSON or an unexpected shape all give a fresh
    state; the problem is logged, never raised.
    """
    raw = store.get_item(key)
    if raw is None:
        return SavedState()

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        log.warning("Could not load saved state from %r: %s", key, e)
        return SavedState()

    if not isinstance(payload, list):
        log.warning("Ignoring saved state with unexpected shape: %r", raw[:80])
        return SavedState()

    done = payload[0] if payload else None
    if done is None:
        return SavedState()
    if not isinstance(done, list):
        log.warning("Ignoring completed levels that are not a list: %r", done)
        return SavedState()
    return SavedState(done_levels=done)
