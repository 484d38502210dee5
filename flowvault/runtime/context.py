import threading
from typing import Any, Dict, List

from flowvault.utils.paths import PATH_SEPARATOR, get_property, set_property


class ContextStore:
    """
    Key-value store backing the flow and global scopes.

    Keys may be dotted paths (``api.url``); ``set`` creates intermediate
    dicts. Each assignment is atomic; concurrent writers to the same key
    are last-write-wins.

    Keys added with ``publish`` are reserved: ``get`` returns them, but
    ``set``, ``delete`` and ``clear`` leave them alone.
    """

    def __init__(self, scope: str):
        self.scope = scope
        self._data: dict = {}
        self._reserved: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def _head(self, key: str) -> str:
        return key.split(PATH_SEPARATOR, 1)[0]

    def publish(self, key: str, value: Any) -> None:
        """Register a read-only top-level entry."""
        with self._lock:
            self._reserved[key] = value
            self._data.pop(key, None)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if self._head(key) in self._reserved:
                return get_property(self._reserved, key, default)
            return get_property(self._data, key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Raises:
            ValueError: if the key is empty, has an empty segment or is reserved
            TypeError: if the path runs through a non-container value
        """
        with self._lock:
            head = self._head(key)
            if head in self._reserved:
                raise ValueError(f"'{head}' is reserved in the {self.scope} context")
            set_property(self._data, key, value)

    def delete(self, key: str) -> None:
        with self._lock:
            if self._head(key) in self._reserved:
                return
            parent_path, _, leaf = key.rpartition(PATH_SEPARATOR)
            parent = get_property(self._data, parent_path) if parent_path else self._data
            if isinstance(parent, dict):
                parent.pop(leaf, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._reserved) + list(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._reserved or key in self._data

    def __repr__(self) -> str:
        return f"<ContextStore {self.scope} keys={self.keys()}>"
