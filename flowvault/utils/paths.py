"""
Dotted-path helpers shared by message and context-store writes.

Paths look like ``user.name`` or ``items.0.id``. Numeric segments index into
lists; every other segment is a dict key.
"""

from typing import Any, List

PATH_SEPARATOR = "."

_MISSING = object()


def split_path(path: str) -> List[str]:
    """Split a dotted path, rejecting empty segments."""
    if not isinstance(path, str) or not path:
        raise ValueError("Property path must be a non-empty string")
    parts = path.split(PATH_SEPARATOR)
    if any(part == "" for part in parts):
        raise ValueError(f"Invalid property path '{path}': empty segment")
    return parts


def _step(container: Any, part: str, path: str) -> Any:
    if isinstance(container, dict):
        return container.get(part, _MISSING)
    if isinstance(container, list):
        if not part.isdigit():
            raise TypeError(f"Cannot use key '{part}' on a list in '{path}'")
        index = int(part)
        return container[index] if index < len(container) else _MISSING
    raise TypeError(
        f"Cannot read '{part}' of non-container type {type(container).__name__} in '{path}'"
    )


def get_property(obj: Any, path: str, default: Any = None) -> Any:
    """
    Read a nested value. Missing segments return ``default``.
    """
    current = obj
    for part in split_path(path):
        try:
            current = _step(current, part, path)
        except TypeError:
            return default
        if current is _MISSING:
            return default
    return current


def set_property(obj: Any, path: str, value: Any) -> None:
    """
    Assign ``value`` at ``path`` inside ``obj``, creating intermediate dicts.

    Raises:
        TypeError: if a segment traverses through a non-container value
        IndexError: if a list index is past the end of the list
    """
    parts = split_path(path)
    current = obj
    for part in parts[:-1]:
        child = _step(current, part, path)
        if child is _MISSING or child is None:
            child = {}
            _assign(current, part, child, path)
        elif not isinstance(child, (dict, list)):
            raise TypeError(
                f"Cannot set '{path}': '{part}' holds a {type(child).__name__}, not an object"
            )
        current = child
    _assign(current, parts[-1], value, path)


def _assign(container: Any, part: str, value: Any, path: str) -> None:
    if isinstance(container, dict):
        container[part] = value
        return
    if isinstance(container, list):
        if not part.isdigit():
            raise TypeError(f"Cannot use key '{part}' on a list in '{path}'")
        index = int(part)
        if index == len(container):
            container.append(value)
        elif index < len(container):
            container[index] = value
        else:
            raise IndexError(f"List index {index} out of range in '{path}'")
        return
    raise TypeError(
        f"Cannot set '{part}' on non-container type {type(container).__name__} in '{path}'"
    )
