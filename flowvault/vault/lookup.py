"""
Fluent Lookup API

Published once into the global context under ``VAULT_LOOKUP_KEY`` so inline
scripts can read vault values by vault name::

    vault = global_context.get("vault")
    db = vault("Prod").get_group("db")
    db.host                     # direct field
    db.get_property("host")     # explicit
    db.get_all()                # plain dict copy

Every ``get_group`` call re-resolves the vault by name and copies the group,
so handles never serve values from a torn-down deployment.
"""

import copy
from typing import Any, Dict, Iterator, List, Optional

from flowvault.constants import VAULT_LOOKUP_KEY
from flowvault.vault.errors import PropertyNotFound, VaultNotFound
from flowvault.vault.registry import VaultRegistry, get_vault_registry

__all__ = ["VAULT_LOOKUP_KEY", "VaultLookup", "VaultHandle", "GroupHandle"]


class GroupHandle:
    """
    Read-only view of one group's unwrapped properties.

    Data lives in a private dict, apart from the methods, so a property named
    ``get_all`` is still reachable through ``get_property``, ``[]`` or
    ``get_all()``. Only attribute access resolves methods first. ``keys``,
    ``[]``, ``in`` and ``len`` make it usable wherever a read-only mapping is
    expected, e.g. ``dict(handle)``.
    """

    __slots__ = ("_group", "_data")

    def __init__(self, group: str, data: Dict[str, Any]):
        object.__setattr__(self, "_group", group)
        object.__setattr__(self, "_data", data)

    def get_property(self, name: str) -> Any:
        if name not in self._data:
            raise PropertyNotFound(self._group, name)
        return self._data[name]

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    # camelCase spellings used by older scripts
    getProperty = get_property
    getAll = get_all

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails, i.e. for data fields
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            return self.get_property(name)
        except PropertyNotFound as e:
            raise AttributeError(str(e)) from e

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("GroupHandle is read-only")

    def __getitem__(self, name: str) -> Any:
        try:
            return self.get_property(name)
        except PropertyNotFound as e:
            raise KeyError(name) from e

    def keys(self) -> List[str]:
        return list(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __dir__(self):
        return sorted(set(super().__dir__()) | {k for k in self._data if k.isidentifier()})

    def __repr__(self) -> str:
        return f"<GroupHandle {self._group!r} keys={list(self._data)}>"


class VaultHandle:
    """Handle on a vault by name; resolved against the registry on each call."""

    def __init__(self, registry: VaultRegistry, name: str):
        self._registry = registry
        self.name = name

    def get_group(self, group_name: str) -> GroupHandle:
        vault = self._registry.find_by_name(self.name)
        if vault is None:
            raise VaultNotFound(self.name)
        data = vault.unwrapped_group(group_name)  # raises GroupNotFound
        return GroupHandle(group_name, data)

    getGroup = get_group

    def __repr__(self) -> str:
        return f"<VaultHandle {self.name!r}>"


class VaultLookup:
    """
    The callable published to scripts: ``lookup(vault_name) -> VaultHandle``.
    """

    def __init__(self, registry: Optional[VaultRegistry] = None):
        self.registry = registry if registry is not None else get_vault_registry()

    def __call__(self, vault_name: str) -> VaultHandle:
        if self.registry.find_by_name(vault_name) is None:
            raise VaultNotFound(vault_name)
        return VaultHandle(self.registry, vault_name)

