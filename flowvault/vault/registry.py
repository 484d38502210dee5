"""
Vault Registry

Directory of live vault-config nodes, so scripts can find a vault by the
name it was given in the editor. Entries are keyed by node id; lookups by
name scan the entries in registration order.
"""

import logging
import threading
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from flowvault.vault.config_node import VaultConfig

logger = logging.getLogger(__name__)


class VaultRegistry:
    """
    Maps vault node id -> live VaultConfig.

    Names are not unique. ``find_by_name`` returns the first registered
    match; which vault wins under duplicate names is undefined.
    """

    def __init__(self):
        self._vaults: Dict[str, "VaultConfig"] = {}
        self._lock = threading.Lock()

    def register(self, vault: "VaultConfig") -> None:
        with self._lock:
            if vault.name and any(
                v.name == vault.name and v.id != vault.id for v in self._vaults.values()
            ):
                logger.warning(
                    f"Vault name '{vault.name}' is used by more than one vault-config; "
                    f"lookups by name are ambiguous"
                )
            self._vaults[vault.id] = vault
        logger.debug(f"Registered vault '{vault.name}' ({vault.id})")

    def deregister(self, vault_id: str) -> None:
        with self._lock:
            vault = self._vaults.pop(vault_id, None)
        if vault is not None:
            logger.debug(f"Deregistered vault '{vault.name}' ({vault_id})")

    def find_by_name(self, name: str) -> Optional["VaultConfig"]:
        # Snapshot so a concurrent deregister can't break the scan
        for vault in list(self._vaults.values()):
            if vault.name == name:
                return vault
        return None

    def clear(self) -> None:
        with self._lock:
            self._vaults.clear()

    def __contains__(self, vault_id: object) -> bool:
        return vault_id in self._vaults

    def __len__(self) -> int:
        return len(self._vaults)


# Process-wide default instance
_vault_registry: Optional[VaultRegistry] = None


def get_vault_registry() -> VaultRegistry:
    """Get the process-wide vault registry, creating it on first use"""
    global _vault_registry
    if _vault_registry is None:
        _vault_registry = VaultRegistry()
    return _vault_registry

