"""
vault-config node

Holds one decoded vault store and answers read-only queries against it.
The store is decoded once on creation and replaced only by a redeploy,
which creates a fresh node.
"""

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from flowvault.constants import VAULT_CONFIG_TYPE, NodeKind
from flowvault.nodes.base import ConfigNode, NodeInput, NodeSchema
from flowvault.nodes.registry import NodeRegistry
from flowvault.vault.decoder import decode_store
from flowvault.vault.errors import GroupNotFound, PropertyNotFound
from flowvault.vault.models import Group, TypedValue
from flowvault.vault.registry import VaultRegistry, get_vault_registry

if TYPE_CHECKING:
    from flowvault.runtime.engine import FlowRuntime

logger = logging.getLogger(__name__)


def unwrap(entry: Any) -> Any:
    """Return the raw value of a property, typed or legacy."""
    if isinstance(entry, TypedValue):
        return entry.value
    return entry


@NodeRegistry.register
class VaultConfig(ConfigNode):
    """Stores many grouped credentials in a single sealed credential field."""

    type_name = VAULT_CONFIG_TYPE

    def __init__(
        self,
        runtime: Optional["FlowRuntime"],
        definition: Dict[str, Any],
        registry: Optional[VaultRegistry] = None,
    ):
        super().__init__(runtime, definition)
        if registry is None:
            registry = runtime.registry if runtime is not None else get_vault_registry()
        self.registry = registry
        self.store = decode_store(self.credentials.get("store"), on_error=self.error)
        self.registry.register(self)
        logger.info(f"Vault '{self.name}' loaded with {len(self.store)} group(s)")

    @property
    def schema(self) -> NodeSchema:
        return NodeSchema(
            name=VAULT_CONFIG_TYPE,
            label="Vault",
            kind=NodeKind.CONFIG,
            description="Named, grouped configuration values kept in a sealed store.",
            inputs=[
                NodeInput(name="name", type="string", label="Name", required=False),
            ],
            credentials=[
                NodeInput(name="store", type="json", label="Store"),
            ],
        )

    def get_group(self, key: Any) -> Optional[Group]:
        """
        Look up a group by exact name.

        Returns None when the key is not a non-empty string, the group is
        absent or null, or the slot does not hold a mapping.
        """
        if not isinstance(key, str) or key == "":
            return None
        entry = self.store.get(key)
        if not isinstance(entry, dict):
            return None
        return entry

    def get_property(self, group: Group, name: str) -> Any:
        """
        Return the unwrapped value of ``name`` in ``group``.

        Raises:
            KeyError: If the group has no such property
        """
        if not isinstance(name, str) or name not in group:
            raise KeyError(name)
        return unwrap(group[name])

    def get_value(self, group_name: str, name: str) -> Any:
        """Resolve ``group_name``/``name``, raising vault errors on a miss."""
        group = self.get_group(group_name)
        if group is None:
            raise GroupNotFound(group_name)
        try:
            return self.get_property(group, name)
        except KeyError:
            raise PropertyNotFound(group_name, name) from None

    def unwrapped_group(self, group_name: str) -> Dict[str, Any]:
        """
        Fresh copy of every property in a group, already unwrapped.

        Raises:
            GroupNotFound: If the group does not exist
        """
        group = self.get_group(group_name)
        if group is None:
            raise GroupNotFound(group_name)
        return {name: copy.deepcopy(unwrap(entry)) for name, entry in group.items()}

    def get_credentials_for_key(self, key: Any) -> Optional[Group]:
        """Key-based accessor used by the vault-key node."""
        return self.get_group(key)

    def close(self) -> None:
        self.registry.deregister(self.id)
