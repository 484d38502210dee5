from typing import Any, Dict

from flowvault.constants import (
    MSG_CREDENTIALS_FIELD,
    MSG_KEY_FIELD,
    VAULT_CONFIG_TYPE,
    VAULT_KEY_NODE_TYPE,
    NodeKind,
)
from flowvault.nodes.base import BaseNode, NodeInput, NodeOutput, NodeSchema
from flowvault.nodes.registry import NodeRegistry
from flowvault.vault.config_node import VaultConfig
from flowvault.vault.errors import ConfigurationMissing, GroupNotFound, LookupKeyMissing


@NodeRegistry.register
class VaultKeyNode(BaseNode):
    """Attaches a whole vault group to msg.credentials, chosen by msg.key."""

    type_name = VAULT_KEY_NODE_TYPE

    @property
    def schema(self) -> NodeSchema:
        return NodeSchema(
            name=VAULT_KEY_NODE_TYPE,
            label="Vault (by key)",
            kind=NodeKind.ACTION,
            description="Looks up a group by msg.key (or a default key) and sets msg.credentials.",
            inputs=[
                NodeInput(name="vault", type="config", label="Vault", config_type=VAULT_CONFIG_TYPE),
                NodeInput(name="defaultKey", type="string", label="Default Key", required=False),
            ],
            outputs=[
                NodeOutput(name="credentials", type="json", label="Credentials"),
            ],
        )

    def _resolve_key(self, msg: Dict[str, Any]) -> str:
        key = msg.get(MSG_KEY_FIELD)
        if isinstance(key, str) and key != "":
            return key
        default_key = self.config.get("defaultKey")
        if isinstance(default_key, str) and default_key != "":
            return default_key
        raise LookupKeyMissing()

    async def execute(self, context: Dict[str, Any], input_data: Any) -> Any:
        key = self._resolve_key(input_data)

        vault = self.runtime.get_node(self.config.get("vault")) if self.runtime else None
        if not isinstance(vault, VaultConfig):
            raise ConfigurationMissing()

        if vault.get_credentials_for_key(key) is None:
            raise GroupNotFound(key)

        input_data[MSG_CREDENTIALS_FIELD] = vault.unwrapped_group(key)
        return input_data
