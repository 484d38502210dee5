from typing import Any, Dict

from flowvault.constants import VAULT_CONFIG_TYPE, VAULT_NODE_TYPE, NodeKind
from flowvault.nodes.base import BaseNode, NodeInput, NodeOutput, NodeSchema
from flowvault.nodes.registry import NodeRegistry
from flowvault.vault.config_node import VaultConfig
from flowvault.vault.rules import RuleEngine, rules_from_config


@NodeRegistry.register
class VaultNode(BaseNode):
    """Copies vault values into msg, flow or global scope, one rule at a time."""

    type_name = VAULT_NODE_TYPE

    def __init__(self, runtime, definition: Dict[str, Any]):
        super().__init__(runtime, definition)
        # Rules are fixed for the lifetime of the deployment
        self.rules = rules_from_config(definition)

    @property
    def schema(self) -> NodeSchema:
        return NodeSchema(
            name=VAULT_NODE_TYPE,
            label="Vault",
            kind=NodeKind.ACTION,
            description="Resolves group/property values from a vault into msg, flow or global.",
            inputs=[
                NodeInput(name="vault", type="config", label="Vault", config_type=VAULT_CONFIG_TYPE),
                NodeInput(
                    name="rules",
                    type="rules",
                    label="Rules",
                    description="List of {group, property, output}; output is msg.<path>, flow.<path> or global.<path>",
                ),
            ],
            outputs=[
                NodeOutput(name="msg", type="json", label="Message"),
            ],
        )

    @property
    def vault(self):
        node = self.runtime.get_node(self.config.get("vault")) if self.runtime else None
        return node if isinstance(node, VaultConfig) else None

    async def execute(self, context: Dict[str, Any], input_data: Any) -> Any:
        engine = RuleEngine(self.vault)
        return engine.apply(self.rules, input_data, context["flow"], context["global"])
