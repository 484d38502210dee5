"""
Flow runtime

Deploys flow definitions, owns the flow and global context stores and
delivers messages along wires. Vault-config nodes are created before the
nodes that reference them and torn down on every redeploy.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from flowvault.constants import VAULT_LOOKUP_KEY
from flowvault.nodes.base import BaseNode, ConfigNode, Node
from flowvault.nodes.registry import NodeRegistry
from flowvault.runtime.context import ContextStore
from flowvault.runtime.error_handler import ErrorClassifier
from flowvault.runtime.logger import ExecutionLogger
from flowvault.utils.security import decrypt_string
from flowvault.vault.lookup import VaultLookup
from flowvault.vault.registry import VaultRegistry

# Registers the built-in node types
from flowvault.nodes import code, vault, vault_key  # noqa: F401,E402
from flowvault.vault import config_node  # noqa: F401,E402

logger = logging.getLogger(__name__)


class FlowRuntime:
    """
    Hosts one deployment at a time.

    Usage:
        runtime = FlowRuntime()
        runtime.deploy(definitions)
        out = await runtime.receive("vault-node-id", {"payload": 1})
    """

    def __init__(
        self,
        registry: Optional[VaultRegistry] = None,
        secret_key: Optional[str] = None,
    ):
        # A private registry unless the caller shares one
        self.registry = registry if registry is not None else VaultRegistry()
        self.secret_key = secret_key
        self.exec_logger = ExecutionLogger()
        self.global_context = ContextStore("global")
        self._flow_contexts: Dict[str, ContextStore] = {}
        self.nodes: Dict[str, Node] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

        self.lookup = VaultLookup(self.registry)
        self.global_context.publish(VAULT_LOOKUP_KEY, self.lookup)

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    def _unseal(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        credentials = definition.get("credentials")
        if not credentials:
            return definition
        unsealed = {
            key: decrypt_string(value, self.secret_key) if isinstance(value, str) else value
            for key, value in credentials.items()
        }
        return {**definition, "credentials": unsealed}

    def deploy(self, definitions: Iterable[Dict[str, Any]]) -> List[Node]:
        """
        Replace the current deployment with ``definitions``.

        Config nodes are created first so message nodes can resolve them.

        Raises:
            ValueError: If a definition has an unknown type
        """
        if self.nodes:
            self.teardown()

        definitions = [dict(d) for d in definitions]
        for definition in definitions:
            definition.setdefault("id", str(uuid.uuid4()))

        def is_config(definition):
            node_cls = NodeRegistry.get_node_class(definition.get("type"))
            return node_cls is not None and issubclass(node_cls, ConfigNode)

        ordered = sorted(definitions, key=lambda d: 0 if is_config(d) else 1)

        created: List[Node] = []
        try:
            for definition in ordered:
                node = NodeRegistry.create(self, self._unseal(definition))
                self.nodes[node.id] = node
                created.append(node)
        except Exception:
            self.teardown()
            raise

        self.exec_logger.log_deploy_complete(len(created))
        return created

    def teardown(self) -> None:
        """Close every node; vault-config nodes leave the registry."""
        count = len(self.nodes)
        for node in list(self.nodes.values()):
            try:
                node.close()
            except Exception as e:
                logger.error(f"Failed to close node {node.id}: {e}", exc_info=True)
        self.nodes.clear()
        self._locks.clear()
        self.exec_logger.log_teardown_complete(count)

    def get_node(self, node_id: Optional[str]) -> Optional[Node]:
        if not node_id:
            return None
        return self.nodes.get(node_id)

    def flow_context(self, flow_id: str) -> ContextStore:
        if flow_id not in self._flow_contexts:
            self._flow_contexts[flow_id] = ContextStore(f"flow:{flow_id}")
        return self._flow_contexts[flow_id]

    # ------------------------------------------------------------------
    # Message delivery
    # ------------------------------------------------------------------

    def prepare_context(self, node: BaseNode) -> Dict[str, Any]:
        """Build the execution context handed to a node."""
        return {
            "node_id": node.id,
            "flow_id": node.flow_id,
            "node_config": node.config,
            "flow": self.flow_context(node.flow_id),
            "global": self.global_context,
            "node": node,
        }

    async def receive(self, node_id: str, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Deliver ``msg`` to a node and forward its output along the wires.

        Returns:
            The forwarded message, or None if the node failed or sent nothing

        Raises:
            ValueError: If no message node has this id
        """
        node = self.nodes.get(node_id)
        if not isinstance(node, BaseNode):
            raise ValueError(f"No message node with id '{node_id}'")

        msg.setdefault("_msgid", uuid.uuid4().hex)
        lock = self._locks.setdefault(node_id, asyncio.Lock())

        async with lock:
            try:
                result = await node.execute(self.prepare_context(node), msg)
            except Exception as e:
                error_context = ErrorClassifier.classify(e)
                self.exec_logger.log_node_failed(
                    node.id, error_context.message, error_context.to_dict(), msg
                )
                return None

        if result is None:
            return None

        for target in node.wires:
            if isinstance(self.nodes.get(target), BaseNode):
                await self.receive(target, result)
            else:
                logger.warning(f"Node {node.id} is wired to unknown or config node {target}")
        return result
