"""
Node Registry

Maps a node type name (as used in flow definitions) to its node class.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from flowvault.nodes.base import Node

if TYPE_CHECKING:
    from flowvault.runtime.engine import FlowRuntime

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Central registry for all node types.

    Node classes register themselves with the ``@NodeRegistry.register``
    decorator when their module is imported.
    """

    _types: Dict[str, Type[Node]] = {}

    @classmethod
    def register(cls, node_cls: Type[Node]) -> Type[Node]:
        type_name = node_cls.type_name
        if type_name in cls._types and cls._types[type_name] is not node_cls:
            logger.warning(f"Node type '{type_name}' re-registered by {node_cls.__name__}")
        cls._types[type_name] = node_cls
        return node_cls

    @classmethod
    def get_node_class(cls, type_name: str) -> Optional[Type[Node]]:
        return cls._types.get(type_name)

    @classmethod
    def list_types(cls) -> List[str]:
        return sorted(cls._types)

    @classmethod
    def create(cls, runtime: Optional["FlowRuntime"], definition: Dict[str, Any]) -> Node:
        """
        Instantiate a node from its flow definition entry.

        Raises:
            ValueError: If the type is unknown
        """
        type_name = definition.get("type")
        node_cls = cls._types.get(type_name)
        if node_cls is None:
            raise ValueError(f"Unknown node type '{type_name}'. Available: {cls.list_types()}")
        return node_cls(runtime, definition)
