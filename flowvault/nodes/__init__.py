"""
Flow Nodes Package

Built-in node types register themselves with the NodeRegistry when their
modules are imported; the runtime imports them on startup.
"""

from .base import BaseNode, ConfigNode, Node, NodeInput, NodeOutput, NodeSchema
from .registry import NodeRegistry

__all__ = [
    "BaseNode",
    "ConfigNode",
    "Node",
    "NodeInput",
    "NodeOutput",
    "NodeSchema",
    "NodeRegistry",
]
