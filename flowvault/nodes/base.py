import logging
import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel

from flowvault.config import settings
from flowvault.constants import NodeKind

if TYPE_CHECKING:
    from flowvault.runtime.engine import FlowRuntime

logger = logging.getLogger(__name__)


class NodeInput(BaseModel):
    name: str
    type: str  # string, json, rules, code, config
    label: str
    required: bool = True
    default: Any = None
    description: Optional[str] = None
    config_type: Optional[str] = None  # For config type: 'vault-config'


class NodeOutput(BaseModel):
    name: str
    type: str
    label: str


class NodeSchema(BaseModel):
    name: str
    label: str
    kind: NodeKind
    description: str
    inputs: List[NodeInput] = []
    outputs: List[NodeOutput] = []
    credentials: List[NodeInput] = []
    category: str = "Vault"


class Node(ABC):
    """
    A deployed node instance.

    ``definition`` is the node's entry in the flow definition:
    ``{"id", "type", "name", "flow", "wires", "credentials", ...}``.
    Credentials arrive already unsealed by the runtime.
    """

    type_name: ClassVar[str]

    def __init__(self, runtime: Optional["FlowRuntime"], definition: Dict[str, Any]):
        self.runtime = runtime
        self.config = definition
        self.id: str = definition.get("id") or str(uuid.uuid4())
        self.type: str = definition.get("type") or self.type_name
        self.name: str = definition.get("name") or ""
        self.flow_id: str = definition.get("flow") or settings.DEFAULT_FLOW_ID
        self.wires: List[str] = list(definition.get("wires") or [])
        self.credentials: Dict[str, Any] = definition.get("credentials") or {}

    @property
    @abstractmethod
    def schema(self) -> NodeSchema:
        pass

    def error(self, message: str, msg: Optional[Dict[str, Any]] = None) -> None:
        """Report a problem on the runtime's diagnostic channel."""
        if self.runtime is not None:
            self.runtime.exec_logger.log_node_error(self.id, message, msg)
        else:
            logger.error(f"[{self.type}:{self.id}] {message}")

    def warn(self, message: str) -> None:
        logger.warning(f"[{self.type}:{self.id}] {message}")

    def close(self) -> None:
        """Called when the node is torn down (stop or redeploy)."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r} name={self.name!r}>"


class ConfigNode(Node):
    """Shared configuration entity; never receives messages."""


class BaseNode(Node):
    """A node that handles messages."""

    @abstractmethod
    async def execute(self, context: Dict[str, Any], input_data: Any) -> Any:
        """
        Handle one message.

        Returns the message to forward, or None to forward nothing.
        Raises VaultError (or any exception) to fail the message; the
        runtime reports it and drops the message.
        """
        pass
