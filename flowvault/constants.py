"""
Constants for flowvault

Centralizes the magic strings shared by the vault, the nodes and the runtime.
"""

from enum import Enum


class Scope(str, Enum):
    """Assignment targets for a resolved value."""
    MSG = "msg"
    FLOW = "flow"
    GLOBAL = "global"


class NodeKind(str, Enum):
    """Types of nodes in a flow."""
    CONFIG = "config"
    ACTION = "action"
    FUNCTION = "function"


class ErrorCategory(str, Enum):
    """Classification of errors for reporting."""
    CONFIGURATION_ERROR = "configuration_error"
    VALIDATION_ERROR = "validation_error"
    RESOURCE_NOT_FOUND = "resource_not_found"
    ASSIGNMENT_ERROR = "assignment_error"
    DECODE_ERROR = "decode_error"
    SCRIPT_ERROR = "script_error"
    UNKNOWN = "unknown"


# Fixed key under which the vault lookup callable is published in the
# global context. Scripts must use it verbatim.
VAULT_LOOKUP_KEY = "vault"

# Node type names
VAULT_CONFIG_TYPE = "vault-config"
VAULT_NODE_TYPE = "vault"
VAULT_KEY_NODE_TYPE = "vault-key"
FUNCTION_NODE_TYPE = "function"

# Message field the key-based node reads and writes
MSG_KEY_FIELD = "key"
MSG_CREDENTIALS_FIELD = "credentials"
