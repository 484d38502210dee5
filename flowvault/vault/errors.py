"""
Vault error taxonomy.

Every per-message failure raised by the retrieval nodes is a ``VaultError``.
The runtime classifies it by ``category``, reports it on the diagnostic
channel and drops the message. The lookup API raises the same types straight
to the calling script.
"""

from typing import Optional

from flowvault.constants import ErrorCategory


class VaultError(Exception):
    """Base class for all vault resolution errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN


class ConfigurationMissing(VaultError):
    category = ErrorCategory.CONFIGURATION_ERROR

    def __init__(self, message: str = "No vault-config node configured"):
        super().__init__(message)


class NoRulesConfigured(VaultError):
    category = ErrorCategory.CONFIGURATION_ERROR

    def __init__(self, message: str = "No retrieval rules configured"):
        super().__init__(message)


class RuleMalformed(VaultError):
    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, index: int, missing: str):
        self.index = index
        self.missing = missing
        super().__init__(f"Rule {index}: missing required field '{missing}'")


class GroupNotFound(VaultError, LookupError):
    category = ErrorCategory.RESOURCE_NOT_FOUND

    def __init__(self, group: str):
        self.group = group
        super().__init__(f"Group '{group}' not found in vault")


class PropertyNotFound(VaultError, LookupError):
    category = ErrorCategory.RESOURCE_NOT_FOUND

    def __init__(self, group: str, prop: str):
        self.group = group
        self.property = prop
        super().__init__(f"Property '{prop}' not found in group '{group}'")


class VaultNotFound(VaultError, LookupError):
    category = ErrorCategory.RESOURCE_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Vault '{name}' not found")


class OutputFormatInvalid(VaultError):
    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, output: str):
        self.output = output
        super().__init__(
            f"Invalid output '{output}': expected 'msg.<path>', 'flow.<path>' or 'global.<path>'"
        )


class ScopeInvalid(VaultError):
    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, scope: str, output: Optional[str] = None):
        self.scope = scope
        self.output = output
        super().__init__(
            f"Invalid scope '{scope}' in output '{output}': must be msg, flow or global"
        )


class AssignmentFailed(VaultError):
    category = ErrorCategory.ASSIGNMENT_ERROR

    def __init__(self, output: str, cause: Exception):
        self.output = output
        self.cause = cause
        super().__init__(f"Failed to set '{output}': {cause}")


class StoreDecodeFailed(VaultError):
    category = ErrorCategory.DECODE_ERROR

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to parse vault store JSON: {reason}")


class LookupKeyMissing(VaultError):
    category = ErrorCategory.CONFIGURATION_ERROR

    def __init__(self, message: str = "No key specified in msg.key or node configuration"):
        super().__init__(message)


class ScriptFailed(VaultError):
    category = ErrorCategory.SCRIPT_ERROR

    def __init__(self, node_id: str, cause: Exception):
        self.node_id = node_id
        self.cause = cause
        super().__init__(f"Function node {node_id} failed: {cause}")
