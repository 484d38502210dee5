"""
Vault Module

Grouped configuration values kept in a sealed store, resolved into message,
flow or global scope by the vault nodes or looked up by name from scripts.
"""

from .config_node import VaultConfig
from .decoder import decode_store, encode_store
from .lookup import VAULT_LOOKUP_KEY, GroupHandle, VaultHandle, VaultLookup
from .models import TypedValue, ValueType
from .registry import VaultRegistry, get_vault_registry
from .rules import RetrievalRule, RuleEngine

__all__ = [
    "VaultConfig",
    "decode_store",
    "encode_store",
    "VAULT_LOOKUP_KEY",
    "GroupHandle",
    "VaultHandle",
    "VaultLookup",
    "TypedValue",
    "ValueType",
    "VaultRegistry",
    "get_vault_registry",
    "RetrievalRule",
    "RuleEngine",
]
