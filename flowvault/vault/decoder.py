"""
Store Decoder

Turns the (already unsealed) credential text of a vault-config node into an
in-memory store. Decoding never raises: bad input degrades to an empty store
and a diagnostic, so downstream lookups simply miss.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from flowvault.vault.errors import StoreDecodeFailed
from flowvault.vault.models import TypedValue, VaultStore

logger = logging.getLogger(__name__)


def _decode_group(group: Any) -> Any:
    if not isinstance(group, dict):
        # Kept as-is; the accessor reports such slots as not found
        return group
    return {
        name: TypedValue(entry["value"], entry["type"]) if TypedValue.is_record(entry) else entry
        for name, entry in group.items()
    }


def decode_store(
    blob: Optional[str],
    on_error: Optional[Callable[[str], None]] = None,
) -> VaultStore:
    """
    Decode a serialized vault store.

    Args:
        blob: JSON text of the store, or None when nothing was saved yet
        on_error: receives the diagnostic text when the blob is malformed

    Returns:
        Mapping of group name to decoded group (empty on missing or bad input)
    """
    if not blob:
        return {}

    try:
        raw = json.loads(blob)
        if not isinstance(raw, dict):
            raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    except (ValueError, TypeError) as e:
        error = StoreDecodeFailed(str(e))
        if on_error:
            on_error(str(error))
        else:
            logger.warning(str(error))
        return {}

    return {name: _decode_group(group) for name, group in raw.items()}


def _encode_entry(entry: Any) -> Any:
    return entry.to_dict() if isinstance(entry, TypedValue) else entry


def encode_store(store: VaultStore) -> str:
    """Serialize a store back to JSON, typed records as {value, type}."""
    data: Dict[str, Any] = {}
    for name, group in store.items():
        if isinstance(group, dict):
            data[name] = {prop: _encode_entry(entry) for prop, entry in group.items()}
        else:
            data[name] = group
    return json.dumps(data)
