"""
Vault data model.

A store maps group name -> group, and a group maps property name -> value.
Two on-disk generations are read side by side:

- legacy: the property holds the raw value
- typed:  the property holds ``{"value": <raw>, "type": <tag>}``

Typed records are turned into ``TypedValue`` when the store is decoded, so
the rest of the code never has to guess the shape again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ValueType(str, Enum):
    """Type tags written by the authoring side."""
    STR = "str"
    PASSWORD = "password"
    CRED = "cred"
    NUM = "num"
    BOOL = "bool"
    JSON = "json"
    BIN = "bin"
    DATE = "date"


SECRET_TYPES = {ValueType.PASSWORD, ValueType.CRED}


@dataclass(frozen=True)
class TypedValue:
    """A typed-format record. ``type`` keeps the raw tag, even unknown ones."""
    value: Any
    type: str

    @property
    def value_type(self) -> Optional[ValueType]:
        try:
            return ValueType(self.type)
        except ValueError:
            return None

    @property
    def is_secret(self) -> bool:
        return self.value_type in SECRET_TYPES

    @classmethod
    def is_record(cls, entry: Any) -> bool:
        # Both keys must be present; a JSON value that merely has a "value"
        # key is a legacy raw value.
        return isinstance(entry, dict) and "value" in entry and "type" in entry

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "type": self.type}


Group = Dict[str, Any]
VaultStore = Dict[str, Any]
