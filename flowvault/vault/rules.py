"""
Retrieval Rule Engine

Applies an ordered list of (group, property, output) rules to one message.
The first failing rule stops processing. Writes made by earlier rules to
the flow or global context are not rolled back.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from flowvault.constants import Scope
from flowvault.utils.paths import PATH_SEPARATOR, set_property
from flowvault.vault.config_node import VaultConfig
from flowvault.vault.errors import (
    AssignmentFailed,
    ConfigurationMissing,
    GroupNotFound,
    NoRulesConfigured,
    OutputFormatInvalid,
    PropertyNotFound,
    RuleMalformed,
    ScopeInvalid,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetrievalRule:
    group: Any
    property: Any
    output: Any

    @classmethod
    def from_config(cls, raw: Any) -> "RetrievalRule":
        """Build a rule from node config; ``domain`` is the older name for ``group``."""
        if not isinstance(raw, dict):
            return cls(None, None, None)
        group = raw.get("group")
        if group in (None, ""):
            group = raw.get("domain")
        return cls(group, raw.get("property"), raw.get("output"))

    def missing_field(self) -> Optional[str]:
        for field_name in ("group", "property", "output"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or value == "":
                return field_name
        return None


def rules_from_config(config: Dict[str, Any]) -> List[RetrievalRule]:
    """
    Read the rule list of a vault node.

    Falls back to the single-rule layout where ``domain``, ``property`` and
    ``output`` sit directly on the node config.
    """
    raw_rules = config.get("rules")
    if isinstance(raw_rules, list):
        return [RetrievalRule.from_config(raw) for raw in raw_rules]
    if any(config.get(k) for k in ("domain", "group", "property", "output")):
        return [RetrievalRule.from_config(config)]
    return []


def parse_output(output: str):
    """
    Split ``scope.path`` into (Scope, path).

    Raises:
        OutputFormatInvalid: fewer than two segments, or an empty segment
        ScopeInvalid: the first segment is not msg, flow or global
    """
    parts = output.split(PATH_SEPARATOR)
    if len(parts) < 2 or any(part == "" for part in parts):
        raise OutputFormatInvalid(output)
    try:
        scope = Scope(parts[0])
    except ValueError:
        raise ScopeInvalid(parts[0], output) from None
    return scope, PATH_SEPARATOR.join(parts[1:])


class RuleEngine:
    """Resolves retrieval rules against one vault-config node."""

    def __init__(self, vault: Optional[VaultConfig]):
        self.vault = vault

    def resolve(self, rule: RetrievalRule) -> Any:
        group = self.vault.get_group(rule.group)
        if group is None:
            raise GroupNotFound(rule.group)
        try:
            value = self.vault.get_property(group, rule.property)
        except KeyError:
            raise PropertyNotFound(rule.group, rule.property) from None
        # The decoded store is read-only; hand out a copy
        return copy.deepcopy(value)

    def apply(
        self,
        rules: Sequence[RetrievalRule],
        msg: Dict[str, Any],
        flow: Any,
        global_context: Any,
    ) -> Dict[str, Any]:
        """
        Apply ``rules`` in order, writing each value to its output.

        ``flow`` and ``global_context`` are context stores exposing
        ``set(path, value)``.

        Returns:
            The same message object, mutated in place

        Raises:
            VaultError: the first failure; later rules are not evaluated
        """
        if self.vault is None:
            raise ConfigurationMissing()
        if not rules:
            raise NoRulesConfigured()

        for index, rule in enumerate(rules):
            missing = rule.missing_field()
            if missing:
                raise RuleMalformed(index, missing)

            value = self.resolve(rule)
            scope, path = parse_output(rule.output)

            try:
                if scope is Scope.MSG:
                    set_property(msg, path, value)
                elif scope is Scope.FLOW:
                    flow.set(path, value)
                else:
                    global_context.set(path, value)
            except Exception as e:
                raise AssignmentFailed(rule.output, e) from e

            logger.debug(f"Resolved {rule.group}.{rule.property} -> {rule.output}")

        return msg
