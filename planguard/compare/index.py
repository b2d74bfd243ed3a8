"""Rule index — resolves which rule applies to a resource name/type."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from ..models import ResourceRuleDef, RulesetSection
from .resource import ResourceRule

log = structlog.get_logger(__name__)


def name_type_key(resource_type: str, name: str) -> str:
    return f"{resource_type}.{name}"


def build_rule(rule: ResourceRuleDef, section: RulesetSection) -> ResourceRule:
    """Resolve a rule definition against its section's default options."""
    return ResourceRule(
        enforced=MappingProxyType(dict(rule.enforced)),
        ignored=frozenset(rule.ignored),
        options=section.default.override(rule.options),
    )


class RuleIndex:
    """
    Read-only lookup built once per ruleset section.
    Precedence: type.name, then name, then type. No merging across levels.
    """

    def __init__(self, section: RulesetSection) -> None:
        name_type: dict[str, ResourceRule] = {}
        by_name: dict[str, ResourceRule] = {}
        by_type: dict[str, ResourceRule] = {}

        for rule in section.resources:
            if rule.name and rule.type:
                name_type[name_type_key(rule.type, rule.name)] = build_rule(rule, section)
            elif rule.name:
                by_name[rule.name] = build_rule(rule, section)
            elif rule.type:
                by_type[rule.type] = build_rule(rule, section)
            else:
                log.warning("rule_without_name_or_type_skipped")

        self._strict = section.strict
        self._name_type: Mapping[str, ResourceRule] = MappingProxyType(name_type)
        self._by_name: Mapping[str, ResourceRule] = MappingProxyType(by_name)
        self._by_type: Mapping[str, ResourceRule] = MappingProxyType(by_type)
        log.debug(
            "rule_index_built",
            strict=self._strict,
            name_type=len(name_type),
            name=len(by_name),
            type=len(by_type),
        )

    @property
    def strict(self) -> bool:
        return self._strict

    def resolve(self, name: str, resource_type: str) -> Optional[ResourceRule]:
        """Most specific rule for this resource, or None."""
        rule = self._name_type.get(name_type_key(resource_type, name))
        if rule is not None:
            return rule
        rule = self._by_name.get(name)
        if rule is not None:
            return rule
        return self._by_type.get(resource_type)

    def __len__(self) -> int:
        return len(self._name_type) + len(self._by_name) + len(self._by_type)
