"""Structured inputs: ruleset sections and plan resource changes."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class OptionOverrides:
    """Per-rule option overrides. None means "keep the section default"."""

    enforce_all: Optional[bool] = None
    ignore_extra_args: Optional[bool] = None
    require_all: Optional[bool] = None
    auto_fail: Optional[bool] = None


@dataclass(frozen=True)
class CompareOptions:
    """Effective switches for one resolved rule."""

    enforce_all: bool = False  # absent enforced attribute fails
    ignore_extra_args: bool = False  # uncovered attributes are tolerated
    require_all: bool = False  # absent ignored attribute fails
    auto_fail: bool = False  # never pass, e.g. forbidden resource types

    def override(self, overrides: OptionOverrides) -> "CompareOptions":
        """Field-by-field override; unset fields keep this object's value."""
        return CompareOptions(
            enforce_all=_pick(overrides.enforce_all, self.enforce_all),
            ignore_extra_args=_pick(overrides.ignore_extra_args, self.ignore_extra_args),
            require_all=_pick(overrides.require_all, self.require_all),
            auto_fail=_pick(overrides.auto_fail, self.auto_fail),
        )


def _pick(value: Optional[bool], default: bool) -> bool:
    return default if value is None else value


@dataclass
class ResourceRuleDef:
    """One rule as written in the ruleset. At least name or type is set."""

    name: str = ""
    type: str = ""
    enforced: dict[str, Any] = field(default_factory=dict)  # attribute -> expected value
    ignored: set[str] = field(default_factory=set)
    options: OptionOverrides = field(default_factory=OptionOverrides)

    @property
    def key(self) -> str:
        """Display key: type.name, name or type."""
        if self.name and self.type:
            return f"{self.type}.{self.name}"
        return self.name or self.type


@dataclass
class RulesetSection:
    """Rules for one change direction (created, destroyed or updated)."""

    strict: bool = False
    default: CompareOptions = field(default_factory=CompareOptions)
    resources: list[ResourceRuleDef] = field(default_factory=list)


@dataclass
class Ruleset:
    """Parsed ruleset. Sections left as None are not evaluated."""

    created: Optional[RulesetSection] = None
    destroyed: Optional[RulesetSection] = None
    updated: Optional[RulesetSection] = None


@dataclass
class ResourceChange:
    """One entry of a plan's resource_changes."""

    address: str
    name: str
    type: str
    actions: list[str] = field(default_factory=list)  # e.g. ["create"], ["delete", "create"]
    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)
    computed: set[str] = field(default_factory=set)  # known only after apply

    @property
    def is_create(self) -> bool:
        return "create" in self.actions

    @property
    def is_delete(self) -> bool:
        return "delete" in self.actions

    @property
    def is_update(self) -> bool:
        return "update" in self.actions
