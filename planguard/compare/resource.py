"""Attribute comparison for a single resource against one resolved rule."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..models import CompareOptions

AUTO_FAIL_NOTICE = "AutoFail set to true"
FAILED_HEADING = "Failed arguments:"
MISSING_ENFORCED_HEADING = "Missing enforced arguments:"
EXTRA_HEADING = "Extra arguments:"
# Kept as-is for output compatibility, even though only missing-ignored
# attributes are listed under it.
MISSING_HEADING = "Missing enforced and ignored arguments:"


@dataclass
class ResourceValues:
    """One side of a change: attribute values plus names computed at apply time."""

    values: dict[str, Any] = field(default_factory=dict)
    computed: set[str] = field(default_factory=set)

    def has(self, name: str) -> bool:
        return name in self.values or name in self.computed


@dataclass(frozen=True)
class FailedArg:
    expected: Any
    actual: Any


@dataclass
class CompareResult:
    """Every attribute of rule and snapshot lands in exactly one bucket."""

    enforced: dict[str, Any] = field(default_factory=dict)  # matched, name -> expected
    failed: dict[str, FailedArg] = field(default_factory=dict)
    ignored: dict[str, bool] = field(default_factory=dict)  # present, value not inspected
    extra: dict[str, bool] = field(default_factory=dict)
    missing_enforced: dict[str, Any] = field(default_factory=dict)
    missing_ignored: dict[str, bool] = field(default_factory=dict)


def set_difference(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    """Entries of a whose key is not in b. Values of b are irrelevant."""
    return {k: v for k, v in a.items() if k not in b}


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality that never treats a bool as equal to a number."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    return a == b


def _string_keys(value: Any) -> Any:
    # YAML may produce int keys; json sorting needs one key type.
    if isinstance(value, dict):
        return {str(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(v) for v in value]
    return value


def format_value(value: Any) -> str:
    """Render a plan value the way it appears in HCL/JSON; strings stay bare."""
    if isinstance(value, str):
        return value
    return json.dumps(_string_keys(value), sort_keys=True, default=str)


@dataclass(frozen=True)
class ResourceRule:
    """A resolved rule: enforced values, ignored names and effective options."""

    enforced: Mapping[str, Any] = field(default_factory=dict)
    ignored: frozenset[str] = frozenset()
    options: CompareOptions = field(default_factory=CompareOptions)

    def compare_result(self, values: ResourceValues) -> CompareResult:
        """Categorize every enforced, ignored and present attribute."""
        result = CompareResult()

        for name, expected in self.enforced.items():
            if not values.has(name):
                result.missing_enforced[name] = expected
            elif name in values.computed:
                # Unknown until apply; cannot be checked now.
                result.enforced[name] = expected
            elif values_equal(values.values[name], expected):
                result.enforced[name] = expected
            else:
                result.failed[name] = FailedArg(expected=expected, actual=values.values[name])

        for name in self.ignored:
            if name in self.enforced:
                continue
            if values.has(name):
                result.ignored[name] = True
            else:
                result.missing_ignored[name] = True

        covered = {**self.enforced, **dict.fromkeys(self.ignored, True)}
        for name in set_difference(values.values, covered):
            result.extra[name] = True

        return result

    def compare(self, values: ResourceValues) -> bool:
        """True when the snapshot satisfies the rule under its options."""
        opts = self.options
        if opts.auto_fail:
            return False
        result = self.compare_result(values)
        if result.failed:
            return False
        if opts.enforce_all and result.missing_enforced:
            return False
        if result.extra and not opts.ignore_extra_args:
            return False
        if opts.require_all and result.missing_ignored:
            return False
        return True

    def diff(self, values: ResourceValues) -> str:
        """Plain-text report of every failing section; empty when compare() passes."""
        opts = self.options
        if opts.auto_fail:
            return AUTO_FAIL_NOTICE

        result = self.compare_result(values)
        sections: list[str] = []

        if result.failed:
            lines = [FAILED_HEADING]
            for name in sorted(result.failed):
                arg = result.failed[name]
                lines.append(f"  - {name}")
                lines.append(f"    + Expected: {format_value(arg.expected)}")
                lines.append(f"    - Actual:   {format_value(arg.actual)}")
            sections.append("\n".join(lines))

        if opts.enforce_all and result.missing_enforced:
            sections.append(_name_section(MISSING_ENFORCED_HEADING, result.missing_enforced))

        if result.extra and not opts.ignore_extra_args:
            sections.append(_name_section(EXTRA_HEADING, result.extra))

        if opts.require_all and result.missing_ignored:
            sections.append(_name_section(MISSING_HEADING, result.missing_ignored))

        return "\n".join(sections)


def _name_section(heading: str, names: Mapping[str, Any]) -> str:
    return "\n".join([heading] + [f"  - {n}" for n in sorted(names)])
