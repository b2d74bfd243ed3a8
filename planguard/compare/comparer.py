"""Change comparers — apply a section's rules to created, destroyed or updated resources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import structlog

from ..models import ResourceChange, RulesetSection
from .index import RuleIndex
from .resource import ResourceValues, values_equal

log = structlog.get_logger(__name__)


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"  # passed without a matching rule


GLYPHS = {Status.PASS: "✓", Status.FAIL: "×", Status.WARN: "!"}


@dataclass
class ComparisonReport:
    """Outcome for one resource change. Text is unstyled."""

    address: str
    status: Status
    diff: str = ""  # attribute-level diff, empty unless failed on a rule
    no_rule: bool = False

    @property
    def passed(self) -> bool:
        return self.status != Status.FAIL

    @property
    def text(self) -> str:
        head = f"{GLYPHS[self.status]} {self.address}"
        if self.no_rule:
            head += " (no matching rule)"
        if not self.diff:
            return head
        nested = "\n".join("  " + ln for ln in self.diff.splitlines())
        return f"{head}\n{nested}"


class Comparer(ABC):
    """Shared logic; subclasses implement values() to pick the side of the change checked."""

    action = ""

    def __init__(self, section: RulesetSection) -> None:
        self.index = RuleIndex(section)

    @property
    def strict(self) -> bool:
        return self.index.strict

    @abstractmethod
    def values(self, change: ResourceChange) -> ResourceValues:
        """Snapshot of the change this comparer checks."""

    def compare(self, change: ResourceChange) -> bool:
        rule = self.index.resolve(change.name, change.type)
        if rule is None:
            return not self.strict
        return rule.compare(self.values(change))

    def diff(self, change: ResourceChange) -> ComparisonReport:
        rule = self.index.resolve(change.name, change.type)
        if rule is None:
            log.info("no_matching_rule", address=change.address, action=self.action, strict=self.strict)
            status = Status.FAIL if self.strict else Status.WARN
            return ComparisonReport(address=change.address, status=status, no_rule=True)

        diff = rule.diff(self.values(change))
        if diff:
            log.debug("resource_failed", address=change.address, action=self.action)
            return ComparisonReport(address=change.address, status=Status.FAIL, diff=diff)
        return ComparisonReport(address=change.address, status=Status.PASS)


class CreateComparer(Comparer):
    """Checks the after-state of created resources."""

    action = "create"

    def values(self, change: ResourceChange) -> ResourceValues:
        return ResourceValues(values=change.after, computed=change.computed)


class DeleteComparer(Comparer):
    """Checks the before-state of destroyed resources."""

    action = "delete"

    def values(self, change: ResourceChange) -> ResourceValues:
        # Nothing is computed on the way out.
        return ResourceValues(values=change.before, computed=set())


class UpdateComparer(Comparer):
    """
    Checks the new values of attributes an update actually changes.

    Unchanged attributes are left out of the snapshot, so they are never
    extra and an enforced attribute that is not being changed is reported
    as missing (a failure only with enforce_all).
    """

    action = "update"

    def values(self, change: ResourceChange) -> ResourceValues:
        return ResourceValues(values=changed_values(change), computed=set(change.computed))


_ABSENT = object()


def changed_values(change: ResourceChange) -> dict:
    """After-state values for attributes that differ from the before-state."""
    changed = {}
    for name in set(change.before) | set(change.after):
        if name in change.computed:
            continue
        old = change.before.get(name, _ABSENT)
        new = change.after.get(name, _ABSENT)
        if old is _ABSENT or new is _ABSENT or not values_equal(old, new):
            changed[name] = None if new is _ABSENT else new
    return changed
