"""Run engine — evaluates every plan change against the configured sections."""

from dataclasses import dataclass

import structlog

from .compare import ComparisonReport, Comparer, CreateComparer, DeleteComparer, Status, UpdateComparer
from .models import ResourceChange, Ruleset

log = structlog.get_logger(__name__)

ACTIONS = ("create", "delete", "update")


@dataclass
class ResourceReport:
    """One change evaluated under one direction."""

    address: str
    action: str  # create | delete | update
    report: ComparisonReport

    @property
    def passed(self) -> bool:
        return self.report.passed

    @property
    def status(self) -> Status:
        return self.report.status


def build_comparers(ruleset: Ruleset) -> dict[str, Comparer]:
    """One comparer per configured section, built once per run."""
    comparers: dict[str, Comparer] = {}
    if ruleset.created is not None:
        comparers["create"] = CreateComparer(ruleset.created)
    if ruleset.destroyed is not None:
        comparers["delete"] = DeleteComparer(ruleset.destroyed)
    if ruleset.updated is not None:
        comparers["update"] = UpdateComparer(ruleset.updated)
    return comparers


def _applies(change: ResourceChange, action: str) -> bool:
    if action == "create":
        return change.is_create
    if action == "delete":
        return change.is_delete
    return change.is_update


def run_ruleset(ruleset: Ruleset, changes: list[ResourceChange]) -> list[ResourceReport]:
    """Evaluate changes in plan order; replaced resources get a delete and a create report."""
    comparers = build_comparers(ruleset)
    reports: list[ResourceReport] = []
    for change in changes:
        for action in ACTIONS:
            comparer = comparers.get(action)
            if comparer is None or not _applies(change, action):
                continue
            reports.append(ResourceReport(address=change.address, action=action, report=comparer.diff(change)))
    log.debug("ruleset_evaluated", changes=len(changes), reports=len(reports))
    return reports


def summarize(reports: list[ResourceReport]) -> dict[str, int]:
    counts = {"total": len(reports), "passed": 0, "failed": 0, "warnings": 0}
    for r in reports:
        if r.status == Status.FAIL:
            counts["failed"] += 1
        else:
            counts["passed"] += 1
            if r.status == Status.WARN:
                counts["warnings"] += 1
    return counts


def passed(reports: list[ResourceReport]) -> bool:
    """True when no report failed."""
    return all(r.passed for r in reports)
