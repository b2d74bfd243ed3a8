"""Parse `terraform show -json` plan output into ResourceChange objects."""

import json
from pathlib import Path
from typing import Any

import structlog

from .errors import PlanError
from .models import ResourceChange

log = structlog.get_logger(__name__)


def load_plan(path: Path) -> list[ResourceChange]:
    """Read a JSON plan file."""
    path = Path(path)
    if not path.is_file():
        raise PlanError(f"Plan not found: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise PlanError(f"{path}: invalid JSON: {e}") from e
    changes = parse_plan(data, source=str(path))
    log.info("plan_loaded", path=str(path), resource_changes=len(changes))
    return changes


def parse_plan(data: Any, source: str = "plan") -> list[ResourceChange]:
    """Managed resource changes from a decoded plan. Data sources are skipped."""
    if not isinstance(data, dict):
        raise PlanError(f"{source}: top level must be an object")
    raw = data.get("resource_changes", [])
    if not isinstance(raw, list):
        raise PlanError(f"{source}: resource_changes must be a list")

    changes = []
    for i, rc in enumerate(raw):
        if not isinstance(rc, dict):
            raise PlanError(f"{source}: resource_changes[{i}] must be an object")
        if rc.get("mode", "managed") == "data":
            continue
        changes.append(_parse_change(rc, f"{source}: resource_changes[{i}]"))
    return changes


def _parse_change(rc: dict, where: str) -> ResourceChange:
    change = rc.get("change") or {}
    if not isinstance(change, dict):
        raise PlanError(f"{where}.change must be an object")
    address = rc.get("address")
    if not address:
        raise PlanError(f"{where}: missing address")
    actions = change.get("actions") or []
    if not isinstance(actions, list):
        raise PlanError(f"{where}.change.actions must be a list")

    return ResourceChange(
        address=address,
        name=rc.get("name", ""),
        type=rc.get("type", ""),
        actions=[str(a) for a in actions],
        before=_state(change.get("before"), f"{where}.change.before"),
        after=_state(change.get("after"), f"{where}.change.after"),
        computed=computed_attributes(change.get("after_unknown")),
    )


def _state(value: Any, where: str) -> dict[str, Any]:
    """before/after object; null (nothing on that side) becomes {}."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PlanError(f"{where} must be an object or null")
    return value


def computed_attributes(after_unknown: Any) -> set[str]:
    """Top-level attribute names with any value unknown until apply."""
    if not isinstance(after_unknown, dict):
        return set()
    return {name for name, unknown in after_unknown.items() if _has_unknown(unknown)}


def _has_unknown(value: Any) -> bool:
    # after_unknown mirrors the value's shape with true at unknown leaves.
    if isinstance(value, dict):
        return any(_has_unknown(v) for v in value.values())
    if isinstance(value, list):
        return any(_has_unknown(v) for v in value)
    return value is True
