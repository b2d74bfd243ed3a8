"""Terminal output formatting — grouping, colors, width control."""

import json
import shutil
from typing import List

import click

from .compare import Status
from .engine import ACTIONS, ResourceReport, summarize

STATUS_COLORS = {Status.PASS: "green", Status.FAIL: "red", Status.WARN: "yellow"}

ACTION_HEADINGS = {
    "create": "CREATED RESOURCES",
    "delete": "DESTROYED RESOURCES",
    "update": "UPDATED RESOURCES",
}


def _get_width() -> int:
    try:
        return min(72, shutil.get_terminal_size((72, 24)).columns)
    except OSError:
        return 72


def _style_report(r: ResourceReport) -> List[str]:
    """Head line in the status color; nested diff of a failure dimmed red."""
    color = STATUS_COLORS[r.status]
    first, *rest = r.report.text.splitlines()
    lines = [click.style(f"  {first}", fg=color)]
    for ln in rest:
        lines.append(click.style(f"  {ln}", fg="red", dim=True))
    return lines


def _summary_line(reports: List[ResourceReport]) -> str:
    counts = summarize(reports)
    parts = [f"{counts['passed']} passed", f"{counts['failed']} failed"]
    if counts["warnings"]:
        parts.append(f"{counts['warnings']} without a matching rule")
    return f" {counts['total']} resource change(s): " + ", ".join(parts)


def format_human(reports: List[ResourceReport], errors_only: bool = False) -> str:
    """Build the human terminal output as a single string."""
    width = _get_width()
    lines = []

    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(" planguard · plan policy check")
    lines.append("─" * width)

    shown = [r for r in reports if not r.passed] if errors_only else reports
    if not reports:
        lines.append(" No resource changes matched a configured section.")
    elif not shown:
        lines.append(" All resources passed.")
    for action in ACTIONS:
        group = [r for r in shown if r.action == action]
        if not group:
            continue
        lines.append(f" {ACTION_HEADINGS[action]}")
        for r in group:
            lines.extend(_style_report(r))

    lines.append("─" * width)
    ok = all(r.passed for r in reports)
    lines.append(click.style(_summary_line(reports), fg="green" if ok else "red"))
    lines.append("└" + "─" * (width - 2) + "┘")

    return "\n".join(lines)


def format_json(reports: List[ResourceReport]) -> str:
    """Machine output for piping/CI."""
    output = {
        "passed": all(r.passed for r in reports),
        "summary": summarize(reports),
        "results": [
            {
                "address": r.address,
                "action": r.action,
                "status": r.status.value,
                "passed": r.passed,
                "no_matching_rule": r.report.no_rule,
                "diff": r.report.diff,
            }
            for r in reports
        ],
    }
    return json.dumps(output, indent=2)
