"""CLI entry point — load plan and ruleset, evaluate, output clearly."""

from pathlib import Path

import click
import typer

from . import __version__
from .engine import passed, run_ruleset
from .errors import PlanguardError
from .format import format_human, format_json
from .logging_config import configure_logging
from .models import Ruleset
from .plan import load_plan
from .ruleset import SECTION_KEYS, load_ruleset


def _err(msg: str) -> None:
    """Raise a styled error (red box) — used for all CLI errors."""
    raise click.BadParameter(msg)


app = typer.Typer(help="Check a Terraform plan against a ruleset.", no_args_is_help=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"planguard {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", envvar="PLANGUARD_LOG_LEVEL", help="Log level for stderr diagnostics"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Validate the attribute changes a plan proposes."""
    configure_logging("DEBUG" if verbose else log_level)


def _load_ruleset(path: Path) -> Ruleset:
    try:
        return load_ruleset(path)
    except PlanguardError as e:
        _err(str(e))


@app.command("check")
def check_cmd(
    plan_path: Path = typer.Argument(..., dir_okay=False, help="Plan JSON (terraform show -json)"),
    ruleset_path: Path = typer.Option(
        ..., "--ruleset", "-r", envvar="PLANGUARD_RULESET", dir_okay=False, help="Ruleset YAML"
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    errors_only: bool = typer.Option(False, "--errors-only", "-e", help="Only show failing resources"),
) -> None:
    """Evaluate every resource change. Exit 1 if any fails."""
    ruleset = _load_ruleset(ruleset_path)
    try:
        changes = load_plan(plan_path)
    except PlanguardError as e:
        _err(str(e))

    reports = run_ruleset(ruleset, changes)
    if json_out:
        typer.echo(format_json(reports))
    else:
        typer.echo(format_human(reports, errors_only=errors_only))

    if not passed(reports):
        raise typer.Exit(1)


@app.command("rules")
def rules_cmd(
    ruleset_path: Path = typer.Argument(..., dir_okay=False, help="Ruleset YAML"),
) -> None:
    """Validate a ruleset and list its rules with effective options."""
    ruleset = _load_ruleset(ruleset_path)
    typer.echo(f"OK: {ruleset_path}")
    for key, attr in SECTION_KEYS.items():
        section = getattr(ruleset, attr)
        if section is None:
            continue
        typer.echo(f"\n{key} (strict: {str(section.strict).lower()})")
        if not section.resources:
            typer.echo("  (no rules)")
        for rule in section.resources:
            opts = section.default.override(rule.options)
            flags = [name for name, on in vars(opts).items() if on]
            suffix = f" [{', '.join(flags)}]" if flags else ""
            typer.echo(
                f"  {rule.key}: {len(rule.enforced)} enforced, {len(rule.ignored)} ignored{suffix}"
            )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
