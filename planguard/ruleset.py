"""Load rulesets from YAML."""

from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from .errors import RulesetError
from .models import CompareOptions, OptionOverrides, ResourceRuleDef, Ruleset, RulesetSection

log = structlog.get_logger(__name__)

# YAML key -> Ruleset attribute
SECTION_KEYS = {
    "createdResources": "created",
    "destroyedResources": "destroyed",
    "updatedResources": "updated",
}

# YAML key -> CompareOptions / OptionOverrides field
OPTION_KEYS = {
    "enforceAll": "enforce_all",
    "ignoreExtraArgs": "ignore_extra_args",
    "requireAll": "require_all",
    "autoFail": "auto_fail",
}


def load_ruleset(path: Path) -> Ruleset:
    """Read and validate a ruleset file."""
    path = Path(path)
    if not path.is_file():
        raise RulesetError(f"Ruleset not found: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise RulesetError(f"{path}: invalid YAML: {e}") from e
    ruleset = parse_ruleset(data, source=str(path))
    log.info("ruleset_loaded", path=str(path), sections=[k for k, v in vars(ruleset).items() if v])
    return ruleset


def parse_ruleset(data: Any, source: str = "ruleset") -> Ruleset:
    """Build a Ruleset from decoded YAML."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RulesetError(f"{source}: top level must be a mapping")
    unknown = set(data) - set(SECTION_KEYS)
    if unknown:
        raise RulesetError(f"{source}: unknown section(s): {', '.join(sorted(unknown))}")

    ruleset = Ruleset()
    for key, attr in SECTION_KEYS.items():
        if key in data:
            setattr(ruleset, attr, _parse_section(data[key], f"{source}: {key}"))
    return ruleset


def _parse_section(data: Any, where: str) -> RulesetSection:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RulesetError(f"{where}: must be a mapping")
    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise RulesetError(f"{where}.strict: expected true/false, got {strict!r}")

    default = data.get("default") or {}
    if not isinstance(default, dict):
        raise RulesetError(f"{where}.default: must be a mapping")
    default_opts = CompareOptions(**{k: v for k, v in _parse_options(default, f"{where}.default").items() if v is not None})

    resources = data.get("resources") or []
    if not isinstance(resources, list):
        raise RulesetError(f"{where}.resources: must be a list")
    rules = [_parse_rule(r, f"{where}.resources[{i}]") for i, r in enumerate(resources)]
    return RulesetSection(strict=strict, default=default_opts, resources=rules)


def _parse_options(data: dict, where: str) -> dict[str, Optional[bool]]:
    """Option keys present in data, mapped to field names."""
    opts: dict[str, Optional[bool]] = {}
    for key, field_name in OPTION_KEYS.items():
        value = data.get(key)
        if value is not None and not isinstance(value, bool):
            raise RulesetError(f"{where}.{key}: expected true/false, got {value!r}")
        opts[field_name] = value
    return opts


def _parse_rule(data: Any, where: str) -> ResourceRuleDef:
    if not isinstance(data, dict):
        raise RulesetError(f"{where}: must be a mapping")
    name = data.get("name") or ""
    rtype = data.get("type") or ""
    if not isinstance(name, str) or not isinstance(rtype, str):
        raise RulesetError(f"{where}: name and type must be strings")
    if not name and not rtype:
        raise RulesetError(f"{where}: rule needs a name or a type")

    return ResourceRuleDef(
        name=name,
        type=rtype,
        enforced=_parse_enforced(data.get("enforced"), f"{where}.enforced"),
        ignored=_parse_ignored(data.get("ignored"), f"{where}.ignored"),
        options=OptionOverrides(**_parse_options(data, where)),
    )


def _parse_enforced(data: Any, where: str) -> dict[str, Any]:
    """attr: {value: X} or the shorthand attr: X."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RulesetError(f"{where}: must be a mapping")
    enforced = {}
    for attr, spec in data.items():
        if isinstance(spec, dict) and set(spec) == {"value"}:
            enforced[str(attr)] = spec["value"]
        else:
            enforced[str(attr)] = spec
    return enforced


def _parse_ignored(data: Any, where: str) -> set[str]:
    """List of names, or a mapping whose keys are the names."""
    if data is None:
        return set()
    if isinstance(data, dict):
        return {str(k) for k in data}
    if isinstance(data, list) and all(isinstance(x, str) for x in data):
        return set(data)
    raise RulesetError(f"{where}: must be a list of attribute names")
