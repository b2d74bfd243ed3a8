"""Errors raised while loading rulesets and plans."""


class PlanguardError(Exception):
    """Base class for load-time failures. Comparisons never raise."""


class RulesetError(PlanguardError):
    """Ruleset file is missing or malformed."""


class PlanError(PlanguardError):
    """Plan file is missing or not a Terraform JSON plan."""
