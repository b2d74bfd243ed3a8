"""Rule resolution and attribute comparison."""

from .comparer import (
    ComparisonReport,
    Comparer,
    CreateComparer,
    DeleteComparer,
    Status,
    UpdateComparer,
)
from .index import RuleIndex
from .resource import CompareResult, FailedArg, ResourceRule, ResourceValues, set_difference

__all__ = [
    "CompareResult",
    "Comparer",
    "ComparisonReport",
    "CreateComparer",
    "DeleteComparer",
    "FailedArg",
    "ResourceRule",
    "ResourceValues",
    "RuleIndex",
    "Status",
    "UpdateComparer",
    "set_difference",
]
