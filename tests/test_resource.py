"""Tests for attribute comparison against a single resolved rule."""

import pytest

from planguard.compare.resource import (
    AUTO_FAIL_NOTICE,
    CompareResult,
    FailedArg,
    ResourceRule,
    ResourceValues,
    set_difference,
)
from planguard.models import CompareOptions


def _rule(enforced=None, ignored=(), **opts) -> ResourceRule:
    return ResourceRule(
        enforced=enforced or {},
        ignored=frozenset(ignored),
        options=CompareOptions(**opts),
    )


def _values(values, computed=()) -> ResourceValues:
    return ResourceValues(values=values, computed=set(computed))


# --- categorization ---


def test_result_enforced_value_matches():
    """Equal value lands in matched-enforced only."""
    got = _rule({"key": "value"}).compare_result(_values({"key": "value"}))
    assert got == CompareResult(enforced={"key": "value"})


def test_result_enforced_value_does_not_match():
    """Unequal value records expected and actual."""
    got = _rule({"key": "value"}).compare_result(_values({"key": "value2"}))
    assert got == CompareResult(failed={"key": FailedArg(expected="value", actual="value2")})


def test_result_extra_value_that_is_ignored():
    """Ignored attribute is matched, not extra."""
    got = _rule({"key": "value"}, ignored={"ignored"}).compare_result(
        _values({"key": "value", "ignored": "ignored"})
    )
    assert got == CompareResult(enforced={"key": "value"}, ignored={"ignored": True})


def test_result_extra_value():
    """Uncovered attribute is extra."""
    got = _rule({"key": "value"}).compare_result(_values({"key": "value", "extra": "sensitive"}))
    assert got == CompareResult(enforced={"key": "value"}, extra={"extra": True})


def test_result_missing_enforced_value():
    """Absent enforced attribute is missing-enforced."""
    got = _rule({"key": "value", "second": "value"}).compare_result(_values({"key": "value"}))
    assert got == CompareResult(enforced={"key": "value"}, missing_enforced={"second": "value"})


def test_result_missing_ignored_value():
    """Absent ignored attribute is missing-ignored."""
    got = _rule(ignored={"key", "second"}).compare_result(_values({"key": "value"}))
    assert got == CompareResult(ignored={"key": True}, missing_ignored={"second": True})


def test_result_computed_value_satisfies_expectation():
    """Computed attribute matches regardless of its placeholder value."""
    got = _rule({"arn": "arn:aws:x"}).compare_result(_values({"arn": None}, computed={"arn"}))
    assert got == CompareResult(enforced={"arn": "arn:aws:x"})


def test_result_computed_only_attribute_is_present():
    """Attribute known only as computed is not missing and not extra."""
    got = _rule({"id": "i-123"}, ignored={"arn"}).compare_result(_values({}, computed={"id", "arn"}))
    assert got == CompareResult(enforced={"id": "i-123"}, ignored={"arn": True})


def test_result_buckets_are_disjoint():
    """Each attribute ends up in exactly one bucket."""
    rule = _rule({"a": 1, "b": 2, "c": 3}, ignored={"d", "e"})
    got = rule.compare_result(_values({"a": 1, "b": 5, "d": "x", "f": "y"}))
    buckets = [got.enforced, got.failed, got.ignored, got.extra, got.missing_enforced, got.missing_ignored]
    names = [n for b in buckets for n in b]
    assert sorted(names) == ["a", "b", "c", "d", "e", "f"]


def test_result_nested_values_compare_deeply():
    """Maps and lists compare by value."""
    rule = _rule({"tags": {"env": "prod", "team": "infra"}})
    assert rule.compare(_values({"tags": {"team": "infra", "env": "prod"}}))
    assert not rule.compare(_values({"tags": {"env": "dev", "team": "infra"}}))


# --- verdict ---


@pytest.mark.parametrize(
    "rule,values,expected",
    [
        (_rule({"key": "value"}), {"key": "value"}, True),
        (_rule({"key": "value2"}), {"key": "value"}, False),
        (_rule({"key": "value"}, ignored={"ignored"}), {"key": "value", "ignored": "ignored"}, True),
        (_rule({"key": "value"}), {"key": "value", "extra": "sensitive"}, False),
        (_rule({"key": "value"}, ignore_extra_args=True), {"key": "value", "extra": "sensitive"}, True),
        (_rule({"key": "value", "second": "value"}), {"key": "value"}, True),
        (_rule({"key": "value", "second": "value"}, enforce_all=True), {"key": "value"}, False),
        (_rule(ignored={"key"}), {"key": "value"}, True),
        (_rule(ignored={"key"}), {"key": "value", "second": "value"}, False),
        (_rule(ignored={"key"}, ignore_extra_args=True), {"key": "value", "second": "value"}, True),
        (_rule({"enforced": "value"}, ignored={"key", "second"}), {"key": "value", "enforced": "value"}, True),
        (
            _rule({"enforced": "value"}, ignored={"key", "second"}, require_all=True),
            {"key": "value", "enforced": "value"},
            False,
        ),
        (_rule({"enforced": "value"}, auto_fail=True), {"enforced": "value"}, False),
        (_rule(auto_fail=True), {"key": "value"}, False),
        (_rule(auto_fail=True), {}, False),
        (_rule(), {}, True),
    ],
)
def test_compare(rule, values, expected):
    assert rule.compare(_values(values)) is expected


def test_compare_empty_rule_with_ignore_extra_args_passes_anything():
    """No enforced/ignored entries and ignore_extra_args means vacuous pass."""
    rule = _rule(ignore_extra_args=True)
    assert rule.compare(_values({"a": 1, "b": 2}))
    assert rule.diff(_values({"a": 1, "b": 2})) == ""


# --- diff ---


def test_diff_match_is_empty():
    """Scenario: exact match renders nothing."""
    assert _rule({"key": "value"}).diff(_values({"key": "value"})) == ""


def test_diff_failed_argument():
    """Mismatch lists name, expected and actual."""
    got = _rule({"key": "value2"}).diff(_values({"key": "value"}))
    assert "Failed arguments:" in got
    assert "- key" in got
    assert "+ Expected: value2" in got
    assert "- Actual:   value" in got


def test_diff_extra_argument():
    got = _rule({"key": "value"}).diff(_values({"key": "value", "extra": "sensitive"}))
    assert got.startswith("Extra arguments:")
    assert "extra" in got
    assert "sensitive" not in got


def test_diff_extra_argument_ignored_by_option():
    assert _rule({"key": "value"}, ignore_extra_args=True).diff(_values({"key": "value", "extra": "x"})) == ""


def test_diff_missing_enforced_only_with_enforce_all():
    """Missing enforced attributes are reported only under enforce_all."""
    values = _values({"key": "value"})
    assert _rule({"key": "value", "second": "value"}).diff(values) == ""
    got = _rule({"key": "value", "second": "value"}, enforce_all=True).diff(values)
    assert got == "Missing enforced arguments:\n  - second"


def test_diff_missing_ignored_with_require_all():
    """require_all reports missing ignored names under the combined heading."""
    rule = _rule({"enforced": "value"}, ignored={"key", "second"}, require_all=True)
    got = rule.diff(_values({"key": "value", "enforced": "value"}))
    assert got == "Missing enforced and ignored arguments:\n  - second"


def test_diff_autofail_is_sole_notice():
    """AutoFail replaces every other section."""
    rule = _rule({"key": "other"}, auto_fail=True)
    assert rule.diff(_values({"key": "value", "extra": 1})) == AUTO_FAIL_NOTICE
    assert _rule(auto_fail=True).diff(_values({})) == "AutoFail set to true"


def test_diff_section_order():
    """Failed, missing enforced, extra, then missing sections."""
    rule = _rule({"a": 1, "b": 2}, ignored={"c"}, enforce_all=True, require_all=True)
    got = rule.diff(_values({"a": 5, "z": 0}))
    headings = [ln for ln in got.splitlines() if not ln.startswith(" ")]
    assert headings == [
        "Failed arguments:",
        "Missing enforced arguments:",
        "Extra arguments:",
        "Missing enforced and ignored arguments:",
    ]


def test_diff_renders_non_string_values_as_json():
    got = _rule({"count": 2, "enabled": True}).diff(_values({"count": 3, "enabled": False}))
    assert "+ Expected: 2" in got
    assert "- Actual:   3" in got
    assert "+ Expected: true" in got
    assert "- Actual:   false" in got


@pytest.mark.parametrize(
    "rule,values",
    [
        (_rule({"k": "v"}), {"k": "v"}),
        (_rule({"k": "v"}), {"k": "w"}),
        (_rule({"k": "v"}), {"k": "v", "x": 1}),
        (_rule({"k": "v", "m": 1}, enforce_all=True), {"k": "v"}),
        (_rule(ignored={"i"}, require_all=True), {}),
        (_rule(ignored={"i"}), {}),
        (_rule(auto_fail=True), {}),
    ],
)
def test_compare_true_iff_diff_empty(rule, values):
    v = _values(values)
    assert rule.compare(v) == (rule.diff(v) == "")


def test_compare_bool_is_not_a_number():
    """true/false never match 1/0."""
    assert not _rule({"enabled": True}).compare(_values({"enabled": 1}))
    assert not _rule({"enabled": False}).compare(_values({"enabled": 0}))
    assert not _rule({"count": 1}).compare(_values({"count": True}))
    assert _rule({"enabled": True}).compare(_values({"enabled": True}))


def test_compare_nested_bool_is_not_a_number():
    assert not _rule({"ports": [1, 0]}).compare(_values({"ports": [True, False]}))
    assert not _rule({"flags": {"a": True}}).compare(_values({"flags": {"a": 1}}))
    assert _rule({"flags": {"a": [True, 2]}}).compare(_values({"flags": {"a": [True, 2]}}))


def test_diff_mixed_key_types_do_not_raise():
    """YAML int keys next to str keys still render."""
    got = _rule({"tags": {1: "a", "b": "c"}}).diff(_values({"tags": {"x": "y"}}))
    assert '+ Expected: {"1": "a", "b": "c"}' in got
    assert '- Actual:   {"x": "y"}' in got


# --- set difference ---


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ({"keyA": "valueA"}, {"keyB": "valueB"}, {"keyA": "valueA"}),
        ({"keyA": "valueA", "shared": "s"}, {"keyB": "valueB", "shared": "s"}, {"keyA": "valueA"}),
        ({"keyA": "valueA", "s1": 1, "s2": 2}, {"keyB": "valueB", "s1": 1, "s2": 2}, {"keyA": "valueA"}),
        ({"shared": "s"}, {"shared": "different"}, {}),
    ],
)
def test_set_difference(a, b, expected):
    assert set_difference(a, b) == expected
