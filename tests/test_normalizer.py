import pytest

from pdf_rule_checker.checker.normalizer import (
    error_result,
    normalize_result,
    parse_confidence,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (85, 85),
        (72.9, 72),
        ("64", 64),
        ("85%", 85),
        (" 40 percent", 40),
        ("high", 0),
        (None, 0),
        (True, 0),
        (float("nan"), 0),
        ([90], 0),
    ],
)
def test_parse_confidence(value, expected):
    assert parse_confidence(value) == expected


@pytest.mark.parametrize("confidence, expected", [(-20, 0), (250, 100), ("1000", 100)])
def test_normalize_result_clamps_confidence(confidence, expected):
    result = normalize_result("rule", {"status": "pass", "confidence": confidence})

    assert result.confidence == expected


@pytest.mark.parametrize(
    "status, expected",
    [("PASS", "pass"), ("Fail", "fail"), (" pass ", "pass"), ("maybe", "fail"), (1, "fail")],
)
def test_normalize_result_status_is_pass_or_fail(status, expected):
    assert normalize_result("rule", {"status": status}).status == expected


def test_normalize_result_fills_defaults():
    result = normalize_result("Has a title", {})

    assert result.model_dump() == {
        "rule": "Has a title",
        "status": "fail",
        "evidence": "No evidence found",
        "reasoning": "Unable to determine",
        "confidence": 0,
    }


def test_normalize_result_ignores_non_object_payload():
    result = normalize_result("Has a title", ["pass"])

    assert result.status == "fail"
    assert result.evidence == "No evidence found"


def test_normalize_result_keeps_llm_fields():
    result = normalize_result(
        "Mentions a year",
        {
            "status": "pass",
            "evidence": "Published 2024",
            "reasoning": "A year is stated.",
            "confidence": 95,
        },
    )

    assert result.status == "pass"
    assert result.evidence == "Published 2024"
    assert result.reasoning == "A year is stated."
    assert result.confidence == 95


def test_error_result_reports_failure_message():
    result = error_result("Has a title", ValueError("boom"))

    assert result.status == "fail"
    assert result.evidence == "Error processing rule"
    assert result.reasoning == "Failed to analyze: boom"
    assert result.confidence == 0
