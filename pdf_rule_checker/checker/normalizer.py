from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional

from pdf_rule_checker.checker.schemas import RuleResult

DEFAULT_STATUS = "fail"
DEFAULT_EVIDENCE = "No evidence found"
DEFAULT_REASONING = "Unable to determine"
DEFAULT_CONFIDENCE = 0

ERROR_EVIDENCE = "Error processing rule"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_confidence(value: Any) -> int:
    """Parse an integer-like confidence the way ``parseInt`` would.

    Numbers are truncated toward zero, strings contribute their leading
    integer (``"85%"`` -> 85) and anything else yields 0.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_CONFIDENCE
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return DEFAULT_CONFIDENCE
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return DEFAULT_CONFIDENCE


def clamp_confidence(value: int) -> int:
    return max(0, min(100, value))


def normalize_status(value: Any) -> str:
    if not value or not isinstance(value, str):
        return DEFAULT_STATUS
    status = value.strip().lower()
    return status if status in ("pass", "fail") else DEFAULT_STATUS


def _text_or_default(value: Any, default: str) -> str:
    if value is None or value == "" or value is False:
        return default
    return value if isinstance(value, str) else str(value)


def normalize_result(rule: str, payload: Optional[Mapping[str, Any]]) -> RuleResult:
    if not isinstance(payload, Mapping):
        payload = {}
    return RuleResult(
        rule=rule,
        status=normalize_status(payload.get("status")),
        evidence=_text_or_default(payload.get("evidence"), DEFAULT_EVIDENCE),
        reasoning=_text_or_default(payload.get("reasoning"), DEFAULT_REASONING),
        confidence=clamp_confidence(parse_confidence(payload.get("confidence"))),
    )


def error_result(rule: str, exc: BaseException) -> RuleResult:
    return RuleResult(
        rule=rule,
        status="fail",
        evidence=ERROR_EVIDENCE,
        reasoning=f"Failed to analyze: {exc}",
        confidence=0,
    )
