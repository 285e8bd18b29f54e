"""Rule evaluation against extracted document text."""

from pdf_rule_checker.checker.config import (
    RuleCheckerConfig,
    get_rule_checker_config,
)
from pdf_rule_checker.checker.rule_checker import check_rule, evaluate_rules
from pdf_rule_checker.checker.schemas import CheckResponse, RuleResult

__all__ = [
    "RuleCheckerConfig",
    "get_rule_checker_config",
    "check_rule",
    "evaluate_rules",
    "CheckResponse",
    "RuleResult",
]
