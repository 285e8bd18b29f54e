from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from pdf_rule_checker.checker.config import RuleCheckerConfig, get_rule_checker_config
from pdf_rule_checker.checker.llm_client import LLMClient
from pdf_rule_checker.checker.normalizer import error_result, normalize_result
from pdf_rule_checker.checker.prompts import SYSTEM_PROMPT, build_rule_prompt
from pdf_rule_checker.checker.schemas import RuleResult

logger = logging.getLogger(__name__)

EMPTY_RULE_EVIDENCE = "No rule provided"
EMPTY_RULE_REASONING = "Rule is empty or invalid"


def build_llm_client(config: Optional[RuleCheckerConfig] = None) -> LLMClient:
    config = config or get_rule_checker_config()
    return LLMClient(
        provider=config.provider,
        model=config.model,
        api_key=config.api_key,
        api_url=config.api_url,
        temperature=config.temperature,
        max_tokens=config.max_output_tokens,
        timeout_s=config.request_timeout_s,
    )


def empty_rule_result(rule: Optional[str]) -> RuleResult:
    return RuleResult(
        rule=rule or "",
        status="fail",
        evidence=EMPTY_RULE_EVIDENCE,
        reasoning=EMPTY_RULE_REASONING,
        confidence=0,
    )


async def check_rule(
    document_text: str,
    rule: str,
    llm_client: LLMClient,
    config: Optional[RuleCheckerConfig] = None,
) -> RuleResult:
    """Evaluate one rule against the document.

    Never raises: transport errors, invalid JSON and anything else that goes
    wrong while talking to the LLM come back as a failing result.
    """
    config = config or get_rule_checker_config()
    user_prompt = build_rule_prompt(
        document_text,
        rule,
        max_chars=config.max_document_chars,
        marker=config.truncation_marker,
    )
    try:
        response = await llm_client.request_json(SYSTEM_PROMPT, user_prompt)
        return normalize_result(rule, response)
    except Exception as exc:
        logger.warning("Rule evaluation failed rule=%r error=%s", rule, exc)
        return error_result(rule, exc)


async def evaluate_rules(
    document_text: str,
    rules: Sequence[Optional[str]],
    llm_client: LLMClient,
    config: Optional[RuleCheckerConfig] = None,
) -> List[RuleResult]:
    config = config or get_rule_checker_config()

    async def _evaluate(rule: Optional[str]) -> RuleResult:
        if not rule or not rule.strip():
            return empty_rule_result(rule)
        return await check_rule(document_text, rule, llm_client, config)

    results = await asyncio.gather(*(_evaluate(rule) for rule in rules))
    passed = sum(1 for result in results if result.status == "pass")
    logger.info(
        "Rule evaluation summary rules=%s passed=%s failed=%s",
        len(results),
        passed,
        len(results) - passed,
    )
    return list(results)
