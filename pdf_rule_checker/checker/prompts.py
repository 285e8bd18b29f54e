from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a document analysis assistant. Always respond with valid JSON only."
)

MAX_DOCUMENT_CHARS = 12000
TRUNCATION_MARKER = "..."

RULE_PROMPT_TEMPLATE = """You are analyzing a document to check if it follows a specific rule.

RULE TO CHECK: "{rule}"

DOCUMENT TEXT:
{document}

Please analyze the document and determine if it PASSES or FAILS the rule. Provide your response in the following JSON format:
{{
  "status": "pass" or "fail",
  "evidence": "One specific sentence or phrase from the document that supports your decision (or 'Not found' if failing)",
  "reasoning": "Brief explanation (1-2 sentences) of why it passes or fails",
  "confidence": A number between 0-100 representing your confidence in this assessment
}}

IMPORTANT:
- Return ONLY valid JSON, no additional text
- Evidence should be an exact quote from the document if possible
- Confidence should reflect how certain you are (higher for clear cases, lower for ambiguous ones)
- If the rule is not met, status must be "fail"
"""


def truncate_document(
    text: str,
    max_chars: int = MAX_DOCUMENT_CHARS,
    marker: str = TRUNCATION_MARKER,
) -> str:
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}{marker}"


def build_rule_prompt(
    document_text: str,
    rule: str,
    max_chars: int = MAX_DOCUMENT_CHARS,
    marker: str = TRUNCATION_MARKER,
) -> str:
    return RULE_PROMPT_TEMPLATE.format(
        rule=rule,
        document=truncate_document(document_text, max_chars, marker),
    )
