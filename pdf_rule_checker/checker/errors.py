"""Request-level and per-rule failure types.

Only ``ValidationError``, ``ExtractionError`` and ``UploadTooLargeError``
abort a request with a client error. ``LLMCallError`` is raised by the LLM
client and is always turned into a failing ``RuleResult`` by the
single-rule checker.
"""

from __future__ import annotations

from typing import Dict


class RuleCheckError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message}


class ValidationError(RuleCheckError):
    status_code = 400


class ExtractionError(RuleCheckError):
    status_code = 400


class UploadTooLargeError(RuleCheckError):
    status_code = 413


class InternalError(RuleCheckError):
    status_code = 500
    error = "Failed to process PDF"

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error, "message": self.message}


class LLMCallError(RuleCheckError):
    pass
