from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


class RuleResult(BaseModel):
    rule: str
    status: Literal["pass", "fail"]
    evidence: str
    reasoning: str
    confidence: int = Field(ge=0, le=100)


class CheckResponse(BaseModel):
    results: List[RuleResult] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class InternalErrorResponse(ErrorResponse):
    message: str
