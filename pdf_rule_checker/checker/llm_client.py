from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional
from uuid import uuid4

import httpx

from pdf_rule_checker.checker.errors import LLMCallError

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(
        self,
        provider: str,
        model: str,
        api_key: str,
        api_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 500,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.api_key = api_key
        api_url = self._resolve_api_url(provider, api_url)
        if not api_url:
            raise ValueError("LLM API URL is required")
        self.api_url: str = api_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_s = timeout_s
        self._transport = transport

    @staticmethod
    def _resolve_api_url(provider: str, api_url: Optional[str]) -> Optional[str]:
        if api_url:
            return api_url
        if provider == "openai":
            return "https://api.openai.com/v1/chat/completions"
        return None

    @staticmethod
    def _extract_content(data: Dict[str, Any]) -> Optional[str]:
        if isinstance(data.get("content"), str):
            return data["content"]
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            first = choices[0]
            if isinstance(first, dict):
                message = first.get("message")
                if isinstance(message, dict) and isinstance(
                    message.get("content"), str
                ):
                    return message["content"]
                if isinstance(first.get("text"), str):
                    return first["text"]
        return None

    async def request_json(self, system_prompt: str, user_prompt: str) -> Any:
        request_id = str(uuid4())
        response_text = await self._send_request(system_prompt, user_prompt, request_id)
        try:
            return json.loads(response_text)
        except json.JSONDecodeError as exc:
            raise LLMCallError(
                f"Invalid JSON response from provider={self.provider} "
                f"request_id={request_id}: {exc}"
            ) from exc

    def _build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

    async def _send_request(
        self, system_prompt: str, user_prompt: str, request_id: str
    ) -> str:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = self._build_payload(system_prompt, user_prompt)
        timeout = (
            self.timeout_s if self.timeout_s is not None else httpx.USE_CLIENT_DEFAULT
        )
        start_time = time.monotonic()
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.api_url, headers=headers, json=payload, timeout=timeout
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise LLMCallError(
                f"LLM request failed for provider={self.provider} "
                f"request_id={request_id}: {exc}"
            ) from exc
        except ValueError as exc:
            raise LLMCallError(
                f"Invalid JSON response from provider={self.provider} "
                f"request_id={request_id}"
            ) from exc
        finally:
            latency_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "LLM request completed request_id=%s provider=%s latency_ms=%.2f",
                request_id,
                self.provider,
                latency_ms,
            )
        content = self._extract_content(data) if isinstance(data, dict) else None
        if content is None:
            keys = sorted(list(data.keys())) if isinstance(data, dict) else []
            raise LLMCallError(
                "Unexpected LLM response format from provider="
                f"{self.provider} request_id={request_id} keys={keys}"
            )
        return content
