import asyncio
import re
from pathlib import Path

import pytest

from pdf_rule_checker.checker.config import RuleCheckerConfig, UploadConfig

RULE_PATTERN = re.compile(r'RULE TO CHECK: "(.*)"')


def build_pdf(text: str = "") -> bytes:
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode() if text else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    body = b"%PDF-1.4\n"
    offsets = []
    for number, obj in enumerate(objects, start=1):
        offsets.append(len(body))
        body += b"%d 0 obj\n" % number + obj + b"\nendobj\n"
    xref_offset = len(body)
    body += b"xref\n0 %d\n" % (len(objects) + 1)
    body += b"0000000000 65535 f \n"
    for offset in offsets:
        body += b"%010d 00000 n \n" % offset
    body += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    body += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return body


class FakeLLMClient:
    """Answers from a rule -> payload mapping; exceptions in it are raised."""

    def __init__(self, responses=None, default=None, delays=None):
        self.responses = responses or {}
        self.default = default or {
            "status": "pass",
            "evidence": "Published 2024",
            "reasoning": "The document states a year.",
            "confidence": 90,
        }
        self.delays = delays or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def request_json(self, system_prompt, user_prompt):
        rule = RULE_PATTERN.search(user_prompt).group(1)
        self.calls.append(rule)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(rule, 0))
        finally:
            self.in_flight -= 1
        response = self.responses.get(rule, self.default)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def pdf_factory():
    return build_pdf


@pytest.fixture
def llm_factory():
    return FakeLLMClient


@pytest.fixture
def fake_llm(llm_factory):
    return llm_factory()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def checker_config(upload_dir) -> RuleCheckerConfig:
    return RuleCheckerConfig(
        upload=UploadConfig(directory=upload_dir, max_bytes=1024 * 1024)
    )
