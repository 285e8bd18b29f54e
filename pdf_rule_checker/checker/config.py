from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "rule_checker.yml"

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class UploadConfig:
    directory: Path
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port_env: str = "PORT"
    default_port: int = 5000

    def resolve_port(self, override: Optional[int] = None) -> int:
        if override is not None:
            return override
        value = os.getenv(self.port_env, "")
        return int(value) if value.strip() else self.default_port


@dataclass(frozen=True)
class RuleCheckerConfig:
    upload: UploadConfig
    provider: str = "openai"
    api_key_env: str = "OPENAI_API_KEY"
    model_env: str = "OPENAI_MODEL"
    api_url_env: str = "LLM_API_URL"
    default_model: str = "gpt-4o-mini"
    temperature: float = 0.3
    max_output_tokens: int = 500
    request_timeout_s: Optional[float] = None
    max_document_chars: int = 12000
    truncation_marker: str = "..."
    server: ServerConfig = field(default_factory=ServerConfig)
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def model(self) -> str:
        return os.getenv(self.model_env, "") or self.default_model

    @property
    def api_key(self) -> str:
        return os.getenv(self.api_key_env, "")

    @property
    def api_url(self) -> Optional[str]:
        return os.getenv(self.api_url_env) or None


def _resolve_directory(value: Optional[str]) -> Path:
    directory = Path(value or "uploads")
    if not directory.is_absolute():
        directory = Path.cwd() / directory
    return directory


@lru_cache
def get_rule_checker_config(path: Path = CONFIG_PATH) -> RuleCheckerConfig:
    data = yaml.safe_load(path.read_text()) if path.exists() else {}
    data = data or {}
    upload_data = data.get("upload") or {}
    server_data = data.get("server") or {}
    timeout = data.get("request_timeout_s")
    return RuleCheckerConfig(
        upload=UploadConfig(
            directory=_resolve_directory(upload_data.get("directory")),
            max_bytes=int(upload_data.get("max_bytes", DEFAULT_MAX_UPLOAD_BYTES)),
        ),
        provider=data.get("provider", "openai"),
        api_key_env=data.get("api_key_env", "OPENAI_API_KEY"),
        model_env=data.get("model_env", "OPENAI_MODEL"),
        api_url_env=data.get("api_url_env", "LLM_API_URL"),
        default_model=data.get("default_model", "gpt-4o-mini"),
        temperature=float(data.get("temperature", 0.3)),
        max_output_tokens=int(data.get("max_output_tokens", 500)),
        request_timeout_s=float(timeout) if timeout is not None else None,
        max_document_chars=int(data.get("max_document_chars", 12000)),
        truncation_marker=str(data.get("truncation_marker", "...")),
        server=ServerConfig(
            host=server_data.get("host", "0.0.0.0"),
            port_env=server_data.get("port_env", "PORT"),
            default_port=int(server_data.get("default_port", 5000)),
        ),
        cors_origins=list(data.get("cors_origins") or ["*"]),
    )
