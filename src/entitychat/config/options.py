from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str | None = None) -> str | None:
    raw = (os.getenv(name) or "").strip()
    return raw or default


def _env_float(name: str, default: float | None, *, min_value: float, max_value: float) -> float | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return max(min_value, min(max_value, value))


def _env_int(name: str, default: int, *, min_value: int, max_value: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(min_value, min(max_value, value))


def normalize_openai_base_url(value: str) -> str:
    """Strip a trailing ``/v1`` (or full endpoint path) from an OpenAI-style URL."""

    raw = (value or "").strip().rstrip("/")
    for suffix in ("/v1/chat/completions", "/v1/models", "/v1"):
        if raw.endswith(suffix):
            return raw[: -len(suffix)].rstrip("/")
    return raw


@dataclass(frozen=True)
class AssistantOptions:
    """Assistant settings, read from ``ENTITYCHAT_*`` environment variables."""

    provider: str = "stub"
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com"
    api_key: str | None = None
    timeout_seconds: float = 30.0
    temperature: float | None = None
    max_tool_calls: int = 8
    history_tokens: int = 6000

    @classmethod
    def from_env(cls) -> "AssistantOptions":
        defaults = cls()
        return cls(
            provider=(_env_str("ENTITYCHAT_ASSISTANT_PROVIDER", defaults.provider) or defaults.provider).lower(),
            model=_env_str("ENTITYCHAT_ASSISTANT_MODEL", defaults.model) or defaults.model,
            base_url=normalize_openai_base_url(_env_str("ENTITYCHAT_OPENAI_URL", defaults.base_url) or defaults.base_url),
            api_key=_env_str("ENTITYCHAT_OPENAI_API_KEY"),
            timeout_seconds=_env_float(
                "ENTITYCHAT_ASSISTANT_TIMEOUT_SECONDS",
                defaults.timeout_seconds,
                min_value=1.0,
                max_value=600.0,
            ),
            temperature=_env_float("ENTITYCHAT_ASSISTANT_TEMPERATURE", None, min_value=0.0, max_value=2.0),
            max_tool_calls=_env_int(
                "ENTITYCHAT_ASSISTANT_MAX_TOOL_CALLS",
                defaults.max_tool_calls,
                min_value=0,
                max_value=50,
            ),
            history_tokens=_env_int(
                "ENTITYCHAT_ASSISTANT_HISTORY_TOKENS",
                defaults.history_tokens,
                min_value=256,
                max_value=200_000,
            ),
        )

    @property
    def headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}
