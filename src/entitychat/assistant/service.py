from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any

import requests

from entitychat.config import AssistantOptions
from entitychat.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class AssistantReply:
    content: str
    provider: str
    model: str | None = None
    meta: dict[str, Any] | None = None
    tool_calls: list[dict[str, Any]] | None = None
    ok: bool = True
    error: str | None = None


def _truncate_text(value: str, *, limit: int = 2000) -> str:
    text = (value or "").strip()
    return text[:limit] if limit > 0 else ""


def generate_reply(
    *,
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]] | None = None,
    tool_choice: str | dict[str, Any] | None = None,
    options: AssistantOptions | None = None,
) -> AssistantReply:
    """Run one model completion over ``messages``.

    ``provider=openai`` posts to an OpenAI-compatible chat completions
    endpoint. Any other provider returns a canned stub reply so the rest of
    the application can run without a model.
    """

    options = options or AssistantOptions.from_env()
    if options.provider == "openai":
        return _generate_openai_reply(messages=messages, tools=tools, tool_choice=tool_choice, options=options)
    return AssistantReply(
        content=(
            "Assistant is running in stub mode. "
            "Set `ENTITYCHAT_ASSISTANT_PROVIDER=openai` and `ENTITYCHAT_OPENAI_API_KEY` "
            "to enable a model."
        ),
        provider="stub",
        model=None,
        meta=None,
    )


def _failure(*, error: str, model: str, meta: dict[str, Any]) -> AssistantReply:
    return AssistantReply(
        content=f"Assistant error: {error}",
        provider="openai",
        model=model,
        meta=meta,
        tool_calls=None,
        ok=False,
        error=error,
    )


def _generate_openai_reply(
    *,
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]] | None,
    tool_choice: str | dict[str, Any] | None,
    options: AssistantOptions,
) -> AssistantReply:
    url = f"{options.base_url}/v1/chat/completions"
    payload: dict[str, Any] = {"model": options.model, "messages": messages, "stream": False}
    if options.temperature is not None:
        payload["temperature"] = options.temperature
    if tools:
        payload["tools"] = tools
        payload["tool_choice"] = tool_choice if tool_choice is not None else "auto"

    started = time.monotonic()
    try:
        response = requests.post(url, json=payload, headers=options.headers, timeout=options.timeout_seconds)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.HTTPError as exc:
        response_obj = getattr(exc, "response", None)
        meta: dict[str, Any] = {"url": url, "error": repr(exc)}
        status_code = getattr(response_obj, "status_code", None)
        if status_code is not None:
            meta["status_code"] = status_code
        response_text = _truncate_text(str(getattr(response_obj, "text", "") or ""))
        if response_text:
            meta["response_text"] = response_text
        error = f"{type(exc).__name__}: {exc}"
        logger.warning("Model request failed (%s, status=%s): %s", url, status_code, response_text or error)
        return _failure(error=error, model=options.model, meta=meta)
    except (requests.exceptions.RequestException, ValueError) as exc:
        error = f"{type(exc).__name__}: {exc}"
        logger.warning("Model request failed (%s): %s", url, error)
        return _failure(error=error, model=options.model, meta={"url": url, "error": repr(exc)})
    elapsed_ms = int((time.monotonic() - started) * 1000)

    content = ""
    usage: dict[str, Any] | None = None
    tool_calls: list[dict[str, Any]] | None = None
    if isinstance(data, dict):
        usage_obj = data.get("usage")
        if isinstance(usage_obj, dict):
            usage = usage_obj
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message_obj = choices[0].get("message")
            if isinstance(message_obj, dict):
                content = str(message_obj.get("content") or "")
                tool_calls_obj = message_obj.get("tool_calls")
                if isinstance(tool_calls_obj, list) and tool_calls_obj:
                    tool_calls = [tc for tc in tool_calls_obj if isinstance(tc, dict)]
    if not content and not tool_calls:
        content = json.dumps(data)[:4000]

    meta = {"url": url, "elapsed_ms": elapsed_ms}
    if usage is not None:
        meta["usage"] = usage
    logger.info("Model reply in %d ms (tool_calls=%d)", elapsed_ms, len(tool_calls or []))
    return AssistantReply(
        content=content,
        provider="openai",
        model=str(data.get("model") or options.model) if isinstance(data, dict) else options.model,
        meta=meta,
        tool_calls=tool_calls,
    )
