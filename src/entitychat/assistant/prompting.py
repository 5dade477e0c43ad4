from __future__ import annotations

import json
from typing import Any, Iterable


def estimate_tokens(text: str) -> int:
    """Rough token count: about four characters per token on English text."""

    if not text:
        return 0
    return max(1, (len(text) + 3) // 4)


def _message_text(message: dict[str, Any]) -> str:
    content = message.get("content") or ""
    tool_calls = message.get("tool_calls")
    if tool_calls:
        content += json.dumps(tool_calls, ensure_ascii=False)
    return content


def estimate_tokens_for_messages(messages: Iterable[dict[str, Any]]) -> int:
    # four tokens of per-message overhead for role and framing
    return sum(estimate_tokens(_message_text(message)) + 4 for message in messages)


def trim_history(messages: list[dict[str, Any]], *, max_tokens: int) -> list[dict[str, Any]]:
    """Drop the oldest turns until ``messages`` fits in ``max_tokens``.

    Tool results are only meaningful next to the assistant message that
    requested them, so a trimmed history never starts with a ``tool`` message.
    The newest message is always kept.
    """

    kept = list(messages)
    while len(kept) > 1 and estimate_tokens_for_messages(kept) > max_tokens:
        kept.pop(0)
    while len(kept) > 1 and kept[0].get("role") == "tool":
        kept.pop(0)
    return kept
