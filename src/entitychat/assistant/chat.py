"""One conversation with the assistant, including the tool-call loop."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from entitychat.config import AssistantOptions
from entitychat.logging import get_logger
from entitychat.schema import generate_system_prompt

from .context import ActiveViewContext
from .prompting import trim_history
from .service import AssistantReply, generate_reply
from .tools import TOOL_CALL_PREFIX, EntityTools, format_tool_result_message, parse_tool_call


logger = get_logger(__name__)

ReplyFn = Callable[..., AssistantReply]

_TEXT_TOOL_INSTRUCTIONS = (
    "If native tool calling is unavailable, request a tool by replying with a single line:\n"
    f'{TOOL_CALL_PREFIX} {{"name": "<tool>", "arguments": {{...}}}}\n'
    "and wait for the TOOL_RESULT message before answering."
)


@dataclass
class ChatTurn:
    content: str
    ok: bool = True
    provider: str | None = None
    tool_results: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


def _native_tool_call(call: dict[str, Any]) -> tuple[str, dict[str, Any] | None]:
    function = call.get("function") or {}
    name = str(function.get("name") or call.get("name") or "").strip()
    raw_args = function.get("arguments", call.get("arguments"))
    if raw_args is None or raw_args == "":
        return name, {}
    if isinstance(raw_args, dict):
        return name, raw_args
    try:
        parsed = json.loads(raw_args)
    except (TypeError, json.JSONDecodeError):
        return name, None
    return name, parsed if isinstance(parsed, dict) else None


class ChatSession:
    """Message history plus the model/tool loop for a single user.

    Each :meth:`send` runs the model until it answers without requesting a
    tool, or until ``options.max_tool_calls`` tools have run in the turn.
    """

    def __init__(
        self,
        tools: EntityTools,
        *,
        options: AssistantOptions | None = None,
        active_view: ActiveViewContext | None = None,
        reply_fn: ReplyFn | None = None,
    ):
        self.tools = tools
        self.options = options or AssistantOptions.from_env()
        self.active_view = active_view
        self.history: list[dict[str, Any]] = []
        self._reply_fn = reply_fn or generate_reply
        self._lock = threading.Lock()

    def system_messages(self) -> list[dict[str, Any]]:
        prompt = "\n".join(
            [
                generate_system_prompt(self.tools.schema).rstrip(),
                "",
                self.tools.tool_prompt().rstrip(),
                "",
                _TEXT_TOOL_INSTRUCTIONS,
            ]
        )
        messages = [{"role": "system", "content": prompt}]
        if self.active_view is not None:
            view = self.active_view.snapshot()
            if view.entity_name is not None:
                hint = f"The user is currently viewing: {view}"
                if view.current_object_display is not None:
                    hint += f", record '{view.current_object_display}' (key: {view.current_object_key})"
                messages.append({"role": "system", "content": hint})
        return messages

    def reset(self) -> None:
        with self._lock:
            self.history.clear()

    def _complete(self, *, tools_allowed: bool) -> AssistantReply:
        messages = self.system_messages() + trim_history(self.history, max_tokens=self.options.history_tokens)
        tools = self.tools.openai_tools() if self.options.max_tool_calls > 0 else None
        return self._reply_fn(
            messages=messages,
            tools=tools,
            tool_choice=None if tools_allowed or tools is None else "none",
            options=self.options,
        )

    def _run_tool(self, name: str, args: dict[str, Any] | None, turn: ChatTurn) -> dict[str, Any]:
        if args is None:
            result = {"ok": False, "tool": name, "error": "Tool arguments must be a JSON object."}
        else:
            result = self.tools.run_tool(name=name, args=args)
        turn.tool_results.append(result)
        return result

    def send(self, text: str) -> ChatTurn:
        with self._lock:
            return self._send(text)

    def _send(self, text: str) -> ChatTurn:
        self.history.append({"role": "user", "content": text})
        turn = ChatTurn(content="")
        calls = 0
        limit = self.options.max_tool_calls

        while True:
            reply = self._complete(tools_allowed=calls < limit)
            turn.provider = reply.provider
            if not reply.ok:
                self.history.append({"role": "assistant", "content": reply.content})
                turn.content, turn.ok, turn.error = reply.content, False, reply.error
                return turn

            if reply.tool_calls and calls >= limit:
                content = reply.content or "I reached the tool call limit for this request."
                self.history.append({"role": "assistant", "content": content})
                turn.content = content
                logger.warning("Tool call limit (%d) reached; ignoring further tool calls", limit)
                return turn

            if reply.tool_calls:
                self.history.append({"role": "assistant", "content": reply.content or "", "tool_calls": reply.tool_calls})
                for call in reply.tool_calls:
                    name, args = _native_tool_call(call)
                    if calls >= limit:
                        result = {"ok": False, "tool": name, "error": "Tool call limit reached for this turn."}
                    else:
                        calls += 1
                        result = self._run_tool(name, args, turn)
                    self.history.append(
                        {
                            "role": "tool",
                            "tool_call_id": call.get("id"),
                            "content": json.dumps(result, ensure_ascii=False),
                        }
                    )
                continue

            parsed = parse_tool_call(reply.content) if calls < limit else None
            if parsed is not None:
                name, args = parsed
                calls += 1
                self.history.append({"role": "assistant", "content": reply.content})
                result = self._run_tool(name, args, turn)
                self.history.append({"role": "user", "content": format_tool_result_message(name, result)})
                continue

            self.history.append({"role": "assistant", "content": reply.content})
            turn.content = reply.content
            logger.info("Chat turn finished after %d tool call(s)", calls)
            return turn
