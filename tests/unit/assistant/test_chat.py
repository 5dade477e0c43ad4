from __future__ import annotations

import json
from typing import Any

from entitychat.assistant import AssistantReply, ChatSession
from entitychat.config import AssistantOptions


class ScriptedModel:
    """Returns queued replies and records every request."""

    def __init__(self, *replies: AssistantReply):
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, *, messages, tools=None, tool_choice=None, options=None) -> AssistantReply:
        self.calls.append({"messages": list(messages), "tools": tools, "tool_choice": tool_choice})
        return self.replies.pop(0)


def _reply(content: str = "", tool_calls=None) -> AssistantReply:
    return AssistantReply(content=content, provider="fake", tool_calls=tool_calls)


def _native(name: str, args: dict[str, Any], call_id: str = "call_1") -> dict[str, Any]:
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": json.dumps(args)}}


def test_plain_answer_without_tools(tools):
    model = ScriptedModel(_reply("Hello!"))
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=model)

    turn = session.send("hi")

    assert turn.ok is True
    assert turn.content == "Hello!"
    assert turn.tool_results == []
    assert session.history == [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "Hello!"}]
    system = model.calls[0]["messages"][0]
    assert system["role"] == "system"
    assert "Available entities:" in system["content"]
    assert "Available tools:" in system["content"]


def test_native_tool_call_round_trip(tools):
    model = ScriptedModel(
        _reply(tool_calls=[_native("query_entity", {"entity_name": "Product", "filter": "name=chai"})]),
        _reply("Chai costs $18.00."),
    )
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=model)

    turn = session.send("How much is chai?")

    assert turn.content == "Chai costs $18.00."
    assert len(turn.tool_results) == 1
    assert turn.tool_results[0]["ok"] is True
    tool_message = model.calls[1]["messages"][-1]
    assert tool_message["role"] == "tool"
    assert tool_message["tool_call_id"] == "call_1"
    assert "Found 1 Product record(s)" in json.loads(tool_message["content"])["result"]


def test_text_tool_call_round_trip(tools):
    model = ScriptedModel(
        _reply('Let me check.\nTOOL_CALL {"name": "describe_entity", "arguments": {"entity_name": "Order"}}'),
        _reply("Orders have a status."),
    )
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=model)

    turn = session.send("What is an order?")

    assert turn.content == "Orders have a status."
    last = model.calls[1]["messages"][-1]
    assert last["role"] == "user"
    assert last["content"].startswith("TOOL_RESULT describe_entity (JSON):\n")


def test_tool_call_limit_stops_the_loop(tools):
    looping = _reply(tool_calls=[_native("list_entities", {})])
    model = ScriptedModel(looping, looping, looping, looping)
    session = ChatSession(tools, options=AssistantOptions(max_tool_calls=2), reply_fn=model)

    turn = session.send("loop forever")

    assert len(turn.tool_results) == 2
    assert len(model.calls) == 3
    assert model.calls[0]["tool_choice"] is None
    assert model.calls[2]["tool_choice"] == "none"
    assert turn.content == "I reached the tool call limit for this request."


def test_zero_tool_calls_sends_no_tools(tools):
    model = ScriptedModel(_reply('TOOL_CALL {"name": "list_entities", "arguments": {}}'))
    session = ChatSession(tools, options=AssistantOptions(max_tool_calls=0), reply_fn=model)

    turn = session.send("anything")

    assert model.calls[0]["tools"] is None
    assert turn.tool_results == []
    assert turn.content.startswith("TOOL_CALL")


def test_malformed_native_arguments_are_reported(tools):
    bad = {"id": "call_9", "function": {"name": "query_entity", "arguments": "{not json"}}
    model = ScriptedModel(_reply(tool_calls=[bad]), _reply("Sorry."))
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=model)

    turn = session.send("query")

    assert turn.tool_results == [
        {"ok": False, "tool": "query_entity", "error": "Tool arguments must be a JSON object."}
    ]


def test_failed_reply_ends_turn(tools):
    failure = AssistantReply(content="Assistant error: boom", provider="openai", ok=False, error="boom")
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=ScriptedModel(failure))

    turn = session.send("hi")

    assert turn.ok is False
    assert turn.error == "boom"


def test_active_view_hint_is_sent(tools, active_view):
    active_view.update("Product", is_list_view=False, object_key="1", object_display="Chai")
    model = ScriptedModel(_reply("ok"))
    session = ChatSession(tools, options=AssistantOptions(), active_view=active_view, reply_fn=model)

    session.send("update this")

    hint = model.calls[0]["messages"][1]
    assert hint == {
        "role": "system",
        "content": "The user is currently viewing: Product (Detail View), record 'Chai' (key: 1)",
    }


def test_reset_clears_history(tools):
    session = ChatSession(tools, options=AssistantOptions(), reply_fn=ScriptedModel(_reply("hi")))
    session.send("hello")

    session.reset()

    assert session.history == []
