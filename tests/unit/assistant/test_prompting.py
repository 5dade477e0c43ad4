from entitychat.assistant.prompting import estimate_tokens, estimate_tokens_for_messages, trim_history


def test_estimate_tokens():
    assert estimate_tokens("") == 0
    assert estimate_tokens("a") == 1
    assert estimate_tokens("abcdefgh") == 2


def test_estimate_tokens_for_messages_counts_overhead_and_tool_calls():
    plain = [{"role": "user", "content": "abcd"}]
    with_calls = [{"role": "assistant", "content": "", "tool_calls": [{"id": "1"}]}]

    assert estimate_tokens_for_messages(plain) == 5
    assert estimate_tokens_for_messages(with_calls) > 4


def test_trim_history_drops_oldest_first():
    messages = [{"role": "user", "content": "x" * 400} for _ in range(5)]

    kept = trim_history(messages, max_tokens=250)

    assert len(kept) == 2
    assert kept == messages[-2:]


def test_trim_history_never_starts_with_tool_message():
    messages = [
        {"role": "user", "content": "x" * 400},
        {"role": "assistant", "content": "", "tool_calls": [{"id": "1"}]},
        {"role": "tool", "content": "y" * 40},
        {"role": "assistant", "content": "done"},
    ]

    kept = trim_history(messages, max_tokens=20)

    assert kept[0]["role"] != "tool"
    assert kept == [{"role": "assistant", "content": "done"}]
    assert kept[-1] == {"role": "assistant", "content": "done"}


def test_trim_history_keeps_latest_message_even_when_too_large():
    messages = [{"role": "user", "content": "z" * 10_000}]

    assert trim_history(messages, max_tokens=10) == messages
