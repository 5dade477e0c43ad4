from dataclasses import fields

import pytest

from entitychat.config import AssistantOptions, normalize_openai_base_url


ENV_VARS = [
    "ENTITYCHAT_ASSISTANT_PROVIDER",
    "ENTITYCHAT_ASSISTANT_MODEL",
    "ENTITYCHAT_OPENAI_URL",
    "ENTITYCHAT_OPENAI_API_KEY",
    "ENTITYCHAT_ASSISTANT_TIMEOUT_SECONDS",
    "ENTITYCHAT_ASSISTANT_TEMPERATURE",
    "ENTITYCHAT_ASSISTANT_MAX_TOOL_CALLS",
    "ENTITYCHAT_ASSISTANT_HISTORY_TOKENS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    options = AssistantOptions.from_env()

    assert options == AssistantOptions()
    assert options.provider == "stub"
    assert options.headers == {}


def test_options_cover_only_settings_the_client_reads(clean_env):
    clean_env.setenv("ENTITYCHAT_ASSISTANT_STREAMING", "yes")

    assert AssistantOptions.from_env() == AssistantOptions()
    assert [field.name for field in fields(AssistantOptions)] == [
        "provider",
        "model",
        "base_url",
        "api_key",
        "timeout_seconds",
        "temperature",
        "max_tool_calls",
        "history_tokens",
    ]


def test_reads_environment(clean_env):
    clean_env.setenv("ENTITYCHAT_ASSISTANT_PROVIDER", "OpenAI")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_MODEL", "local-model")
    clean_env.setenv("ENTITYCHAT_OPENAI_URL", "http://localhost:8000/v1/")
    clean_env.setenv("ENTITYCHAT_OPENAI_API_KEY", "sk-abc")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_TEMPERATURE", "0.3")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_MAX_TOOL_CALLS", "4")

    options = AssistantOptions.from_env()

    assert options.provider == "openai"
    assert options.model == "local-model"
    assert options.base_url == "http://localhost:8000"
    assert options.headers == {"Authorization": "Bearer sk-abc"}
    assert options.temperature == 0.3
    assert options.max_tool_calls == 4


def test_invalid_numbers_fall_back_and_values_are_clamped(clean_env):
    clean_env.setenv("ENTITYCHAT_ASSISTANT_TIMEOUT_SECONDS", "soon")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_TEMPERATURE", "9")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_MAX_TOOL_CALLS", "-3")
    clean_env.setenv("ENTITYCHAT_ASSISTANT_HISTORY_TOKENS", "10")

    options = AssistantOptions.from_env()

    assert options.timeout_seconds == 30.0
    assert options.temperature == 2.0
    assert options.max_tool_calls == 0
    assert options.history_tokens == 256


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://api.openai.com", "https://api.openai.com"),
        ("https://api.openai.com/v1", "https://api.openai.com"),
        ("http://host:8000/v1/chat/completions", "http://host:8000"),
        ("http://host:8000/", "http://host:8000"),
    ],
)
def test_normalize_openai_base_url(raw, expected):
    assert normalize_openai_base_url(raw) == expected
