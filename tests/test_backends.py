"""Tests for the chat and text completion backends."""

import json
from unittest.mock import Mock

import pytest

from conftest import chat_body, text_body
from gpt_auto_test.errors import CompletionError, ConfigError, TransportError
from gpt_auto_test.llm.backends import (
    ChatBackend,
    CompletionBackend,
    TextBackend,
    build_backend,
    get_backend_class,
    list_backends,
)
from gpt_auto_test.llm.config import BackendConfig
from gpt_auto_test.llm.response import Role
from gpt_auto_test.llm.transport import TransportClient


@pytest.fixture
def transport():
    return Mock()


def sent_payload(transport):
    return transport.send.call_args[0][1]


class TestChatBackend:
    """Chat wire format and reply handling."""

    def test_serializes_turns_in_order(self, transport):
        transport.send.return_value = chat_body("reply")
        backend = ChatBackend(transport)
        backend.init("S")
        backend.add_context("A")
        backend.add_context("B")

        backend.complete()

        url, payload = transport.send.call_args[0]
        assert url == "https://api.openai.com/v1/chat/completions"
        assert payload == {
            "model": "gpt-3.5-turbo",
            "messages": [
                {"role": "system", "content": "S"},
                {"role": "user", "content": "A"},
                {"role": "user", "content": "B"},
            ],
        }

    def test_complete_returns_raw_text_and_records_assistant_turn(self, transport):
        transport.send.return_value = chat_body("Here:\n```python\nx = 1\n```")
        backend = ChatBackend(transport)
        backend.add_context("A")

        text = backend.complete()

        assert text == "Here:\n```python\nx = 1\n```"
        last = backend.conversation.turns[-1]
        assert last.role is Role.ASSISTANT
        assert last.content == text

    def test_history_grows_across_rounds(self, transport):
        transport.send.side_effect = [chat_body("one"), chat_body("two")]
        backend = ChatBackend(transport)
        backend.init("S")
        backend.add_context("first")
        backend.complete()
        backend.add_context("second")
        backend.complete()

        roles = [m["role"] for m in sent_payload(transport)["messages"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert len(backend.conversation) == 5

    def test_repeated_init_appends(self, transport):
        """A second init adds another system turn."""
        backend = ChatBackend(transport)
        backend.init("first framing")
        backend.init("second framing")
        messages = backend.conversation.messages()
        assert messages == [
            {"role": "system", "content": "first framing"},
            {"role": "system", "content": "second framing"},
        ]

    def test_content_stored_verbatim(self, transport):
        backend = ChatBackend(transport)
        text = "  leading and trailing  \n```python\nweird```"
        backend.add_context(text)
        assert backend.conversation.turns[0].content == text

    def test_custom_model_and_url(self, transport):
        transport.send.return_value = chat_body("x", model="gpt-4")
        backend = ChatBackend(transport, model="gpt-4", url="http://localhost:8080/v1/chat/completions")
        backend.add_context("A")
        backend.complete()
        url, payload = transport.send.call_args[0]
        assert url == "http://localhost:8080/v1/chat/completions"
        assert payload["model"] == "gpt-4"

    def test_empty_choices(self, transport):
        transport.send.return_value = json.dumps({"choices": [], "model": "m"})
        backend = ChatBackend(transport)
        with pytest.raises(CompletionError, match="No choices"):
            backend.complete()

    def test_missing_message(self, transport):
        transport.send.return_value = json.dumps({"choices": [{"index": 0, "text": "x"}]})
        with pytest.raises(CompletionError, match="No message"):
            ChatBackend(transport).complete()

    def test_null_content(self, transport):
        transport.send.return_value = json.dumps(
            {"choices": [{"message": {"role": "assistant", "content": None}}]}
        )
        with pytest.raises(CompletionError, match="No content"):
            ChatBackend(transport).complete()

    def test_non_json_body(self, transport):
        transport.send.return_value = "<html>gateway</html>"
        with pytest.raises(CompletionError, match="not JSON"):
            ChatBackend(transport).complete()

    def test_failed_round_adds_no_assistant_turn(self, transport):
        transport.send.return_value = json.dumps({"choices": []})
        backend = ChatBackend(transport)
        backend.add_context("A")
        with pytest.raises(CompletionError):
            backend.complete()
        assert len(backend.conversation) == 1

    def test_transport_error_wrapped(self, transport):
        cause = TransportError("HTTP 500", status_code=500, body="oops")
        transport.send.side_effect = cause
        with pytest.raises(CompletionError) as exc_info:
            ChatBackend(transport).complete()
        assert exc_info.value.__cause__ is cause

    def test_config_error_not_wrapped(self, transport):
        transport.send.side_effect = ConfigError("Missing environment variable: OPENAI_API_KEY")
        with pytest.raises(ConfigError):
            ChatBackend(transport).complete()


class TestTextBackend:
    """Legacy text wire format."""

    def test_prompt_is_newline_joined(self, transport):
        transport.send.return_value = text_body("reply")
        backend = TextBackend(transport)
        backend.init("S")
        backend.add_context("A")
        backend.add_context("B")

        backend.complete()

        url, payload = transport.send.call_args[0]
        assert url == "https://api.openai.com/v1/completions"
        assert payload == {
            "model": "text-davinci-003",
            "prompt": "S\nA\nB",
            "max_tokens": 1024,
            "temperature": 0.0,
        }

    def test_reads_flat_choice_text(self, transport):
        transport.send.return_value = text_body("```python\nx = 1\n```")
        backend = TextBackend(transport)
        assert backend.complete() == "```python\nx = 1\n```"
        assert backend.conversation.turns[-1].role is Role.ASSISTANT

    def test_reply_becomes_part_of_next_prompt(self, transport):
        transport.send.side_effect = [text_body("R1"), text_body("R2")]
        backend = TextBackend(transport)
        backend.init("S")
        backend.complete()
        backend.add_context("A")
        backend.complete()
        assert sent_payload(transport)["prompt"] == "S\nR1\nA"

    def test_missing_text(self, transport):
        transport.send.return_value = json.dumps({"choices": [{"index": 0}]})
        with pytest.raises(CompletionError, match="No text"):
            TextBackend(transport).complete()

    def test_sampling_overrides(self, transport):
        transport.send.return_value = text_body("x")
        backend = TextBackend(transport, max_tokens=256, temperature=0.5)
        backend.complete()
        payload = sent_payload(transport)
        assert payload["max_tokens"] == 256
        assert payload["temperature"] == 0.5


class TestRegistry:
    """Backend lookup and construction."""

    def test_builtin_backends_registered(self):
        assert set(list_backends()) >= {"chat", "text"}
        assert get_backend_class("chat") is ChatBackend
        assert get_backend_class("text") is TextBackend

    def test_unknown_backend(self):
        with pytest.raises(ConfigError, match="Backend 'grpc' not found"):
            get_backend_class("grpc")

    def test_build_backend_from_config(self):
        cfg = BackendConfig(
            backend_id="legacy",
            type="text",
            model="davinci-002",
            api_key_env="LEGACY_KEY",
            timeout_s=30,
            max_tokens=64,
        )
        backend = build_backend(cfg)
        assert isinstance(backend, TextBackend)
        assert backend.model == "davinci-002"
        assert backend.url == TextBackend.DEFAULT_URL
        assert backend.max_tokens == 64
        assert backend.temperature == 0.0
        assert isinstance(backend.transport, TransportClient)
        assert backend.transport.api_key_env == "LEGACY_KEY"
        assert backend.transport.timeout_s == 30
        assert len(backend.conversation) == 0

    def test_backends_satisfy_protocol(self, transport):
        assert isinstance(ChatBackend(transport), CompletionBackend)
        assert isinstance(TextBackend(transport), CompletionBackend)


def test_last_round_bookkeeping(transport):
    """Usage and request id of the latest round stay visible for logging."""
    transport.send.return_value = chat_body("reply")
    backend = ChatBackend(transport)
    assert backend.last_request_id is None
    assert backend.last_usage is None

    backend.complete()

    assert backend.last_request_id == "chatcmpl-123"
    assert backend.last_usage == {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30}


def test_failed_round_keeps_previous_bookkeeping(transport):
    transport.send.side_effect = [chat_body("reply"), json.dumps({"choices": []})]
    backend = ChatBackend(transport)
    backend.complete()
    with pytest.raises(CompletionError):
        backend.complete()
    assert backend.last_request_id == "chatcmpl-123"
