"""Pytest configuration for gpt-auto-test tests."""
import json
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path so 'gpt_auto_test' can be imported without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gpt_auto_test.llm.backends import ChatBackend, TextBackend
from gpt_auto_test.llm.session import CompletionSession


def chat_body(content: str, model: str = "gpt-3.5-turbo") -> str:
    """Serialize a chat completion response."""
    return json.dumps({
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1680000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
    })


def text_body(text: str, model: str = "text-davinci-003") -> str:
    """Serialize a legacy text completion response."""
    return json.dumps({
        "id": "cmpl-123",
        "object": "text_completion",
        "created": 1680000000,
        "model": model,
        "choices": [{"text": text, "index": 0, "logprobs": None, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
    })


def fenced(code: str, language: str = "python") -> str:
    """Wrap code the way a well-behaved model reply does."""
    return f"Here is the code:\n```{language}\n{code}\n```\nHope this helps."


@pytest.fixture
def make_session():
    """Build a session over a real backend whose transport replays ``replies``.

    Returns a factory: ``make_session(*replies, backend="chat")`` gives
    ``(session, transport)``; ``transport.send`` is a Mock.
    """
    def factory(*replies: str, backend: str = "chat"):
        transport = Mock()
        if backend == "chat":
            transport.send.side_effect = [chat_body(r) for r in replies]
            instance = ChatBackend(transport)
        else:
            transport.send.side_effect = [text_body(r) for r in replies]
            instance = TextBackend(transport)
        return CompletionSession(instance), transport

    return factory
