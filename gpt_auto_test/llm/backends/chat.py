"""Chat completions backend (role-tagged messages)."""

from typing import Any

from ...errors import CompletionError
from ..response import CompletionResponse, extract_usage
from .base import ConversationBackend, first_choice


class ChatBackend(ConversationBackend):
    """OpenAI-style ``/chat/completions`` backend.

    Payload: ``{"model": ..., "messages": [{"role": ..., "content": ...}]}``
    with every turn serialized in order.
    """

    id = "chat"
    DEFAULT_URL = "https://api.openai.com/v1/chat/completions"
    DEFAULT_MODEL = "gpt-3.5-turbo"

    def build_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": self.conversation.messages(),
        }

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        choice = first_choice(data, self.id)

        message = choice.get("message")
        if not isinstance(message, dict):
            raise CompletionError("No message in chat response choice")
        content = message.get("content")
        if not isinstance(content, str):
            raise CompletionError("No content in chat response message")

        return CompletionResponse(
            text=content,
            backend=self.id,
            model=data.get("model", self.model),
            usage=extract_usage(data),
            finish_reason=choice.get("finish_reason"),
            request_id=str(data.get("id", "")),
        )
