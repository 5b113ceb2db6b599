"""Legacy text completions backend (single prompt string)."""

from typing import Any

from ...errors import CompletionError
from ..response import CompletionResponse, extract_usage
from .base import ConversationBackend, first_choice


class TextBackend(ConversationBackend):
    """OpenAI-style ``/completions`` backend.

    The conversation is flattened into one newline-joined prompt, and
    sampling defaults to temperature 0.0 unless the backend config sets one.
    """

    id = "text"
    DEFAULT_URL = "https://api.openai.com/v1/completions"
    DEFAULT_MODEL = "text-davinci-003"
    DEFAULT_MAX_TOKENS = 1024
    DEFAULT_TEMPERATURE = 0.0

    def __init__(self, transport, model=None, url=None, max_tokens=None, temperature=None):
        super().__init__(transport, model=model, url=url)
        self.max_tokens = max_tokens if max_tokens is not None else self.DEFAULT_MAX_TOKENS
        self.temperature = temperature if temperature is not None else self.DEFAULT_TEMPERATURE

    def build_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": self.conversation.prompt(),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        choice = first_choice(data, self.id)

        text = choice.get("text")
        if not isinstance(text, str):
            raise CompletionError("No text in completion response choice")

        return CompletionResponse(
            text=text,
            backend=self.id,
            model=data.get("model", self.model),
            usage=extract_usage(data),
            finish_reason=choice.get("finish_reason"),
            request_id=str(data.get("id", "")),
        )
