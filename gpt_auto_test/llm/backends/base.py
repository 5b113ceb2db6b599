"""Backend protocol and the shared conversation plumbing."""

import json
import time
from typing import Any, Protocol, runtime_checkable

from ...errors import CompletionError, TransportError
from ...logger import get_logger
from ..response import CompletionResponse, Conversation, Role
from ..transport import TransportClient

logger = get_logger(__name__)


@runtime_checkable
class CompletionBackend(Protocol):
    """Protocol for completion backends."""

    id: str
    model: str
    conversation: Conversation
    last_request_id: str | None
    last_usage: dict[str, Any] | None

    def init(self, system_prompt: str) -> None:
        """Seed the conversation with a framing turn."""
        ...

    def add_context(self, text: str) -> None:
        """Append one user turn holding ``text`` verbatim."""
        ...

    def complete(self) -> str:
        """Run one round and return the raw reply text.

        Raises:
            CompletionError: On transport failure or an unusable reply
        """
        ...


class ConversationBackend:
    """Owns one conversation and drives the request/response cycle.

    Subclasses supply ``build_payload`` and ``parse_response`` for their
    wire format.
    """

    id = ""
    DEFAULT_URL = ""
    DEFAULT_MODEL = ""

    def __init__(
        self,
        transport: TransportClient,
        model: str | None = None,
        url: str | None = None,
    ):
        self.transport = transport
        self.model = model or self.DEFAULT_MODEL
        self.url = url or self.DEFAULT_URL
        self.conversation = Conversation()
        # Bookkeeping of the latest successful round; the response itself is not kept.
        self.last_request_id: str | None = None
        self.last_usage: dict[str, Any] | None = None

    def init(self, system_prompt: str) -> None:
        # A second call adds another framing turn instead of replacing the first.
        self.conversation.add(Role.SYSTEM, system_prompt)

    def add_context(self, text: str) -> None:
        self.conversation.add(Role.USER, text)

    def build_payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def parse_response(self, data: dict[str, Any]) -> CompletionResponse:
        raise NotImplementedError

    def complete(self) -> str:
        payload = self.build_payload()

        start_time = time.time()
        try:
            raw = self.transport.send(self.url, payload)
        except TransportError as e:
            raise CompletionError(f"{self.id} completion request failed: {e}") from e
        elapsed_ms = int((time.time() - start_time) * 1000)

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CompletionError(f"{self.id} response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise CompletionError(f"{self.id} response is not a JSON object")

        response = self.parse_response(data)
        response.elapsed_ms = elapsed_ms

        logger.debug(
            "llm.response",
            event="llm.response",
            backend=self.id,
            model=response.model,
            request_id=response.request_id,
            finish_reason=response.finish_reason,
            usage=response.usage,
            elapsed_ms=response.elapsed_ms,
            text=response.text,
        )

        self.last_request_id = response.request_id
        self.last_usage = response.usage
        self.conversation.add(Role.ASSISTANT, response.text)
        return response.text


def first_choice(data: dict[str, Any], backend_id: str) -> dict[str, Any]:
    """Return the first entry of ``choices`` or fail.

    Raises:
        CompletionError: If the list is missing, empty or malformed
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise CompletionError(f"No choices in {backend_id} response")
    choice = choices[0]
    if not isinstance(choice, dict):
        raise CompletionError(f"Malformed choice in {backend_id} response")
    return choice
