"""Conversation and completion data structures."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(Enum):
    """Speaker of a conversation turn; values are the wire tokens."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Turn:
    """One role-tagged message. Content is stored verbatim."""

    role: Role
    content: str

    def to_message(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class Conversation:
    """Ordered turn history sent on every request."""

    turns: list[Turn] = field(default_factory=list)

    def add(self, role: Role, content: str) -> None:
        self.turns.append(Turn(role, content))

    def messages(self) -> list[dict[str, str]]:
        """Serialize every turn as a chat message, in order."""
        return [turn.to_message() for turn in self.turns]

    def prompt(self) -> str:
        """Collapse all turns into one newline-joined prompt.

        Roles are dropped: legacy text completion has no notion of them.
        """
        return "\n".join(turn.content for turn in self.turns)

    def __len__(self) -> int:
        return len(self.turns)


@dataclass
class CompletionResponse:
    """First-choice text of a completion plus bookkeeping.

    Lives only for the duration of one ``complete()`` call.
    """

    text: str
    backend: str
    model: str | None = None
    usage: dict[str, Any] | None = None
    finish_reason: str | None = None
    request_id: str = ""
    elapsed_ms: int = 0

    def __post_init__(self):
        """Ensure request_id is set."""
        if not self.request_id:
            self.request_id = str(uuid.uuid4())


def extract_usage(data: dict[str, Any]) -> dict[str, Any] | None:
    """Pull token counters from a response body, if present."""
    usage = data.get("usage")
    if not isinstance(usage, dict):
        return None
    return {
        "prompt_tokens": usage.get("prompt_tokens", 0),
        "completion_tokens": usage.get("completion_tokens", 0),
        "total_tokens": usage.get("total_tokens", 0),
    }
