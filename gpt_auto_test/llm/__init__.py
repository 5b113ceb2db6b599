"""Conversational completion layer - pluggable backends behind one session."""

from .config import BackendConfig, LLMConfig, load_config
from .response import CompletionResponse, Conversation, Role, Turn
from .session import CompletionSession
from .transport import TransportClient

__all__ = [
    "CompletionSession",
    "CompletionResponse",
    "Conversation",
    "Role",
    "Turn",
    "TransportClient",
    "load_config",
    "LLMConfig",
    "BackendConfig",
]
