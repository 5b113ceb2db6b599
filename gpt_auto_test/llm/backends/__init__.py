"""Completion backend implementations."""

from .base import CompletionBackend, ConversationBackend
from .chat import ChatBackend
from .text import TextBackend
from .registry import build_backend, get_backend_class, list_backends, register_backend

# Register backends
register_backend(ChatBackend)
register_backend(TextBackend)

__all__ = [
    "CompletionBackend",
    "ConversationBackend",
    "ChatBackend",
    "TextBackend",
    "build_backend",
    "register_backend",
    "get_backend_class",
    "list_backends",
]
