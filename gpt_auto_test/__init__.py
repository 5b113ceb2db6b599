"""gpt-auto-test - LLM-generated implementations and tests for Python functions."""

from .agents import ImplementationRequest, TestRequest, generate_tests, implement
from .errors import (
    CompletionError,
    ConfigError,
    ExtractionError,
    FragmentSyntaxError,
    GptAutoTestError,
    NoCloseFenceError,
    NoOpenFenceError,
    TransportError,
)
from .llm import CompletionSession, load_config

__all__ = [
    "CompletionSession",
    "ImplementationRequest",
    "TestRequest",
    "implement",
    "generate_tests",
    "load_config",
    "GptAutoTestError",
    "ConfigError",
    "TransportError",
    "CompletionError",
    "ExtractionError",
    "NoOpenFenceError",
    "NoCloseFenceError",
    "FragmentSyntaxError",
]
