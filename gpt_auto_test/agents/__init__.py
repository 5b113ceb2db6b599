"""Agents that drive completion rounds toward code or tests."""

from .base import AgentState
from .implementer import ImplementationRequest, implement
from .tester import TestRequest, generate_tests

__all__ = [
    "AgentState",
    "ImplementationRequest",
    "TestRequest",
    "implement",
    "generate_tests",
]
