"""
Implementation Agent
--------------------
Responsibility:
1. Show the model an incomplete function
2. Ask it to complete the code per a plain-text description
3. Return the fenced code block, checked to parse as Python
"""

from ..llm.session import CompletionSession
from ..logger import get_logger
from ..syntax_guard import extract_code_block, parse_fragment
from .base import Agent
from .prompts import (
    IMPLEMENTER_INSTRUCTION,
    IMPLEMENTER_READ_STUB,
    IMPLEMENTER_SYSTEM,
    render,
)

logger = get_logger(__name__)


class ImplementationRequest(Agent):
    """Single-round request to complete a stub. All or nothing."""

    name = "implementer"

    def __init__(self, session: CompletionSession, description: str, stub: str, language: str = "python"):
        super().__init__(session, language)
        self.description = description
        self.stub = stub

    def _run(self) -> str:
        self.init(IMPLEMENTER_SYSTEM)
        self.add_context(render(IMPLEMENTER_READ_STUB, language=self.language, stub=self.stub))
        self.add_context(render(
            IMPLEMENTER_INSTRUCTION,
            language=self.language,
            description=self.description,
        ))

        logger.info("agent.round.start", event="agent.round.start", agent=self.name, round=1)
        reply = self.complete()

        code = extract_code_block(reply, self.language)
        parse_fragment(code)

        logger.info("agent.round.done", event="agent.round.done", agent=self.name, round=1)
        return code


def implement(session: CompletionSession, description: str, stub: str, language: str = "python") -> str:
    """Complete ``stub`` following ``description`` and return the new code."""
    return ImplementationRequest(session, description, stub, language).run()
