"""Shared lifecycle for completion agents."""

from enum import Enum

from ..llm.session import CompletionSession
from ..logger import get_logger

logger = get_logger(__name__)


class AgentState(Enum):
    """Linear lifecycle of one agent run. FAILED and DONE are terminal."""

    CREATED = "created"
    INITIALIZED = "initialized"
    CONTEXT_ADDED = "context_added"
    COMPLETION_ROUND = "completion_round"
    DONE = "done"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    AgentState.CREATED: {AgentState.INITIALIZED},
    AgentState.INITIALIZED: {AgentState.CONTEXT_ADDED, AgentState.COMPLETION_ROUND},
    AgentState.CONTEXT_ADDED: {AgentState.CONTEXT_ADDED, AgentState.COMPLETION_ROUND},
    AgentState.COMPLETION_ROUND: {AgentState.CONTEXT_ADDED, AgentState.COMPLETION_ROUND, AgentState.DONE},
    AgentState.DONE: set(),
    AgentState.FAILED: set(),
}


class Agent:
    """Drives one or more completion rounds on a single session.

    Subclasses implement ``_run``; any exception it raises moves the
    agent to FAILED and is re-raised unchanged.
    """

    name = "agent"

    def __init__(self, session: CompletionSession, language: str = "python"):
        """Initialize agent.

        Args:
            session: Session owning a fresh conversation
            language: Fence tag requested in prompts and expected in replies
        """
        self.session = session
        self.language = language
        self.state = AgentState.CREATED

    def _transition(self, target: AgentState) -> None:
        if target is not AgentState.FAILED and target not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"{self.name}: illegal transition {self.state.value} -> {target.value}"
            )
        self.state = target

    def init(self, system_prompt: str) -> None:
        self._transition(AgentState.INITIALIZED)
        self.session.init(system_prompt)

    def add_context(self, text: str) -> None:
        self._transition(AgentState.CONTEXT_ADDED)
        self.session.add_context(text)

    def complete(self) -> str:
        self._transition(AgentState.COMPLETION_ROUND)
        return self.session.complete()

    def run(self) -> str:
        if self.state is not AgentState.CREATED:
            raise RuntimeError(f"{self.name}: already run (state {self.state.value})")
        try:
            result = self._run()
        except Exception as e:
            self.state = AgentState.FAILED
            logger.error(
                "agent.failed",
                event="agent.failed",
                agent=self.name,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        self._transition(AgentState.DONE)
        return result

    def _run(self) -> str:
        raise NotImplementedError
