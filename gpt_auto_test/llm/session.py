"""Backend-agnostic completion session."""

import time
from pathlib import Path

from ..logger import get_logger
from .backends import CompletionBackend, build_backend
from .config import LLMConfig, load_config, resolve_role
from .trace import record_error_trace, record_trace

logger = get_logger(__name__)


class CompletionSession:
    """Facade over one backend and its conversation.

    Orchestrators talk only to this class, so swapping the chat backend
    for the text backend changes nothing on their side.
    """

    def __init__(self, backend: CompletionBackend, workspace: Path | None = None):
        """Initialize session.

        Args:
            backend: Backend owning the conversation
            workspace: Optional directory for trace recording
        """
        self.backend = backend
        self.workspace = workspace

    @classmethod
    def from_config(
        cls,
        config: LLMConfig | None = None,
        role: str = "implementer",
        backend: str | None = None,
        workspace: Path | None = None,
    ) -> "CompletionSession":
        """Build a session with a fresh backend for ``role``.

        Args:
            config: Loaded configuration; defaults are used if omitted
            role: Role name used to pick the backend
            backend: Explicit backend ID overriding the role mapping
            workspace: Optional directory for trace recording

        Raises:
            ConfigError: If the backend cannot be resolved
        """
        if config is None:
            config = load_config()
        backend_cfg = resolve_role(role, config, backend)
        return cls(build_backend(backend_cfg), workspace)

    @property
    def conversation(self):
        return self.backend.conversation

    def init(self, system_prompt: str) -> None:
        self.backend.init(system_prompt)

    def add_context(self, text: str) -> None:
        self.backend.add_context(text)

    def complete(self) -> str:
        """Run one completion round and return the raw reply text."""
        logger.info(
            "llm.complete",
            event="llm.complete.start",
            backend=self.backend.id,
            model=self.backend.model,
            turns=len(self.backend.conversation),
        )

        start_time = time.time()
        try:
            reply = self.backend.complete()
        except Exception as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            trace_file = None
            if self.workspace:
                trace_file = record_error_trace(self.backend, e, elapsed_ms, self.workspace)

            logger.error(
                "llm.complete.error",
                event="llm.complete.error",
                backend=self.backend.id,
                error_type=type(e).__name__,
                error_message=str(e),
                elapsed_ms=elapsed_ms,
                trace_file=str(trace_file) if trace_file else None,
            )
            raise

        elapsed_ms = int((time.time() - start_time) * 1000)
        trace_file = None
        if self.workspace:
            trace_file = record_trace(self.backend, reply, elapsed_ms, self.workspace)

        logger.info(
            "llm.complete.success",
            event="llm.complete.success",
            backend=self.backend.id,
            model=self.backend.model,
            elapsed_ms=elapsed_ms,
            request_id=self.backend.last_request_id,
            usage=self.backend.last_usage,
            reply_chars=len(reply),
            trace_file=str(trace_file) if trace_file else None,
        )
        return reply
