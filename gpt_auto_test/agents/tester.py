"""
Test Agent
----------
Responsibility:
1. Show the model the function under test
2. Ask for one test per requested name (or as many as it can)
3. Append each fenced block, checked to parse as a test function or
   test module, after the original source
"""

from typing import Iterable

from ..llm.session import CompletionSession
from ..logger import get_logger
from ..syntax_guard import extract_code_block, parse_test_fragment
from .base import Agent
from .prompts import (
    TESTER_ANY_TESTS,
    TESTER_NAMED_TEST,
    TESTER_READ_FUNCTION,
    TESTER_SYSTEM,
    render,
)

logger = get_logger(__name__)


class TestRequest(Agent):
    """Multi-round test generation for one function.

    Rounds run sequentially on one conversation, so each round sees the
    earlier replies. Fragments already appended stay in ``fragments``
    when a later round fails, but ``run`` still raises.
    """

    __test__ = False  # not a pytest class

    name = "tester"

    def __init__(
        self,
        session: CompletionSession,
        source: str,
        test_names: Iterable[str] = (),
        language: str = "python",
    ):
        super().__init__(session, language)
        self.source = source
        # Duplicates collapse; first-seen order is kept.
        self.test_names = list(dict.fromkeys(test_names))
        self.fragments: list[tuple[str, str]] = []

    def instructions(self) -> list[str]:
        """One instruction per completion round."""
        if not self.test_names:
            return [render(TESTER_ANY_TESTS, language=self.language)]
        return [
            render(TESTER_NAMED_TEST, language=self.language, test_name=test_name)
            for test_name in self.test_names
        ]

    def output(self) -> str:
        """Original source followed by every fragment gathered so far."""
        return "\n\n".join([self.source] + [code for _, code in self.fragments])

    def _run(self) -> str:
        self.init(TESTER_SYSTEM)
        self.add_context(render(TESTER_READ_FUNCTION, language=self.language, source=self.source))

        for round_no, instruction in enumerate(self.instructions(), start=1):
            logger.info("agent.round.start", event="agent.round.start", agent=self.name, round=round_no)
            self.add_context(instruction)
            reply = self.complete()

            code = extract_code_block(reply, self.language)
            kind, _ = parse_test_fragment(code)
            self.fragments.append((kind, code))

            logger.info(
                "agent.round.done",
                event="agent.round.done",
                agent=self.name,
                round=round_no,
                fragment_kind=kind,
            )

        return self.output()


def generate_tests(
    session: CompletionSession,
    source: str,
    test_names: Iterable[str] = (),
    language: str = "python",
) -> str:
    """Return ``source`` followed by generated tests."""
    return TestRequest(session, source, test_names, language).run()
