"""
Syntax Guard - isolates code from model replies and checks it parses.

Models are told to start their reply with a fenced block, so extraction
is a single literal scan. A reply that ignores the instruction is an
error, never something to recover from.
"""

import ast
from typing import Tuple

from .errors import FragmentSyntaxError, NoCloseFenceError, NoOpenFenceError

FENCE = "```"

FUNCTION = "function"
MODULE = "module"


def extract_code_block(llm_response: str, language: str = "python") -> str:
    """
    Extract code from the first fenced block tagged with ``language``.

    Only the first opener and the next bare fence after it are looked
    at; nesting is not tracked. The tag is matched literally, so a
    reply fenced with a different tag is reported as having no opener.

    Args:
        llm_response: Full LLM response text
        language: Language marker following the opening fence

    Returns:
        Code between the fences with surrounding whitespace trimmed

    Raises:
        NoOpenFenceError: If no opening fence for ``language`` exists
        NoCloseFenceError: If the opening fence is never closed
    """
    marker = f"{FENCE}{language}"
    start = llm_response.find(marker)
    if start == -1:
        raise NoOpenFenceError(f"No code block start found: {llm_response}", text=llm_response)

    body = llm_response[start + len(marker):]
    end = body.find(FENCE)
    if end == -1:
        raise NoCloseFenceError(f"No code block end found: {llm_response}", text=llm_response)

    return body[:end].strip()


def parse_fragment(code: str) -> ast.Module:
    """Parse ``code`` as a Python module.

    Raises:
        FragmentSyntaxError: If the code does not parse
    """
    try:
        return ast.parse(code)
    except SyntaxError as e:
        raise FragmentSyntaxError(
            f"Failed to parse the response as Python code (line {e.lineno}: {e.msg}):\n{code}\n",
            code=code,
            lineno=e.lineno,
            msg=e.msg or "",
        ) from e


def is_single_function(tree: ast.Module) -> bool:
    return (
        len(tree.body) == 1
        and isinstance(tree.body[0], (ast.FunctionDef, ast.AsyncFunctionDef))
    )


def parse_test_fragment(code: str) -> Tuple[str, ast.Module]:
    """Parse a generated test as one function, else as a whole module.

    Returns:
        Tuple of (kind, tree) where kind is ``"function"`` or ``"module"``

    Raises:
        FragmentSyntaxError: If the code parses as neither
    """
    tree = parse_fragment(code)
    if is_single_function(tree):
        return FUNCTION, tree
    return MODULE, tree
