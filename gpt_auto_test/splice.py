"""Locate a top-level function in module source and splice code around it."""

import ast
import re
from dataclasses import dataclass

from .syntax_guard import parse_fragment


@dataclass(frozen=True)
class FunctionSpan:
    """Location of a function in module source.

    Lines are 1-based and inclusive; ``start`` covers decorators.
    """

    name: str
    start: int
    end: int
    text: str


# Only the breaks the tokenizer counts; str.splitlines also splits on
# form feeds and unicode separators, which would shift ast line numbers.
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def source_lines(source: str) -> list[str]:
    """Split ``source`` into lines numbered the way ``ast`` numbers them."""
    lines = LINE_BREAK.split(source)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def find_function(source: str, name: str) -> FunctionSpan:
    """Find the first top-level ``def``/``async def`` called ``name``.

    Raises:
        FragmentSyntaxError: If ``source`` does not parse
        LookupError: If no such function exists
    """
    tree = parse_fragment(source)
    lines = source_lines(source)

    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == name:
            start = min([node.lineno] + [d.lineno for d in node.decorator_list])
            end = node.end_lineno
            return FunctionSpan(
                name=name,
                start=start,
                end=end,
                text="\n".join(lines[start - 1:end]),
            )

    raise LookupError(f"Function '{name}' not found")


def replace_function(source: str, name: str, code: str) -> str:
    """Return ``source`` with function ``name`` replaced by ``code``."""
    span = find_function(source, name)
    lines = source_lines(source)
    new_lines = lines[:span.start - 1] + source_lines(code.strip("\n")) + lines[span.end:]
    return "\n".join(new_lines) + "\n"


def insert_after_function(source: str, name: str, code: str) -> str:
    """Return ``source`` with ``code`` inserted after function ``name``.

    Top-level blocks are separated by two blank lines.
    """
    span = find_function(source, name)
    lines = source_lines(source)
    parts = ["\n".join(lines[:span.end]), code.strip("\n")]
    tail = "\n".join(lines[span.end:]).strip("\n")
    if tail:
        parts.append(tail)
    return "\n\n\n".join(parts) + "\n"
