"""Command line entry point: generate implementations or tests for a function."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from .agents import ImplementationRequest, TestRequest
from .errors import GptAutoTestError
from .llm import CompletionSession, load_config
from .logger import set_level
from .splice import find_function, insert_after_function, replace_function


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Python module containing the function")
    parser.add_argument("--function", required=True, help="Top-level function name")
    parser.add_argument("--config", default=None, help="Path to YAML configuration (default: built-in)")
    parser.add_argument("--backend", default=None, help="Backend ID overriding the role mapping")
    parser.add_argument("--workspace", default=None, help="Directory for conversation traces")
    parser.add_argument("--write", action="store_true", help="Rewrite FILE instead of printing")
    parser.add_argument("--verbose", action="store_true", help="Log model replies")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpt-auto-test",
        description="Generate function implementations or tests with an LLM",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    impl_parser = subparsers.add_parser("impl", help="Complete a stub function")
    _add_common(impl_parser)
    impl_parser.add_argument("--description", required=True, help="Desired behaviour in plain text")

    test_parser = subparsers.add_parser("test", help="Generate tests for a function")
    _add_common(test_parser)
    test_parser.add_argument(
        "--name",
        action="append",
        dest="test_names",
        default=[],
        help="Test function name to request (repeatable)",
    )

    return parser


def _session(args: argparse.Namespace, role: str, config) -> CompletionSession:
    workspace = Path(args.workspace) if args.workspace else None
    return CompletionSession.from_config(config, role=role, backend=args.backend, workspace=workspace)


def run_impl(args: argparse.Namespace, source: str) -> str:
    config = load_config(args.config)
    span = find_function(source, args.function)
    request = ImplementationRequest(
        _session(args, "implementer", config),
        args.description,
        span.text,
        language=config.language,
    )
    code = request.run()
    return replace_function(source, args.function, code)


def run_test(args: argparse.Namespace, source: str) -> str:
    config = load_config(args.config)
    span = find_function(source, args.function)
    request = TestRequest(
        _session(args, "tester", config),
        span.text,
        args.test_names,
        language=config.language,
    )
    request.run()
    tests = "\n\n\n".join(code for _, code in request.fragments)
    return insert_after_function(source, args.function, tests)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parser().parse_args(argv)

    if args.verbose:
        set_level("DEBUG")

    path = Path(args.file)
    try:
        source = path.read_text(encoding="utf-8")
        if args.command == "impl":
            result = run_impl(args, source)
        else:
            result = run_test(args, source)
    except (GptAutoTestError, LookupError, OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.write:
        path.write_text(result)
        print(f"updated:{path}")
    else:
        sys.stdout.write(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
