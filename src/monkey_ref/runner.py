from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .evaluator import eval_program
from .lexer_rd import Lexer, tokenize
from .parser_rd import parse_program
from .runtime import root_environment
from .tree import Program
from .types import Environment, MkError, MkNull, MkObject, MonkeyInternalError, MonkeyParseError
from .utils import configure_logging, debug_py_trace_enabled, ensure_recursion_limit

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_SYNTAX_ERROR = 2
EXIT_INTERNAL_ERROR = 3

USAGE = "usage: monkey [--tokens] [--ast] [--debug] [FILE | - | SOURCE]"

def parse_or_raise(src: str) -> Program:
    """Parse src, raising MonkeyParseError with every syntax error when there are any."""
    program, errors = parse_program(Lexer(src))

    if errors:
        raise MonkeyParseError(errors)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("AST: %s", program.to_source_string())

    return program

def run(src: str, env: Optional[Environment] = None) -> MkObject:
    """Parse and evaluate src. The result may be an MkError; check before use."""
    program = parse_or_raise(src)
    ensure_recursion_limit()

    if env is None:
        env = root_environment()

    return eval_program(program, env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]] = None) -> int:
    show_tokens = False
    show_ast = False
    debug = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--tokens":
            show_tokens = True
            continue

        if token == "--ast":
            show_ast = True
            continue

        if token == "--debug":
            debug = True
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            return EXIT_OK

        if token.startswith("--"):
            print(f"Unknown flag: {token}\n{USAGE}", file=sys.stderr)
            return EXIT_SYNTAX_ERROR

        if arg is None:
            arg = token
        else:
            print(f"Unexpected argument: {token}\n{USAGE}", file=sys.stderr)
            return EXIT_SYNTAX_ERROR

    configure_logging(debug)
    source = _load_source(arg)

    if show_tokens:
        for tok in tokenize(source):
            print(tok)
        return EXIT_OK

    try:
        if show_ast:
            print(parse_or_raise(source).to_tree().pretty(), end="")
            return EXIT_OK

        result = run(source)
    except MonkeyParseError as exc:
        print(exc, file=sys.stderr)
        return EXIT_SYNTAX_ERROR
    except MonkeyInternalError as exc:
        print(f"internal error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return EXIT_INTERNAL_ERROR

    if isinstance(result, MkError):
        print(result.inspect(), file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not isinstance(result, MkNull):
        print(result.inspect())

    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
