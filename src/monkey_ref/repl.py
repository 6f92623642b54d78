"""Interactive REPL for Monkey, powered by prompt_toolkit."""

from __future__ import annotations

import logging
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import tokenize
from .repl_highlight import MonkeyLexer
from .runner import run
from .runtime import Builtins, init_stdlib, root_environment
from .token_types import TT
from .types import Environment, MkError, MkNull, MonkeyInternalError, MonkeyParseError
from .utils import configure_logging, debug_enabled, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/debug": ("Toggle DEBUG logging", "[on|off]"),
    "/env": ("List names bound in the session", ""),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAR, TT.LSQB, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RSQB, TT.RBRACE}


def needs_continuation(text: str) -> bool:
    """Return True while *text* has unclosed brackets or an unterminated string."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)
        elif tok.type == TT.ILLEGAL and tok.value.startswith('"'):
            return True

    return depth > 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _set_debug(on: bool) -> None:
    logging.getLogger("monkey_ref").setLevel(logging.DEBUG if on else logging.WARNING)


def handle_slash(line: str, env_box: list[Environment]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/debug":
        logger = logging.getLogger("monkey_ref")
        if arg.lower() in ("on", "1", "true", "yes"):
            _set_debug(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            _set_debug(False)
        elif arg == "":
            # Toggle.
            _set_debug(logger.getEffectiveLevel() > logging.DEBUG)
        else:
            print("Usage: /debug [on|off]", file=sys.stderr)
            return True

        state = "on" if logger.getEffectiveLevel() <= logging.DEBUG else "off"
        print(f"Debug logging: {state}")
        return True

    if cmd == "/env":
        names = env_box[0].names()
        print(", ".join(names) if names else "(empty)")
        return True

    if cmd == "/reset":
        env_box[0] = root_environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, env: Environment) -> bool:
    """Evaluate one submission and print its outcome. Returns False on any error."""
    try:
        result = run(text, env)
    except MonkeyParseError as exc:
        print(exc, file=sys.stderr)
        return False
    except MonkeyInternalError as exc:
        print(f"internal error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return False

    if isinstance(result, MkError):
        print(result.inspect(), file=sys.stderr)
        return False

    if not isinstance(result, MkNull):
        print(result.inspect())
    return True


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    configure_logging(debug_enabled())
    init_stdlib()
    # Use a mutable box so /reset can swap the environment.
    env_box: list[Environment] = [root_environment()]

    history = InMemoryHistory()
    lexer = MonkeyLexer(frozenset(Builtins.functions))

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        if buf.text.startswith("/") or not needs_continuation(buf.text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n    ")

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("monkey repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        # Slash command?
        if handle_slash(text, env_box):
            continue

        eval_line(text, env_box[0])


if __name__ == "__main__":
    repl()
