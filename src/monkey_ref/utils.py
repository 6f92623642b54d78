"""Environment-variable configuration shared by the runner and the REPL.

MONKEY_DEBUG            enable DEBUG logging (1/true/yes/on)
MONKEY_DEBUG_PY_TRACE   print Python tracebacks for internal errors
MONKEY_RECURSION_LIMIT  interpreter recursion limit installed before evaluation
"""
from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_LIMIT = 10000

_TRUTHY = {"1", "true", "yes", "on"}

def env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY

def debug_enabled() -> bool:
    return env_flag("MONKEY_DEBUG")

def debug_py_trace_enabled() -> bool:
    return env_flag("MONKEY_DEBUG_PY_TRACE")

def recursion_limit() -> int:
    raw = os.environ.get("MONKEY_RECURSION_LIMIT")
    if raw is None or not raw.strip():
        return DEFAULT_RECURSION_LIMIT

    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring MONKEY_RECURSION_LIMIT=%r: not an integer", raw)
        return DEFAULT_RECURSION_LIMIT

    if value < 100:
        logger.warning("ignoring MONKEY_RECURSION_LIMIT=%d: below 100", value)
        return DEFAULT_RECURSION_LIMIT

    return value

def ensure_recursion_limit() -> None:
    """Raise the interpreter recursion limit (never lowers it)."""
    limit = recursion_limit()
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)

def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug or debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
