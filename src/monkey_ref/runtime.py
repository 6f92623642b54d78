from __future__ import annotations

import importlib
import logging
from typing import Callable, Dict, List, Mapping, Optional

from .types import (
    BuiltinFn,
    Environment,
    MkBuiltin,
    MkError,
    MkFn,
    MkObject,
    MkReturn,
    NULL,
)

logger = logging.getLogger(__name__)

_STDLIB_INITIALIZED = False

class Builtins:
    functions: Dict[str, MkBuiltin] = {}

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_builtin(name: str, *, arity: Optional[int] = None):
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = MkBuiltin(name=name, fn=fn, arity=arity)
        return fn

    return dec

def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)

def root_environment(host_builtins: Optional[Mapping[str, BuiltinFn]] = None) -> Environment:
    """Fresh top-level environment; host_builtins are bound as BUILTIN values in it."""
    init_stdlib()
    env = Environment()

    for name, fn in (host_builtins or {}).items():
        env.define(name, MkBuiltin(name=name, fn=fn))

    return env

def arity_error(want: int, got: int) -> MkError:
    return MkError(f"wrong number of arguments: want={want}, got={got}")

def call_function(fn: MkObject, args: List[MkObject], eval_block: Callable) -> MkObject:
    """
    Call semantics:
    - MkFn binds args positionally in a scope enclosed by the closure env
      (not the caller's); arity must match exactly.
    - A `return` inside the body is unwrapped here so it stops at the call.
    - MkBuiltin receives the evaluated args list.
    """

    if isinstance(fn, MkFn):
        if len(args) != len(fn.parameters):
            return arity_error(len(fn.parameters), len(args))

        callee_env = fn.env.enclosed()
        for param, val in zip(fn.parameters, args):
            callee_env.define(param.value, val)

        result = eval_block(fn.body, callee_env)
        if isinstance(result, MkReturn):
            return result.value
        return result

    if isinstance(fn, MkBuiltin):
        if fn.arity is not None and len(args) != fn.arity:
            return arity_error(fn.arity, len(args))

        logger.debug("calling builtin %s with %d arg(s)", fn.name, len(args))
        result = fn.fn(args)
        return NULL if result is None else result

    return MkError(f"not a function: {fn.type_name()}")
