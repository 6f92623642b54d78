from __future__ import annotations

import logging
from typing import Callable, List, Union

from ..runtime import call_function
from ..tree import BlockStatement, CallExpression, Expression, FunctionLiteral
from ..types import Environment, MkFn, MkObject
from .helpers import is_abrupt

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Expression, Environment], MkObject]
BodyFunc = Callable[[BlockStatement, Environment], MkObject]

def eval_function_literal(node: FunctionLiteral, env: Environment) -> MkFn:
    # The defining environment is captured by reference, later `let`s in it stay visible.
    return MkFn(parameters=node.parameters, body=node.body, env=env)

def eval_expressions(exprs, env: Environment, eval_func: EvalFunc) -> Union[List[MkObject], MkObject]:
    """Evaluate left to right; the first error (or return) is handed back in place of the list."""
    values: List[MkObject] = []

    for expr in exprs:
        val = eval_func(expr, env)
        if is_abrupt(val):
            return val
        values.append(val)

    return values

def eval_call(node: CallExpression, env: Environment, eval_func: EvalFunc, eval_body: BodyFunc) -> MkObject:
    fn = eval_func(node.function, env)
    if is_abrupt(fn):
        return fn

    args = eval_expressions(node.arguments, env, eval_func)
    if not isinstance(args, list):
        return args

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("call %s with %d arg(s)", node.function.to_source_string(), len(args))
    return call_function(fn, args, eval_body)
