from __future__ import annotations

from typing import Callable, Iterable

from ..tree import BlockStatement, Statement
from ..types import Environment, MkError, MkObject, MkReturn, NULL

EvalFunc = Callable[[Statement, Environment], MkObject]

def eval_statements(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> MkObject:
    """Run statements in order; a return or error stops the run and is handed back still wrapped."""
    result: MkObject = NULL

    for stmt in statements:
        result = eval_func(stmt, env)

        if isinstance(result, (MkReturn, MkError)):
            return result

    return result

def eval_block(block: BlockStatement, env: Environment, eval_func: EvalFunc) -> MkObject:
    # `let` inside a branch binds in a child scope.
    scope = env.enclosed() if block.declares_bindings() else env

    return eval_statements(block.statements, scope, eval_func)
