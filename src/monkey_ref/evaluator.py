from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from .runtime import init_stdlib, lookup_builtin
from .tree import (
    AnyNode,
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FloatLiteral,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .types import (
    Environment,
    MkBool,
    MkError,
    MkFloat,
    MkInteger,
    MkObject,
    MkReturn,
    MkString,
    MonkeyInternalError,
    NULL,
)

from .eval.blocks import eval_block, eval_statements
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_function_literal
from .eval.helpers import is_abrupt, is_truthy
from .eval.objects import eval_array, eval_hash_literal, eval_index

logger = logging.getLogger(__name__)

EvalFunc = Callable[[AnyNode, Environment], MkObject]

# ---------------- Public API ----------------

def eval_program(program: Program, env: Optional[Environment] = None) -> MkObject:
    """Evaluate a fully parsed program; the result is never a bare MkReturn.

    Callers check for MkError first. Script recursion deep enough to exhaust
    the interpreter stack is reported as an MkError as well.
    """
    init_stdlib()

    if env is None:
        env = Environment()

    result = _guard_recursion(lambda: eval_statements(program.statements, env, eval_node))

    if isinstance(result, MkReturn):
        return result.value

    return result

def eval_expr(node: AnyNode, env: Optional[Environment] = None) -> MkObject:
    """Evaluate a single node; Program nodes go through eval_program."""
    if isinstance(node, Program):
        return eval_program(node, env)

    init_stdlib()
    if env is None:
        env = Environment()

    return _guard_recursion(lambda: eval_node(node, env))

def _guard_recursion(thunk: Callable[[], MkObject]) -> MkObject:
    try:
        return thunk()
    except RecursionError:
        logger.debug("recursion limit hit during evaluation")
        return MkError("maximum recursion depth exceeded")

# ---------------- Core evaluator ----------------

def eval_node(n: AnyNode, env: Environment) -> MkObject:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise MonkeyInternalError(f"no evaluation rule for node type {type(n).__name__}")

    return handler(n, env)

def _eval_function_body(body: BlockStatement, env: Environment) -> MkObject:
    # The call already made a fresh scope for the parameters.
    return eval_statements(body.statements, env, eval_node)

def _eval_let(n: LetStatement, env: Environment) -> MkObject:
    val = eval_node(n.value, env)
    if is_abrupt(val):
        return val

    env.define(n.name.value, val)
    return NULL

def _eval_return(n: ReturnStatement, env: Environment) -> MkObject:
    val = eval_node(n.value, env)
    if is_abrupt(val):
        return val

    return MkReturn(val)

def _eval_identifier(n: Identifier, env: Environment) -> MkObject:
    val = env.get(n.value)
    if val is not None:
        return val

    builtin = lookup_builtin(n.value)
    if builtin is not None:
        return builtin

    return MkError(f"identifier not found: {n.value}")

def _eval_if(n: IfExpression, env: Environment) -> MkObject:
    cond = eval_node(n.condition, env)
    if is_abrupt(cond):
        return cond

    if is_truthy(cond):
        return eval_block(n.consequence, env, eval_node)

    if n.alternative is not None:
        return eval_block(n.alternative, env, eval_node)

    return NULL

_NODE_DISPATCH: Dict[type, EvalFunc] = {
    Program: lambda n, env: eval_program(n, env),
    ExpressionStatement: lambda n, env: eval_node(n.expression, env),
    BlockStatement: lambda n, env: eval_block(n, env, eval_node),
    LetStatement: _eval_let,
    ReturnStatement: _eval_return,
    IntegerLiteral: lambda n, env: MkInteger(n.value),
    FloatLiteral: lambda n, env: MkFloat(n.value),
    BooleanLiteral: lambda n, env: MkBool(n.value),
    StringLiteral: lambda n, env: MkString(n.value),
    Identifier: _eval_identifier,
    PrefixExpression: lambda n, env: eval_prefix(n, env, eval_node),
    InfixExpression: lambda n, env: eval_infix(n, env, eval_node),
    IfExpression: _eval_if,
    FunctionLiteral: lambda n, env: eval_function_literal(n, env),
    CallExpression: lambda n, env: eval_call(n, env, eval_node, _eval_function_body),
    ArrayLiteral: lambda n, env: eval_array(n, env, eval_node),
    IndexExpression: lambda n, env: eval_index(n, env, eval_node),
    HashLiteral: lambda n, env: eval_hash_literal(n, env, eval_node),
}
