from __future__ import annotations

import math
from typing import Callable

from ..tree import Expression, InfixExpression, PrefixExpression
from ..types import (
    Environment,
    MkBool,
    MkError,
    MkFloat,
    MkInteger,
    MkNull,
    MkObject,
    MkString,
)
from .helpers import is_abrupt, is_truthy

EvalFunc = Callable[[Expression, Environment], MkObject]

I64_MIN = -2**63
I64_MAX = 2**63 - 1

def eval_prefix(node: PrefixExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    right = eval_func(node.right, env)
    if is_abrupt(right):
        return right

    return apply_prefix_operator(node.operator, right)

def eval_infix(node: InfixExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    left = eval_func(node.left, env)
    if is_abrupt(left):
        return left

    right = eval_func(node.right, env)
    if is_abrupt(right):
        return right

    return apply_binary_operator(node.operator, left, right)

def apply_prefix_operator(op: str, right: MkObject) -> MkObject:
    match op:
        case '!':
            return MkBool(not is_truthy(right))
        case '-':
            match right:
                case MkInteger(value=n):
                    return _checked_int(-n, f"-{n}")
                case MkFloat(value=f):
                    return MkFloat(-f)
                case _:
                    return MkError(f"unknown operator: -{right.type_name()}")
        case _:
            return MkError(f"unknown operator: {op}{right.type_name()}")

def apply_binary_operator(op: str, left: MkObject, right: MkObject) -> MkObject:
    match (left, right):
        case (MkInteger(value=a), MkInteger(value=b)):
            return _integer_op(op, a, b)
        case (MkInteger() | MkFloat(), MkInteger() | MkFloat()):
            # Mixed operands promote to float
            return _float_op(op, float(left.value), float(right.value))
        case (MkString(value=a), MkString(value=b)):
            match op:
                case '+':
                    return MkString(a + b)
                case '==':
                    return MkBool(a == b)
                case '!=':
                    return MkBool(a != b)
        case (MkBool(value=a), MkBool(value=b)):
            match op:
                case '==':
                    return MkBool(a == b)
                case '!=':
                    return MkBool(a != b)
        case (MkNull(), MkNull()):
            match op:
                case '==':
                    return MkBool(True)
                case '!=':
                    return MkBool(False)

    lt, rt = left.type_name(), right.type_name()
    if lt != rt:
        return MkError(f"type mismatch: {lt} {op} {rt}")

    return MkError(f"unknown operator: {lt} {op} {rt}")

def _checked_int(value: int, expr: str) -> MkObject:
    if value < I64_MIN or value > I64_MAX:
        return MkError(f"integer overflow: {expr}")

    return MkInteger(value)

def _integer_op(op: str, a: int, b: int) -> MkObject:
    match op:
        case '+':
            return _checked_int(a + b, f"{a} + {b}")
        case '-':
            return _checked_int(a - b, f"{a} - {b}")
        case '*':
            return _checked_int(a * b, f"{a} * {b}")
        case '/':
            if b == 0:
                return MkError(f"division by zero: {a} / {b}")
            # Truncate toward zero
            q = abs(a) // abs(b)
            return _checked_int(q if (a < 0) == (b < 0) else -q, f"{a} / {b}")
        case '<':
            return MkBool(a < b)
        case '>':
            return MkBool(a > b)
        case '==':
            return MkBool(a == b)
        case '!=':
            return MkBool(a != b)
        case _:
            return MkError(f"unknown operator: INTEGER {op} INTEGER")

def _float_op(op: str, a: float, b: float) -> MkObject:
    match op:
        case '+':
            return MkFloat(a + b)
        case '-':
            return MkFloat(a - b)
        case '*':
            return MkFloat(a * b)
        case '/':
            return MkFloat(float_divide(a, b))
        case '<':
            return MkBool(a < b)
        case '>':
            return MkBool(a > b)
        case '==':
            return MkBool(a == b)
        case '!=':
            return MkBool(a != b)
        case _:
            return MkError(f"unknown operator: FLOAT {op} FLOAT")

def float_divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 and nan/0 are nan."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)

    return a / b
