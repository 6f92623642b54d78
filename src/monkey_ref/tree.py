"""AST node classes produced by the parser and consumed by the evaluator.

Nodes are frozen dataclasses; child sequences are tuples. The originating
token is kept for positions and token_literal() but is excluded from
equality, so two parses of equivalent source compare equal.

to_tree() renders a node as a lark Tree for pretty dumps (runner --ast).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

from .token_types import Tok

_SOURCE_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
}


def quote_string(value: str) -> str:
    return '"' + ''.join(_SOURCE_ESCAPES.get(ch, ch) for ch in value) + '"'


def _leaf(kind: str, value: str, tok: Optional[Tok] = None) -> Token:
    if tok is None:
        return Token(kind, value)
    return Token(kind, value, line=tok.line, column=tok.column)


class Node:
    """Common capability of every AST node."""
    token: Tok

    def token_literal(self) -> str:
        return self.token.value

    def to_source_string(self) -> str:
        raise NotImplementedError

    def to_tree(self) -> Union[Tree, Token]:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_source_string()


class Statement(Node):
    pass


class Expression(Node):
    pass


# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier(Expression):
    token: Tok = field(compare=False, repr=False)
    value: str

    def to_source_string(self) -> str:
        return self.value

    def to_tree(self) -> Token:
        return _leaf('IDENT', self.value, self.token)


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    value: int

    def to_source_string(self) -> str:
        return str(self.value)

    def to_tree(self) -> Token:
        return _leaf('INT', str(self.value), self.token)


@dataclass(frozen=True)
class FloatLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    value: float

    def to_source_string(self) -> str:
        return repr(self.value)

    def to_tree(self) -> Token:
        return _leaf('FLOAT', repr(self.value), self.token)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    value: bool

    def to_source_string(self) -> str:
        return "true" if self.value else "false"

    def to_tree(self) -> Token:
        return _leaf('BOOL', self.to_source_string(), self.token)


@dataclass(frozen=True)
class StringLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    value: str

    def to_source_string(self) -> str:
        return quote_string(self.value)

    def to_tree(self) -> Token:
        return _leaf('STRING', self.value, self.token)


@dataclass(frozen=True)
class PrefixExpression(Expression):
    token: Tok = field(compare=False, repr=False)
    operator: str
    right: Expression

    def to_source_string(self) -> str:
        return f"({self.operator}{self.right.to_source_string()})"

    def to_tree(self) -> Tree:
        return Tree('prefix', [_leaf('OP', self.operator, self.token), self.right.to_tree()])


@dataclass(frozen=True)
class InfixExpression(Expression):
    token: Tok = field(compare=False, repr=False)
    left: Expression
    operator: str
    right: Expression

    def to_source_string(self) -> str:
        return f"({self.left.to_source_string()} {self.operator} {self.right.to_source_string()})"

    def to_tree(self) -> Tree:
        return Tree('infix', [
            self.left.to_tree(),
            _leaf('OP', self.operator, self.token),
            self.right.to_tree(),
        ])


@dataclass(frozen=True)
class IfExpression(Expression):
    token: Tok = field(compare=False, repr=False)
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def to_source_string(self) -> str:
        out = f"if ({self.condition.to_source_string()}) {self.consequence.to_source_string()}"
        if self.alternative is not None:
            out += f" else {self.alternative.to_source_string()}"
        return out

    def to_tree(self) -> Tree:
        children = [self.condition.to_tree(), self.consequence.to_tree()]
        if self.alternative is not None:
            children.append(self.alternative.to_tree())
        return Tree('if', children)


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def to_source_string(self) -> str:
        params = ", ".join(p.to_source_string() for p in self.parameters)
        return f"fn({params}) {self.body.to_source_string()}"

    def to_tree(self) -> Tree:
        params = Tree('params', [p.to_tree() for p in self.parameters])
        return Tree('fn', [params, self.body.to_tree()])


@dataclass(frozen=True)
class CallExpression(Expression):
    token: Tok = field(compare=False, repr=False)
    function: Expression
    arguments: Tuple[Expression, ...]

    def to_source_string(self) -> str:
        args = ", ".join(a.to_source_string() for a in self.arguments)
        return f"{self.function.to_source_string()}({args})"

    def to_tree(self) -> Tree:
        args = Tree('args', [a.to_tree() for a in self.arguments])
        return Tree('call', [self.function.to_tree(), args])


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    elements: Tuple[Expression, ...]

    def to_source_string(self) -> str:
        return "[" + ", ".join(e.to_source_string() for e in self.elements) + "]"

    def to_tree(self) -> Tree:
        return Tree('array', [e.to_tree() for e in self.elements])


@dataclass(frozen=True)
class IndexExpression(Expression):
    token: Tok = field(compare=False, repr=False)
    left: Expression
    index: Expression

    def to_source_string(self) -> str:
        return f"({self.left.to_source_string()}[{self.index.to_source_string()}])"

    def to_tree(self) -> Tree:
        return Tree('index', [self.left.to_tree(), self.index.to_tree()])


@dataclass(frozen=True)
class HashLiteral(Expression):
    token: Tok = field(compare=False, repr=False)
    pairs: Tuple[Tuple[Expression, Expression], ...]

    def to_source_string(self) -> str:
        items = ", ".join(f"{k.to_source_string()}: {v.to_source_string()}" for k, v in self.pairs)
        return "{" + items + "}"

    def to_tree(self) -> Tree:
        return Tree('hash', [Tree('pair', [k.to_tree(), v.to_tree()]) for k, v in self.pairs])


# ---------- Statements ----------

@dataclass(frozen=True)
class LetStatement(Statement):
    token: Tok = field(compare=False, repr=False)
    name: Identifier
    value: Expression

    def to_source_string(self) -> str:
        return f"let {self.name.to_source_string()} = {self.value.to_source_string()};"

    def to_tree(self) -> Tree:
        return Tree('let', [self.name.to_tree(), self.value.to_tree()])


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Tok = field(compare=False, repr=False)
    value: Expression

    def to_source_string(self) -> str:
        return f"return {self.value.to_source_string()};"

    def to_tree(self) -> Tree:
        return Tree('return', [self.value.to_tree()])


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Tok = field(compare=False, repr=False)
    expression: Expression

    def to_source_string(self) -> str:
        return f"{self.expression.to_source_string()};"

    def to_tree(self) -> Tree:
        return Tree('expr', [self.expression.to_tree()])


@dataclass(frozen=True)
class BlockStatement(Statement):
    token: Tok = field(compare=False, repr=False)
    statements: Tuple[Statement, ...]

    def to_source_string(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(s.to_source_string() for s in self.statements) + " }"

    def to_tree(self) -> Tree:
        return Tree('block', [s.to_tree() for s in self.statements])

    def declares_bindings(self) -> bool:
        return any(isinstance(s, LetStatement) for s in self.statements)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def to_source_string(self) -> str:
        return " ".join(s.to_source_string() for s in self.statements)

    def to_tree(self) -> Tree:
        return Tree('program', [s.to_tree() for s in self.statements])


AnyNode: TypeAlias = Union[Program, Statement, Expression]
