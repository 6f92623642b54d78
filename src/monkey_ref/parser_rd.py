"""
Recursive Descent Parser for Monkey

Structure:
- Lexer: pulled one token at a time through next_token()
- Parser: recursive descent for statements, Pratt parsing for expressions
- AST: node classes from tree.py

Syntax errors are accumulated rather than raised to the caller: a failing
statement records a ParseError and the parser skips ahead to the next `;`.
"""

from __future__ import annotations

import logging
import math
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
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
    Statement,
    StringLiteral,
)

logger = logging.getLogger(__name__)

I64_MAX = 2**63 - 1

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)
    INDEX = 8        # a[i]


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NEQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.LPAR: Precedence.CALL,
    TT.LSQB: Precedence.INDEX,
}

PrefixRule = Callable[[], Expression]
InfixRule = Callable[[Expression], Expression]


class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. ordering (<, >)
    3. sum (+, -)
    4. product (*, /)
    5. prefix (-, !)
    6. call (f(...))
    7. index (a[...])
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[ParseError] = []

        self.current: Tok = lexer.next_token()
        self.peek_tok: Tok = lexer.next_token()

        self.prefix_rules: Dict[TT, PrefixRule] = {}
        self.infix_rules: Dict[TT, InfixRule] = {}

        self.register_prefix(TT.IDENT, self.parse_identifier)
        self.register_prefix(TT.INT, self.parse_integer_literal)
        self.register_prefix(TT.FLOAT, self.parse_float_literal)
        self.register_prefix(TT.STRING, self.parse_string_literal)
        self.register_prefix(TT.TRUE, self.parse_boolean_literal)
        self.register_prefix(TT.FALSE, self.parse_boolean_literal)
        self.register_prefix(TT.BANG, self.parse_prefix_expression)
        self.register_prefix(TT.MINUS, self.parse_prefix_expression)
        self.register_prefix(TT.LPAR, self.parse_grouped_expression)
        self.register_prefix(TT.IF, self.parse_if_expression)
        self.register_prefix(TT.FN, self.parse_function_literal)
        self.register_prefix(TT.LSQB, self.parse_array_literal)
        self.register_prefix(TT.LBRACE, self.parse_hash_literal)

        for op in (TT.PLUS, TT.MINUS, TT.STAR, TT.SLASH, TT.EQ, TT.NEQ, TT.LT, TT.GT):
            self.register_infix(op, self.parse_infix_expression)
        self.register_infix(TT.LPAR, self.parse_call_expression)
        self.register_infix(TT.LSQB, self.parse_index_expression)

    def register_prefix(self, token_type: TT, rule: PrefixRule) -> None:
        self.prefix_rules[token_type] = rule

    def register_infix(self, token_type: TT, rule: InfixRule) -> None:
        self.infix_rules[token_type] = rule

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.current = self.peek_tok
        self.peek_tok = self.lexer.next_token()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def check_peek(self, *types: TT) -> bool:
        return self.peek_tok.type in types

    def expect_peek(self, token_type: TT) -> Tok:
        """Advance onto the peek token if it has the expected type, else raise"""
        if not self.check_peek(token_type):
            logger.debug(
                "expected next token to be %s, got %r instead",
                token_type.name, self.peek_tok,
            )
            raise ParseError(
                f"expected next token to be {token_type.name}, got {self.peek_tok.type.name} instead",
                self.peek_tok,
            )
        self.advance()
        return self.current

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_tok.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    def synchronize(self) -> None:
        """Skip to the end of the failing statement"""
        while not self.check(TT.SEMI, TT.EOF):
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse entire program, recording every syntax error found"""
        stmts: List[Statement] = []

        while not self.check(TT.EOF):
            if self.check(TT.SEMI):
                self.advance()
                continue

            try:
                stmts.append(self.parse_statement())
            except ParseError as err:
                logger.debug("parse error: %s", err)
                self.errors.append(err)
                self.synchronize()

            if not self.check(TT.EOF):
                self.advance()

        return Program(tuple(stmts))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Statement:
        if self.check(TT.LET):
            return self.parse_let_statement()
        if self.check(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        tok = self.current
        name_tok = self.expect_peek(TT.IDENT)
        name = Identifier(name_tok, name_tok.value)
        self.expect_peek(TT.ASSIGN)
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if self.check_peek(TT.SEMI):
            self.advance()
        return LetStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        tok = self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if self.check_peek(TT.SEMI):
            self.advance()
        return ReturnStatement(tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.current

        expr = self.parse_expression(Precedence.LOWEST)
        if self.check_peek(TT.SEMI):
            self.advance()
        return ExpressionStatement(tok, expr)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ stmt* }`; current token is the opening brace"""
        tok = self.current
        self.advance()

        stmts: List[Statement] = []
        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("expected RBRACE to close block, got EOF", self.current)
            if self.check(TT.SEMI):
                self.advance()
                continue
            stmts.append(self.parse_statement())
            self.advance()

        return BlockStatement(tok, tuple(stmts))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Expression:
        prefix = self.prefix_rules.get(self.current.type)
        if prefix is None:
            if self.check(TT.ILLEGAL):
                raise ParseError(f"illegal token {self.current.value!r}", self.current)
            raise ParseError(f"no prefix parse function for {self.current.type.name} found", self.current)

        left = prefix()

        while not self.check_peek(TT.SEMI) and precedence < self.peek_precedence():
            infix = self.infix_rules.get(self.peek_tok.type)
            if infix is None:
                return left
            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.current, self.current.value)

    def parse_integer_literal(self) -> IntegerLiteral:
        tok = self.current
        try:
            value = int(tok.value)
        except ValueError:
            # beyond the interpreter's int-string digit limit
            raise ParseError(f"could not parse {tok.value} as integer", tok) from None
        if value > I64_MAX:
            raise ParseError(f"could not parse {tok.value} as integer", tok)
        return IntegerLiteral(tok, value)

    def parse_float_literal(self) -> FloatLiteral:
        tok = self.current
        value = float(tok.value)
        if math.isinf(value):
            raise ParseError(f"could not parse {tok.value} as float", tok)
        return FloatLiteral(tok, value)

    def parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self.current, self.current.value)

    def parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(self.current, self.check(TT.TRUE))

    def parse_prefix_expression(self) -> PrefixExpression:
        tok = self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(tok, tok.value, right)

    def parse_infix_expression(self, left: Expression) -> InfixExpression:
        tok = self.current
        precedence = self.current_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        return InfixExpression(tok, left, tok.value, right)

    def parse_grouped_expression(self) -> Expression:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RPAR)
        return expr

    def parse_if_expression(self) -> IfExpression:
        tok = self.current
        self.expect_peek(TT.LPAR)
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RPAR)

        self.expect_peek(TT.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.check_peek(TT.ELSE):
            self.advance()
            self.expect_peek(TT.LBRACE)
            alternative = self.parse_block_statement()

        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> FunctionLiteral:
        tok = self.current
        self.expect_peek(TT.LPAR)
        params = self.parse_function_parameters()

        self.expect_peek(TT.LBRACE)
        body = self.parse_block_statement()
        return FunctionLiteral(tok, params, body)

    def parse_function_parameters(self) -> Tuple[Identifier, ...]:
        params: List[Identifier] = []

        if self.check_peek(TT.RPAR):
            self.advance()
            return ()

        name_tok = self.expect_peek(TT.IDENT)
        params.append(Identifier(name_tok, name_tok.value))

        while self.check_peek(TT.COMMA):
            self.advance()
            name_tok = self.expect_peek(TT.IDENT)
            params.append(Identifier(name_tok, name_tok.value))

        self.expect_peek(TT.RPAR)
        return tuple(params)

    def parse_call_expression(self, function: Expression) -> CallExpression:
        tok = self.current
        args = self.parse_expression_list(TT.RPAR)
        return CallExpression(tok, function, args)

    def parse_array_literal(self) -> ArrayLiteral:
        tok = self.current
        return ArrayLiteral(tok, self.parse_expression_list(TT.RSQB))

    def parse_expression_list(self, end: TT) -> Tuple[Expression, ...]:
        """Comma-separated expressions up to `end`; current token is the opener"""
        items: List[Expression] = []

        if self.check_peek(end):
            self.advance()
            return ()

        self.advance()
        items.append(self.parse_expression(Precedence.LOWEST))

        while self.check_peek(TT.COMMA):
            self.advance()  # comma
            self.advance()  # next item
            items.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return tuple(items)

    def parse_index_expression(self, left: Expression) -> IndexExpression:
        tok = self.current
        self.advance()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RSQB)
        return IndexExpression(tok, left, index)

    def parse_hash_literal(self) -> HashLiteral:
        tok = self.current
        pairs: List[Tuple[Expression, Expression]] = []

        while not self.check_peek(TT.RBRACE):
            self.advance()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(TT.COLON)
            self.advance()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))

            if not self.check_peek(TT.RBRACE):
                self.expect_peek(TT.COMMA)

        self.expect_peek(TT.RBRACE)
        return HashLiteral(tok, tuple(pairs))


# ============================================================================
# Entry points
# ============================================================================

def parse_program(lexer: Lexer) -> Tuple[Program, List[ParseError]]:
    """Parse everything the lexer yields. The program must not be evaluated when errors is non-empty."""
    parser = Parser(lexer)
    program = parser.parse_program()
    return program, parser.errors


def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse source text, returning the program and its syntax error messages"""
    program, errors = parse_program(Lexer(source))
    return program, [str(err) for err in errors]
