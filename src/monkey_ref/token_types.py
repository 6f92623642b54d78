"""
Token Types for the Monkey Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Special
    ILLEGAL = auto()
    EOF = auto()

    # Literals
    IDENT = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()

    # Keywords
    FN = auto()
    LET = auto()
    TRUE = auto()
    FALSE = auto()
    IF = auto()
    ELSE = auto()
    RETURN = auto()

    # Operators
    ASSIGN = auto()
    PLUS = auto()
    MINUS = auto()
    BANG = auto()
    STAR = auto()
    SLASH = auto()

    # Comparison
    LT = auto()
    GT = auto()
    EQ = auto()
    NEQ = auto()

    # Punctuation
    COMMA = auto()
    SEMI = auto()
    COLON = auto()
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    LSQB = auto()
    RSQB = auto()


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
