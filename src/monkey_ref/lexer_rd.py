"""
Lexer for Monkey - Recursive Descent Parser

Tokenizes Monkey source code on demand.

Features:
- Pull interface (next_token) so the parser consumes tokens lazily
- Position tracking (line, column) of each token's first character
- Never raises: malformed input becomes an ILLEGAL token the parser reports
"""

from typing import List

from .token_types import TT, Tok


def is_digit(ch: str) -> bool:
    # ASCII only
    return '0' <= ch <= '9'

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Whitespace and `//` line comments are skipped. Once the source is
    exhausted every further call to next_token() yields EOF.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FN,
        'let': TT.LET,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'if': TT.IF,
        'else': TT.ELSE,
        'return': TT.RETURN,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),

        # Single-character operators
        ('=', TT.ASSIGN),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('!', TT.BANG),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        (',', TT.COMMA),
        (';', TT.SEMI),
        (':', TT.COLON),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LSQB),
        (']', TT.RSQB),
    ]

    ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '"': '"',
        '\\': '\\',
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

        # Start of the token being scanned
        self.tok_line = 1
        self.tok_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_trivia()
        self.tok_line = self.line
        self.tok_column = self.column

        if self.pos >= len(self.source):
            return self.make(TT.EOF, '')

        ch = self.peek()

        if ch == '"':
            return self.scan_string()

        if is_digit(ch):
            return self.scan_number()

        if ch.isalpha() or ch == '_':
            return self.scan_identifier()

        return self.scan_operator()

    def __iter__(self):
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    def skip_trivia(self):
        """Skip whitespace and comments between tokens"""
        while self.pos < len(self.source):
            ch = self.peek()
            if ch in (' ', '\t', '\r', '\n'):
                self.advance()
            elif ch == '/' and self.peek(1) == '/':
                while self.pos < len(self.source) and self.peek() != '\n':
                    self.advance()
            else:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self) -> Tok:
        """Scan string literal "..." and decode its escapes"""
        self.advance()  # opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            if self.peek() == '\\':
                self.advance()
                esc = self.advance()
                value += self.ESCAPES.get(esc, '\\' + esc)
            else:
                value += self.advance()

        if self.pos >= len(self.source):
            return self.make(TT.ILLEGAL, '"' + value)

        self.advance()  # closing quote
        return self.make(TT.STRING, value)

    def scan_number(self) -> Tok:
        """Scan integer or float literal"""
        value = ''
        is_float = False

        # Integer part
        while is_digit(self.peek()):
            value += self.advance()

        # Decimal part
        if self.peek() == '.' and is_digit(self.peek(1)):
            is_float = True
            value += self.advance()  # .
            while is_digit(self.peek()):
                value += self.advance()

        # Scientific notation
        if self.peek() in ('e', 'E'):
            sign = 1 if self.peek(1) in ('+', '-') else 0
            if is_digit(self.peek(1 + sign)):
                is_float = True
                value += self.advance(1 + sign)
                while is_digit(self.peek()):
                    value += self.advance()

        return self.make(TT.FLOAT if is_float else TT.INT, value)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        value = ''
        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return self.make(token_type, value)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return self.make(op_type, op_str)

        return self.make(TT.ILLEGAL, self.advance())

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")

        result = ''
        for _ in range(n):
            if self.pos >= len(self.source):
                break
            ch = self.source[self.pos]
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def make(self, token_type: TT, value: str) -> Tok:
        """Build a token positioned at the start of the current scan"""
        return Tok(
            type=token_type,
            value=value,
            line=self.tok_line,
            column=self.tok_column,
        )


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source, EOF included"""
    return list(Lexer(source))
