"""prompt_toolkit lexer for live Monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as MonkeyTokenizer
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "builtin": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.FN: "keyword",
    TT.LET: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.RETURN: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.FLOAT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.ILLEGAL: "error",
    TT.ASSIGN: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.BANG: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
    TT.COLON: "punctuation",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
}


def _gap_style(gap: str) -> str:
    return GROUP_STYLE["comment"] if gap.lstrip().startswith("//") else ""


def highlight_line(text: str, builtins: frozenset = frozenset()) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    lexer = MonkeyTokenizer(text)
    result: StyleAndTextTuples = []
    pos = 0

    while True:
        tok = lexer.next_token()
        if tok.type == TT.EOF:
            break

        start = tok.column - 1
        end = lexer.pos

        # Unstyled (or comment) gap before token.
        if start > pos:
            gap = text[pos:start]
            result.append((_gap_style(gap), gap))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type == TT.IDENT and tok.value in builtins:
            group = "builtin"
        result.append((GROUP_STYLE.get(group, ""), text[start:end]))
        pos = end

    # Trailing text (whitespace or a comment).
    if pos < len(text):
        tail = text[pos:]
        result.append((_gap_style(tail), tail))

    return result if result else [("", text)]


class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monkey source using the RD lexer."""

    def __init__(self, builtins: frozenset = frozenset()):
        self.builtins = builtins

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno], self.builtins)
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
