## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field

import lark
from .errors import JawaSyntaxError


GRAMMAR = r"""start: (IDENTIFIER | NUMBER | STRING | PLUS | MINUS | STAR | SLASH | PERCENT
        | DOT | COMMA | SEMICOLON | ASSIGN | LPAREN | RPAREN | LBRACE | RBRACE | LBRACKET | RBRACKET)*

// COMMENTS
LINE_COMMENT.3: /\/\/[^\r\n]*/
BLOCK_COMMENT.3: /\/\*.*?\*\//s

// TOKENS
IDENTIFIER: /[A-Za-z_$][A-Za-z0-9_$]*/
NUMBER: /\d+(?:\.\d+)?/
STRING: /"[^"]*"/
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
PERCENT: "%"
DOT: "."
COMMA: ","
SEMICOLON: ";"
ASSIGN: "="
LPAREN: "("
RPAREN: ")"
LBRACE: "{"
RBRACE: "}"
LBRACKET: "["
RBRACKET: "]"

// WHITESPACE
%import common.WS
%ignore WS
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""

KEYWORDS = frozenset({'class', 'import', 'new', 'if', 'else', 'while', 'for', 'return', 'true', 'false'})


@dataclass(frozen=True)
class Token:
    kind: str                     # IDENTIFIER, NUMBER, STRING, KEYWORD or a symbol name like DOT
    text: str                     # literal text, without quotes for strings
    keyword: str | None = None    # set only for KEYWORD tokens
    meta: dict = field(default_factory=dict, compare=False, hash=False)

    def is_keyword(self, name: str) -> bool:
        return self.kind == 'KEYWORD' and self.keyword == name

    def __repr__(self):
        return f"{self.kind}({self.text!r})"


_LARK = None

def _lark() -> lark.Lark:
    global _LARK
    if _LARK is None:
        _LARK = lark.Lark(GRAMMAR, parser='lalr', lexer='basic')
    return _LARK


def _convert(tok: lark.Token, filename: str | None) -> Token:
    meta = {'filename': filename, 'line': tok.line, 'column': tok.column, 'width': len(tok.value)}
    match tok.type:
        case 'IDENTIFIER' if tok.value in KEYWORDS:
            return Token('KEYWORD', tok.value, tok.value, meta)
        case 'STRING':
            return Token('STRING', tok.value[1:-1], None, meta)
        case _:
            return Token(tok.type, tok.value, None, meta)


def tokenize(source: str, filename: str | None = None) -> list[Token]:
    """Split source text into the list of tokens consumed by the parser."""
    try:
        return [_convert(tok, filename) for tok in _lark().lex(source)]
    except lark.exceptions.UnexpectedCharacters as exc:
        char = source[exc.pos_in_stream] if exc.pos_in_stream < len(source) else ''
        raise JawaSyntaxError(f"Unexpected character {char!r} at line {exc.line}, column {exc.column}.",
                              filename=filename, line=exc.line, column=exc.column, token=char, found=char) from None
