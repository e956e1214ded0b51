"""
PHC Lexer
=========
Tokenizes PHC expression text into a flat stream of typed tokens.

Digits, letters, '.' and '_' all accumulate into one WORD buffer, so
numbers, variable names and function names share a single lexing rule.
The parser decides later which of the three a WORD is. Every other
non-space character flushes the buffer and becomes a one-character token.
The lexer never raises; malformed words are left for the parser to reject.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """All token types in a PHC expression."""
    WORD        = auto()   # 42, 3.14, x, sin, primeharm
    OPERATOR    = auto()   # + - * / ^ and any other single character
    LPAREN      = auto()   # (
    RPAREN      = auto()   # )
    COMMA       = auto()   # ,
    EOF         = auto()


@dataclass(frozen=True)
class Token:
    """A single token. `col` is 1-based and only used in error messages."""
    type: TokenType
    value: str
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, C{self.col})"


SINGLE_CHAR_TOKENS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "._"


class Lexer:
    """
    Tokenizes a PHC expression.

    Usage:
        tokens = Lexer("2 + sin(x)").tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _read_word(self) -> Token:
        start_col = self.pos + 1
        chars = []
        while self.pos < len(self.source) and is_word_char(self.source[self.pos]):
            chars.append(self._advance())
        return Token(TokenType.WORD, "".join(chars), start_col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source, ending with an EOF token."""
        tokens = list(self._iter_tokens())
        tokens.append(Token(TokenType.EOF, "", len(self.source) + 1))
        return tokens

    def _iter_tokens(self) -> Iterator[Token]:
        while self.pos < len(self.source):
            ch = self._current()

            if ch.isspace():
                self._advance()
                continue

            if is_word_char(ch):
                yield self._read_word()
                continue

            col = self.pos + 1
            self._advance()
            yield Token(SINGLE_CHAR_TOKENS.get(ch, TokenType.OPERATOR), ch, col)


def tokenize(text: str) -> list[Token]:
    """Tokenize `text` into a list of tokens ending with EOF."""
    return Lexer(text).tokenize()
