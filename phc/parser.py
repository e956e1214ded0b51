"""
PHC Parser
==========
Recursive-descent parser that builds an Abstract Syntax Tree (AST)
from the token stream produced by the Lexer.

Grammar, loosest binding first:
    expression     := addition
    addition       := multiplication ( ('+' | '-') multiplication )*
    multiplication := power ( ('*' | '/') power )*
    power          := factor ( '^' factor )*
    factor         := NUMBER | VARIABLE | FUNCTION '(' arglist ')' | '(' expression ')'
    arglist        := [ expression (',' expression)* ]

Every binary operator is left-associative, '^' included, so 2^3^2 is
(2^3)^2. The first error aborts the parse; no partial tree is returned.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable

from .config import DEFAULT_CONFIG
from .errors import DepthExceeded, LexicalAnomaly, ParseError, PHCError
from .lexer import Token, TokenType, tokenize
from .reporter import NULL_REPORTER, Reporter


# ─────────────────────────────────────────────────────────────
#  AST Node Types
# ─────────────────────────────────────────────────────────────

class BinaryOperator(Enum):
    """Binary operators and their source symbols."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> BinaryOperator:
        for op in cls:
            if op.value == symbol:
                return op
        raise ValueError(f"Unknown operator: {symbol}")


OPERATOR_SYMBOLS = frozenset(op.value for op in BinaryOperator)


def format_number(value: float) -> str:
    """Render integral floats without a trailing .0."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes. `col` is informational only."""
    node_type: ClassVar[str] = ""
    col: int = field(default=0, kw_only=True, compare=False)


@dataclass(frozen=True)
class LiteralNode(ASTNode):
    """A numeric literal."""
    node_type: ClassVar[str] = "Literal"
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class VariableNode(ASTNode):
    """A name resolved against a Scope at evaluation time."""
    node_type: ClassVar[str] = "Variable"
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BinaryOpNode(ASTNode):
    """left <operator> right. Each subtree is owned by this node alone."""
    node_type: ClassVar[str] = "BinaryOp"
    operator: BinaryOperator
    left: ASTNode
    right: ASTNode

    def __str__(self) -> str:
        return f"({self.left} {self.operator.symbol} {self.right})"


@dataclass(frozen=True)
class CallNode(ASTNode):
    """A named function applied to argument subtrees.

    Arity is not checked here; the evaluator validates it against the
    function registry.
    """
    node_type: ClassVar[str] = "Call"
    func_name: str
    args: tuple[ASTNode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def __str__(self) -> str:
        return f"{self.func_name}({', '.join(str(a) for a in self.args)})"


# ─────────────────────────────────────────────────────────────
#  Token Classification
# ─────────────────────────────────────────────────────────────

NUMBER_RE = re.compile(r"[0-9]*\.?[0-9]+")
IDENTIFIER_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def is_number(word: str) -> bool:
    return NUMBER_RE.fullmatch(word) is not None


def is_identifier(word: str) -> bool:
    return IDENTIFIER_RE.fullmatch(word) is not None


# ─────────────────────────────────────────────────────────────
#  Parser
# ─────────────────────────────────────────────────────────────

class Parser:
    """
    Recursive-descent parser for PHC expressions.

    Usage:
        parser = Parser(tokenize("2 + 3 * x"))
        ast = parser.parse()

    `parse()` returns None when the token stream holds no expression at
    all; callers must treat that as a failure (the module-level `parse`
    does). `function_names`, when given, is the set of known function
    names: such a name must be followed by '('. Unknown names followed by
    '(' still parse as calls and fail at evaluation time.
    """

    def __init__(self, tokens: list[Token],
                 max_depth: int = DEFAULT_CONFIG.max_depth,
                 reporter: Reporter | None = None,
                 function_names: Iterable[str] | None = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            tokens = list(tokens) + [Token(TokenType.EOF, "", 0)]
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth
        self.reporter = reporter or NULL_REPORTER
        self.function_names = (
            {name.lower() for name in function_names}
            if function_names is not None else None
        )

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _at_operator(self, symbols: str) -> bool:
        token = self._current()
        return token.type == TokenType.OPERATOR and token.value in symbols

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise DepthExceeded(self.max_depth)

    def _leave(self):
        self.depth -= 1

    # ─────────────────────────────────────────────────────────
    #  Top-Level Parsing
    # ─────────────────────────────────────────────────────────

    def parse(self) -> ASTNode | None:
        """Parse the whole token stream into a single expression tree."""
        if self._current().type == TokenType.EOF:
            return None
        try:
            node = self._parse_expression()
            token = self._current()
            if token.type == TokenType.OPERATOR and token.value not in OPERATOR_SYMBOLS:
                raise LexicalAnomaly(
                    f"Unrecognized token: {token.value!r}", token.value, token.col
                )
            if token.type != TokenType.EOF:
                raise ParseError(
                    f"Unexpected trailing input: {token.value!r}", token.value, token.col
                )
        except PHCError as e:
            self.reporter.error(f"Failed to parse expression: {e}")
            raise
        return node

    # ─────────────────────────────────────────────────────────
    #  Precedence Levels
    # ─────────────────────────────────────────────────────────

    def _parse_expression(self) -> ASTNode:
        return self._parse_addition()

    def _parse_addition(self) -> ASTNode:
        node = self._parse_multiplication()
        while self._at_operator("+-"):
            op = self._advance()
            right = self._parse_multiplication()
            node = BinaryOpNode(BinaryOperator.from_symbol(op.value), node, right, col=op.col)
        return node

    def _parse_multiplication(self) -> ASTNode:
        node = self._parse_power()
        while self._at_operator("*/"):
            op = self._advance()
            right = self._parse_power()
            node = BinaryOpNode(BinaryOperator.from_symbol(op.value), node, right, col=op.col)
        return node

    def _parse_power(self) -> ASTNode:
        node = self._parse_factor()
        while self._at_operator("^"):
            op = self._advance()
            right = self._parse_factor()
            node = BinaryOpNode(BinaryOperator.POW, node, right, col=op.col)
        return node

    # ─────────────────────────────────────────────────────────
    #  Factors
    # ─────────────────────────────────────────────────────────

    def _parse_factor(self) -> ASTNode:
        """Parse a number, variable, function call or parenthesized group."""
        token = self._current()

        if token.type == TokenType.EOF:
            raise ParseError("Unexpected end of expression", "", token.col)

        if token.type == TokenType.LPAREN:
            return self._parse_group()

        if token.type == TokenType.WORD:
            self._advance()
            word = token.value
            if is_number(word):
                return LiteralNode(float(word), col=token.col)
            if is_identifier(word):
                if self._current().type == TokenType.LPAREN:
                    return self._parse_call(token)
                if self.function_names is not None and word.lower() in self.function_names:
                    raise ParseError(
                        f"Expected '(' after function name {word!r}", word, token.col
                    )
                return VariableNode(word, col=token.col)
            raise LexicalAnomaly(f"Unrecognized token: {word!r}", word, token.col)

        if token.type == TokenType.OPERATOR and token.value not in OPERATOR_SYMBOLS:
            raise LexicalAnomaly(f"Unrecognized token: {token.value!r}", token.value, token.col)

        raise ParseError(f"Unrecognized token: {token.value!r}", token.value, token.col)

    def _parse_group(self) -> ASTNode:
        open_token = self._advance()  # consume (
        self._enter()
        try:
            inner = self._parse_expression()
        finally:
            self._leave()
        token = self._current()
        if token.type != TokenType.RPAREN:
            raise ParseError(
                f"Missing closing parenthesis for '(' at column {open_token.col}",
                token.value, token.col,
            )
        self._advance()
        return inner

    def _parse_call(self, name_token: Token) -> CallNode:
        """Parse `name(arg, arg, ...)`; the name has already been consumed."""
        self._advance()  # consume (
        args: list[ASTNode] = []
        if self._current().type == TokenType.RPAREN:
            self._advance()
            return CallNode(name_token.value, (), col=name_token.col)

        self._enter()
        try:
            while True:
                args.append(self._parse_expression())
                token = self._current()
                if token.type == TokenType.RPAREN:
                    self._advance()
                    break
                if token.type == TokenType.COMMA:
                    self._advance()
                    continue
                if token.type == TokenType.EOF:
                    raise ParseError(
                        f"Missing closing parenthesis in call to {name_token.value!r}",
                        name_token.value, token.col,
                    )
                raise ParseError(
                    f"Malformed function argument list in call to {name_token.value!r}",
                    token.value, token.col,
                )
        finally:
            self._leave()
        return CallNode(name_token.value, tuple(args), col=name_token.col)


def parse(text: str, max_depth: int = DEFAULT_CONFIG.max_depth,
          reporter: Reporter | None = None,
          function_names: Iterable[str] | None = None) -> ASTNode:
    """Parse `text` into an AST. Raises ParseError on any failure, including empty input."""
    node = Parser(
        tokenize(text), max_depth=max_depth,
        reporter=reporter, function_names=function_names,
    ).parse()
    if node is None:
        if reporter is not None:
            reporter.error("Failed to parse expression: empty input")
        raise ParseError("Empty expression", text, 0)
    return node
