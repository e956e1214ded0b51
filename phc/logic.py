"""
PHC Logic
=========
Boolean propositions built from atoms and NOT / AND / OR / IMPLIES, and
their recursive evaluator.

Propositions are normally built directly:
    p = Proposition.implies(Proposition.atomic(False), Proposition.atomic(True))
    PropositionEvaluator().evaluate(p)   # True

`parse_proposition` adds a small text front-end for the REPL's `prop`
command:  true -> (false or not false)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .config import DEFAULT_CONFIG
from .errors import DepthExceeded, InternalError, MissingProposition, ParseError, PHCError
from .lexer import Token, TokenType, tokenize
from .reporter import NULL_REPORTER, Reporter


class PropositionType(Enum):
    ATOMIC  = auto()
    NOT     = auto()
    AND     = auto()
    OR      = auto()
    IMPLIES = auto()


BINARY_TYPES = (PropositionType.AND, PropositionType.OR, PropositionType.IMPLIES)

_SYMBOLS = {
    PropositionType.AND: "∧",
    PropositionType.OR: "∨",
    PropositionType.IMPLIES: "→",
}


@dataclass(frozen=True)
class Proposition:
    """
    A boolean proposition tree.

    Exactly the fields of its type are set:
      - ATOMIC:             value
      - NOT:                operand
      - AND / OR / IMPLIES: left, right
    Each compound proposition owns its subtrees; trees are never shared
    or cyclic when built through the factories.
    """
    type: PropositionType
    value: bool | None = None
    operand: Proposition | None = None
    left: Proposition | None = None
    right: Proposition | None = None

    def __post_init__(self):
        if self.type == PropositionType.ATOMIC:
            if not isinstance(self.value, bool):
                raise ValueError("ATOMIC proposition requires a boolean value")
            if self.operand is not None or self.left is not None or self.right is not None:
                raise ValueError("ATOMIC proposition takes no operands")
        elif self.type == PropositionType.NOT:
            if self.value is not None or self.left is not None or self.right is not None:
                raise ValueError("NOT proposition takes a single operand")
        elif self.type in BINARY_TYPES:
            if self.value is not None or self.operand is not None:
                raise ValueError(f"{self.type.name} proposition takes left and right operands")

    @classmethod
    def atomic(cls, value: bool) -> Proposition:
        return cls(PropositionType.ATOMIC, value=value)

    @classmethod
    def negate(cls, operand: Proposition) -> Proposition:
        return cls(PropositionType.NOT, operand=operand)

    @classmethod
    def conjoin(cls, left: Proposition, right: Proposition) -> Proposition:
        return cls(PropositionType.AND, left=left, right=right)

    @classmethod
    def disjoin(cls, left: Proposition, right: Proposition) -> Proposition:
        return cls(PropositionType.OR, left=left, right=right)

    @classmethod
    def implies(cls, left: Proposition, right: Proposition) -> Proposition:
        return cls(PropositionType.IMPLIES, left=left, right=right)

    def __str__(self) -> str:
        if self.type == PropositionType.ATOMIC:
            return "true" if self.value else "false"
        if self.type == PropositionType.NOT:
            return f"¬({self.operand})"
        symbol = _SYMBOLS.get(self.type, str(self.type))
        return f"({self.left} {symbol} {self.right})"


# ─────────────────────────────────────────────────────────────
#  Evaluator
# ─────────────────────────────────────────────────────────────

class PropositionEvaluator:
    """
    Recursive truth evaluation.

    AND and OR evaluate both operands before combining them; nothing is
    short-circuited.
    """

    def __init__(self, reporter: Reporter | None = None,
                 max_depth: int = DEFAULT_CONFIG.max_depth):
        self.reporter = reporter or NULL_REPORTER
        self.max_depth = max_depth

    def evaluate(self, proposition: Proposition | None) -> bool:
        if proposition is None:
            self.reporter.error("Attempted to evaluate a missing proposition")
            raise MissingProposition()
        try:
            return self._evaluate(proposition, 1)
        except PHCError as e:
            kind = getattr(proposition, "type", type(proposition).__name__)
            kind = getattr(kind, "name", kind)
            self.reporter.error(f"Error evaluating {kind} proposition: {e}")
            raise

    def _evaluate(self, proposition: Proposition | None, depth: int) -> bool:
        if proposition is None:
            raise MissingProposition("Proposition operand is missing")
        if depth > self.max_depth:
            raise DepthExceeded(self.max_depth)
        if not isinstance(proposition, Proposition):
            raise InternalError(f"Unsupported proposition: {proposition!r}")

        match proposition.type:
            case PropositionType.ATOMIC:
                return proposition.value
            case PropositionType.NOT:
                return not self._evaluate(proposition.operand, depth + 1)
            case PropositionType.AND:
                left = self._evaluate(proposition.left, depth + 1)
                right = self._evaluate(proposition.right, depth + 1)
                return left and right
            case PropositionType.OR:
                left = self._evaluate(proposition.left, depth + 1)
                right = self._evaluate(proposition.right, depth + 1)
                return left or right
            case PropositionType.IMPLIES:
                left = self._evaluate(proposition.left, depth + 1)
                right = self._evaluate(proposition.right, depth + 1)
                return not left or right
            case _:
                raise InternalError(f"Unsupported proposition type: {proposition.type!r}")


def evaluate_proposition(proposition: Proposition | None) -> bool:
    """Evaluate with a silent reporter and the default depth limit."""
    return PropositionEvaluator().evaluate(proposition)


# ─────────────────────────────────────────────────────────────
#  Text Front-End
# ─────────────────────────────────────────────────────────────

TRUE_WORDS = {"true", "1"}
FALSE_WORDS = {"false", "0"}
NOT_TOKENS = {"not", "!", "¬"}
AND_TOKENS = {"and", "&", "∧"}
OR_TOKENS = {"or", "|", "∨"}
IMPLIES_TOKENS = {"implies", "→"}


class PropositionParser:
    """
    Parses textual propositions, loosest binding first:
        implication := disjunction [ ('->' | 'implies') implication ]
        disjunction := conjunction ( 'or' conjunction )*
        conjunction := negation ( 'and' negation )*
        negation    := 'not' negation | atom
        atom        := 'true' | 'false' | '1' | '0' | '(' implication ')'
    Implication is right-associative; keywords are case-insensitive.
    """

    def __init__(self, tokens: list[Token], max_depth: int = DEFAULT_CONFIG.max_depth):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _at(self, words: set[str]) -> bool:
        token = self._current()
        return token.type in (TokenType.WORD, TokenType.OPERATOR) and token.value.lower() in words

    def _at_arrow(self) -> bool:
        token = self._current()
        nxt = self.tokens[min(self.pos + 1, len(self.tokens) - 1)]
        return (token.type == TokenType.OPERATOR and token.value == "-"
                and nxt.type == TokenType.OPERATOR and nxt.value == ">")

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise DepthExceeded(self.max_depth)

    def parse(self) -> Proposition:
        if self._current().type == TokenType.EOF:
            raise ParseError("Empty proposition")
        result = self._parse_implication()
        token = self._current()
        if token.type != TokenType.EOF:
            raise ParseError(f"Unexpected trailing input: {token.value!r}", token.value, token.col)
        return result

    def _parse_implication(self) -> Proposition:
        left = self._parse_disjunction()
        if self._at_arrow():
            self._advance()
            self._advance()
        elif self._at(IMPLIES_TOKENS):
            self._advance()
        else:
            return left
        self._enter()
        try:
            right = self._parse_implication()
        finally:
            self.depth -= 1
        return Proposition.implies(left, right)

    def _parse_disjunction(self) -> Proposition:
        node = self._parse_conjunction()
        while self._at(OR_TOKENS):
            self._advance()
            node = Proposition.disjoin(node, self._parse_conjunction())
        return node

    def _parse_conjunction(self) -> Proposition:
        node = self._parse_negation()
        while self._at(AND_TOKENS):
            self._advance()
            node = Proposition.conjoin(node, self._parse_negation())
        return node

    def _parse_negation(self) -> Proposition:
        if not self._at(NOT_TOKENS):
            return self._parse_atom()
        self._advance()
        self._enter()
        try:
            return Proposition.negate(self._parse_negation())
        finally:
            self.depth -= 1

    def _parse_atom(self) -> Proposition:
        token = self._current()
        if token.type == TokenType.EOF:
            raise ParseError("Unexpected end of proposition", "", token.col)
        if token.type == TokenType.LPAREN:
            self._advance()
            self._enter()
            try:
                inner = self._parse_implication()
            finally:
                self.depth -= 1
            if self._current().type != TokenType.RPAREN:
                closing = self._current()
                raise ParseError("Missing closing parenthesis", closing.value, closing.col)
            self._advance()
            return inner
        if token.type == TokenType.WORD:
            word = token.value.lower()
            if word in TRUE_WORDS:
                self._advance()
                return Proposition.atomic(True)
            if word in FALSE_WORDS:
                self._advance()
                return Proposition.atomic(False)
        raise ParseError(f"Unrecognized token: {token.value!r}", token.value, token.col)


def parse_proposition(text: str, max_depth: int = DEFAULT_CONFIG.max_depth) -> Proposition:
    """Parse a textual proposition. Raises ParseError when malformed."""
    return PropositionParser(tokenize(text), max_depth=max_depth).parse()
