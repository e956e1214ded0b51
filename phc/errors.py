"""
PHC Errors
==========
Discriminated error kinds for the PHC engine.

Every failure raised by the tokenizer, parser, evaluators or session is a
PHCError subclass carrying an ErrorKind, so callers can branch on the
class or on `.kind` without inspecting message strings.
"""
from enum import Enum, auto


class ErrorKind(Enum):
    """Every way a PHC operation can fail."""
    LEXICAL_ANOMALY     = auto()
    PARSE_ERROR         = auto()
    UNDEFINED_VARIABLE  = auto()
    UNKNOWN_FUNCTION    = auto()
    ARGUMENT_COUNT      = auto()
    DOMAIN_ERROR        = auto()
    DIVISION_BY_ZERO    = auto()
    DEPTH_EXCEEDED      = auto()
    MISSING_PROPOSITION = auto()
    INTERNAL_ERROR      = auto()


class PHCError(Exception):
    """Base class for all PHC failures."""
    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class ParseError(PHCError):
    """Malformed grammar. Carries the offending fragment and its column."""
    kind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, fragment: str = "", col: int = 0):
        super().__init__(message)
        self.fragment = fragment
        self.col = col


class LexicalAnomaly(ParseError):
    """A lexeme that is neither a number, a name nor a known symbol.

    The lexer itself never raises; the parser raises this when it meets
    such a token, so it is also a ParseError.
    """
    kind = ErrorKind.LEXICAL_ANOMALY


class UndefinedVariable(PHCError):
    kind = ErrorKind.UNDEFINED_VARIABLE

    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class UnknownFunction(PHCError):
    kind = ErrorKind.UNKNOWN_FUNCTION

    def __init__(self, name: str):
        super().__init__(f"Unknown function: {name}")
        self.name = name


class ArgumentCountError(PHCError):
    """Too few arguments for a registered function."""
    kind = ErrorKind.ARGUMENT_COUNT

    def __init__(self, name: str, expected: int, given: int):
        super().__init__(
            f"Insufficient arguments for function: {name} "
            f"(expected {expected}, got {given})"
        )
        self.name = name
        self.expected = expected
        self.given = given


class DomainError(PHCError):
    """A function or operator applied outside its real domain."""
    kind = ErrorKind.DOMAIN_ERROR

    def __init__(self, name: str, value: float, message: str = ""):
        super().__init__(message or f"{name} domain error for {value!r}")
        self.name = name
        self.value = value


class DivisionByZero(PHCError):
    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)


class DepthExceeded(PHCError):
    """Nesting went past the configured maximum depth."""
    kind = ErrorKind.DEPTH_EXCEEDED

    def __init__(self, limit: int):
        super().__init__(f"Maximum nesting depth of {limit} exceeded")
        self.limit = limit


class MissingProposition(PHCError):
    kind = ErrorKind.MISSING_PROPOSITION

    def __init__(self, message: str = "Proposition cannot be None"):
        super().__init__(message)


class InternalError(PHCError):
    """A defect: an AST or proposition variant the engine does not know."""
    kind = ErrorKind.INTERNAL_ERROR
