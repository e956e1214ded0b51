# PHC: Prime Harmonics Calculus expression engine
"""
PHC: a small symbolic-expression language.
Tokenizer, precedence parser, numeric evaluator and proposition logic.
"""
from .errors import (
    ErrorKind, PHCError, LexicalAnomaly, ParseError, UndefinedVariable,
    UnknownFunction, ArgumentCountError, DomainError, DivisionByZero,
    DepthExceeded, MissingProposition, InternalError,
)
from .reporter import Reporter, ConsoleReporter, RecordingReporter, LoggingReporter
from .config import EngineConfig
from .lexer import Lexer, Token, TokenType, tokenize
from .parser import (
    Parser, ASTNode, LiteralNode, VariableNode, BinaryOpNode, CallNode,
    BinaryOperator, parse,
)
from .functions import FunctionInfo, FunctionRegistry, default_registry
from .evaluator import Evaluator, Scope, assign, evaluate, evaluate_function, is_true
from .logic import (
    Proposition, PropositionType, PropositionEvaluator,
    evaluate_proposition, parse_proposition,
)
from .session import Session

__version__ = "0.1.0"
__all__ = [
    "ErrorKind", "PHCError", "LexicalAnomaly", "ParseError", "UndefinedVariable",
    "UnknownFunction", "ArgumentCountError", "DomainError", "DivisionByZero",
    "DepthExceeded", "MissingProposition", "InternalError",
    "Reporter", "ConsoleReporter", "RecordingReporter", "LoggingReporter",
    "EngineConfig",
    "Lexer", "Token", "TokenType", "tokenize",
    "Parser", "ASTNode", "LiteralNode", "VariableNode", "BinaryOpNode", "CallNode",
    "BinaryOperator", "parse",
    "FunctionInfo", "FunctionRegistry", "default_registry",
    "Evaluator", "Scope", "assign", "evaluate", "evaluate_function", "is_true",
    "Proposition", "PropositionType", "PropositionEvaluator",
    "evaluate_proposition", "parse_proposition",
    "Session",
]
