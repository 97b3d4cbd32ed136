# src/gencad/parser/__init__.py
from .tokenizer import KeywordParam, RawSection, tokenize
from .state_machine import Candidate, FieldMode, FieldRule, RecordSchema, RecordStateMachine
from .exceptions import (
    BaseParsingError,
    GrammarError,
    MissingFieldError,
    StructuralError,
    TokenizationError,
    UnexpectedKeywordError,
)

__all__ = [
    # Tokenizer
    "KeywordParam",
    "RawSection",
    "tokenize",
    # Record State Machine
    "Candidate",
    "FieldMode",
    "FieldRule",
    "RecordSchema",
    "RecordStateMachine",
    # Exceptions
    "BaseParsingError",
    "GrammarError",
    "MissingFieldError",
    "StructuralError",
    "TokenizationError",
    "UnexpectedKeywordError",
]
