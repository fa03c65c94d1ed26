"""Diagnostic system for structfuzz errors.

Provides structured error diagnostics with codes, tiers and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorTier
from .errors import (
    CheckerError,
    GeneratorInvariantError,
    IllegalRevertError,
    ImpossibleTokenPairError,
    InterpreterError,
    InvalidRangeError,
    NestingDepthError,
    ParserError,
    ReconstructionMismatchError,
    RejectedInputError,
    StructFuzzError,
    UnsupportedInputError,
)
from .templates import ErrorTemplate

__all__ = [
    "CheckerError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "ErrorTier",
    "GeneratorInvariantError",
    "IllegalRevertError",
    "ImpossibleTokenPairError",
    "InterpreterError",
    "InvalidRangeError",
    "NestingDepthError",
    "ParserError",
    "ReconstructionMismatchError",
    "RejectedInputError",
    "StructFuzzError",
    "UnsupportedInputError",
]
