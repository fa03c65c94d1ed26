"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTier",
]


class ErrorTier(StrEnum):
    """How the harness treats an error.

    Categories:
        REJECTION: Front-end refused the program (ordinary result, rc=0)
        INVARIANT: The fuzzing machinery itself is broken (abort the run)
        CAPABILITY: A stream was asked for something it cannot provide
    """

    REJECTION = "rejection"
    INVARIANT = "invariant"
    CAPABILITY = "capability"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Syntax rejections (reference parser)
        2000-2999: Semantic rejections (reference checker)
        3000-3999: Runtime rejections (interpreter boundary)
        4000-4999: Generator invariant violations
        5000-5999: Stream capability errors
    """

    # Syntax rejections (1000-1999)
    UNEXPECTED_TOKEN = 1001
    UNEXPECTED_EOF = 1002
    INVALID_LITERAL = 1003
    LEXER_ERROR = 1004
    NESTING_DEPTH_EXCEEDED = 1005

    # Semantic rejections (2000-2999)
    DUPLICATE_DECLARATION = 2001
    UNDECLARED_NAME = 2002
    CONSTANT_ASSIGNMENT = 2003
    CONTROL_FLOW_OUTSIDE_LOOP = 2004
    RETURN_OUTSIDE_FUNCTION = 2005
    INVALID_DECLARATION_PLACEMENT = 2006

    # Runtime rejections (3000-3999)
    INTERPRETER_FAILED = 3001

    # Generator invariant violations (4000-4999)
    IMPOSSIBLE_TOKEN_PAIR = 4001
    ILLEGAL_REVERT = 4002
    INVALID_RANGE = 4003
    RECONSTRUCTION_MISMATCH = 4004

    # Stream capability errors (5000-5999)
    INPUT_UNSUPPORTED = 5001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        tier: How the harness classifies the error
        position: Token index or character offset the error refers to
        hint: Suggestion for finding the cause
    """

    code: DiagnosticCode
    message: str
    tier: ErrorTier = ErrorTier.REJECTION
    position: int | None = None
    hint: str | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Example output:
            error[ILLEGAL_REVERT]: Illegal forward revert to 7 from cursor 3
              --> position 7
              = help: Only positions previously returned by cursor() may be restored

        Returns:
            Formatted error message
        """
        lines = [f"error[{self.code.name}]: {_escape(self.message)}"]
        if self.position is not None:
            lines.append(f"  --> position {self.position}")
        if self.hint:
            lines.append(f"  = help: {_escape(self.hint)}")
        return "\n".join(lines)


def _escape(text: str) -> str:
    """Escape control characters so diagnostics stay on their own lines."""
    return text.replace("\r", "\\r").replace("\n", "\\n").replace("\x00", "\\x00")
