"""structfuzz exception hierarchy with structured diagnostics.

Three tiers, mirroring how the harness reacts:

1. RejectedInputError - the front-end refused the program. Ordinary
   result (rc=0), never a finding.
2. GeneratorInvariantError - the fuzzing machinery produced input no real
   front-end stage could ever see. Aborts the run loudly.
3. Anything else escaping a stage - a real crash, handled at the process
   boundary by the reproducer and crash reporter.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class StructFuzzError(Exception):
    """Base exception for all structfuzz errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize StructFuzzError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


# ============================================================================
# TIER 1: EXPECTED REJECTIONS
# ============================================================================


class RejectedInputError(StructFuzzError):
    """Front-end stage refused the program.

    Not a bug. The harness maps these to rc=0.
    """


class ParserError(RejectedInputError):
    """Syntax error reported by the parser.

    Attributes:
        position: Index of the offending token in the stream (or -1)
    """

    def __init__(self, message: str | Diagnostic, *, position: int = -1) -> None:
        """Initialize ParserError.

        Args:
            message: Error message string OR Diagnostic object
            position: Index of the offending token in the stream
        """
        super().__init__(message)
        self.position = position


class NestingDepthError(ParserError):
    """Input nests deeper than the parser allows.

    Raised instead of letting the parser hit RecursionError, which would be
    indistinguishable from a genuine crash.
    """


class CheckerError(RejectedInputError):
    """Semantic error reported by the checker."""


class InterpreterError(RejectedInputError):
    """Runtime error reported by the interpreter."""


# ============================================================================
# TIER 2: GENERATOR INVARIANT VIOLATIONS
# ============================================================================


class GeneratorInvariantError(StructFuzzError):
    """The fuzzing system violated one of its own invariants.

    Signals a defect in a generator or stream decorator, not a finding in
    the front-end under test.
    """


class ImpossibleTokenPairError(GeneratorInvariantError):
    """Two adjacent tokens that no lexer run can produce."""


class IllegalRevertError(GeneratorInvariantError):
    """Seekable stream asked to revert to a position ahead of its cursor."""


class InvalidRangeError(GeneratorInvariantError, ValueError):
    """Fuzzbits asked for a choice out of a non-positive range."""


class ReconstructionMismatchError(GeneratorInvariantError):
    """Reconstructed source text differs from the expected golden text."""


# ============================================================================
# CAPABILITY
# ============================================================================


class UnsupportedInputError(StructFuzzError, NotImplementedError):
    """Stream cannot reconstruct its source text.

    Pure generators raise this rather than returning a wrong string.
    """
