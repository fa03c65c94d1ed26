"""Tests for diagnostic codes, templates and the exception hierarchy."""

from __future__ import annotations

import pytest

from structfuzz.diagnostics import (
    CheckerError,
    Diagnostic,
    DiagnosticCode,
    ErrorTemplate,
    ErrorTier,
    GeneratorInvariantError,
    IllegalRevertError,
    InvalidRangeError,
    NestingDepthError,
    ParserError,
    RejectedInputError,
    StructFuzzError,
    UnsupportedInputError,
)

# ============================================================================
# DIAGNOSTIC FORMATTING
# ============================================================================


class TestDiagnostic:
    """Test Diagnostic rendering."""

    def test_format_error_full(self) -> None:
        """Code, position and hint each get a line."""
        diagnostic = ErrorTemplate.illegal_revert(7, 3)
        assert diagnostic.format_error() == (
            "error[ILLEGAL_REVERT]: Illegal forward revert to 7 from cursor 3\n"
            "  --> position 7\n"
            "  = help: Only positions previously returned by cursor() may be restored"
        )
        assert diagnostic.tier is ErrorTier.INVARIANT

    def test_format_error_minimal(self) -> None:
        """No position, no hint: a single line."""
        diagnostic = Diagnostic(code=DiagnosticCode.LEXER_ERROR, message="bad")
        assert diagnostic.format_error() == "error[LEXER_ERROR]: bad"
        assert str(diagnostic) == "bad"
        assert diagnostic.tier is ErrorTier.REJECTION

    def test_control_characters_escaped(self) -> None:
        """Newlines in messages cannot break the one-line header."""
        diagnostic = Diagnostic(code=DiagnosticCode.LEXER_ERROR, message="a\nb\r\x00")
        assert diagnostic.format_error() == "error[LEXER_ERROR]: a\\nb\\r\\x00"

    def test_reconstruction_mismatch_offset(self) -> None:
        """Position points at the first differing character."""
        assert ErrorTemplate.reconstruction_mismatch("let x", "let y").position == 4
        assert ErrorTemplate.reconstruction_mismatch("ab", "abc").position == 2

    def test_codes_unique(self) -> None:
        """Every code has its own number."""
        values = [code.value for code in DiagnosticCode]
        assert len(values) == len(set(values))


# ============================================================================
# EXCEPTION HIERARCHY
# ============================================================================


class TestHierarchy:
    """Test how exceptions classify."""

    def test_diagnostic_attached(self) -> None:
        """Diagnostic-built errors carry it and format their message."""
        diagnostic = ErrorTemplate.unexpected_eof(4)
        error = ParserError(diagnostic, position=4)
        assert error.diagnostic is diagnostic
        assert error.position == 4
        assert str(error) == diagnostic.format_error()

    def test_plain_message(self) -> None:
        """String-built errors have no diagnostic."""
        error = CheckerError("plain")
        assert error.diagnostic is None
        assert str(error) == "plain"

    def test_parser_position_default(self) -> None:
        """Position defaults to -1."""
        assert ParserError("x").position == -1

    @pytest.mark.parametrize("cls", [ParserError, NestingDepthError, CheckerError])
    def test_rejections(self, cls: type[StructFuzzError]) -> None:
        """Front-end refusals are rejections, not invariant violations."""
        assert issubclass(cls, RejectedInputError)
        assert not issubclass(cls, GeneratorInvariantError)

    def test_invariant_errors(self) -> None:
        """Generator defects stay apart from rejections."""
        assert issubclass(IllegalRevertError, GeneratorInvariantError)
        assert not issubclass(IllegalRevertError, RejectedInputError)

    def test_builtin_bases(self) -> None:
        """Range and capability errors also match their builtin counterparts."""
        with pytest.raises(ValueError, match="INVALID_RANGE"):
            raise InvalidRangeError(ErrorTemplate.invalid_range(0, 8))
        with pytest.raises(NotImplementedError, match="cannot reconstruct"):
            raise UnsupportedInputError(ErrorTemplate.input_unsupported("TableTokenStream"))
