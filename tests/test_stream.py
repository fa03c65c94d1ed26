"""Tests for token stream protocols and seekable buffers."""

from __future__ import annotations

import pytest

from structfuzz.diagnostics import (
    DiagnosticCode,
    GeneratorInvariantError,
    IllegalRevertError,
    UnsupportedInputError,
)
from structfuzz.syntax import (
    EOF_TOKEN,
    CannedTokenStream,
    DelegatingSeekableTokenStream,
    SeekableTokenStream,
    Token,
    TokenStream,
    TokenType,
    make_seekable,
)

A = Token(TokenType.IDENTIFIER, "a")
B = Token(TokenType.IDENTIFIER, "b")
C = Token(TokenType.IDENTIFIER, "c")


class CountingStream:
    """Plain token stream that records how often it was asked."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = list(tokens)
        self.calls = 0

    def next(self) -> Token:
        self.calls += 1
        if self.tokens:
            return self.tokens.pop(0)
        return EOF_TOKEN

    def input(self) -> str:
        return "counted"


# ============================================================================
# CANNED STREAM
# ============================================================================


class TestCannedTokenStream:
    """Test the fixed-list seekable stream."""

    def test_returns_tokens_then_eof_forever(self) -> None:
        """EOF repeats once the list is used up."""
        stream = CannedTokenStream([A, B])
        assert [stream.next() for _ in range(5)] == [A, B, EOF_TOKEN, EOF_TOKEN, EOF_TOKEN]

    def test_cursor_stops_at_eof(self) -> None:
        """Reading EOF does not move the cursor."""
        stream = CannedTokenStream([A])
        stream.next()
        stream.next()
        stream.next()
        assert stream.cursor() == 1

    def test_revert_replays_tokens(self) -> None:
        """Reverting rewinds to an earlier cursor."""
        stream = CannedTokenStream([A, B, C])
        stream.next()
        mark = stream.cursor()
        assert stream.next() == B
        assert stream.next() == C
        stream.revert(mark)
        assert stream.next() == B

    def test_revert_to_current_cursor_is_noop(self) -> None:
        """Reverting to the current position changes nothing."""
        stream = CannedTokenStream([A, B])
        stream.next()
        stream.revert(stream.cursor())
        assert stream.next() == B

    def test_forward_revert_is_fatal(self) -> None:
        """Reverting ahead of the cursor raises IllegalRevertError."""
        stream = CannedTokenStream([A, B, C])
        stream.next()
        with pytest.raises(IllegalRevertError) as exc_info:
            stream.revert(3)
        assert isinstance(exc_info.value, GeneratorInvariantError)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.ILLEGAL_REVERT

    def test_input_returns_source(self) -> None:
        """A stream built from source text hands that text back."""
        assert CannedTokenStream([A], "a").input() == "a"

    def test_input_without_source_unsupported(self) -> None:
        """Without a source, input() refuses instead of guessing."""
        with pytest.raises(UnsupportedInputError):
            CannedTokenStream([A]).input()

    def test_protocols(self) -> None:
        """CannedTokenStream is a seekable token stream."""
        stream = CannedTokenStream([])
        assert isinstance(stream, TokenStream)
        assert isinstance(stream, SeekableTokenStream)


# ============================================================================
# DELEGATING STREAM
# ============================================================================


class TestDelegatingSeekableTokenStream:
    """Test buffering over a plain stream."""

    def test_delegate_asked_once_per_token(self) -> None:
        """Backtracking replays from the buffer, not from the delegate."""
        delegate = CountingStream([A, B, C])
        stream = DelegatingSeekableTokenStream(delegate)
        stream.next()
        stream.next()
        stream.revert(0)
        assert [stream.next(), stream.next(), stream.next()] == [A, B, C]
        assert delegate.calls == 3

    def test_eof_buffered_once(self) -> None:
        """Repeated EOF reads do not hit the delegate again."""
        delegate = CountingStream([])
        stream = DelegatingSeekableTokenStream(delegate)
        for _ in range(4):
            assert stream.next() == EOF_TOKEN
        assert delegate.calls == 1

    def test_forward_revert_is_fatal(self) -> None:
        """Same revert rule as the canned stream."""
        stream = DelegatingSeekableTokenStream(CountingStream([A]))
        with pytest.raises(IllegalRevertError):
            stream.revert(1)

    def test_input_delegates(self) -> None:
        """input() comes from the wrapped stream."""
        assert DelegatingSeekableTokenStream(CountingStream([])).input() == "counted"


class TestMakeSeekable:
    """Test make_seekable()."""

    def test_seekable_stream_returned_as_is(self) -> None:
        """A stream that can seek is not wrapped."""
        stream = CannedTokenStream([A])
        assert make_seekable(stream) is stream

    def test_plain_stream_wrapped(self) -> None:
        """A plain stream gets a buffer."""
        delegate = CountingStream([A])
        stream = make_seekable(delegate)
        assert isinstance(stream, DelegatingSeekableTokenStream)
        assert stream.delegate is delegate
