"""Token stream protocols and the seekable buffer.

A token stream hands out tokens one at a time and never fails on exhaustion:
past the end it returns EOF forever. Some streams can also reconstruct the
source text they stand for (input()); pure generators cannot and raise
UnsupportedInputError instead of guessing.

The parser needs more than that: to parse "f<T>(x)" it must try a generic
argument list, and rewind if that fails ("a < b"). SeekableTokenStream adds
cursor()/revert() for this. make_seekable() hands back the stream itself if
it already can seek, and otherwise buffers it.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from structfuzz.diagnostics import (
    ErrorTemplate,
    IllegalRevertError,
    UnsupportedInputError,
)

from .token_type import TokenType
from .tokens import EOF_TOKEN, Token

__all__ = [
    "CannedTokenStream",
    "DelegatingSeekableTokenStream",
    "SeekableTokenStream",
    "TokenStream",
    "make_seekable",
]


@runtime_checkable
class TokenStream(Protocol):
    """Producer of tokens."""

    def next(self) -> Token:
        """Consume and return one token; EOF once nothing is left."""
        ...

    def input(self) -> str:
        """Return the source text this stream stands for.

        Raises:
            UnsupportedInputError: If the stream cannot reconstruct it
        """
        ...


@runtime_checkable
class SeekableTokenStream(TokenStream, Protocol):
    """Token stream with backtracking."""

    def cursor(self) -> int:
        """Index of the token the next call to next() returns."""
        ...

    def revert(self, cursor: int) -> None:
        """Rewind to a cursor previously returned by cursor().

        Raises:
            IllegalRevertError: If cursor is ahead of the current cursor
        """
        ...


class _SeekableBuffer:
    """Append-only token buffer with a cursor.

    EOF, once buffered, is returned again and again without moving the
    cursor past it.
    """

    __slots__ = ("_cursor", "_tokens")

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens: list[Token] = list(tokens)
        self._cursor = 0

    def next(self) -> Token:
        if self._cursor >= len(self._tokens):
            self._tokens.append(self._fetch())
        token = self._tokens[self._cursor]
        if token.type is not TokenType.EOF:
            self._cursor += 1
        return token

    def cursor(self) -> int:
        return self._cursor

    def revert(self, cursor: int) -> None:
        if cursor > self._cursor:
            raise IllegalRevertError(ErrorTemplate.illegal_revert(cursor, self._cursor))
        self._cursor = cursor

    def _fetch(self) -> Token:
        return EOF_TOKEN


class DelegatingSeekableTokenStream(_SeekableBuffer):
    """Seekable view over a plain token stream.

    Tokens are pulled from the delegate only when the cursor reaches the end
    of the buffer, so the delegate sees each token request exactly once no
    matter how often the parser backtracks.
    """

    __slots__ = ("delegate",)

    def __init__(self, delegate: TokenStream) -> None:
        super().__init__()
        self.delegate = delegate

    def _fetch(self) -> Token:
        return self.delegate.next()

    def input(self) -> str:
        return self.delegate.input()

    def __repr__(self) -> str:
        return f"DelegatingSeekableTokenStream({self.delegate!r}, cursor={self._cursor})"


class CannedTokenStream(_SeekableBuffer):
    """Seekable stream over a fixed token list.

    Used for lexer output and in tests. Returns EOF forever after the list.

    Args:
        tokens: Tokens to hand out; a trailing EOF is optional
        source: Source text the tokens were lexed from, if any
    """

    __slots__ = ("_source",)

    def __init__(self, tokens: Iterable[Token], source: str | None = None) -> None:
        super().__init__(tokens)
        self._source = source

    def input(self) -> str:
        if self._source is None:
            raise UnsupportedInputError(ErrorTemplate.input_unsupported(type(self).__name__))
        return self._source

    def __repr__(self) -> str:
        return f"CannedTokenStream(len={len(self._tokens)}, cursor={self._cursor})"


def make_seekable(stream: TokenStream) -> SeekableTokenStream:
    """Return stream itself if it can seek, otherwise a buffered view of it."""
    if isinstance(stream, SeekableTokenStream):
        return stream
    return DelegatingSeekableTokenStream(stream)
