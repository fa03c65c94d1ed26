"""Immutable character cursor for the reference lexer.

Python 3.13+. Zero external dependencies.

Design:
    - Cursor is a frozen dataclass; every advance() returns a new cursor
    - EOF is a state (is_eof), not a return value
    - current raises EOFError, so callers check is_eof instead of None
    - Line:column is computed on demand, for diagnostics only
"""

from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["Cursor"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position.

    Example:
        >>> cursor = Cursor("a<-b", 0)
        >>> cursor.current
        'a'
        >>> cursor.advance().slice_ahead(2)
        '<-'
        >>> Cursor("", 0).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once the position is at or past the end of the source."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character at the current position.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character at position + offset, or None beyond EOF."""
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return a new cursor advanced by count characters (clamped to EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Source text from the current position up to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Next n characters (fewer near EOF) without advancing."""
        return self.source[self.pos : self.pos + n]

    def starts_with(self, text: str) -> bool:
        """Check whether the source continues with text at this position."""
        return self.source.startswith(text, self.pos)

    def expect(self, char: str) -> "Cursor | None":
        """Consume char if it is next, otherwise return None.

        Example:
            >>> Cursor("?.", 0).expect("?").current
            '.'
            >>> Cursor("?.", 0).expect("!") is None
            True
        """
        if not self.is_eof and self.current == char:
            return self.advance()
        return None

    def skip_while(self, predicate: Callable[[str], bool]) -> "Cursor":
        """Advance past every consecutive character matching predicate."""
        pos = self.pos
        source = self.source
        while pos < len(source) and predicate(source[pos]):
            pos += 1
        return Cursor(source, pos)

    def skip_to(self, text: str) -> "Cursor":
        """Advance to the next occurrence of text, or to EOF if there is none.

        The returned cursor points AT the occurrence, not past it.
        """
        found = self.source.find(text, self.pos)
        return Cursor(self.source, len(self.source) if found < 0 else found)

    def compute_line_col(self) -> tuple[int, int]:
        """Compute the 1-indexed (line, column) of the current position.

        O(n) in the position. Only call for error reporting.

        Example:
            >>> Cursor("ab\\ncd", 4).compute_line_col()
            (2, 2)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)
