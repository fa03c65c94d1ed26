"""Table token generator.

The simplest useful generator: one draw, one entry of TOKEN_TABLE. It ends
as soon as the entropy runs out, so short inputs give short programs.
"""

from structfuzz.diagnostics import ErrorTemplate, UnsupportedInputError
from structfuzz.entropy import Fuzzbits
from structfuzz.syntax.tokens import EOF_TOKEN, Token

from .examples import TOKEN_TABLE

__all__ = ["TableTokenStream"]


class TableTokenStream:
    """Token stream indexing TOKEN_TABLE with fuzzbits."""

    __slots__ = ("fuzzbits",)

    def __init__(self, fuzzbits: Fuzzbits) -> None:
        self.fuzzbits = fuzzbits

    def input(self) -> str:
        raise UnsupportedInputError(ErrorTemplate.input_unsupported(type(self).__name__))

    def next(self) -> Token:
        if self.fuzzbits.bits_left() <= 0:
            return EOF_TOKEN
        return TOKEN_TABLE[self.fuzzbits.intn(len(TOKEN_TABLE))]

    def __repr__(self) -> str:
        return f"TableTokenStream({self.fuzzbits!r})"
