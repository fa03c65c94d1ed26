"""Structured token generator.

Spends entropy on token types rather than bytes of text: each draw picks a
whole token. The first token is chosen to look like the start of a program
(a keyword, a name or a pragma); after that every type from binary
integer literals to pragmas is equally likely, and literal types carry an
example value.
"""

import logging

from structfuzz.diagnostics import ErrorTemplate, UnsupportedInputError
from structfuzz.entropy import Fuzzbits
from structfuzz.syntax.token_type import KEYWORDS, TokenType
from structfuzz.syntax.tokens import EOF_TOKEN, Token

from .examples import EXAMPLE_TOKEN_VALUES

__all__ = ["StructuredTokenStream"]

logger = logging.getLogger(__name__)

_FIRST_TYPE = TokenType.BINARY_INTEGER_LITERAL
_LAST_TYPE = TokenType.PRAGMA
_LAST_VALUED_TYPE = TokenType.STRING


class StructuredTokenStream:
    """Token stream drawing every decision from fuzzbits.

    Attributes:
        fuzzbits: Entropy source
    """

    __slots__ = ("_sent_first", "fuzzbits")

    def __init__(self, fuzzbits: Fuzzbits) -> None:
        self.fuzzbits = fuzzbits
        self._sent_first = False

    def input(self) -> str:
        raise UnsupportedInputError(ErrorTemplate.input_unsupported(type(self).__name__))

    def next(self) -> Token:
        bits = self.fuzzbits
        # Out of entropy: EOF one time in three, driven by the
        # post-exhaustion counter so the stream always ends.
        if bits.bits_left() <= 0 and bits.intn(3) == 1:
            return EOF_TOKEN

        if not self._sent_first:
            self._sent_first = True
            return self._first_token()

        token_type = TokenType(_FIRST_TYPE + bits.intn(_LAST_TYPE - _FIRST_TYPE + 1))
        if token_type <= _LAST_VALUED_TYPE:
            values = EXAMPLE_TOKEN_VALUES[token_type]
            return Token(token_type, values[bits.intn(len(values))])
        return Token(token_type)

    def _first_token(self) -> Token:
        bits = self.fuzzbits
        match bits.intn(4):
            case 0 | 1:
                return Token(TokenType.IDENTIFIER, KEYWORDS[bits.intn(len(KEYWORDS))])
            case 2:
                names = EXAMPLE_TOKEN_VALUES[TokenType.IDENTIFIER]
                return Token(TokenType.IDENTIFIER, names[bits.intn(len(names))])
            case _:
                return Token(TokenType.PRAGMA)

    def __repr__(self) -> str:
        return f"StructuredTokenStream({self.fuzzbits!r})"
