"""Separator insertion for generated token streams.

Token generators pick token types without caring how their texts glue
together. AutoSpacingTokenStream sits between a generator and whatever
renders source text, and inserts a space wherever two adjacent tokens would
otherwise lex as something else. After a line comment the separator is a
newline, or the comment would swallow the next token.

It also guards the generator: a pair of tokens that lexing can never
produce aborts the run with ImpossibleTokenPairError.

Python 3.13+. Zero external dependencies.
"""

import logging

from structfuzz.diagnostics import ErrorTemplate, ImpossibleTokenPairError

from .adjacency import needs_spacing, never_occurs
from .stream import TokenStream
from .token_type import TokenType
from .tokens import NEWLINE_SPACE, SINGLE_SPACE, Space, Token, space_token

__all__ = ["AutoSpacingTokenStream"]

logger = logging.getLogger(__name__)


class AutoSpacingTokenStream:
    """Token stream decorator inserting mandatory separators.

    Compares each token against the previous non-space token. Space and EOF
    tokens pass through unchecked and never become the previous token; a
    space that was forwarded since the previous token already separates it
    from the next one.

    Attributes:
        delegate: Upstream token stream
    """

    __slots__ = ("_pending", "_prev_type", "_separated", "delegate")

    def __init__(self, delegate: TokenStream) -> None:
        self.delegate = delegate
        self._prev_type: TokenType | None = None
        self._pending: Token | None = None
        self._separated = False

    def input(self) -> str:
        return self.delegate.input()

    def next(self) -> Token:
        if self._pending is not None:
            token, self._pending = self._pending, None
        else:
            token = self.delegate.next()

        match token.type:
            case TokenType.EOF:
                return token
            case TokenType.SPACE:
                self._note_space(token)
                return token

        prev = self._prev_type
        if never_occurs(prev, token.type):
            diagnostic = ErrorTemplate.impossible_token_pair(
                prev.token_name if prev is not None else "start of stream",
                token.type.token_name,
            )
            logger.error("%s", diagnostic.message)
            raise ImpossibleTokenPairError(diagnostic)

        if not self._separated and needs_spacing(prev, token.type):
            self._pending = token
            space = NEWLINE_SPACE if prev is TokenType.LINE_COMMENT else SINGLE_SPACE
            self._separated = True
            return space_token(space)

        self._prev_type = token.type
        self._separated = False
        return token

    def _note_space(self, token: Token) -> None:
        # After a line comment only a line break separates.
        if self._prev_type is TokenType.LINE_COMMENT:
            if isinstance(token.value, Space) and token.value.contains_newline:
                self._separated = True
        else:
            self._separated = True

    def __repr__(self) -> str:
        return f"AutoSpacingTokenStream({self.delegate!r})"
