"""Source reconstruction from a token stream.

CodeGatheringTokenStream records every token it forwards and can render the
recorded tokens back into source text. Together with AutoSpacingTokenStream
this turns a pure token generator into something the harness can print,
hash, and re-parse from text.

Golden-text mode: given the expected source, the gatherer compares its
reconstruction when the stream reaches EOF (unless an error token passed
through) and aborts with ReconstructionMismatchError on any difference.

Python 3.13+. Zero external dependencies.
"""

import logging

from structfuzz.diagnostics import ErrorTemplate, ReconstructionMismatchError

from .stream import TokenStream
from .token_type import TokenType
from .tokens import Space, Token

__all__ = ["CodeGatheringTokenStream", "render_tokens", "token_text"]

logger = logging.getLogger(__name__)

# Rendered as nothing: comments vanish, EOF and errors have no text.
_SILENT_TYPES: frozenset[TokenType] = frozenset({
    TokenType.ERROR,
    TokenType.EOF,
    TokenType.LINE_COMMENT,
    TokenType.BLOCK_COMMENT_CONTENT,
})


def token_text(token: Token) -> str:
    """Render one token as source text.

    Args:
        token: Token to render

    Returns:
        Space string for spaces, the payload for identifiers and literals,
        the fixed text for punctuation, "" for comments, EOF and errors

    Raises:
        ValueError: If a token without payload has no fixed text
    """
    if token.type in _SILENT_TYPES:
        return ""
    value = token.value
    if isinstance(value, Space):
        return value.string
    if value is not None:
        return value
    return token.type.text


def render_tokens(tokens: list[Token] | tuple[Token, ...]) -> str:
    """Concatenate the source text of tokens."""
    return "".join(token_text(token) for token in tokens)


class CodeGatheringTokenStream:
    """Token stream decorator reconstructing the source it forwarded.

    Attributes:
        delegate: Upstream token stream
        expected: Golden text to verify against at EOF, if any
    """

    __slots__ = ("_checked", "_saw_error", "_tokens", "delegate", "expected")

    def __init__(self, delegate: TokenStream, *, expected: str | None = None) -> None:
        self.delegate = delegate
        self.expected = expected
        self._tokens: list[Token] = []
        self._saw_error = False
        self._checked = False

    @property
    def tokens(self) -> tuple[Token, ...]:
        """Every token forwarded so far, in order."""
        return tuple(self._tokens)

    def next(self) -> Token:
        token = self.delegate.next()
        self._tokens.append(token)
        match token.type:
            case TokenType.ERROR:
                self._saw_error = True
            case TokenType.EOF if self.expected is not None and not self._checked:
                self._checked = True
                if not self._saw_error:
                    self._verify(self.expected)
        return token

    def input(self) -> str:
        return render_tokens(self._tokens)

    def _verify(self, expected: str) -> None:
        actual = self.input()
        if actual != expected:
            diagnostic = ErrorTemplate.reconstruction_mismatch(expected, actual)
            logger.error("%s", diagnostic.message)
            raise ReconstructionMismatchError(diagnostic)

    def __repr__(self) -> str:
        return f"CodeGatheringTokenStream({self.delegate!r}, tokens={len(self._tokens)})"
