"""Token-level parser state.

ParserState wraps a SeekableTokenStream and exposes one significant token
of lookahead (spaces and comments are skipped). It never reads ahead of the
current token, so a generator behind the stream is only asked for tokens
the grammar actually looks at.

Backtracking:
    mark() returns the stream cursor before the current token; restore()
    rewinds the stream there and re-reads the current token. The stream's
    buffer makes re-reading deterministic.
"""

from structfuzz.constants import MAX_DEPTH
from structfuzz.core import DepthGuard
from structfuzz.diagnostics import ErrorTemplate, ParserError
from structfuzz.syntax.stream import SeekableTokenStream
from structfuzz.syntax.token_type import TokenType
from structfuzz.syntax.tokens import Token

from .primitives import HARD_KEYWORDS

__all__ = ["ParserState"]

_TRIVIA: frozenset[TokenType] = frozenset({
    TokenType.SPACE,
    TokenType.LINE_COMMENT,
    TokenType.BLOCK_COMMENT_START,
    TokenType.BLOCK_COMMENT_CONTENT,
    TokenType.BLOCK_COMMENT_END,
})


class ParserState:
    """Current token, position and depth of one parse.

    Attributes:
        current: Current significant token
        position: Stream index of the current token
        depth: Nesting guard shared by every recursive rule
    """

    def __init__(self, stream: SeekableTokenStream, *, max_depth: int = MAX_DEPTH) -> None:
        self._stream = stream
        self._mark = 0
        self.position = 0
        self.current: Token = Token(TokenType.EOF)
        self.depth = DepthGuard(max_depth)
        self._read()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read(self) -> None:
        self._mark = self._stream.cursor()
        token = self._stream.next()
        while token.type in _TRIVIA:
            token = self._stream.next()
        cursor = self._stream.cursor()
        self.position = cursor if token.type is TokenType.EOF else cursor - 1
        self.current = token
        if token.type is TokenType.ERROR:
            diagnostic = ErrorTemplate.lexer_error(str(token.value), self.position)
            raise ParserError(diagnostic, position=self.position)

    def advance(self) -> Token:
        """Consume the current token and return it."""
        token = self.current
        if token.type is not TokenType.EOF:
            self._read()
        return token

    def mark(self) -> int:
        """Cursor to restore() to for re-reading the current token."""
        return self._mark

    def restore(self, mark: int) -> None:
        """Rewind to a mark; raises IllegalRevertError for marks ahead."""
        self._stream.revert(mark)
        self._read()

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def at(self, token_type: TokenType) -> bool:
        return self.current.type is token_type

    def at_keyword(self, keyword: str) -> bool:
        return self.current.type is TokenType.IDENTIFIER and self.current.value == keyword

    def keyword(self) -> str | None:
        """Value of the current token if it is an identifier."""
        if self.current.type is TokenType.IDENTIFIER:
            return str(self.current.value)
        return None

    def accept(self, token_type: TokenType) -> bool:
        if self.current.type is token_type:
            self.advance()
            return True
        return False

    def accept_keyword(self, keyword: str) -> bool:
        if self.at_keyword(keyword):
            self.advance()
            return True
        return False

    def expect(self, token_type: TokenType) -> Token:
        if self.current.type is not token_type:
            raise self.error(str(token_type))
        return self.advance()

    def expect_keyword(self, keyword: str) -> None:
        if not self.accept_keyword(keyword):
            raise self.error(f"'{keyword}'")

    def expect_name(self) -> str:
        """Consume an identifier that is not a hard keyword."""
        name = self.keyword()
        if name is None or name in HARD_KEYWORDS:
            raise self.error("name")
        self.advance()
        return name

    def error(self, expected: str) -> ParserError:
        """Build the error for an unexpected current token."""
        if self.current.type is TokenType.EOF:
            diagnostic = ErrorTemplate.unexpected_eof(self.position)
        else:
            diagnostic = ErrorTemplate.unexpected_token(str(self.current), expected, self.position)
        return ParserError(diagnostic, position=self.position)
