"""Tests for AutoSpacingTokenStream."""

from __future__ import annotations

import pytest

from structfuzz.diagnostics import ImpossibleTokenPairError
from structfuzz.syntax import (
    AutoSpacingTokenStream,
    CannedTokenStream,
    CodeGatheringTokenStream,
    Space,
    Token,
    TokenType,
    space_token,
    tokenize,
)

T = TokenType


def _drain(stream: AutoSpacingTokenStream) -> list[Token]:
    tokens = []
    while True:
        token = stream.next()
        tokens.append(token)
        if token.type is T.EOF:
            return tokens


def _spaced(*tokens: Token) -> str:
    gatherer = CodeGatheringTokenStream(AutoSpacingTokenStream(CannedTokenStream(tokens)))
    while gatherer.next().type is not T.EOF:
        pass
    return gatherer.input()


# ============================================================================
# SEPARATOR INSERTION
# ============================================================================


class TestSeparatorInsertion:
    """Test that separators appear exactly where lexing needs them."""

    def test_canonical_sequence(self) -> None:
        """Words are separated, punctuation is glued."""
        code = _spaced(
            Token(T.IDENTIFIER, "a"),
            Token(T.IDENTIFIER, "b"),
            Token(T.PLUS),
            Token(T.DECIMAL_INTEGER_LITERAL, "1"),
            Token(T.DOT),
            Token(T.IDENTIFIER, "c"),
        )
        assert code == "a b+1 .c"

    def test_output_relexes_to_input(self) -> None:
        """The spaced text lexes back to the generated tokens."""
        generated = [
            Token(T.LESS),
            Token(T.MINUS),
            Token(T.EQUAL),
            Token(T.EQUAL_EQUAL),
            Token(T.SLASH),
            Token(T.STAR),
            Token(T.SLASH),
            Token(T.IDENTIFIER, "as"),
            Token(T.EXCLAMATION_MARK),
        ]
        code = _spaced(*generated)
        relexed = [t for t in tokenize(code) if t.type not in (T.SPACE, T.EOF)]
        assert relexed == generated

    def test_existing_space_is_enough(self) -> None:
        """A space from upstream already separates."""
        code = _spaced(
            Token(T.IDENTIFIER, "a"),
            space_token(Space("  ")),
            Token(T.IDENTIFIER, "b"),
        )
        assert code == "a  b"

    def test_space_is_pending_only_once(self) -> None:
        """The separator goes out first, the token right after it."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([Token(T.IDENTIFIER, "a"), Token(T.IDENTIFIER, "b")])
        )
        types = [t.type for t in _drain(stream)]
        assert types == [T.IDENTIFIER, T.SPACE, T.IDENTIFIER, T.EOF]

    def test_input_delegates(self) -> None:
        """input() is the upstream's."""
        stream = AutoSpacingTokenStream(CannedTokenStream([], "src"))
        assert stream.input() == "src"


# ============================================================================
# LINE COMMENTS
# ============================================================================


class TestLineComments:
    """Test newline insertion after line comments."""

    def test_newline_after_line_comment(self) -> None:
        """The next token goes on a new line."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([Token(T.LINE_COMMENT, "// hi"), Token(T.IDENTIFIER, "x")])
        )
        tokens = _drain(stream)
        assert [t.type for t in tokens] == [T.LINE_COMMENT, T.SPACE, T.IDENTIFIER, T.EOF]
        assert isinstance(tokens[1].value, Space)
        assert tokens[1].value.contains_newline

    def test_blank_without_newline_does_not_end_comment(self) -> None:
        """A plain blank after a line comment is not a separator."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([
                Token(T.LINE_COMMENT, "// hi"),
                space_token(Space(" ")),
                Token(T.IDENTIFIER, "x"),
            ])
        )
        types = [t.type for t in _drain(stream)]
        assert types == [T.LINE_COMMENT, T.SPACE, T.SPACE, T.IDENTIFIER, T.EOF]

    def test_newline_space_ends_comment(self) -> None:
        """An upstream line break already separates."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([
                Token(T.LINE_COMMENT, "// hi"),
                space_token(Space("\n", contains_newline=True)),
                Token(T.IDENTIFIER, "x"),
            ])
        )
        types = [t.type for t in _drain(stream)]
        assert types == [T.LINE_COMMENT, T.SPACE, T.IDENTIFIER, T.EOF]


# ============================================================================
# IMPOSSIBLE PAIRS
# ============================================================================


class TestImpossiblePairs:
    """Test that impossible token pairs abort the run."""

    def test_dangling_comment_end(self) -> None:
        """'*/' after an identifier cannot come out of a lexer."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([Token(T.IDENTIFIER, "x"), Token(T.BLOCK_COMMENT_END)])
        )
        stream.next()
        with pytest.raises(ImpossibleTokenPairError, match="TokenBlockCommentEnd"):
            stream.next()

    def test_content_at_stream_start(self) -> None:
        """Comment content cannot open a stream."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([Token(T.BLOCK_COMMENT_CONTENT, "x")])
        )
        with pytest.raises(ImpossibleTokenPairError):
            stream.next()

    def test_spaces_do_not_hide_the_pair(self) -> None:
        """The check looks past spaces to the previous real token."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([
                Token(T.ERROR, "boom"),
                space_token(Space(" ")),
                Token(T.IDENTIFIER, "x"),
            ])
        )
        stream.next()
        stream.next()
        with pytest.raises(ImpossibleTokenPairError):
            stream.next()

    def test_complete_block_comment_is_fine(self) -> None:
        """Start, content, end is a legal sequence."""
        stream = AutoSpacingTokenStream(
            CannedTokenStream([
                Token(T.BLOCK_COMMENT_START),
                Token(T.BLOCK_COMMENT_CONTENT, " c "),
                Token(T.BLOCK_COMMENT_END),
                Token(T.IDENTIFIER, "x"),
            ])
        )
        assert [t.type for t in _drain(stream)][-1] is T.EOF
