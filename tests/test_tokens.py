"""Tests for token types, token values and the adjacency tables."""

from __future__ import annotations

import pytest

from structfuzz.syntax import (
    KEYWORDS,
    NEEDS_SPACING,
    NEVER_OCCURS,
    Space,
    Token,
    TokenType,
    needs_spacing,
    never_occurs,
    space_token,
    tokenize,
)

T = TokenType

# ============================================================================
# TOKEN TYPE
# ============================================================================


class TestTokenType:
    """Test TokenType renderings and ordering."""

    def test_generator_range_is_contiguous(self) -> None:
        """BINARY_INTEGER_LITERAL..PRAGMA holds every drawable type."""
        drawable = [t for t in TokenType if T.BINARY_INTEGER_LITERAL <= t <= T.PRAGMA]
        assert drawable[0] is T.BINARY_INTEGER_LITERAL
        assert drawable[-1] is T.PRAGMA
        assert T.SPACE not in drawable
        assert T.LINE_COMMENT not in drawable

    @pytest.mark.parametrize(
        ("token_type", "name"),
        [
            (T.EOF, "TokenEOF"),
            (T.PLUS, "TokenPlus"),
            (T.DOUBLE_QUESTION_MARK, "TokenDoubleQuestionMark"),
            (T.BLOCK_COMMENT_CONTENT, "TokenBlockCommentContent"),
        ],
    )
    def test_token_name(self, token_type: TokenType, name: str) -> None:
        """token_name is the stable CamelCase identifier."""
        assert token_type.token_name == name

    @pytest.mark.parametrize(
        ("token_type", "text"),
        [
            (T.PLUS, "+"),
            (T.LEFT_ARROW_EXCLAMATION, "<-!"),
            (T.SWAP, "<->"),
            (T.AS_QUESTION_MARK, "as?"),
            (T.PRAGMA, "#"),
            (T.BLOCK_COMMENT_START, "/*"),
        ],
    )
    def test_fixed_text(self, token_type: TokenType, text: str) -> None:
        """Punctuation and operators carry their source text."""
        assert token_type.has_text
        assert token_type.text == text

    @pytest.mark.parametrize("token_type", [T.IDENTIFIER, T.STRING, T.SPACE, T.EOF, T.ERROR])
    def test_payload_types_have_no_text(self, token_type: TokenType) -> None:
        """Types whose text comes from the value raise on .text."""
        assert not token_type.has_text
        with pytest.raises(ValueError, match="no fixed source text"):
            _ = token_type.text

    def test_str_is_description(self) -> None:
        """str() is the human description used in errors."""
        assert str(T.IDENTIFIER) == "identifier"
        assert str(T.PAREN_OPEN) == "'('"

    def test_every_fixed_text_lexes_to_its_type(self) -> None:
        """Fixed texts of all punctuation lex back to a single token."""
        for token_type in TokenType:
            if not token_type.has_text or token_type is T.BLOCK_COMMENT_START:
                continue
            if token_type is T.BLOCK_COMMENT_END:
                continue
            tokens = list(tokenize(token_type.text))
            assert [t.type for t in tokens] == [token_type, T.EOF], token_type

    def test_keywords_are_identifiers(self) -> None:
        """Keywords lex as plain identifiers."""
        for keyword in KEYWORDS:
            assert list(tokenize(keyword))[0] == Token(T.IDENTIFIER, keyword)


# ============================================================================
# TOKEN
# ============================================================================


class TestToken:
    """Test Token value objects."""

    def test_tokens_are_immutable(self) -> None:
        """Token is a frozen dataclass."""
        token = Token(T.IDENTIFIER, "x")
        with pytest.raises(AttributeError):
            token.value = "y"  # type: ignore[misc]

    def test_is_(self) -> None:
        """is_() compares the token kind."""
        assert Token(T.COMMA).is_(T.COMMA)
        assert not Token(T.COMMA).is_(T.DOT)

    def test_str_shows_payload(self) -> None:
        """str() includes the value when there is one."""
        assert str(Token(T.COMMA)) == "','"
        assert str(Token(T.IDENTIFIER, "foo")) == "identifier('foo')"
        assert str(space_token(Space("\n", contains_newline=True))) == "space('\\n')"


# ============================================================================
# ADJACENCY
# ============================================================================


class TestNeedsSpacing:
    """Test the needs-spacing table against the lexer."""

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            (Token(T.IDENTIFIER, "a"), Token(T.IDENTIFIER, "b")),
            (Token(T.DECIMAL_INTEGER_LITERAL, "0"), Token(T.IDENTIFIER, "x")),
            (Token(T.IDENTIFIER, "as"), Token(T.EXCLAMATION_MARK)),
            (Token(T.LESS), Token(T.MINUS)),
            (Token(T.LEFT_ARROW), Token(T.GREATER)),
            (Token(T.EQUAL), Token(T.EQUAL)),
            (Token(T.AMPERSAND), Token(T.AMPERSAND)),
            (Token(T.SLASH), Token(T.SLASH)),
            (Token(T.SLASH), Token(T.STAR)),
            (Token(T.QUESTION_MARK), Token(T.DOT)),
        ],
    )
    def test_gluing_changes_the_lexing(self, left: Token, right: Token) -> None:
        """Every listed pair lexes differently without a separator."""
        assert needs_spacing(left.type, right.type)
        glued = _text(left) + _text(right)
        assert [t.type for t in tokenize(glued) if t.type is not T.EOF] != [left.type, right.type]

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            (T.PAREN_OPEN, T.PAREN_CLOSE),
            (T.IDENTIFIER, T.DOT),
            (T.PLUS, T.MINUS),
            (T.COMMA, T.IDENTIFIER),
        ],
    )
    def test_harmless_pairs(self, left: TokenType, right: TokenType) -> None:
        """Pairs that keep their lexing need no separator."""
        assert not needs_spacing(left, right)

    def test_stream_start_never_needs_spacing(self) -> None:
        """Nothing comes before the first token."""
        assert not any(needs_spacing(None, t) for t in TokenType)

    def test_line_comment_needs_spacing_before_everything(self) -> None:
        """A line comment swallows anything on its line."""
        assert all((T.LINE_COMMENT, t) in NEEDS_SPACING for t in TokenType)


class TestNeverOccurs:
    """Test the never-occurs table against the lexer."""

    def test_block_comment_start_only_before_content(self) -> None:
        """After '/*' only content, '*/' or an error can follow."""
        allowed = {t for t in TokenType if not never_occurs(T.BLOCK_COMMENT_START, t)}
        assert allowed == {
            T.BLOCK_COMMENT_CONTENT,
            T.BLOCK_COMMENT_END,
            T.ERROR,
        }

    def test_content_only_after_start(self) -> None:
        """Comment content directly follows '/*'."""
        assert never_occurs(T.IDENTIFIER, T.BLOCK_COMMENT_CONTENT)
        assert not never_occurs(T.BLOCK_COMMENT_START, T.BLOCK_COMMENT_CONTENT)

    def test_end_only_closes_open_comment(self) -> None:
        """'*/' after anything but start or content is impossible."""
        assert never_occurs(T.STAR, T.BLOCK_COMMENT_END)
        assert not never_occurs(T.BLOCK_COMMENT_CONTENT, T.BLOCK_COMMENT_END)

    def test_error_is_last(self) -> None:
        """Only EOF follows an error token."""
        assert never_occurs(T.ERROR, T.IDENTIFIER)
        assert not never_occurs(T.ERROR, T.EOF)

    def test_stream_start(self) -> None:
        """A stream cannot open with comment content or a comment end."""
        assert never_occurs(None, T.BLOCK_COMMENT_CONTENT)
        assert never_occurs(None, T.BLOCK_COMMENT_END)
        assert not never_occurs(None, T.IDENTIFIER)

    def test_generated_pairs_always_possible(self) -> None:
        """Generators drawing from the drawable range never hit the table."""
        generated = [t for t in TokenType if T.BINARY_INTEGER_LITERAL <= t <= T.PRAGMA]
        for left in generated:
            for right in generated:
                assert (left, right) not in NEVER_OCCURS


def _text(token: Token) -> str:
    if isinstance(token.value, str):
        return token.value
    return token.type.text
