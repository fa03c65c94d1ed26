"""Tests for the reference lexer and its cursor."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from structfuzz.syntax import Space, Token, TokenType, lex, render_tokens, tokenize
from structfuzz.syntax.cursor import Cursor

T = TokenType


def _types(source: str) -> list[TokenType]:
    return [token.type for token in tokenize(source) if token.type is not T.SPACE]


# ============================================================================
# CURSOR
# ============================================================================


class TestCursor:
    """Test the immutable character cursor."""

    def test_advance_returns_new_cursor(self) -> None:
        """advance() does not mutate."""
        cursor = Cursor("abc", 0)
        moved = cursor.advance(2)
        assert cursor.pos == 0
        assert moved.current == "c"

    def test_advance_clamps_to_eof(self) -> None:
        """Advancing past the end stops at EOF."""
        assert Cursor("ab", 1).advance(10).is_eof

    def test_current_at_eof_raises(self) -> None:
        """current at EOF raises EOFError."""
        with pytest.raises(EOFError):
            _ = Cursor("", 0).current

    def test_peek_beyond_eof(self) -> None:
        """peek() past the end is None."""
        assert Cursor("a", 0).peek(1) is None

    def test_skip_to_stops_at_occurrence(self) -> None:
        """skip_to() points at the match, or EOF when absent."""
        assert Cursor("ab*/c", 0).skip_to("*/").pos == 2
        assert Cursor("abc", 0).skip_to("*/").is_eof

    def test_expect(self) -> None:
        """expect() consumes a matching character only."""
        assert Cursor("!x", 0).expect("!") == Cursor("!x", 1)
        assert Cursor("!x", 0).expect("?") is None
        assert Cursor("", 0).expect("!") is None

    def test_line_col(self) -> None:
        """Positions convert to 1-indexed line and column."""
        assert Cursor("ab\ncd", 0).compute_line_col() == (1, 1)
        assert Cursor("ab\ncd", 4).compute_line_col() == (2, 2)


# ============================================================================
# TOKENS
# ============================================================================


class TestTokenize:
    """Test token classification."""

    def test_always_ends_with_single_eof(self) -> None:
        """Every token sequence ends with exactly one EOF."""
        assert list(tokenize("")) == [Token(T.EOF)]
        assert _types("a")[-1] is T.EOF

    def test_whitespace_runs_become_one_space(self) -> None:
        """Consecutive whitespace is one SPACE token."""
        tokens = list(tokenize("a \t\n b"))
        assert tokens[1] == Token(T.SPACE, Space(" \t\n ", contains_newline=True))

    @pytest.mark.parametrize(
        ("source", "token_type"),
        [
            ("0b101", T.BINARY_INTEGER_LITERAL),
            ("0o17", T.OCTAL_INTEGER_LITERAL),
            ("42", T.DECIMAL_INTEGER_LITERAL),
            ("1_000", T.DECIMAL_INTEGER_LITERAL),
            ("0xDEAD_beef", T.HEXADECIMAL_INTEGER_LITERAL),
            ("0z12", T.UNKNOWN_BASE_INTEGER_LITERAL),
            ("3.14", T.FIXED_POINT_NUMBER_LITERAL),
            ("0b102", T.BINARY_INTEGER_LITERAL),
            ("7up", T.DECIMAL_INTEGER_LITERAL),
        ],
    )
    def test_numbers(self, source: str, token_type: TokenType) -> None:
        """Numbers are classified by prefix; digits are checked by the parser."""
        assert list(tokenize(source)) == [Token(token_type, source), Token(T.EOF)]

    def test_dot_without_digit_is_member_access(self) -> None:
        """'1.x' is an integer, a dot and a name."""
        assert _types("1.x") == [T.DECIMAL_INTEGER_LITERAL, T.DOT, T.IDENTIFIER, T.EOF]

    def test_strings_keep_quotes_and_escapes(self) -> None:
        """String values are their exact source text."""
        source = '"a \\" b"'
        assert list(tokenize(source))[0] == Token(T.STRING, source)

    def test_unterminated_string_is_error(self) -> None:
        """A string that hits a newline or EOF is an ERROR, and lexing stops."""
        assert _types('"abc\nx') == [T.ERROR, T.EOF]

    @pytest.mark.parametrize(
        ("source", "types"),
        [
            ("<-!", [T.LEFT_ARROW_EXCLAMATION]),
            ("<->", [T.SWAP]),
            ("<-", [T.LEFT_ARROW]),
            ("<<=", [T.LESS_LESS, T.EQUAL]),
            ("?.?", [T.QUESTION_MARK_DOT, T.QUESTION_MARK]),
            ("??", [T.DOUBLE_QUESTION_MARK]),
            ("!=", [T.NOT_EQUAL]),
            ("&&&", [T.AMPERSAND_AMPERSAND, T.AMPERSAND]),
        ],
    )
    def test_longest_operator_wins(self, source: str, types: list[TokenType]) -> None:
        """Operators use maximal munch."""
        assert _types(source) == [*types, T.EOF]

    @pytest.mark.parametrize(
        ("source", "types"),
        [
            ("x as! T", [T.IDENTIFIER, T.AS_EXCLAMATION_MARK, T.IDENTIFIER]),
            ("x as? T", [T.IDENTIFIER, T.AS_QUESTION_MARK, T.IDENTIFIER]),
            ("x as T", [T.IDENTIFIER, T.IDENTIFIER, T.IDENTIFIER]),
            ("ask!", [T.IDENTIFIER, T.EXCLAMATION_MARK]),
        ],
    )
    def test_casts(self, source: str, types: list[TokenType]) -> None:
        """'as!' and 'as?' are single tokens; other words are not."""
        assert _types(source) == [*types, T.EOF]

    def test_line_comment_runs_to_newline(self) -> None:
        """Line comments exclude the newline."""
        tokens = list(tokenize("// hi\nx"))
        assert tokens[0] == Token(T.LINE_COMMENT, "// hi")
        assert tokens[2] == Token(T.IDENTIFIER, "x")

    def test_block_comment(self) -> None:
        """Block comments are start, content, end."""
        assert _types("/* c */") == [
            T.BLOCK_COMMENT_START,
            T.BLOCK_COMMENT_CONTENT,
            T.BLOCK_COMMENT_END,
            T.EOF,
        ]

    def test_empty_block_comment(self) -> None:
        """No content token for '/**/'."""
        assert _types("/**/") == [T.BLOCK_COMMENT_START, T.BLOCK_COMMENT_END, T.EOF]

    def test_unterminated_block_comment(self) -> None:
        """A block comment without end finishes with an ERROR."""
        assert _types("/* open") == [
            T.BLOCK_COMMENT_START,
            T.BLOCK_COMMENT_CONTENT,
            T.ERROR,
            T.EOF,
        ]

    def test_unknown_character_stops_lexing(self) -> None:
        """An unknown character is an ERROR and nothing follows but EOF."""
        assert _types("a $ b") == [T.IDENTIFIER, T.ERROR, T.EOF]


# ============================================================================
# LEX
# ============================================================================


class TestLex:
    """Test lex() and text round-trips."""

    def test_lex_keeps_source(self) -> None:
        """lex() hands back its source through input()."""
        assert lex("let x = 1").input() == "let x = 1"

    @given(st.text(alphabet="abx019_ .+-*/<>=!?&|^%@#:;,()[]{}\n\t\"", max_size=40))
    def test_render_round_trips_comment_free_text(self, source: str) -> None:
        """Rendering the tokens of comment-free text gives the text back."""
        tokens = list(tokenize(source))
        if any(t.type in (T.ERROR, T.LINE_COMMENT, T.BLOCK_COMMENT_START) for t in tokens):
            return
        assert render_tokens(tokens) == source
