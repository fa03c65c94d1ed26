"""Reference character lexer.

Turns source text into the tokens the parser consumes, with maximal munch:
at every position the longest operator wins ("<->" beats "<-" beats "<").
The adjacency tables in structfuzz.syntax.adjacency are written against
exactly these rules.

Lexical rules:
    - Whitespace runs become one SPACE token
    - Identifiers: [A-Za-z_][A-Za-z0-9_]*; "as" directly followed by "!" or
      "?" lexes as the cast operator "as!" / "as?"
    - Numbers start with a digit and run over [A-Za-z0-9_]. Prefixes 0b, 0o
      and 0x select the base; 0 followed by any other letter is an integer
      with unknown base. A decimal followed by "." and a digit continues as
      a fixed-point number. Numbers carry no sign.
    - Strings are double-quoted with backslash escapes and end on the line
    - "//" starts a line comment, "/*" a block comment (no nesting)
    - The first unexpected character produces ERROR, then EOF

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterator

from .cursor import Cursor
from .stream import CannedTokenStream
from .token_type import TokenType
from .tokens import EOF_TOKEN, Space, Token

__all__ = ["lex", "tokenize"]

_WHITESPACE = frozenset(" \t\r\n")
_IDENTIFIER_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_DIGITS = frozenset("0123456789")
_IDENTIFIER_PART = _IDENTIFIER_START | _DIGITS

_BASE_PREFIXES: dict[str, TokenType] = {
    "b": TokenType.BINARY_INTEGER_LITERAL,
    "o": TokenType.OCTAL_INTEGER_LITERAL,
    "x": TokenType.HEXADECIMAL_INTEGER_LITERAL,
}

# Comment markers and the "as" casts are lexed by dedicated rules.
_NOT_OPERATORS = frozenset({
    TokenType.BLOCK_COMMENT_START,
    TokenType.BLOCK_COMMENT_END,
    TokenType.AS_EXCLAMATION_MARK,
    TokenType.AS_QUESTION_MARK,
})

_OPERATORS: dict[str, TokenType] = {
    token_type.text: token_type
    for token_type in TokenType
    if token_type.has_text and token_type not in _NOT_OPERATORS
}
_LONGEST_OPERATOR = max(len(text) for text in _OPERATORS)


def _is_identifier_part(char: str) -> bool:
    return char in _IDENTIFIER_PART


def _is_whitespace(char: str) -> bool:
    return char in _WHITESPACE


def _is_digit(char: str) -> bool:
    return char in _DIGITS


def tokenize(source: str) -> Iterator[Token]:
    """Lex source text into tokens, ending with exactly one EOF.

    Args:
        source: Source text

    Yields:
        Tokens in source order; lexing stops after the first ERROR token
    """
    cursor = Cursor(source, 0)
    while not cursor.is_eof:
        char = cursor.current

        if char in _WHITESPACE:
            end = cursor.skip_while(_is_whitespace)
            text = cursor.slice_to(end.pos)
            yield Token(TokenType.SPACE, Space(text, contains_newline="\n" in text))
            cursor = end

        elif char in _IDENTIFIER_START:
            token, cursor = _lex_identifier(cursor)
            yield token

        elif char in _DIGITS:
            token, cursor = _lex_number(cursor)
            yield token

        elif char == '"':
            token, cursor = _lex_string(cursor)
            yield token
            if token.type is TokenType.ERROR:
                break

        elif cursor.starts_with("//"):
            end = cursor.skip_to("\n")
            yield Token(TokenType.LINE_COMMENT, cursor.slice_to(end.pos))
            cursor = end

        elif cursor.starts_with("/*"):
            tokens, cursor = _lex_block_comment(cursor)
            yield from tokens
            if tokens[-1].type is TokenType.ERROR:
                break

        else:
            token_type, cursor = _lex_operator(cursor)
            if token_type is None:
                yield Token(TokenType.ERROR, f"unexpected character {char!r}")
                break
            yield Token(token_type)

    yield EOF_TOKEN


def lex(source: str) -> CannedTokenStream:
    """Lex source text into a seekable stream whose input() is the source."""
    return CannedTokenStream(tokenize(source), source)


def _lex_identifier(cursor: Cursor) -> tuple[Token, Cursor]:
    end = cursor.skip_while(_is_identifier_part)
    text = cursor.slice_to(end.pos)
    if text == "as":
        if end.expect("!") is not None:
            return Token(TokenType.AS_EXCLAMATION_MARK), end.advance()
        if end.expect("?") is not None:
            return Token(TokenType.AS_QUESTION_MARK), end.advance()
    return Token(TokenType.IDENTIFIER, text), end


def _lex_number(cursor: Cursor) -> tuple[Token, Cursor]:
    token_type = TokenType.DECIMAL_INTEGER_LITERAL
    second = cursor.peek(1)
    if cursor.current == "0" and second is not None and second.isascii() and second.isalpha():
        token_type = _BASE_PREFIXES.get(second, TokenType.UNKNOWN_BASE_INTEGER_LITERAL)

    end = cursor.skip_while(_is_identifier_part)
    if token_type is TokenType.DECIMAL_INTEGER_LITERAL:
        fraction = end.peek(1)
        if end.peek() == "." and fraction is not None and _is_digit(fraction):
            token_type = TokenType.FIXED_POINT_NUMBER_LITERAL
            end = end.advance().skip_while(_is_identifier_part)
    return Token(token_type, cursor.slice_to(end.pos)), end


def _lex_string(cursor: Cursor) -> tuple[Token, Cursor]:
    end = cursor.advance()
    while not end.is_eof:
        char = end.current
        if char == '"':
            end = end.advance()
            return Token(TokenType.STRING, cursor.slice_to(end.pos)), end
        if char == "\n":
            break
        end = end.advance(2 if char == "\\" else 1)
    return Token(TokenType.ERROR, "unterminated string literal"), end


def _lex_block_comment(cursor: Cursor) -> tuple[list[Token], Cursor]:
    start = cursor.advance(2)
    close = start.skip_to("*/")
    tokens = [Token(TokenType.BLOCK_COMMENT_START)]
    content = start.slice_to(close.pos)
    if content:
        tokens.append(Token(TokenType.BLOCK_COMMENT_CONTENT, content))
    if close.is_eof:
        tokens.append(Token(TokenType.ERROR, "unterminated block comment"))
        return tokens, close
    tokens.append(Token(TokenType.BLOCK_COMMENT_END))
    return tokens, close.advance(2)


def _lex_operator(cursor: Cursor) -> tuple[TokenType | None, Cursor]:
    for length in range(_LONGEST_OPERATOR, 0, -1):
        text = cursor.slice_ahead(length)
        if len(text) == length and text in _OPERATORS:
            return _OPERATORS[text], cursor.advance(length)
    return None, cursor
