"""Example token values and the flat token table.

Every value here must lex back to exactly one token of the type it is
listed under; the round-trip tests hold them to that.
"""

from types import MappingProxyType

from structfuzz.syntax.token_type import KEYWORDS, TokenType
from structfuzz.syntax.tokens import Token

__all__ = ["EXAMPLE_TOKEN_VALUES", "TOKEN_TABLE"]

T = TokenType

# Literal and identifier payloads, by token type.
EXAMPLE_TOKEN_VALUES: MappingProxyType[TokenType, tuple[str, ...]] = MappingProxyType({
    T.BINARY_INTEGER_LITERAL: ("0b0", "0b1", "0b101", "0b1111_0000"),
    T.OCTAL_INTEGER_LITERAL: ("0o0", "0o7", "0o17", "0o777"),
    T.DECIMAL_INTEGER_LITERAL: (
        "0",
        "1",
        "2",
        "42",
        "1_000",
        "255",
        "18446744073709551615",
    ),
    T.HEXADECIMAL_INTEGER_LITERAL: ("0x0", "0x1", "0xff", "0xDEAD_beef"),
    T.FIXED_POINT_NUMBER_LITERAL: ("0.0", "1.5", "3.14159", "100.000_001"),
    T.IDENTIFIER: (
        "x",
        "y",
        "a",
        "foo",
        "Bar",
        "_",
        "self",
        "account",
        "T",
        "Int",
        "String",
        "test",
    ),
    T.STRING: ('""', '"hello"', '"a b"', '"\\n"', '"\\"quoted\\""'),
})

_LITERAL_SAMPLES: tuple[Token, ...] = tuple(
    Token(token_type, values[0])
    for token_type, values in EXAMPLE_TOKEN_VALUES.items()
    if token_type is not T.IDENTIFIER
)

_IDENTIFIER_SAMPLES: tuple[Token, ...] = tuple(
    Token(T.IDENTIFIER, name) for name in EXAMPLE_TOKEN_VALUES[T.IDENTIFIER][:4]
)

# Operators and delimiters, every keyword, a few literals and identifiers.
# Order is part of the sample format: a table index names a token.
TOKEN_TABLE: tuple[Token, ...] = (
    *(Token(token_type) for token_type in TokenType if token_type.has_text and token_type <= T.PRAGMA),
    *(Token(T.IDENTIFIER, keyword) for keyword in KEYWORDS),
    *_LITERAL_SAMPLES,
    *_IDENTIFIER_SAMPLES,
)

del T
