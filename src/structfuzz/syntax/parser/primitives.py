"""Keyword sets and literal conversion for the reference parser.

The lexer accepts anything number-shaped ("0b102", "7up") so that the
parser, not the lexer, decides what a valid literal is. The functions here
make that decision and raise ParserError(INVALID_LITERAL) otherwise.
"""

from structfuzz.diagnostics import ErrorTemplate, ParserError
from structfuzz.syntax.ast import FixedPointLiteral, IntegerLiteral
from structfuzz.syntax.token_type import TokenType
from structfuzz.syntax.tokens import Token

__all__ = [
    "ACCESS_LEVELS",
    "COMPOSITE_KINDS",
    "HARD_KEYWORDS",
    "INTEGER_LITERALS",
    "SPECIAL_FUNCTIONS",
    "TRANSFER_OPERATORS",
    "parse_fixed_point_literal",
    "parse_integer_literal",
]

# Words that can never name a variable, function or type.
HARD_KEYWORDS: frozenset[str] = frozenset({
    "if",
    "else",
    "while",
    "break",
    "continue",
    "return",
    "true",
    "false",
    "nil",
    "let",
    "var",
    "fun",
    "as",
    "create",
    "destroy",
    "for",
    "in",
    "emit",
    "import",
    "struct",
    "resource",
    "contract",
    "event",
    "enum",
    "interface",
})

COMPOSITE_KINDS: frozenset[str] = frozenset({"struct", "resource", "contract", "enum"})

SPECIAL_FUNCTIONS: frozenset[str] = frozenset({"init", "destroy", "prepare", "execute"})

# Arguments of access(...)
ACCESS_LEVELS: frozenset[str] = frozenset({"all", "self", "contract", "account"})

TRANSFER_OPERATORS: dict[TokenType, str] = {
    TokenType.EQUAL: "=",
    TokenType.LEFT_ARROW: "<-",
    TokenType.LEFT_ARROW_EXCLAMATION: "<-!",
}

INTEGER_LITERALS: frozenset[TokenType] = frozenset({
    TokenType.UNKNOWN_BASE_INTEGER_LITERAL,
    TokenType.BINARY_INTEGER_LITERAL,
    TokenType.OCTAL_INTEGER_LITERAL,
    TokenType.DECIMAL_INTEGER_LITERAL,
    TokenType.HEXADECIMAL_INTEGER_LITERAL,
})

_BASES: dict[TokenType, tuple[int, str, int]] = {
    # type: (base, valid digits, prefix length)
    TokenType.BINARY_INTEGER_LITERAL: (2, "01", 2),
    TokenType.OCTAL_INTEGER_LITERAL: (8, "01234567", 2),
    TokenType.DECIMAL_INTEGER_LITERAL: (10, "0123456789", 0),
    TokenType.HEXADECIMAL_INTEGER_LITERAL: (16, "0123456789abcdefABCDEF", 2),
}

_DECIMAL_DIGITS = frozenset("0123456789")


def _is_digit_run(text: str, digits: frozenset[str] | str) -> bool:
    """Digits with optional underscores, at least one digit."""
    stripped = text.replace("_", "")
    return bool(stripped) and all(char in digits for char in stripped)


def parse_integer_literal(token: Token, position: int) -> IntegerLiteral:
    """Convert an integer literal token to its value.

    Args:
        token: Token of one of the INTEGER_LITERALS types
        position: Token index, for diagnostics

    Returns:
        IntegerLiteral with value and base

    Raises:
        ParserError: If the digits do not fit the base, the base is unknown,
            or the value is too long to convert
    """
    text = str(token.value)
    spec = _BASES.get(token.type)
    if spec is None:
        raise ParserError(
            ErrorTemplate.invalid_literal(text, str(token.type), position), position=position
        )
    base, digits, prefix = spec
    body = text[prefix:]
    if not _is_digit_run(body, digits):
        raise ParserError(
            ErrorTemplate.invalid_literal(text, str(token.type), position), position=position
        )
    try:
        value = int(body.replace("_", ""), base)
    except ValueError:
        # Decimal strings beyond the interpreter's int conversion limit.
        raise ParserError(
            ErrorTemplate.invalid_literal(text, str(token.type), position), position=position
        ) from None
    return IntegerLiteral(value=value, base=base, text=text)


def parse_fixed_point_literal(token: Token, position: int) -> FixedPointLiteral:
    """Validate a fixed-point literal token ("1.5", "1_000.000_1").

    Raises:
        ParserError: If either side of the point is not a decimal digit run
    """
    text = str(token.value)
    integer, _, fraction = text.partition(".")
    if not (_is_digit_run(integer, _DECIMAL_DIGITS) and _is_digit_run(fraction, _DECIMAL_DIGITS)):
        raise ParserError(
            ErrorTemplate.invalid_literal(text, str(token.type), position), position=position
        )
    return FixedPointLiteral(text=text)
