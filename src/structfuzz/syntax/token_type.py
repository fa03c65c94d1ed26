"""Token type enumeration.

TokenType is a closed IntEnum. The order is significant: generators draw
"any non-trivial token" as a contiguous range of values
(BINARY_INTEGER_LITERAL..PRAGMA), so new members must not be inserted in
the middle of that range.

Every member has three renderings:
    str(t)        human description used in error messages ("identifier", "'+'")
    t.token_name  stable identifier used in logs and reproducers ("TokenPlus")
    t.text        fixed source text, only for punctuation and operators ("+")

Python 3.13+. Zero external dependencies.
"""

from enum import IntEnum, unique

__all__ = [
    "KEYWORDS",
    "TokenType",
]


@unique
class TokenType(IntEnum):
    """Kinds of lexical tokens."""

    ERROR = 0
    EOF = 1
    SPACE = 2
    UNKNOWN_BASE_INTEGER_LITERAL = 3
    BINARY_INTEGER_LITERAL = 4
    OCTAL_INTEGER_LITERAL = 5
    DECIMAL_INTEGER_LITERAL = 6
    HEXADECIMAL_INTEGER_LITERAL = 7
    FIXED_POINT_NUMBER_LITERAL = 8
    IDENTIFIER = 9
    STRING = 10
    PLUS = 11
    MINUS = 12
    STAR = 13
    SLASH = 14
    PERCENT = 15
    DOUBLE_QUESTION_MARK = 16
    PAREN_OPEN = 17
    PAREN_CLOSE = 18
    BRACE_OPEN = 19
    BRACE_CLOSE = 20
    BRACKET_OPEN = 21
    BRACKET_CLOSE = 22
    QUESTION_MARK = 23
    QUESTION_MARK_DOT = 24
    COMMA = 25
    COLON = 26
    DOT = 27
    SEMICOLON = 28
    LEFT_ARROW = 29
    LEFT_ARROW_EXCLAMATION = 30
    SWAP = 31
    LESS = 32
    LESS_EQUAL = 33
    LESS_LESS = 34
    GREATER = 35
    GREATER_EQUAL = 36
    EQUAL = 37
    EQUAL_EQUAL = 38
    EXCLAMATION_MARK = 39
    NOT_EQUAL = 40
    AMPERSAND = 41
    AMPERSAND_AMPERSAND = 42
    CARET = 43
    VERTICAL_BAR = 44
    VERTICAL_BAR_VERTICAL_BAR = 45
    AT = 46
    AS_EXCLAMATION_MARK = 47
    AS_QUESTION_MARK = 48
    PRAGMA = 49
    LINE_COMMENT = 50
    BLOCK_COMMENT_START = 51
    BLOCK_COMMENT_END = 52
    BLOCK_COMMENT_CONTENT = 53

    def __str__(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def token_name(self) -> str:
        """Stable CamelCase name, e.g. TokenDoubleQuestionMark."""
        if self is TokenType.EOF:
            return "TokenEOF"
        return "Token" + "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def has_text(self) -> bool:
        """True when every token of this type renders the same source text."""
        return self in _FIXED_TEXT

    @property
    def text(self) -> str:
        """Fixed source text of punctuation and operator tokens.

        Raises:
            ValueError: For types whose text comes from the token value
                (identifiers, literals, spaces, comments) or that have none
        """
        try:
            return _FIXED_TEXT[self]
        except KeyError:
            msg = f"{self.token_name} has no fixed source text"
            raise ValueError(msg) from None


_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.ERROR: "error",
    TokenType.EOF: "EOF",
    TokenType.SPACE: "space",
    TokenType.UNKNOWN_BASE_INTEGER_LITERAL: "integer with unknown base",
    TokenType.BINARY_INTEGER_LITERAL: "binary integer",
    TokenType.OCTAL_INTEGER_LITERAL: "octal integer",
    TokenType.DECIMAL_INTEGER_LITERAL: "decimal integer",
    TokenType.HEXADECIMAL_INTEGER_LITERAL: "hexadecimal integer",
    TokenType.FIXED_POINT_NUMBER_LITERAL: "fixed-point number",
    TokenType.IDENTIFIER: "identifier",
    TokenType.STRING: "string",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.STAR: "'*'",
    TokenType.SLASH: "'/'",
    TokenType.PERCENT: "'%'",
    TokenType.DOUBLE_QUESTION_MARK: "'??'",
    TokenType.PAREN_OPEN: "'('",
    TokenType.PAREN_CLOSE: "')'",
    TokenType.BRACE_OPEN: "'{'",
    TokenType.BRACE_CLOSE: "'}'",
    TokenType.BRACKET_OPEN: "'['",
    TokenType.BRACKET_CLOSE: "']'",
    TokenType.QUESTION_MARK: "'?'",
    TokenType.QUESTION_MARK_DOT: "'?.'",
    TokenType.COMMA: "','",
    TokenType.COLON: "':'",
    TokenType.DOT: "'.'",
    TokenType.SEMICOLON: "';'",
    TokenType.LEFT_ARROW: "'<-'",
    TokenType.LEFT_ARROW_EXCLAMATION: "'<-!'",
    TokenType.SWAP: "'<->'",
    TokenType.LESS: "'<'",
    TokenType.LESS_EQUAL: "'<='",
    TokenType.LESS_LESS: "'<<'",
    TokenType.GREATER: "'>'",
    TokenType.GREATER_EQUAL: "'>='",
    TokenType.EQUAL: "'='",
    TokenType.EQUAL_EQUAL: "'=='",
    TokenType.EXCLAMATION_MARK: "'!'",
    TokenType.NOT_EQUAL: "'!='",
    TokenType.AMPERSAND: "'&'",
    TokenType.AMPERSAND_AMPERSAND: "'&&'",
    TokenType.CARET: "'^'",
    TokenType.VERTICAL_BAR: "'|'",
    TokenType.VERTICAL_BAR_VERTICAL_BAR: "'||'",
    TokenType.AT: "'@'",
    TokenType.AS_EXCLAMATION_MARK: "'as!'",
    TokenType.AS_QUESTION_MARK: "'as?'",
    TokenType.PRAGMA: "'#'",
    TokenType.LINE_COMMENT: "line comment",
    TokenType.BLOCK_COMMENT_START: "'/*'",
    TokenType.BLOCK_COMMENT_END: "'*/'",
    TokenType.BLOCK_COMMENT_CONTENT: "block comment",
}

# Quoted descriptions are exactly the punctuation and operator types.
_FIXED_TEXT: dict[TokenType, str] = {
    token_type: description[1:-1]
    for token_type, description in _DESCRIPTIONS.items()
    if description.startswith("'")
}

# Reserved words. The lexer emits them as IDENTIFIER tokens; only the parser
# gives them meaning.
KEYWORDS: tuple[str, ...] = (
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
    "auth",
    "priv",
    "pub",
    "access",
    "set",
    "all",
    "self",
    "init",
    "contract",
    "account",
    "import",
    "from",
    "pre",
    "post",
    "event",
    "struct",
    "resource",
    "interface",
    "transaction",
    "prepare",
    "execute",
    "case",
    "switch",
    "default",
    "enum",
)
