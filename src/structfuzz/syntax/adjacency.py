"""Token adjacency tables.

Two static relations over (previous, next) token types:

NEVER_OCCURS
    Pairs that lexing real source text can never produce. Seeing one in a
    generated stream means the generator is broken, not the parser.

NEEDS_SPACING
    Pairs that would lex differently when their texts are concatenated with
    nothing in between ("<" "-" becomes "<-"). A separator must go between
    them for the reconstructed source to re-lex to the same tokens.

Both tables are configuration written down from the lexer's maximal-munch
rules, not derived from the lexer at runtime. They are declared from named
groups so each rule reads as one line.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable

from .token_type import TokenType

__all__ = [
    "NEEDS_SPACING",
    "NEVER_OCCURS",
    "NUMBER_LITERALS",
    "WORD_LIKE",
    "WORD_START",
    "needs_spacing",
    "never_occurs",
]

type TokenPair = tuple[TokenType, TokenType]

T = TokenType

# ============================================================================
# GROUPS
# ============================================================================

NUMBER_LITERALS: frozenset[TokenType] = frozenset({
    T.UNKNOWN_BASE_INTEGER_LITERAL,
    T.BINARY_INTEGER_LITERAL,
    T.OCTAL_INTEGER_LITERAL,
    T.DECIMAL_INTEGER_LITERAL,
    T.HEXADECIMAL_INTEGER_LITERAL,
    T.FIXED_POINT_NUMBER_LITERAL,
})

# Tokens whose text ends in an identifier character.
WORD_LIKE: frozenset[TokenType] = NUMBER_LITERALS | {T.IDENTIFIER}

# Tokens whose text starts with an identifier character.
WORD_START: frozenset[TokenType] = WORD_LIKE | {T.AS_EXCLAMATION_MARK, T.AS_QUESTION_MARK}

_ALL: frozenset[TokenType] = frozenset(TokenType)

_COMMENT_OPENERS: frozenset[TokenType] = frozenset({T.BLOCK_COMMENT_START, T.LINE_COMMENT})


def _pairs(prevs: Iterable[TokenType], nexts: Iterable[TokenType]) -> frozenset[TokenPair]:
    nexts = tuple(nexts)
    return frozenset((p, n) for p in prevs for n in nexts)


# ============================================================================
# NEEDS SPACING
# ============================================================================

NEEDS_SPACING: frozenset[TokenPair] = (
    # a b, 0 x, x 0x1, a as!
    _pairs(WORD_LIKE, WORD_START)
    # as ! would become as!
    | _pairs(
        {T.IDENTIFIER},
        {
            T.EXCLAMATION_MARK,
            T.NOT_EQUAL,
            T.QUESTION_MARK,
            T.QUESTION_MARK_DOT,
            T.DOUBLE_QUESTION_MARK,
        },
    )
    # 1 .5 would become 1.5
    | _pairs(NUMBER_LITERALS, {T.DOT})
    | _pairs(
        {T.QUESTION_MARK},
        {T.QUESTION_MARK, T.DOUBLE_QUESTION_MARK, T.DOT, T.QUESTION_MARK_DOT},
    )
    | _pairs(
        {T.LESS},
        {
            T.MINUS,
            T.LESS,
            T.EQUAL,
            T.EQUAL_EQUAL,
            T.LESS_EQUAL,
            T.LESS_LESS,
            T.LEFT_ARROW,
            T.LEFT_ARROW_EXCLAMATION,
            T.SWAP,
        },
    )
    | _pairs({T.LEFT_ARROW}, {T.EXCLAMATION_MARK, T.NOT_EQUAL, T.GREATER, T.GREATER_EQUAL})
    | _pairs({T.GREATER, T.EQUAL, T.EXCLAMATION_MARK}, {T.EQUAL, T.EQUAL_EQUAL})
    | _pairs({T.AMPERSAND}, {T.AMPERSAND, T.AMPERSAND_AMPERSAND})
    | _pairs({T.VERTICAL_BAR}, {T.VERTICAL_BAR, T.VERTICAL_BAR_VERTICAL_BAR})
    | _pairs({T.SLASH}, {T.SLASH, T.STAR, T.BLOCK_COMMENT_END} | _COMMENT_OPENERS)
    | _pairs({T.STAR}, {T.SLASH} | _COMMENT_OPENERS)
    # a line comment runs to the end of the line
    | _pairs({T.LINE_COMMENT}, _ALL)
)

# ============================================================================
# NEVER OCCURS
# ============================================================================

_INSIDE_BLOCK_COMMENT: frozenset[TokenType] = frozenset({
    T.BLOCK_COMMENT_CONTENT,
    T.BLOCK_COMMENT_END,
})

NEVER_OCCURS: frozenset[TokenPair] = (
    # block comments do not nest and hold nothing but content;
    # an unterminated one ends in an error token
    _pairs({T.BLOCK_COMMENT_START}, _ALL - _INSIDE_BLOCK_COMMENT - {T.ERROR})
    | _pairs({T.BLOCK_COMMENT_CONTENT}, _ALL - {T.BLOCK_COMMENT_END, T.ERROR})
    # content only directly after the start marker
    | _pairs(_ALL - {T.BLOCK_COMMENT_START}, {T.BLOCK_COMMENT_CONTENT})
    # end marker only closes an open comment
    | _pairs(_ALL - {T.BLOCK_COMMENT_START, T.BLOCK_COMMENT_CONTENT}, {T.BLOCK_COMMENT_END})
    # the lexer stops at the first error
    | _pairs({T.ERROR}, _ALL - {T.EOF})
)

# Before the first token, only a dangling comment body is impossible.
_NEVER_FIRST: frozenset[TokenType] = _INSIDE_BLOCK_COMMENT

del T


def never_occurs(prev: TokenType | None, next_type: TokenType) -> bool:
    """Check whether next_type can never follow prev in lexed source.

    Args:
        prev: Previous non-space token type, None at stream start
        next_type: Type of the token about to be emitted

    Returns:
        True if the pair is lexically impossible
    """
    if prev is None:
        return next_type in _NEVER_FIRST
    return (prev, next_type) in NEVER_OCCURS


def needs_spacing(prev: TokenType | None, next_type: TokenType) -> bool:
    """Check whether a separator must go between prev and next_type.

    Args:
        prev: Previous non-space token type, None at stream start
        next_type: Type of the token about to be emitted

    Returns:
        True if concatenating the two texts would change how they lex
    """
    if prev is None:
        return False
    return (prev, next_type) in NEEDS_SPACING
