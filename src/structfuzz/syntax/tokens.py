"""Token value objects.

Tokens are immutable. Fixed-text tokens (operators, punctuation, pragma)
carry no value; identifiers and literals carry their source text; space
tokens carry a Space payload.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from .token_type import TokenType

__all__ = [
    "EOF_TOKEN",
    "NEWLINE_SPACE",
    "SINGLE_SPACE",
    "Space",
    "Token",
    "space_token",
]


@dataclass(frozen=True, slots=True)
class Space:
    """Payload of a SPACE token.

    Attributes:
        string: Exact whitespace text
        contains_newline: True if string contains a line break
    """

    string: str
    contains_newline: bool = False


@dataclass(frozen=True, slots=True)
class Token:
    """Classified lexical unit with an optional payload.

    Attributes:
        type: Token kind
        value: Source text for identifiers, literals, comments and errors;
            Space for space tokens; None for fixed-text tokens
    """

    type: TokenType
    value: str | Space | None = None

    def is_(self, token_type: TokenType) -> bool:
        """Check the token kind."""
        return self.type is token_type

    def __str__(self) -> str:
        if self.value is None:
            return str(self.type)
        if isinstance(self.value, Space):
            return f"{self.type}({self.value.string!r})"
        return f"{self.type}({self.value!r})"


EOF_TOKEN = Token(TokenType.EOF)

SINGLE_SPACE = Space(" ")
NEWLINE_SPACE = Space("\n", contains_newline=True)


def space_token(space: Space) -> Token:
    """Wrap a Space payload into a SPACE token."""
    return Token(TokenType.SPACE, space)
