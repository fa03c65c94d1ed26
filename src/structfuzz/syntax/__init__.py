"""Token model, stream pipeline and reference front-end syntax.

Layers, leaf first:
- token_type, tokens, adjacency: what a token is and which pairs need a
  separator or can never occur
- stream, autospacer, gatherer: the composable TokenStream pipeline
- cursor, lexer: source text to tokens
- ast, parser: tokens to a Program

Python 3.13+.
"""

from .adjacency import NEEDS_SPACING, NEVER_OCCURS, needs_spacing, never_occurs
from .ast import Program
from .autospacer import AutoSpacingTokenStream
from .gatherer import CodeGatheringTokenStream, render_tokens, token_text
from .lexer import lex, tokenize
from .stream import (
    CannedTokenStream,
    DelegatingSeekableTokenStream,
    SeekableTokenStream,
    TokenStream,
    make_seekable,
)
from .token_type import KEYWORDS, TokenType
from .tokens import EOF_TOKEN, NEWLINE_SPACE, SINGLE_SPACE, Space, Token, space_token

# Parser last: its modules import the names above.
from .parser import parse_program, parse_token_stream  # noqa: E402  # isort: skip

__all__ = [
    "EOF_TOKEN",
    "KEYWORDS",
    "NEEDS_SPACING",
    "NEVER_OCCURS",
    "NEWLINE_SPACE",
    "SINGLE_SPACE",
    "AutoSpacingTokenStream",
    "CannedTokenStream",
    "CodeGatheringTokenStream",
    "DelegatingSeekableTokenStream",
    "Program",
    "SeekableTokenStream",
    "Space",
    "Token",
    "TokenStream",
    "TokenType",
    "lex",
    "make_seekable",
    "needs_spacing",
    "never_occurs",
    "parse_program",
    "parse_token_stream",
    "render_tokens",
    "space_token",
    "tokenize",
]
