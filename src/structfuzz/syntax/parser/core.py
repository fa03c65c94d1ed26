"""Parser entry points.

Two ways in, matching the two ways the harness feeds a program:

- parse_token_stream(): straight from a TokenStream. The stream is made
  seekable first, so generators that only implement next()/input() work.
- parse_program(): from source text, through the character lexer.

Both return (program, error) instead of raising for rejected input. A
GeneratorInvariantError coming out of the stream is not a rejection and
propagates unchanged, and so does anything else unexpected: that is what
the harness is looking for.
"""

import logging

from structfuzz.constants import MAX_DEPTH
from structfuzz.diagnostics import ErrorTemplate, NestingDepthError, ParserError
from structfuzz.syntax.ast import Program
from structfuzz.syntax.lexer import lex
from structfuzz.syntax.stream import TokenStream, make_seekable

from .rules import Parser

__all__ = ["parse_program", "parse_token_stream"]

logger = logging.getLogger(__name__)


def parse_token_stream(
    stream: TokenStream, *, max_depth: int = MAX_DEPTH
) -> tuple[Program | None, ParserError | None]:
    """Parse a program from a token stream.

    Args:
        stream: Token producer; wrapped with make_seekable() if needed
        max_depth: Nesting limit for expressions, types and blocks

    Returns:
        (Program, None) on success, (None, ParserError) on rejection.
        An empty stream yields a Program with no declarations.
    """
    seekable = make_seekable(stream)
    try:
        parser = Parser(seekable, max_depth=max_depth)
        program = parser.parse_program()
    except ParserError as error:
        logger.debug("Rejected token stream: %s", error)
        return None, error
    except RecursionError:
        # Unguarded paths (long else-if chains inside deep blocks) can still
        # outrun the interpreter stack on small recursion limits. Reported as
        # a rejection, so this parser never shows a stack overflow as a crash.
        error = NestingDepthError(ErrorTemplate.nesting_depth_exceeded(max_depth))
        logger.warning("Parser exhausted the interpreter stack; rejecting as %s", error)
        return None, error
    return program, None


def parse_program(code: str) -> tuple[Program | None, ParserError | None]:
    """Lex and parse source text."""
    return parse_token_stream(lex(code))
