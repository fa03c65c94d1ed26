"""Reference parser.

Module Organization:
- core.py: parse_token_stream() and parse_program() entry points
- state.py: ParserState (lookahead, backtracking, depth guard)
- primitives.py: keyword sets and literal conversion
- rules.py: Parser, all grammar rules

Public API:
    parse_token_stream: Parse from any TokenStream
    parse_program: Parse from source text
    Parser: Rule class (advanced usage)
"""

from structfuzz.syntax.parser.core import parse_program, parse_token_stream
from structfuzz.syntax.parser.rules import Parser

__all__ = ["Parser", "parse_program", "parse_token_stream"]
