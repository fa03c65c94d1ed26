"""Enumerations for structfuzz type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they drop straight into
STAT lines and environment variable names.

Python 3.13+.
"""

from enum import StrEnum


class Stage(StrEnum):
    """Harness stage a sample is currently in.

    The value doubles as the suffix of the per-stage timeout override:
    FUZZTIMEOUT_parsing=500 limits the parsing stage to 500 ms.
    """

    GENERATING = "generating"
    """Token generator is driving the parser through the token stream"""

    PARSING = "parsing"
    """Reconstructed source text is parsed from scratch"""

    CHECKING = "checking"
    """Parsed program is handed to the checker"""

    INTERPRETING = "interpreting"
    """Checked program is handed to the interpreter"""


class Outcome(StrEnum):
    """Result column of a STAT line."""

    OK = "ok"
    """Parsed, checked and interpreted"""

    ERROR = "err"
    """Rejected by one of the front-end stages"""

    INVALID = "invalid"
    """No program, or a program with no declarations"""

    PANIC = "panic"
    """Stage raised instead of returning"""

    CRASHED = "crashed"
    """Placeholder armed in the crash buffer while a stage runs"""

    TIMEOUT = "timeout"
    """Watchdog fired before the stage finished"""


class Granularity(StrEnum):
    """Fuzzbits strategy family selected by the chunk size."""

    BYTE = "byte"
    """One whole byte per decision (chunk size 8)"""

    CHUNKED = "chunked"
    """Bit window rounded up to the chunk size (chunk size 1..56 except 8)"""

    BIGNUM = "bignum"
    """Exact rational subdivision, zero waste (chunk size 0)"""


__all__ = [
    "Granularity",
    "Outcome",
    "Stage",
]
