"""Shared constants for structfuzz.

Centralized configuration constants used across the entropy, syntax and
harness packages. Placing constants here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Return codes: Outcome convention of a single harness run
- Depth limits: Recursion protection for the reference parser
- Entropy: Fuzzbits strategy selection
- Harness: Timeout exit code, enumeration cadence, STAT vocabulary

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Return codes
    "RC_OK",
    "RC_ERROR",
    "RC_INVALID",
    "RC_RUNNING",
    # Depth limits
    "MAX_DEPTH",
    # Entropy
    "DEFAULT_CHUNK_SIZE",
    "BIGNUM_CHUNK_SIZE",
    "BYTE_CHUNK_SIZE",
    "MAX_CHUNK_BITS",
    # Harness
    "TIMEOUT_EXIT_CODE",
    "DEFAULT_FUZZ_TIME_S",
    "ENUMERATION_CHECK_MASK",
    "ENUMERATION_NEWLINE_MASK",
    "STAT_RESULTS",
]

# ============================================================================
# RETURN CODES
# ============================================================================
#
# A harness run returns exactly one of these. RC_RUNNING is assigned before
# the first stage starts and is only ever overwritten by a normal return, so
# seeing it while unwinding means the run ended abnormally (crash or timeout).
#
# ============================================================================

# Parsed, checked and (when an interpreter is wired in) interpreted.
RC_OK: int = 1

# Handled rejection at any stage: syntax error, check failure, runtime error.
RC_ERROR: int = 0

# Degenerate input: no program, or a program without declarations.
RC_INVALID: int = -1

# Sentinel while a run is in flight.
RC_RUNNING: int = 99999

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting depth of the reference parser (parenthesized expressions,
# nested blocks, nested types). Random token streams are very good at
# producing "((((((((" so this guards the parser against RecursionError.
MAX_DEPTH: int = 100

# ============================================================================
# ENTROPY
# ============================================================================

# Chunk size used by the libFuzzer/atheris targets (one byte per decision).
DEFAULT_CHUNK_SIZE: int = 8

# Chunk size that selects the arbitrary-precision (zero-waste) strategy.
BIGNUM_CHUNK_SIZE: int = 0

# Chunk size that selects the byte-granular strategy.
BYTE_CHUNK_SIZE: int = 8

# Widest single extraction from the 64-bit lookahead window. Up to 7 bits of
# the window can belong to an already consumed byte, and the top bit is the
# sentinel, so 56 bits is the largest request that is always fully backed.
MAX_CHUNK_BITS: int = 56

# ============================================================================
# HARNESS
# ============================================================================

# Exit status used when the watchdog kills a hung stage.
TIMEOUT_EXIT_CODE: int = 123

# Default duration of an enumerative run when FUZZTIME is not set.
DEFAULT_FUZZ_TIME_S: int = 10

# Enumerative runner checks the clock every 2**14 samples ...
ENUMERATION_CHECK_MASK: int = (1 << 14) - 1

# ... and breaks its progress line every 2**20 samples.
ENUMERATION_NEWLINE_MASK: int = (1 << 20) - 1

# Vocabulary of the last column of a STAT line, keyed by return code.
STAT_RESULTS: dict[int, str] = {
    RC_INVALID: "invalid",
    RC_ERROR: "err",
    RC_OK: "ok",
    RC_RUNNING: "panic",
}
