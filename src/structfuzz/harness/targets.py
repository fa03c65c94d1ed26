"""Fuzz targets for libFuzzer-style engines.

Each target feeds one input through a process-wide Harness configured from
the environment. The harness is built on first use and installs the crash
reporter's exit hooks.

The run_* functions are the names reproducers call, so a printed
reproducer replays as-is once the harness names are imported:

    from structfuzz.harness import *
    run_string_sample('let x = 1')  # run_structured_sample(8, b'\\x01')
"""

import os
import threading

from structfuzz.constants import DEFAULT_CHUNK_SIZE

from .context import FuzzContext
from .driver import Harness

__all__ = [
    "default_harness",
    "fuzz_random_bytes",
    "fuzz_random_strings",
    "fuzz_structured_token_stream",
    "fuzz_table_token_stream",
    "run_byte_sample",
    "run_string_sample",
    "run_structured_sample",
    "run_table_sample",
]

_lock = threading.Lock()
_harness: Harness | None = None


def default_harness() -> Harness:
    """Process-wide harness, built once from os.environ."""
    global _harness  # noqa: PLW0603 - lazily built singleton
    with _lock:
        if _harness is None:
            context = FuzzContext.from_environ(os.environ)
            context.crash_reporter.install()
            _harness = Harness(context)
        return _harness


# ============================================================================
# FUZZ ENTRY POINTS
# ============================================================================


def fuzz_random_bytes(data: bytes) -> int:
    return default_harness().run_byte_sample(data)


def fuzz_random_strings(text: str) -> int:
    return default_harness().run_string_sample(text)


def fuzz_structured_token_stream(data: bytes) -> int:
    return default_harness().run_structured_sample(DEFAULT_CHUNK_SIZE, data)


def fuzz_table_token_stream(data: bytes) -> int:
    return default_harness().run_table_sample(DEFAULT_CHUNK_SIZE, data)


# ============================================================================
# REPRODUCER ENTRY POINTS
# ============================================================================


def run_byte_sample(data: bytes) -> int:
    """Replay run_byte_sample(...) reproducers."""
    return default_harness().run_byte_sample(data)


def run_string_sample(code: str) -> int:
    """Replay run_string_sample(...) reproducers."""
    return default_harness().run_string_sample(code)


def run_structured_sample(chunk_size: int, data: bytes) -> int:
    """Replay run_structured_sample(...) reproducers."""
    return default_harness().run_structured_sample(chunk_size, data)


def run_table_sample(chunk_size: int, data: bytes) -> int:
    """Replay run_table_sample(...) reproducers."""
    return default_harness().run_table_sample(chunk_size, data)
