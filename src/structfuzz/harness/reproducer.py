"""Sample identities and reproducer expressions.

A reproducer is a Python call expression that replays one sample through
the harness, e.g. run_structured_sample(8, b'\\x01\\x02'). The names it
calls are the module-level functions of structfuzz.harness.targets. When the
structured sample is re-run from its reconstructed text, the chained form
keeps the original as a trailing comment:

    run_string_sample('pub fun')  # run_structured_sample(8, b'\\x01')
"""

import hashlib

__all__ = [
    "byte_reproducer",
    "chain_reproducer",
    "output_id",
    "sample_id",
    "stream_reproducer",
    "string_reproducer",
]


def sample_id(data: bytes) -> str:
    """SHA-1 hex digest of the sample bytes."""
    return hashlib.sha1(data, usedforsecurity=False).hexdigest()


def output_id(code: str) -> str:
    """"0" for empty output, otherwise the SHA-1 of its UTF-8 encoding."""
    if not code:
        return "0"
    return sample_id(code.encode("utf-8", "surrogatepass"))


def byte_reproducer(data: bytes) -> str:
    return f"run_byte_sample({bytes(data)!r})"


def string_reproducer(code: str) -> str:
    return f"run_string_sample({ascii(code)})"


def stream_reproducer(entry: str, chunk_size: int, data: bytes) -> str:
    """Reproducer for a generator-driven sample.

    Args:
        entry: Harness method name, e.g. "run_structured_sample"
        chunk_size: Fuzzbits strategy selector
        data: Fuzz bytes
    """
    return f"{entry}({chunk_size}, {bytes(data)!r})"


def chain_reproducer(code: str, upstream: str) -> str:
    """String reproducer for code, remembering the reproducer it came from."""
    return f"{string_reproducer(code)}  # {upstream}"
