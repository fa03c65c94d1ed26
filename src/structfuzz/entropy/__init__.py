"""Entropy extraction: fuzz bytes to bounded decisions."""

from .fuzzbits import (
    BignumFuzzbits,
    ByteFuzzbits,
    ChunkedFuzzbits,
    Fuzzbits,
    granularity_of,
    new_fuzzbits,
)

__all__ = [
    "BignumFuzzbits",
    "ByteFuzzbits",
    "ChunkedFuzzbits",
    "Fuzzbits",
    "granularity_of",
    "new_fuzzbits",
]
