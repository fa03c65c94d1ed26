"""Fuzzbits: deterministic bounded choices extracted from a fuzz buffer.

A fuzzer hands the harness a byte buffer. Generators do not want bytes, they
want decisions: "pick one of 24 hours", "pick a token type". A Fuzzbits object
turns the buffer into a sequence of such decisions.

Three strategies, selected by chunk size (see new_fuzzbits):

    ByteFuzzbits     one whole byte per decision (chunk size 8)
    ChunkedFuzzbits  a bit window rounded up to the chunk size (1..56)
    BignumFuzzbits   exact rational subdivision, zero waste (chunk size 0)

Append-stability:
    Coverage-guided fuzzers grow their corpus mostly by appending bytes to
    old samples. For every strategy, the decisions drawn from B are a prefix
    of the decisions drawn from B ++ S for as long as B reports bits left.

Exhaustion:
    Once bits_left() <= 0, intn() keeps answering with an incrementing
    counter taken mod n. Returning a constant instead would send recursive
    generators (which pick "recurse again" with some fixed index) into
    unbounded recursion.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Protocol, runtime_checkable

from structfuzz.constants import BIGNUM_CHUNK_SIZE, BYTE_CHUNK_SIZE, MAX_CHUNK_BITS
from structfuzz.diagnostics import ErrorTemplate, InvalidRangeError
from structfuzz.enums import Granularity

__all__ = [
    "BignumFuzzbits",
    "ByteFuzzbits",
    "ChunkedFuzzbits",
    "Fuzzbits",
    "granularity_of",
    "new_fuzzbits",
]

logger = logging.getLogger(__name__)

_WINDOW_MASK = (1 << 64) - 1
_SENTINEL = 1 << 63


@runtime_checkable
class Fuzzbits(Protocol):
    """Source of bounded integer decisions.

    Contract:
        - intn(n) returns 0 <= result < n for every n >= 1
        - intn(n) raises InvalidRangeError for n <= 0
        - intn(1) returns 0 and consumes nothing
        - bits_left() never increases
        - intn() never fails because the buffer ran out
    """

    def bits_left(self) -> int:
        """Remaining usable entropy in bits (may dip below zero when exhausted)."""
        ...

    def intn(self, n: int) -> int:
        """Draw a decision from range(n)."""
        ...


def _check_range(n: int, bits_left: int) -> None:
    if n <= 0:
        raise InvalidRangeError(ErrorTemplate.invalid_range(n, bits_left))


# ============================================================================
# BYTE GRANULAR
# ============================================================================


class ByteFuzzbits:
    """One byte per decision.

    Ranges wider than 256 consume further bytes, composed base-256 with the
    first byte most significant, then reduced mod n. The reduction wastes
    entropy for ranges that are not powers of 256, which is acceptable: this
    strategy is the one libFuzzer mutates best.
    """

    __slots__ = ("_data", "_offset")

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    def bits_left(self) -> int:
        return (len(self._data) - self._offset) * 8

    def intn(self, n: int) -> int:
        _check_range(n, self.bits_left())
        if n == 1:
            return 0
        if self.bits_left() <= 0:
            self._offset += 1
            return self._offset % n

        result = self._data[self._offset]
        self._offset += 1
        p = n
        while p > 256:
            self._offset += 1
            if self._offset <= len(self._data):
                byte = self._data[self._offset - 1]
            else:
                # Buffer ran out mid-value: continue with the exhaustion counter.
                byte = self._offset % 256
            result = (result << 8) + byte
            p //= 256
        return result % n

    def __repr__(self) -> str:
        return f"ByteFuzzbits(len={len(self._data)}, offset={self._offset})"


# ============================================================================
# BIT CHUNKED
# ============================================================================


class ChunkedFuzzbits:
    """Bit-granular decisions from a 64-bit lookahead window.

    Based on "Reading bits in far too many ways, part 3" (F. Giesen): the
    window holds up to 64 bits read little-endian from the buffer, with a
    sentinel bit marking where unread bits end. The number of leading zeros
    above the sentinel is the number of bits consumed from the window.

    Each decision takes ceil(log2 n) bits rounded up to the chunk size,
    clipped to the bits that remain. Rounding wastes bits: a decision that
    needs b fractional bits but takes w bits produces
    100 * (1 - 2**-(w - b)) percent duplicate outputs over all inputs.

    Attributes:
        chunk_size: Granularity of a single extraction, 1..56 bits
    """

    __slots__ = ("_bits", "_data", "_offset", "chunk_size")

    def __init__(self, chunk_size: int, data: bytes) -> None:
        if not 1 <= chunk_size <= MAX_CHUNK_BITS:
            msg = f"chunk_size must be in 1..{MAX_CHUNK_BITS}, got {chunk_size}"
            raise ValueError(msg)
        self.chunk_size = chunk_size
        self._data = bytes(data)
        self._offset = 0
        self._bits = _SENTINEL

    def bits_left(self) -> int:
        return (len(self._data) - self._offset) * 8 - self._consumed()

    def intn(self, n: int) -> int:
        _check_range(n, self.bits_left())
        if n == 1:
            return 0
        bits_left = self.bits_left()
        if bits_left <= 0:
            self._offset += 1
            return self._offset % n

        minimum_bits = (n - 1).bit_length()
        chunked_bits = -(-minimum_bits // self.chunk_size) * self.chunk_size
        chunked_bits = min(chunked_bits, bits_left)

        result = 0
        shift = 0
        while chunked_bits > 0:
            take = min(chunked_bits, MAX_CHUNK_BITS)
            result |= self.get_bits(take) << shift
            shift += take
            chunked_bits -= take
        return result % n

    def get_bits(self, count: int) -> int:
        """Extract the next count bits, least significant first.

        Args:
            count: Number of bits, 1..56

        Returns:
            Integer holding the extracted bits

        Raises:
            ValueError: If count is outside 1..56
        """
        if not 1 <= count <= MAX_CHUNK_BITS:
            msg = f"Cannot extract {count} bits at once (limit {MAX_CHUNK_BITS})"
            raise ValueError(msg)
        consumed = self._consumed()
        self._offset += consumed >> 3
        self._bits = self._current() | _SENTINEL
        self._bits >>= consumed & 7
        x = self._bits & ((1 << count) - 1)
        self._bits >>= count
        return x

    def _consumed(self) -> int:
        """Leading zeros of the 64-bit window (bits consumed since refill)."""
        return 64 - self._bits.bit_length()

    def _current(self) -> int:
        """Up to nine bytes from the offset, little-endian, truncated to 64 bits."""
        end = min(self._offset + 8, len(self._data) - 1)
        chunk = self._data[self._offset : end + 1]
        return int.from_bytes(chunk, "little") & _WINDOW_MASK

    def __repr__(self) -> str:
        return (
            f"ChunkedFuzzbits(chunk_size={self.chunk_size}, "
            f"len={len(self._data)}, bits_left={self.bits_left()})"
        )


# ============================================================================
# ARBITRARY PRECISION
# ============================================================================


class BignumFuzzbits:
    """Zero-waste decisions by exact rational subdivision.

    The whole buffer is one big-endian integer point inside [0, 2**bits).
    intn(n) cuts the current interval into n equal parts, answers with the
    index of the part holding the point, and narrows onto that part. No bit
    is rounded away, so enumerating every input of a fixed width through a
    fixed decision sequence never produces the same output twice while the
    output space is at least as large as the input space.

    Append-stability is tracked explicitly. Appended bytes can move the point
    anywhere inside [point, point + 1) of the original scale. When a cut falls
    inside that window the answer given is still the one this buffer decides,
    but a longer buffer may decide differently, so bits_left() reports 0 from
    then on.

    Unfriendly to naive coverage feedback: a single flipped low bit changes
    only late decisions, a flipped high bit changes all of them.
    """

    __slots__ = ("_ambiguous", "_extra", "_max", "_mid")

    def __init__(self, data: bytes) -> None:
        self._mid = Fraction(int.from_bytes(data, "big"))
        self._max = Fraction(1 << (len(data) * 8))
        self._extra = 0
        self._ambiguous = False

    @classmethod
    def from_interval(cls, point: int, size: int) -> BignumFuzzbits:
        """Build an instance from an arbitrary point inside [0, size).

        Useful to encode mixed-radix values: a point in time in milliseconds
        of a year decodes with intn(365), intn(24), intn(60), intn(60),
        intn(1000).

        Args:
            point: Position inside the interval
            size: Interval size (need not be a power of two)

        Returns:
            New BignumFuzzbits positioned at point

        Raises:
            InvalidRangeError: If point is outside [0, size)
        """
        if not 0 <= point < size:
            raise InvalidRangeError(ErrorTemplate.point_outside_interval(point, size))
        fuzzbits = cls(b"")
        fuzzbits._mid = Fraction(point)
        fuzzbits._max = Fraction(size)
        return fuzzbits

    def bits_left(self) -> int:
        # Approximate log2 of the interval; monotone under division by n >= 2.
        natural = self._natural_bits()
        if self._ambiguous:
            return min(natural, 0)
        return natural

    def intn(self, n: int) -> int:
        _check_range(n, self.bits_left())
        if n == 1:
            return 0
        if self._natural_bits() <= 0:
            self._extra += 1
            return self._extra % n

        self._max /= n
        answer = int(self._mid // self._max)
        if not self._ambiguous and answer != _ceil(self._mid + 1, self._max) - 1:
            self._ambiguous = True
            logger.debug("Bignum decision %d of %d no longer append-stable", answer, n)
        self._mid -= answer * self._max
        return answer

    def _natural_bits(self) -> int:
        return self._max.numerator.bit_length() - self._max.denominator.bit_length()

    def __repr__(self) -> str:
        return f"BignumFuzzbits(bits_left={self.bits_left()})"


def _ceil(numerator: Fraction, denominator: Fraction) -> int:
    return -(-numerator // denominator)


# ============================================================================
# FACTORY
# ============================================================================


def granularity_of(chunk_size: int) -> Granularity:
    """Map a chunk size to the strategy family it selects."""
    if chunk_size == BYTE_CHUNK_SIZE:
        return Granularity.BYTE
    if chunk_size == BIGNUM_CHUNK_SIZE:
        return Granularity.BIGNUM
    return Granularity.CHUNKED


def new_fuzzbits(chunk_size: int, data: bytes) -> Fuzzbits:
    """Create the Fuzzbits strategy selected by chunk size.

    Args:
        chunk_size: 8 for bytes, 0 for bignum, 1..56 for chunked bits
        data: Fuzz buffer

    Returns:
        Fresh Fuzzbits positioned at the start of data

    Raises:
        ValueError: If chunk_size is negative or wider than 56
    """
    match granularity_of(chunk_size):
        case Granularity.BYTE:
            return ByteFuzzbits(data)
        case Granularity.BIGNUM:
            return BignumFuzzbits(data)
        case Granularity.CHUNKED:
            return ChunkedFuzzbits(chunk_size, data)
