"""Tests for output deduplication."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from structfuzz.harness import BigSetOfHashes, Bitset, fnv1a_64


class TestFnv1a64:
    """Test the hash against published FNV-1a vectors."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"", 0xCBF29CE484222325),
            (b"a", 0xAF63DC4C8601EC8C),
            (b"foobar", 0x85944171F73967E8),
        ],
    )
    def test_vectors(self, data: bytes, expected: int) -> None:
        """Known inputs hash to the published values."""
        assert fnv1a_64(data) == expected

    @given(st.binary(max_size=64))
    def test_fits_64_bits(self, data: bytes) -> None:
        """Hashes never exceed 64 bits."""
        assert 0 <= fnv1a_64(data) < 2**64


class TestBitset:
    """Test the paged 2**31-bit bitset."""

    def test_test_and_set(self) -> None:
        """The first set reports unset, later ones report set."""
        bits = Bitset()
        assert not bits.test_and_set(5)
        assert bits.test_and_set(5)
        assert 5 in bits
        assert 4 not in bits
        assert bits.count == 1

    @pytest.mark.parametrize("index", [0, 7, 8, 2**19 - 1, 2**19, 2**31 - 1])
    def test_boundaries(self, index: int) -> None:
        """Byte and page edges, and both ends of the range, are addressable."""
        bits = Bitset()
        assert not bits.test_and_set(index)
        assert index in bits
        assert index - 1 not in bits
        assert index + 1 not in bits

    @pytest.mark.parametrize("index", [-1, 2**31])
    def test_out_of_range(self, index: int) -> None:
        """Indices beyond 31 bits are refused."""
        bits = Bitset()
        with pytest.raises(IndexError):
            bits.test_and_set(index)
        assert index not in bits

    def test_memory_fixed_per_page(self) -> None:
        """Repeated adds inside one page never grow the allocation."""
        bits = Bitset()
        assert bits.allocated_bytes == 0
        bits.test_and_set(1)
        first = bits.allocated_bytes
        assert first == 2**16
        for i in range(1000):
            bits.test_and_set(i)
        assert bits.allocated_bytes == first

    def test_memory_bounded_by_dense_size(self) -> None:
        """Every page touched still stays at the dense 256 MiB bound."""
        bits = Bitset()
        for i in range(0, 2**31, 2**27):
            bits.test_and_set(i)
        assert bits.allocated_bytes == 16 * 2**16
        assert bits.allocated_bytes <= 2**28


class TestBigSetOfHashes:
    """Test the probabilistic set."""

    def test_first_add_is_new(self) -> None:
        """Unseen strings are reported new, repeats are not."""
        seen = BigSetOfHashes()
        assert seen.add("let x = 1")
        assert not seen.add("let x = 1")
        assert seen.add("let y = 1")

    def test_one_new_half_is_enough(self) -> None:
        """A hash differing in either half counts as new."""
        seen = BigSetOfHashes()
        assert seen.add_hash((1 << 32) | 2)
        assert seen.add_hash((1 << 32) | 3)
        assert seen.add_hash((4 << 32) | 3)

    def test_false_duplicate_possible(self) -> None:
        """Halves seen in different hashes look like a duplicate."""
        seen = BigSetOfHashes()
        seen.add_hash((1 << 32) | 2)
        seen.add_hash((3 << 32) | 4)
        assert not seen.add_hash((1 << 32) | 4)

    def test_len_counts_low_halves(self) -> None:
        """len() is the number of distinct low halves."""
        seen = BigSetOfHashes()
        for text in ("a", "b", "a"):
            seen.add(text)
        assert len(seen) == 2

    @given(st.lists(st.text(max_size=8), max_size=30))
    def test_never_false_new(self, texts: list[str]) -> None:
        """A repeated string is never reported as new."""
        seen = BigSetOfHashes()
        for text in texts:
            seen.add(text)
        for text in texts:
            assert not seen.add(text)
