"""Probabilistic set of seen outputs.

Two bitsets indexed by the high and low 31-bit halves of a 64-bit FNV-1a
hash. A string counts as new when either of its bits was unset, so false
"duplicate" answers are possible (both halves collide) but false "new"
answers are not.

Each bitset spans the full 2**31 bits. It is stored as a fixed table of
64 KiB bytearray pages, allocated the first time a bit inside them is set
and then updated in place. Memory never exceeds the 256 MiB of the dense
bitset and grows with the pages touched, not with the number of adds.
"""

__all__ = ["BigSetOfHashes", "Bitset", "fnv1a_64"]

_FNV_OFFSET_BASIS = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = (1 << 64) - 1
_MASK_31 = 0x7FFFFFFF

_INDEX_BITS = 31
_PAGE_BITS = 19  # 2**19 bits = 64 KiB per page
_PAGE_MASK = (1 << _PAGE_BITS) - 1


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a hash."""
    h = _FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    return h


class Bitset:
    """Fixed-capacity bitset over [0, 2**31).

    Attributes:
        count: Number of bits set
    """

    __slots__ = ("_pages", "count")

    def __init__(self) -> None:
        self._pages: list[bytearray | None] = [None] * (1 << (_INDEX_BITS - _PAGE_BITS))
        self.count = 0

    def test_and_set(self, i: int) -> bool:
        """Set bit i; True if it was already set."""
        if not 0 <= i <= _MASK_31:
            msg = f"Bit index {i} is outside [0, 2**{_INDEX_BITS})"
            raise IndexError(msg)
        page = self._pages[i >> _PAGE_BITS]
        if page is None:
            page = self._pages[i >> _PAGE_BITS] = bytearray((_PAGE_MASK + 1) >> 3)
        offset = i & _PAGE_MASK
        mask = 1 << (offset & 7)
        if page[offset >> 3] & mask:
            return True
        page[offset >> 3] |= mask
        self.count += 1
        return False

    def __contains__(self, i: int) -> bool:
        page = self._pages[i >> _PAGE_BITS] if 0 <= i <= _MASK_31 else None
        if page is None:
            return False
        offset = i & _PAGE_MASK
        return bool(page[offset >> 3] & (1 << (offset & 7)))

    @property
    def allocated_bytes(self) -> int:
        """Bytes held by allocated pages."""
        return sum(len(page) for page in self._pages if page is not None)


class BigSetOfHashes:
    """Hash set of strings kept as two bitsets of 31-bit hash halves."""

    __slots__ = ("_hi", "_lo")

    def __init__(self) -> None:
        self._hi = Bitset()
        self._lo = Bitset()

    def add(self, s: str) -> bool:
        """Add s; True if it was not seen before."""
        return self.add_hash(fnv1a_64(s.encode("utf-8")))

    def add_hash(self, h: int) -> bool:
        """Add a precomputed 64-bit hash; True if it was not seen before."""
        lo_seen = self._lo.test_and_set(h & _MASK_31)
        hi_seen = self._hi.test_and_set((h >> 32) & _MASK_31)
        return not (lo_seen and hi_seen)

    def __len__(self) -> int:
        """Number of distinct low halves seen (a lower bound on adds)."""
        return self._lo.count
