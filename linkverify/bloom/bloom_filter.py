"""
Bloom filter for LinkVerify.

Fixed-size probabilistic membership set used to encode salted field digests.
A filter never stores what was inserted; it only answers "possibly present"
or "definitely absent".
"""

import logging
import math
from typing import List, Tuple

import numpy as np

from ..errors import DecodeError

logger = logging.getLogger(__name__)

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """FNV-1a 64-bit hash of a byte string."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & _MASK64
    return h


class BloomFilter:
    """
    Bloom filter over strings backed by a numpy boolean bit array.

    The k hash functions are derived from a single FNV-1a family by
    prefixing the input with the decimal hash index ("0", "1", ...). This
    approximates independent hashing well enough for benign membership
    tests; it is not robust against an adversary choosing inputs.
    """

    def __init__(self, size: int, hash_count: int):
        """
        Initialize an empty Bloom filter.

        Args:
            size: Number of bits in the filter
            hash_count: Number of bit positions set per element
        """
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"Bloom filter size must be a positive integer, got {size!r}")
        if not isinstance(hash_count, int) or hash_count <= 0:
            raise ValueError(f"Bloom filter hash count must be a positive integer, got {hash_count!r}")

        self._size = size
        self._hash_count = hash_count
        self._bits = np.zeros(size, dtype=bool)
        self._seed_prefixes = [str(i).encode("ascii") for i in range(hash_count)]

    @property
    def size(self) -> int:
        return self._size

    @property
    def hash_count(self) -> int:
        return self._hash_count

    def _positions(self, element: str) -> List[int]:
        data = element.lower().encode("utf-8")
        return [fnv1a_64(prefix + data) % self._size for prefix in self._seed_prefixes]

    def add(self, element: str):
        """
        Add an element to the filter.

        Args:
            element: Element to add (case-insensitive)
        """
        for position in self._positions(element):
            self._bits[position] = True

    def contains(self, element: str) -> bool:
        """
        Check whether an element might be in the filter.

        Args:
            element: Element to check (case-insensitive)

        Returns:
            False if the element was definitely never added, True otherwise
        """
        return all(self._bits[position] for position in self._positions(element))

    def __contains__(self, element: str) -> bool:
        return self.contains(element)

    def count_set_bits(self) -> int:
        return int(np.count_nonzero(self._bits))

    def fill_ratio(self) -> float:
        return self.count_set_bits() / self._size

    def false_positive_rate(self) -> float:
        """
        Estimate the false positive rate from the current fill.

        Computed as (set_bits / size) ** hash_count. This is a structural
        estimate from the bits actually set, not the classical formula in
        terms of the number of inserted items. The value is reported in
        match metadata.

        Returns:
            Estimated false positive probability in [0, 1]
        """
        return float(self.fill_ratio() ** self._hash_count)

    def similarity(self, other: "BloomFilter") -> float:
        """
        Jaccard similarity between the set bits of two filters.

        Args:
            other: Filter to compare against

        Returns:
            |bits set in both| / |bits set in either|, or 0.0 when the filters
            differ in size or neither has any bit set
        """
        if self._size != other._size:
            return 0.0

        union = np.count_nonzero(self._bits | other._bits)
        if union == 0:
            return 0.0

        intersection = np.count_nonzero(self._bits & other._bits)
        return float(intersection / union)

    def to_hex(self) -> str:
        """
        Serialize the bit array to a hex string.

        Bit i lives in byte i // 8 at bit position i % 8, least significant
        bit first, giving ceil(size / 8) bytes.

        Returns:
            Lowercase hex string
        """
        return np.packbits(self._bits, bitorder="little").tobytes().hex()

    @classmethod
    def from_hex(cls, hex_string: str, size: int, hash_count: int) -> "BloomFilter":
        """
        Rebuild a filter from its hex serialization.

        Bits beyond the decoded bytes stay unset; decoded bits beyond size
        are ignored.

        Args:
            hex_string: Output of to_hex()
            size: Number of bits in the filter
            hash_count: Number of hash functions

        Returns:
            Reconstructed BloomFilter
        """
        if not isinstance(hex_string, str):
            raise DecodeError("Bloom filter data must be a hex string")

        try:
            raw = bytes.fromhex(hex_string)
        except ValueError as e:
            raise DecodeError(f"Failed to decode hex string: {e}") from e

        bloom_filter = cls(size, hash_count)
        bits = np.unpackbits(np.frombuffer(raw, dtype=np.uint8), bitorder="little")[:size]
        bloom_filter._bits[:len(bits)] = bits.astype(bool)

        return bloom_filter

    def __repr__(self) -> str:
        return (f"BloomFilter(size={self._size}, hash_count={self._hash_count}, "
                f"set_bits={self.count_set_bits()})")


def optimal_bloom_parameters(expected_items: int, false_positive_rate: float) -> Tuple[int, int]:
    """
    Calculate filter size and hash count for a target false positive rate.

    Uses the classical sizing m = -n ln(p) / (ln 2)^2 and k = (m / n) ln 2.

    Args:
        expected_items: Number of elements expected per filter
        false_positive_rate: Target false positive probability

    Returns:
        Tuple of (size, hash_count)
    """
    if expected_items <= 0:
        raise ValueError("expected_items must be positive")
    if not 0 < false_positive_rate < 1:
        raise ValueError("false_positive_rate must be between 0 and 1")

    size = math.ceil(-expected_items * math.log(false_positive_rate) / (math.log(2) ** 2))
    hash_count = max(1, round(size / expected_items * math.log(2)))

    logger.debug(f"Calibrated Bloom filter for {expected_items} items: "
                 f"size={size}, hash_count={hash_count}")
    return size, hash_count
