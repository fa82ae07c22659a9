"""Standard Bloom filter using double hashing.

Uses two independent hash families (MurmurHash3 via mmh3 and xxHash64)
combined with the Kirsch-Mitzenmacher optimization to derive k hash functions.
If an item was inserted, ``contains`` is guaranteed to return True for it.
Items never inserted return True with probability close to the configured
false positive rate.

There is no ``remove``: clearing bits shared with other items would introduce
false negatives. Use :class:`bloomset.counting_filter.CountingFilter` when
removal is needed.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

from bloomset.hashing import IndexGenerator, IndexSequence
from bloomset.sizing import FilterParams

logger = logging.getLogger(__name__)


class BitSetFilter:
    """Bloom filter backed by a bytearray bitset.

    Prefer the :meth:`with_rate` and :meth:`with_size` constructors.
    """

    def __init__(
        self,
        params: FilterParams,
        *,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> None:
        """Initialize an empty filter.

        Args:
            params: Validated bit array size and hash count.
            seed1: Seed for MurmurHash3 (random if None).
            seed2: Seed for xxHash64 (random if None).
        """
        self._params = params
        self._indexer = IndexGenerator(params.num_bits, params.num_hashes, seed1=seed1, seed2=seed2)
        self._bit_array = bytearray((params.num_bits + 7) // 8)

        logger.debug(
            "BitSetFilter created: num_bits=%d, num_hashes=%d",
            params.num_bits,
            params.num_hashes,
        )

    @classmethod
    def with_rate(
        cls,
        false_positive_rate: float,
        expected_num_items: int,
        *,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> "BitSetFilter":
        """Create a filter sized for ``expected_num_items`` at ``false_positive_rate``.

        Raises:
            ValueError: If the rate is outside (0, 1) or the item count is not positive.
        """
        params = FilterParams.for_rate(false_positive_rate, expected_num_items)
        return cls(params, seed1=seed1, seed2=seed2)

    @classmethod
    def with_size(
        cls,
        num_bits: int,
        num_hashes: int,
        *,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> "BitSetFilter":
        """Create a filter with an explicit bit count and hash count.

        Raises:
            ValueError: If num_bits or num_hashes is not positive.
        """
        return cls(FilterParams.for_size(num_bits, num_hashes), seed1=seed1, seed2=seed2)

    def insert(self, item: Any) -> None:
        """Insert ``item`` into the filter."""
        for bit_index in self._indexer.indices(item):
            self._bit_array[bit_index >> 3] |= 1 << (bit_index & 7)

    def update(self, items: Iterable[Any]) -> None:
        """Insert all ``items`` into the filter."""
        for item in items:
            self.insert(item)

    def contains(self, item: Any) -> bool:
        """Return True if ``item`` may be present, False if definitely absent."""
        for bit_index in self._indexer.indices(item):
            if not (self._bit_array[bit_index >> 3] & (1 << (bit_index & 7))):
                return False
        return True

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def indices(self, item: Any) -> IndexSequence:
        """Bit positions ``item`` maps to in this filter."""
        return self._indexer.indices(item)

    def clear(self) -> None:
        """Unset every bit."""
        self._bit_array[:] = bytes(len(self._bit_array))

    def union(self, other: "BitSetFilter") -> bool:
        """Add every item of ``other`` to this filter in place.

        Returns:
            True if any bit changed.

        Raises:
            ValueError: If the filters differ in size, hash count or seeds.
        """
        self._check_compatible(other)
        changed = False
        for i, theirs in enumerate(other._bit_array):
            merged = self._bit_array[i] | theirs
            if merged != self._bit_array[i]:
                self._bit_array[i] = merged
                changed = True
        return changed

    def intersect(self, other: "BitSetFilter") -> bool:
        """Keep only bits set in both filters.

        Returns:
            True if any bit changed.

        Raises:
            ValueError: If the filters differ in size, hash count or seeds.
        """
        self._check_compatible(other)
        changed = False
        for i, theirs in enumerate(other._bit_array):
            merged = self._bit_array[i] & theirs
            if merged != self._bit_array[i]:
                self._bit_array[i] = merged
                changed = True
        return changed

    def _check_compatible(self, other: "BitSetFilter") -> None:
        if not isinstance(other, BitSetFilter):
            raise TypeError(f"cannot combine with {other.__class__.__name__}")
        if not self._indexer.compatible_with(other._indexer):
            raise ValueError("filters must share num_bits, num_hashes and seeds")

    @property
    def num_bits(self) -> int:
        return self._params.num_bits

    @property
    def num_hashes(self) -> int:
        return self._params.num_hashes

    @property
    def params(self) -> FilterParams:
        return self._params

    @property
    def seeds(self) -> Tuple[int, int]:
        return self._indexer.seeds

    @property
    def fill_ratio(self) -> float:
        """Fraction of bits currently set."""
        set_bits = sum(bin(byte).count("1") for byte in self._bit_array)
        return set_bits / self._params.num_bits

    @property
    def current_false_positive_rate(self) -> float:
        """False positive probability implied by the current fill ratio."""
        return self.fill_ratio ** self._params.num_hashes

    @property
    def bit_array(self) -> bytearray:
        """Expose the underlying bit array for inspection."""
        return self._bit_array

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_bits={self.num_bits}, num_hashes={self.num_hashes})"
