"""Counting Bloom filter with removal support.

Each position holds a small saturating counter instead of a single bit.
Insert increments the counters at an item's positions, ``remove`` decrements
them, and ``contains`` reports True only if all of them are nonzero.

Saturation: a counter at ``max_count`` is never incremented further, so it can
under-represent the number of items sharing the slot. Removing through such a
slot may then zero it early.

Removal risk: removing an item that was never inserted (but tests positive)
or removing an item more times than it was inserted decrements counters other
items depend on, and can make those items report False. Callers are
responsible for only removing items they inserted.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

from bloomset.counters import CounterArray, bits_for_max
from bloomset.hashing import IndexGenerator, IndexSequence
from bloomset.sizing import FilterParams

logger = logging.getLogger(__name__)

DEFAULT_COUNTER_BITS = 4


class CountingFilter:
    """Bloom filter of packed saturating counters.

    Prefer the :meth:`with_rate` and :meth:`with_size` constructors.
    """

    def __init__(
        self,
        params: FilterParams,
        *,
        bits_per_counter: int = DEFAULT_COUNTER_BITS,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> None:
        """Initialize an empty filter.

        Args:
            params: Validated counter count (``num_bits``) and hash count.
            bits_per_counter: Counter width in bits, 1 to 32 (default 4,
                saturating at 15).
            seed1: Seed for MurmurHash3 (random if None).
            seed2: Seed for xxHash64 (random if None).

        Raises:
            ValueError: If bits_per_counter is out of range.
        """
        self._params = params
        self._counters = CounterArray(bits_per_counter, params.num_bits)
        self._indexer = IndexGenerator(params.num_bits, params.num_hashes, seed1=seed1, seed2=seed2)

        logger.debug(
            "CountingFilter created: num_bits=%d, num_hashes=%d, bits_per_counter=%d",
            params.num_bits,
            params.num_hashes,
            bits_per_counter,
        )

    @classmethod
    def with_rate(
        cls,
        false_positive_rate: float,
        expected_num_items: int,
        *,
        bits_per_counter: int = DEFAULT_COUNTER_BITS,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> "CountingFilter":
        """Create a filter sized for ``expected_num_items`` at ``false_positive_rate``."""
        params = FilterParams.for_rate(false_positive_rate, expected_num_items)
        return cls(params, bits_per_counter=bits_per_counter, seed1=seed1, seed2=seed2)

    @classmethod
    def with_size(
        cls,
        num_bits: int,
        num_hashes: int,
        *,
        bits_per_counter: int = DEFAULT_COUNTER_BITS,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> "CountingFilter":
        """Create a filter with ``num_bits`` counters and ``num_hashes`` hashes."""
        return cls(
            FilterParams.for_size(num_bits, num_hashes),
            bits_per_counter=bits_per_counter,
            seed1=seed1,
            seed2=seed2,
        )

    bits_for_max = staticmethod(bits_for_max)

    def insert(self, item: Any) -> None:
        """Insert ``item``, saturating counters at ``max_count``."""
        self.insert_get_count(item)

    def insert_get_count(self, item: Any) -> int:
        """Insert ``item`` and return its estimated count before the insert."""
        counters = self._counters
        ceiling = counters.max_value
        lowest = ceiling
        for idx in self._indexer.indices(item):
            current = counters.get(idx)
            if current < lowest:
                lowest = current
            if current < ceiling:
                counters.set(idx, current + 1)
        return lowest

    def update(self, items: Iterable[Any]) -> None:
        """Insert all ``items`` into the filter."""
        for item in items:
            self.insert(item)

    def contains(self, item: Any) -> bool:
        """Return True if ``item`` may be present, False if definitely absent."""
        for idx in self._indexer.indices(item):
            if self._counters.get(idx) == 0:
                return False
        return True

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def remove(self, item: Any) -> int:
        """Remove one occurrence of ``item``.

        Items that test negative are left untouched. Otherwise each of the
        item's counters is decremented, never going below zero.

        Returns:
            The item's estimated count before removal, 0 if it tested negative.
        """
        if not self.contains(item):
            return 0
        counters = self._counters
        lowest = counters.max_value
        for idx in self._indexer.indices(item):
            current = counters.get(idx)
            if current < lowest:
                lowest = current
            if current > 0:
                counters.set(idx, current - 1)
        return lowest

    def estimate_count(self, item: Any) -> int:
        """Upper bound on how many times ``item`` was inserted (capped at ``max_count``)."""
        return min(self._counters.get(idx) for idx in self._indexer.indices(item))

    def indices(self, item: Any) -> IndexSequence:
        """Counter positions ``item`` maps to in this filter."""
        return self._indexer.indices(item)

    def clear(self) -> None:
        """Reset every counter to zero."""
        self._counters.clear()

    @property
    def num_bits(self) -> int:
        """Number of counters."""
        return self._params.num_bits

    @property
    def num_hashes(self) -> int:
        return self._params.num_hashes

    @property
    def params(self) -> FilterParams:
        return self._params

    @property
    def bits_per_counter(self) -> int:
        return self._counters.bits_per_counter

    @property
    def max_count(self) -> int:
        return self._counters.max_value

    @property
    def seeds(self) -> Tuple[int, int]:
        return self._indexer.seeds

    @property
    def counters(self) -> CounterArray:
        """Expose the counter array for inspection."""
        return self._counters

    @property
    def fill_ratio(self) -> float:
        """Fraction of counters above zero."""
        return self._counters.nonzero() / self._params.num_bits

    @property
    def current_false_positive_rate(self) -> float:
        """False positive probability implied by the current fill ratio."""
        return self.fill_ratio ** self._params.num_hashes

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_bits={self.num_bits}, num_hashes={self.num_hashes}, "
            f"bits_per_counter={self.bits_per_counter})"
        )
