"""Bloom filters with double hashing.

- BitSetFilter: standard Bloom filter for membership testing
- CountingFilter: Bloom filter variant that supports item removal
"""

__version__ = "0.1.0"

from bloomset.bloom_filter import BitSetFilter
from bloomset.counters import CounterArray, bits_for_max
from bloomset.counting_filter import CountingFilter
from bloomset.hashing import IndexGenerator, IndexSequence, item_bytes
from bloomset.sizing import (
    FilterParams,
    estimated_false_positive_rate,
    needed_bits,
    optimal_num_hashes,
)

__all__ = [
    "BitSetFilter",
    "CountingFilter",
    "CounterArray",
    "FilterParams",
    "IndexGenerator",
    "IndexSequence",
    "bits_for_max",
    "estimated_false_positive_rate",
    "item_bytes",
    "needed_bits",
    "optimal_num_hashes",
]
