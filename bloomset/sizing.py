"""Optimal Bloom filter parameters.

For ``n`` expected items and a target false positive rate ``p``:

    m = ceil(-(n * ln p) / (ln 2)^2)
    k = max(1, round((m / n) * ln 2))
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_LN2 = math.log(2)
_LN2_SQUARED = _LN2 * _LN2


def _check_items(expected_num_items: int) -> None:
    if isinstance(expected_num_items, bool) or not isinstance(expected_num_items, int):
        raise TypeError("expected_num_items must be an integer")
    if expected_num_items <= 0:
        raise ValueError("expected_num_items must be positive")


def needed_bits(false_positive_rate: float, expected_num_items: int) -> int:
    """Return the bit array size for the given rate and item count."""
    if not 0.0 < false_positive_rate < 1.0:
        raise ValueError("false_positive_rate must be in the open interval (0, 1)")
    _check_items(expected_num_items)

    return math.ceil(-(expected_num_items * math.log(false_positive_rate)) / _LN2_SQUARED)


def optimal_num_hashes(num_bits: int, expected_num_items: int) -> int:
    """Return the hash count that minimizes false positives for ``num_bits``."""
    if num_bits <= 0:
        raise ValueError("num_bits must be positive")
    _check_items(expected_num_items)

    return max(1, int(round((num_bits / expected_num_items) * _LN2)))


def estimated_false_positive_rate(num_bits: int, num_hashes: int, num_items: int) -> float:
    """Theoretical false positive rate ``(1 - e^(-k n / m))^k``."""
    if num_bits <= 0:
        raise ValueError("num_bits must be positive")
    if num_hashes <= 0:
        raise ValueError("num_hashes must be positive")
    if num_items <= 0:
        return 0.0
    return (1.0 - math.exp(-num_hashes * num_items / num_bits)) ** num_hashes


@dataclass(frozen=True)
class FilterParams:
    """Immutable ``(num_bits, num_hashes)`` pair shared by both filters."""

    num_bits: int
    num_hashes: int

    @staticmethod
    def for_rate(false_positive_rate: float, expected_num_items: int) -> "FilterParams":
        """Derive optimal parameters from a target rate and capacity."""
        num_bits = needed_bits(false_positive_rate, expected_num_items)
        num_hashes = optimal_num_hashes(num_bits, expected_num_items)
        logger.debug(
            "sized filter: rate=%g items=%d -> num_bits=%d num_hashes=%d",
            false_positive_rate,
            expected_num_items,
            num_bits,
            num_hashes,
        )
        return FilterParams(num_bits=num_bits, num_hashes=num_hashes)

    @staticmethod
    def for_size(num_bits: int, num_hashes: int) -> "FilterParams":
        """Validate explicitly chosen parameters."""
        for name, value in (("num_bits", num_bits), ("num_hashes", num_hashes)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer")
            if value <= 0:
                raise ValueError(f"{name} must be positive")
        return FilterParams(num_bits=num_bits, num_hashes=num_hashes)
