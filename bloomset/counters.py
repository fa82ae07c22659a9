"""Packed vector of fixed-width unsigned counters."""
from __future__ import annotations

MAX_COUNTER_BITS = 32


def bits_for_max(max_value: int) -> int:
    """Return the number of bits needed to store ``max_value``."""
    if max_value <= 0:
        raise ValueError("max_value must be positive")
    return max_value.bit_length()


class CounterArray:
    """``count`` counters of ``bits_per_counter`` bits each, packed into a bytearray.

    Counter ``i`` occupies bits ``[i * w, (i + 1) * w)`` of the buffer read as a
    little-endian integer, so a counter may straddle a byte boundary.
    """

    __slots__ = ("_bits_per_counter", "_count", "_mask", "_bytes")

    def __init__(self, bits_per_counter: int, count: int) -> None:
        if isinstance(bits_per_counter, bool) or not isinstance(bits_per_counter, int):
            raise TypeError("bits_per_counter must be an integer")
        if not 1 <= bits_per_counter <= MAX_COUNTER_BITS:
            raise ValueError(f"bits_per_counter must be between 1 and {MAX_COUNTER_BITS}")
        if count <= 0:
            raise ValueError("count must be positive")

        self._bits_per_counter = bits_per_counter
        self._count = count
        self._mask = (1 << bits_per_counter) - 1
        self._bytes = bytearray((bits_per_counter * count + 7) // 8)

    @classmethod
    def with_max(cls, max_value: int, count: int) -> "CounterArray":
        """Create an array whose counters can hold at least ``max_value``."""
        return cls(bits_for_max(max_value), count)

    def _span(self, index: int):
        if not 0 <= index < self._count:
            raise IndexError(f"counter index {index} out of range (0 to {self._count - 1})")
        bit_start = index * self._bits_per_counter
        byte_start = bit_start >> 3
        byte_end = (bit_start + self._bits_per_counter + 7) >> 3
        return byte_start, byte_end, bit_start & 7

    def get(self, index: int) -> int:
        byte_start, byte_end, shift = self._span(index)
        chunk = int.from_bytes(self._bytes[byte_start:byte_end], "little")
        return (chunk >> shift) & self._mask

    def set(self, index: int, value: int) -> None:
        """Store ``value`` at ``index``.

        Raises:
            ValueError: If ``value`` is negative or exceeds ``max_value``.
        """
        if not 0 <= value <= self._mask:
            raise ValueError(
                f"value {value} out of range, max value this array can hold is {self._mask}"
            )
        byte_start, byte_end, shift = self._span(index)
        chunk = int.from_bytes(self._bytes[byte_start:byte_end], "little")
        chunk = (chunk & ~(self._mask << shift)) | (value << shift)
        self._bytes[byte_start:byte_end] = chunk.to_bytes(byte_end - byte_start, "little")

    def clear(self) -> None:
        self._bytes[:] = bytes(len(self._bytes))

    def nonzero(self) -> int:
        """Number of counters with a value above zero."""
        if not any(self._bytes):
            return 0
        return sum(1 for i in range(self._count) if self.get(i))

    def __len__(self) -> int:
        return self._count

    @property
    def bits_per_counter(self) -> int:
        return self._bits_per_counter

    @property
    def max_value(self) -> int:
        return self._mask

    @property
    def raw(self) -> bytearray:
        """Expose the backing buffer for inspection."""
        return self._bytes
