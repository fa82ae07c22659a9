"""Kirsch-Mitzenmacher double hashing.

Two independent hash families (64-bit MurmurHash3 via mmh3 and xxHash64)
produce ``h1`` and ``h2``; the i-th index is ``(h1 + i * h2) mod m``.
"""
from __future__ import annotations

import random
import struct
from typing import Any, Iterator, Optional, Tuple

import mmh3
import xxhash

MAX_SEED1 = (1 << 32) - 1
MAX_SEED2 = (1 << 64) - 1

# Type tags keep 1, "1" and b"1" apart.
_TAG_STR = b"s"
_TAG_BYTES = b"b"
_TAG_INT = b"i"
_TAG_BOOL = b"?"
_TAG_FLOAT = b"f"
_TAG_NONE = b"n"
_TAG_TUPLE = b"t"
_TAG_OBJECT = b"o"


def item_bytes(item: Any) -> bytes:
    """Return a deterministic byte encoding of ``item``.

    Python's builtin ``hash`` is salted per process, so items are encoded
    explicitly instead.

    Raises:
        TypeError: If ``item`` has no deterministic encoding.
    """
    if isinstance(item, str):
        return _TAG_STR + item.encode("utf-8", "surrogatepass")
    if isinstance(item, (bytes, bytearray, memoryview)):
        return _TAG_BYTES + bytes(item)
    if isinstance(item, bool):
        return _TAG_BOOL + (b"\x01" if item else b"\x00")
    if isinstance(item, int):
        length = item.bit_length() // 8 + 1
        return _TAG_INT + item.to_bytes(length, "little", signed=True)
    if isinstance(item, float):
        if item == 0.0:
            item = 0.0  # -0.0 == 0.0
        return _TAG_FLOAT + struct.pack("<d", item)
    if item is None:
        return _TAG_NONE
    if isinstance(item, tuple):
        parts = [_TAG_TUPLE, struct.pack("<I", len(item))]
        for element in item:
            encoded = item_bytes(element)
            parts.append(struct.pack("<I", len(encoded)))
            parts.append(encoded)
        return b"".join(parts)
    if hasattr(type(item), "__bytes__"):
        return _TAG_OBJECT + bytes(item)
    raise TypeError(f"cannot hash item of type {type(item).__name__!r} deterministically")


def _check_seed(name: str, seed: int, maximum: int) -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= seed <= maximum:
        raise ValueError(f"{name} must be in [0, {maximum}]")
    return seed


class IndexSequence:
    """Lazy, restartable sequence of ``count`` indices in ``[0, size)``."""

    __slots__ = ("_h1", "_h2", "_count", "_size")

    def __init__(self, h1: int, h2: int, count: int, size: int) -> None:
        self._h1 = h1 % size
        self._h2 = h2 % size
        # Ensure h2 != 0 so the arithmetic progression advances.
        if self._h2 == 0:
            self._h2 = 1
        self._count = count
        self._size = size

    def __iter__(self) -> Iterator[int]:
        h1, h2, size = self._h1, self._h2, self._size
        for i in range(self._count):
            yield (h1 + i * h2) % size

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"IndexSequence({list(self)!r})"


class IndexGenerator:
    """Map items to ``num_hashes`` positions in ``[0, num_bits)``.

    Args:
        num_bits: Size of the addressed array.
        num_hashes: Number of positions per item.
        seed1: Seed for MurmurHash3, an unsigned 32-bit value. Random if None.
        seed2: Seed for xxHash64, an unsigned 64-bit value. Random if None.

    Raises:
        ValueError: If sizes are not positive or a seed is out of range.
    """

    def __init__(
        self,
        num_bits: int,
        num_hashes: int,
        *,
        seed1: Optional[int] = None,
        seed2: Optional[int] = None,
    ) -> None:
        if num_bits <= 0:
            raise ValueError("num_bits must be positive")
        if num_hashes <= 0:
            raise ValueError("num_hashes must be positive")

        self.num_bits = num_bits
        self.num_hashes = num_hashes
        self.seed1 = random.getrandbits(32) if seed1 is None else _check_seed("seed1", seed1, MAX_SEED1)
        self.seed2 = random.getrandbits(64) if seed2 is None else _check_seed("seed2", seed2, MAX_SEED2)

    def base_hashes(self, item: Any) -> Tuple[int, int]:
        """Return the unreduced ``(h1, h2)`` pair for ``item``."""
        data = item_bytes(item)
        h1 = mmh3.hash64(data, self.seed1, signed=False)[0]
        h2 = xxhash.xxh64(data, seed=self.seed2).intdigest()
        return h1, h2

    def indices(self, item: Any) -> IndexSequence:
        """Return the positions ``item`` maps to."""
        h1, h2 = self.base_hashes(item)
        return IndexSequence(h1, h2, self.num_hashes, self.num_bits)

    @property
    def seeds(self) -> Tuple[int, int]:
        return self.seed1, self.seed2

    def compatible_with(self, other: "IndexGenerator") -> bool:
        """True if both generators map every item to the same positions."""
        return (
            self.num_bits == other.num_bits
            and self.num_hashes == other.num_hashes
            and self.seeds == other.seeds
        )
