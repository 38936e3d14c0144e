"""
Seeded pseudo-random generator for pool generation.

A mulberry32 generator. Every pool ever shared was produced by this exact
sequence, so the output is a compatibility contract: the same seed must give
the same floats on every platform, forever.

All arithmetic is done on unsigned 32-bit patterns; the low 32 bits of
sums, products and xors are the same whether the operands are read as
signed or unsigned, so results match signed 32-bit implementations bit for
bit.
"""

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF

# Golden-ratio style increment added to the state on every draw
_INCREMENT = 0x6D2B79F5

_TWO_POW_32 = 4294967296


def to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= _MASK32
    return value - _TWO_POW_32 if value >= 0x80000000 else value


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def fold_string(text: str) -> int:
    """
    Fold a string into a signed 32-bit integer.

    Iterates UTF-16 code units with hash = hash * 31 + code, wrapping after
    every step.
    """
    encoded = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        value = ((value << 5) - value + code) & _MASK32
    return to_int32(value)


class SeededRandom:
    """
    Deterministic float generator in [0, 1).

    Args:
        seed: String seeds are folded with fold_string; integers are wrapped
            to 32 bits.
    """

    def __init__(self, seed: str | int) -> None:
        if isinstance(seed, str):
            seed = fold_string(seed)
        self._state = int(seed) & _MASK32

    def next(self) -> float:
        self._state = (self._state + _INCREMENT) & _MASK32
        state = self._state
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return (t ^ (t >> 14)) / _TWO_POW_32

    def __call__(self) -> float:
        return self.next()

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.next()

    def pick(self, items: Sequence[T]) -> T:
        """
        Pick one item uniformly.

        Uses floor(next() * len) so historical pools stay reproducible; do not
        replace with rejection sampling.
        """
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[int(self.next() * len(items))]
