"""Deterministic random stream for floor plan generation.

A 32-bit xorshift generator. State lives in the `SeededRng` instance only;
there is no module-level random state so independent generations (and
threads) never share a stream.
"""
from __future__ import annotations
from typing import List, MutableSequence, Sequence, Tuple, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0

# Large primes used to decorrelate attempt / scale sub-streams.
ATTEMPT_SEED_STRIDE = 7919
SCALE_SEED_STRIDE = 3571


def seed_to_state(seed: int) -> int:
    """Fold an arbitrary integer seed into a non-zero 32-bit state."""
    state = int(seed) & _MASK32
    return state or 1


def xorshift32(state: int) -> Tuple[int, float]:
    """Advance `state` once. Returns (next_state, value in [0, 1))."""
    state ^= (state << 13) & _MASK32
    state ^= state >> 17
    state ^= (state << 5) & _MASK32
    state &= _MASK32
    return state, state / _TWO_POW_32


def derive_seed(seed: int, index: int, stride: int = ATTEMPT_SEED_STRIDE) -> int:
    return int(seed) + index * stride


class SeededRng:
    """Small random.Random-like facade over `xorshift32`."""

    __slots__ = ("state",)

    def __init__(self, seed: int):
        self.state = seed_to_state(seed)

    def random(self) -> float:
        self.state, value = xorshift32(self.state)
        return value

    def randint(self, lo: int, hi: int) -> int:
        """Inclusive on both ends, like random.randint."""
        return int(self.random() * (hi - lo + 1)) + lo

    def uniform(self, lo: float, hi: float) -> float:
        return lo + self.random() * (hi - lo)

    def choice(self, values: Sequence[T]) -> T:
        if not values:
            raise IndexError("Cannot choose from an empty sequence")
        return values[self.randint(0, len(values) - 1)]

    def shuffle(self, values: MutableSequence[T]) -> None:
        # Fisher-Yates, walking down from the end
        for index in range(len(values) - 1, 0, -1):
            swap = self.randint(0, index)
            values[index], values[swap] = values[swap], values[index]

    def shuffled(self, values: Sequence[T]) -> List[T]:
        out = list(values)
        self.shuffle(out)
        return out


__all__ = [
    "ATTEMPT_SEED_STRIDE",
    "SCALE_SEED_STRIDE",
    "SeededRng",
    "derive_seed",
    "seed_to_state",
    "xorshift32",
]
