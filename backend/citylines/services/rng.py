"""
City Lines - Seeded Random

XOR-shift PRNG shared by every generation step so a seed reproduces a level.
"""

from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296  # 2^32


class XorShiftRandom:
    """Deterministic PRNG (xorshift32, shifts 13/17/5)."""

    def __init__(self, seed: int):
        seed &= UINT32_MASK
        # xorshift is stuck at zero state
        if seed == 0:
            seed = 1
        self.seed = seed
        self._state = seed

    def next(self) -> float:
        """Returns a number in [0, 1)."""
        x = self._state
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        self._state = x
        return x / UINT32_RANGE

    def next_int(self, min_val: int, max_val: int) -> int:
        """Returns an integer in [min_val, max_val]."""
        if min_val > max_val:
            return min_val
        return min_val + int(self.next() * (max_val - min_val + 1))

    def shuffle(self, arr: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle, returns a new list."""
        result = list(arr)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result

    def choice(self, arr: Sequence[T]) -> Optional[T]:
        if not arr:
            return None
        return arr[self.next_int(0, len(arr) - 1)]
