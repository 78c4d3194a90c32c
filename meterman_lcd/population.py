from __future__ import annotations

import bisect
from typing import Iterator, List, Optional

from .levels import LevelsSet


class Population:
    """Bounded collection of LevelsSets, kept sorted by quality.

    Entries of equal quality keep insertion order, so the best pick among
    equals is the most recently added one, and eviction drops the oldest.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._keys: List[int] = []
        self._sets: List[LevelsSet] = []
        self.total = 0

    def __len__(self) -> int:
        return len(self._sets)

    def __iter__(self) -> Iterator[LevelsSet]:
        """Iterate from worst to best."""
        return iter(list(self._sets))

    def descending(self) -> List[LevelsSet]:
        return self._sets[::-1]

    @property
    def full(self) -> bool:
        return len(self._sets) >= self.capacity

    def add(self, levels: LevelsSet) -> Optional[LevelsSet]:
        """Insert levels, returning the evicted entry if over capacity."""
        index = bisect.bisect_right(self._keys, levels.quality)
        self._keys.insert(index, levels.quality)
        self._sets.insert(index, levels)
        self.total += levels.quality
        if len(self._sets) > self.capacity:
            return self.evict_worst()
        return None

    def best(self) -> Optional[LevelsSet]:
        return self._sets[-1] if self._sets else None

    def worst(self) -> Optional[LevelsSet]:
        return self._sets[0] if self._sets else None

    def pop_best(self) -> Optional[LevelsSet]:
        if not self._sets:
            return None
        self._keys.pop()
        lev = self._sets.pop()
        self.total -= lev.quality
        return lev

    def evict_worst(self) -> Optional[LevelsSet]:
        if not self._sets:
            return None
        self._keys.pop(0)
        lev = self._sets.pop(0)
        self.total -= lev.quality
        return lev

    def average(self) -> float:
        if not self._sets:
            return 0.0
        return self.total / len(self._sets)

    def clear(self) -> None:
        self._keys.clear()
        self._sets.clear()
        self.total = 0
