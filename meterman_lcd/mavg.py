from __future__ import annotations

from collections import deque
from typing import Deque

from .const import DEFAULT_HISTORY


class MovingAverage:
    """Integer moving average over the last `size` samples."""

    __slots__ = ("size", "value", "_total", "_history")

    def __init__(self, size: int = DEFAULT_HISTORY):
        self.size = size
        self.value = 0
        self._total = 0
        self._history: Deque[int] = deque()

    def __len__(self) -> int:
        return len(self._history)

    def __repr__(self) -> str:
        return f"MovingAverage(size={self.size}, value={self.value}, history={list(self._history)})"

    def add(self, v: int) -> None:
        self._history.append(v)
        self._total += v
        if len(self._history) > self.size:
            self._total -= self._history.popleft()
        self.value = int(self._total / len(self._history))

    def init(self, v: int) -> None:
        """Fill the history with copies of v."""
        for _ in range(self.size):
            self.add(v)

    def set(self, v: int) -> None:
        """Init with v, but only if nothing has been added yet."""
        if not self._history:
            self.init(v)

    def copy(self) -> "MovingAverage":
        na = MovingAverage(self.size)
        na.value = self.value
        na._total = self._total
        na._history = deque(self._history)
        return na
