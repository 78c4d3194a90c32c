"""On/off thresholds for the digit segments.

Levels are kept as moving averages of the sampled 'off' and 'on' values, and
are updated as images with known content are calibrated. A LevelsSet is one
complete snapshot for all digits, scored by how well it decodes.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .const import DEFAULT_HISTORY, SEGMENTS
from .mavg import MovingAverage


def threshold(lo: int, hi: int, perc: int) -> int:
    """Point perc percent of the way from lo to hi."""
    d = (hi - lo) * perc
    q = abs(d) // 100
    return lo + (q if d >= 0 else -q)


class SegmentLevels:
    __slots__ = ("min", "max", "threshold")

    def __init__(self, history: int = DEFAULT_HISTORY):
        self.min = MovingAverage(history)
        self.max = MovingAverage(history)
        self.threshold = 0

    def update(self, perc: int) -> None:
        self.threshold = threshold(self.min.value, self.max.value, perc)

    def copy(self) -> "SegmentLevels":
        sl = SegmentLevels.__new__(SegmentLevels)
        sl.min = self.min.copy()
        sl.max = self.max.copy()
        sl.threshold = self.threshold
        return sl


class DigitLevels:
    """Per segment levels of one digit, plus the digit wide average."""

    __slots__ = ("segments", "min", "max", "threshold")

    def __init__(self, history: int = DEFAULT_HISTORY):
        self.segments: List[SegmentLevels] = [SegmentLevels(history) for _ in range(SEGMENTS)]
        self.min = 0
        self.max = 0
        self.threshold = 0

    def copy(self) -> "DigitLevels":
        dl = DigitLevels.__new__(DigitLevels)
        dl.segments = [s.copy() for s in self.segments]
        dl.min = self.min
        dl.max = self.max
        dl.threshold = self.threshold
        return dl

    def set_min_max(self, lo: int, hi: int, perc: int) -> None:
        self.min = lo
        self.max = hi
        for s in self.segments:
            s.min.init(lo)
            s.max.init(hi)
            s.update(perc)
        self.threshold = threshold(lo, hi, perc)

    def update(self, perc: int) -> None:
        """Recompute all thresholds from the current moving averages."""
        for s in self.segments:
            s.update(perc)
        self.min = sum(s.min.value for s in self.segments) // SEGMENTS
        self.max = sum(s.max.value for s in self.segments) // SEGMENTS
        self.threshold = threshold(self.min, self.max, perc)

    def calibrate(self, samples: Sequence[int], off: int, mask: int, perc: int,
                  track_off: bool = False) -> None:
        """Fold one set of samples into the levels, using mask as the truth."""
        tmax = 0
        tcount = 0
        for i, s in enumerate(self.segments):
            if mask & (1 << i):
                s.max.add(samples[i])
                tmax += s.max.value
                tcount += 1
                if track_off:
                    s.min.add(off)
                else:
                    s.min.set(off)
            else:
                s.min.add(samples[i])
        # Segments never seen on get the average of those that were.
        if tcount:
            for s in self.segments:
                s.max.set(tmax // tcount)
        self.update(perc)

    def min_values(self) -> List[int]:
        return [s.min.value for s in self.segments]

    def max_values(self) -> List[int]:
        return [s.max.value for s in self.segments]


class LevelsSet:
    """Calibration snapshot for every digit, with decode quality accounting."""

    __slots__ = ("digits", "good", "bad", "quality")

    def __init__(self, digits: Optional[List[DigitLevels]] = None, quality: int = 0):
        self.digits: List[DigitLevels] = digits if digits is not None else []
        self.good = 0
        self.bad = 0
        self.quality = quality

    def __repr__(self) -> str:
        return f"LevelsSet(quality={self.quality}, good={self.good}, bad={self.bad}, digits={len(self.digits)})"

    def add_digit(self, history: int) -> int:
        self.digits.append(DigitLevels(history))
        return len(self.digits) - 1

    def copy(self) -> "LevelsSet":
        # Vote counters start afresh in the copy.
        return LevelsSet([d.copy() for d in self.digits], self.quality)

    def update_quality(self) -> int:
        total = self.good + self.bad
        if total:
            self.quality = self.good * 100 // total
        return self.quality

    def reset_votes(self) -> None:
        self.good = 0
        self.bad = 0
