"""Calibration file format.

One record per line, comma separated integers:

    index,quality
    index,digit,segment,min,max

The first form opens a new LevelsSet, the second sets the moving averages of
one segment in the set most recently opened. Sets are written best first.
"""
from __future__ import annotations

import logging
import re
from typing import IO, Iterable, List, Optional

from .const import SEGMENTS
from .levels import LevelsSet

_LOGGER = logging.getLogger(__name__)

_INT = re.compile(r"-?[0-9]+")


def write_levels(fp: IO[str], sets: Iterable[LevelsSet]) -> int:
    count = 0
    for index, lev in enumerate(sets):
        fp.write(f"{index},{lev.quality}\n")
        for d, dl in enumerate(lev.digits):
            for s, sl in enumerate(dl.segments):
                fp.write(f"{index},{d},{s},{sl.min.value},{sl.max.value}\n")
        count += 1
    return count


def _parse_line(text: str, lineno: int) -> Optional[List[int]]:
    tokens = text.split(",")
    for tok in tokens:
        if not _INT.fullmatch(tok):
            _LOGGER.warning("Calibration line %d: invalid number %r", lineno, tok)
            return None
    values = [int(tok) for tok in tokens]
    if len(values) not in (2, 5):
        _LOGGER.warning("Calibration line %d: field count mismatch (%d)", lineno, len(values))
        return None
    return values


def read_levels(fp: IO[str], base: LevelsSet, max_levels: int, perc: int) -> List[LevelsSet]:
    """Parse saved levels, using copies of base for each new set.

    Bad lines are logged and skipped.
    """
    sets: List[LevelsSet] = []
    cur: Optional[LevelsSet] = None
    open_index = -1
    for lineno, line in enumerate(fp, start=1):
        line = line.strip()
        if not line:
            continue
        v = _parse_line(line, lineno)
        if v is None:
            continue
        index = v[0]
        if index < 0 or index >= max_levels:
            _LOGGER.warning("Calibration line %d: level index (%d) out of range, max %d",
                            lineno, index, max_levels)
            continue
        if index < open_index:
            _LOGGER.warning("Calibration line %d: level index (%d) precedes current index %d",
                            lineno, index, open_index)
            continue
        if index != open_index or cur is None:
            cur = base.copy()
            cur.quality = 100
            open_index = index
            sets.append(cur)
        if len(v) == 2:
            cur.quality = v[1]
            continue
        _, digit, seg, lo, hi = v
        if digit < 0 or digit >= len(cur.digits):
            _LOGGER.warning("Calibration line %d: out of range digit (%d)", lineno, digit)
            continue
        if seg < 0 or seg >= SEGMENTS:
            _LOGGER.warning("Calibration line %d: out of range segment (%d)", lineno, seg)
            continue
        sl = cur.digits[digit].segments[seg]
        sl.min.init(lo)
        sl.max.init(hi)
    for lev in sets:
        for dl in lev.digits:
            dl.update(perc)
    return sets
