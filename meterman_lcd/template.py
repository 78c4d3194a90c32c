"""Digit templates and anchored digits.

A template describes one size/style of 7 segment digit with all points
relative to the top left corner of the digit. Digits are created from a
template by offsetting every point by the digit's absolute position, so
several digits of the same size share one template.
"""
from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .const import (
    DEFAULT_OFF_MARGIN, DEFAULT_ON_MARGIN, SEG_BL, SEG_BM, SEG_BR, SEG_MM,
    SEG_TL, SEG_TM, SEG_TR, SEGMENTS,
)
from .exceptions import ConfigError
from .geometry import Point, PointList, Quad, adjust, offset_points, segment_quad, split
from .image import LuminanceImage, Region, sample_region

_LOGGER = logging.getLogger(__name__)


class Segment(NamedTuple):
    quad: Quad
    points: PointList


class Template:
    def __init__(self, name: str, bbox: Sequence[int], width: int,
                 dp: Optional[Sequence[int]] = None,
                 on_margin: int = DEFAULT_ON_MARGIN,
                 off_margin: int = DEFAULT_OFF_MARGIN):
        if len(bbox) != 6:
            raise ConfigError(f"Invalid bounding box length (expected 6, got {len(bbox)})")
        dp = list(dp or [])
        if len(dp) not in (0, 2):
            raise ConfigError(f"Invalid decimal point (expected 0 or 2 values, got {len(dp)})")
        if width <= 0:
            raise ConfigError(f"Invalid segment width {width}")
        self.name = name
        self.width = width
        # Top left is the implied origin.
        self.bb = Quad.from_ints([0, 0, *bbox])
        self.dp: PointList = Point(dp[0], dp[1]).block((width + 1) // 2) if dp else []

        tl, tr, br, bl = self.bb
        self.mr = split(tr, br, 2)[0]
        self.tmr = adjust(self.mr, tr, width // 2)
        self.bmr = adjust(self.mr, br, width // 2)
        self.ml = split(tl, bl, 2)[0]
        self.tml = adjust(self.ml, tl, width // 2)
        self.bml = adjust(self.ml, bl, width // 2)

        # The 'off' samples come from the blank squares inside the upper and lower halves.
        upper = Quad(tl, tr, self.bmr, self.bml).inner(width + off_margin)
        lower = Quad(self.tml, self.tmr, br, bl).inner(width + off_margin)
        self.off: PointList = upper.points() + lower.points()

        # Order must match the segment bit allocation.
        quads = [None] * SEGMENTS
        quads[SEG_TL] = segment_quad(tl, self.ml, tr, self.mr, width, on_margin)
        quads[SEG_TM] = segment_quad(tl, tr, bl, br, width, on_margin)
        quads[SEG_TR] = segment_quad(tr, self.mr, tl, self.ml, width, on_margin)
        quads[SEG_BR] = segment_quad(self.mr, br, self.ml, bl, width, on_margin)
        quads[SEG_BM] = segment_quad(bl, br, self.ml, self.mr, width, on_margin)
        quads[SEG_BL] = segment_quad(self.ml, bl, self.mr, br, width, on_margin)
        quads[SEG_MM] = segment_quad(self.tml, self.tmr, bl, br, width, on_margin)
        self.segments: List[Segment] = [Segment(q, q.points()) for q in quads]
        _LOGGER.debug("Template %s: %d off points, segment points %s",
                      name, len(self.off), [len(s.points) for s in self.segments])

    def __repr__(self) -> str:
        return f"Template({self.name!r}, bb={tuple(self.bb)}, width={self.width})"


class Digit:
    """One 7 segment digit at an absolute position in the image.

    The digit's levels live in the decoder's current LevelsSet, at `index`.
    """

    def __init__(self, index: int, template: Template, x: int, y: int):
        self.index = index
        self.template = template
        self.pos = Point(x, y)
        self.bb = template.bb.offset(x, y)
        self.tmr = template.tmr.offset(x, y)
        self.tml = template.tml.offset(x, y)
        self.bmr = template.bmr.offset(x, y)
        self.bml = template.bml.offset(x, y)
        self.off = Region(offset_points(template.off, x, y))
        self.dp = Region(offset_points(template.dp, x, y))
        self.segments: List[Segment] = [
            Segment(s.quad.offset(x, y), offset_points(s.points, x, y))
            for s in template.segments
        ]
        self._regions = [Region(s.points) for s in self.segments]

    def __repr__(self) -> str:
        return f"Digit({self.index}, {self.template.name!r}, pos={tuple(self.pos)})"

    @property
    def has_dp(self) -> bool:
        return len(self.dp) > 0

    def sample_segments(self, img: LuminanceImage, inverse: bool = False) -> List[int]:
        return [sample_region(img, r, inverse) for r in self._regions]

    def sample_off(self, img: LuminanceImage, inverse: bool = False) -> int:
        return sample_region(img, self.off, inverse)

    def sample_dp(self, img: LuminanceImage, inverse: bool = False) -> int:
        if not self.has_dp:
            return 0
        return sample_region(img, self.dp, inverse)

    def markers(self) -> Tuple[Point, ...]:
        return (*self.bb, self.tmr, self.tml, self.bmr, self.bml)
