"""Integer geometry used to lay out digits and segments.

All coordinates are integer pixels. Divisions truncate toward zero so that
the derived segment regions are the same whatever the sign of the offsets.
"""
from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Sequence

# Corner indices of a quad.
TL = 0
TR = 1
BR = 2
BL = 3


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _round(v: float) -> int:
    """Round half away from zero (v is never negative here)."""
    return int(math.floor(v + 0.5))


class Point(NamedTuple):
    x: int
    y: int

    def offset(self, x: int, y: int) -> "Point":
        return Point(self.x + x, self.y + y)

    def block(self, w: int) -> List["Point"]:
        """Points of the square of side w centred on this point."""
        h = w // 2
        return [
            Point(x, y)
            for x in range(self.x - h, self.x + h + 1)
            for y in range(self.y - h, self.y + h + 1)
        ]


PointList = List[Point]


def adjust(s: Point, e: Point, d: int) -> Point:
    """Return the point moved from s toward e by d pixels."""
    dx = e.x - s.x
    dy = e.y - s.y
    if dx == 0 and dy == 0:
        return s
    length = _round(math.sqrt(dx * dx + dy * dy) + 0.5)
    return Point(s.x + _div(d * dx, length), s.y + _div(d * dy, length))


def split(start: Point, end: Point, sections: int) -> PointList:
    """Return the sections-1 points dividing the line into equal parts."""
    lx = end.x - start.x
    ly = end.y - start.y
    return [
        Point(start.x + _div(lx * i, sections), start.y + _div(ly * i, sections))
        for i in range(1, sections)
    ]


def offset_points(points: Iterable[Point], x: int, y: int) -> PointList:
    return [Point(p.x + x, p.y + y) for p in points]


def _orientation(p: Point, q: Point, r: Point) -> int:
    v = (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)
    if v == 0:
        return 0
    return 1 if v > 0 else 2


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """True if q lies within the bounding rectangle of p and r."""
    return (min(p.x, r.x) <= q.x <= max(p.x, r.x)
            and min(p.y, r.y) <= q.y <= max(p.y, r.y))


def _intersect(p1: Point, q1: Point, p2: Point, q2: Point) -> bool:
    o1 = _orientation(p1, q1, p2)
    o2 = _orientation(p1, q1, q2)
    o3 = _orientation(p2, q2, p1)
    o4 = _orientation(p2, q2, q1)
    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


class Quad(NamedTuple):
    """Four corners in the order TL, TR, BR, BL."""

    tl: Point
    tr: Point
    br: Point
    bl: Point

    @classmethod
    def from_ints(cls, values: Sequence[int]) -> "Quad":
        return cls(*(Point(values[i * 2], values[i * 2 + 1]) for i in range(4)))

    def offset(self, x: int, y: int) -> "Quad":
        return Quad(*(p.offset(x, y) for p in self))

    def inner(self, m: int) -> "Quad":
        """Shrink the quad by moving each corner m pixels along both adjacent edges."""
        tl = adjust(self.tl, self.tr, m)
        tr = adjust(self.tr, self.tl, m)
        bl = adjust(self.bl, self.br, m)
        br = adjust(self.br, self.bl, m)
        return Quad(
            adjust(tl, bl, m),
            adjust(tr, br, m),
            adjust(br, tr, m),
            adjust(bl, tl, m),
        )

    def contains(self, p: Point) -> bool:
        """Ray casting test; points on an edge are inside."""
        limit = Point(max(max(c.x for c in self), p.x) + 1, p.y)
        count = 0
        for i in range(4):
            a = self[i]
            b = self[(i + 1) % 4]
            if not _intersect(a, b, p, limit):
                continue
            if _orientation(a, p, b) == 0:
                return _on_segment(a, p, b)
            # A ray through a vertex is only counted once.
            if p.y == a.y:
                if b.y <= p.y:
                    count += 1
            elif p.y == b.y:
                if a.y <= p.y:
                    count += 1
            else:
                count += 1
        return (count & 1) != 0

    def points(self) -> PointList:
        """All integer points inside the quad."""
        minx = min(c.x for c in self)
        maxx = max(c.x for c in self)
        miny = min(c.y for c in self)
        maxy = max(c.y for c in self)
        out = []
        for y in range(miny, maxy + 1):
            for x in range(minx, maxx + 1):
                p = Point(x, y)
                if self.contains(p):
                    out.append(p)
        return out


def segment_quad(s1: Point, s2: Point, e1: Point, e2: Point, w: int, m: int) -> Quad:
    """Quad of the stroke along (s1, s2), w wide toward (e1, e2), inset by m."""
    tl = adjust(s1, s2, w + m)
    tr = adjust(s2, s1, w + m)
    ne1 = adjust(e1, e2, w + m)
    ne2 = adjust(e2, e1, w + m)
    bl = adjust(tl, ne1, w - m)
    br = adjust(tr, ne2, w - m)
    tl = adjust(tl, ne1, m)
    tr = adjust(tr, ne2, m)
    return Quad(tl, tr, br, bl)
