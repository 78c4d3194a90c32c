import pytest

from meterman_lcd.geometry import Point, Quad, adjust, offset_points, segment_quad, split

DIAMOND = Quad(Point(10, 5), Point(15, 10), Point(10, 15), Point(5, 10))
EXTENDED = Quad(Point(8, 3), Point(15, 10), Point(10, 15), Point(3, 8))
SQUARE = Quad(Point(5, 5), Point(10, 5), Point(10, 10), Point(5, 10))


@pytest.mark.parametrize("quad,inside,outside", [
    (DIAMOND,
     [(10, 5), (6, 10), (10, 6), (14, 10), (10, 9), (10, 10)],
     [(3, 5), (0, 0), (3, 15), (15, 15), (5, 11), (4, 8), (11, 5), (4, 10), (16, 10)]),
    (EXTENDED,
     [(8, 10), (10, 8), (14, 10), (10, 9), (10, 10), (8, 3), (3, 8)],
     [(0, 0), (15, 15), (5, 11), (2, 8), (11, 5), (2, 10), (16, 10)]),
    (SQUARE,
     [(5, 5), (7, 8), (10, 10), (5, 10), (10, 5), (8, 10)],
     [(0, 0), (11, 11), (11, 10), (4, 8), (12, 8), (11, 5)]),
], ids=["diamond", "extended-diamond", "square"])
def test_contains(quad, inside, outside):
    for p in inside:
        assert quad.contains(Point(*p)), p
    for p in outside:
        assert not quad.contains(Point(*p)), p


def test_points_of_square():
    pts = SQUARE.points()
    assert len(pts) == 36
    assert set(pts) == {Point(x, y) for x in range(5, 11) for y in range(5, 11)}


def test_adjust_rounds_length_up():
    # length of a 50 pixel line is taken as 51
    assert adjust(Point(0, 0), Point(0, 50), 10) == Point(0, 9)
    assert adjust(Point(0, 50), Point(0, 0), 10) == Point(0, 41)
    assert adjust(Point(3, 3), Point(3, 3), 5) == Point(3, 3)


def test_split_truncates_toward_zero():
    assert split(Point(0, 0), Point(10, -10), 3) == [Point(3, -3), Point(6, -6)]
    assert split(Point(60, 0), Point(60, 100), 2) == [Point(60, 50)]


def test_block():
    b = Point(5, 5).block(4)
    assert len(b) == 25
    assert min(b) == Point(3, 3)
    assert max(b) == Point(7, 7)


def test_inner():
    q = Quad(Point(0, 0), Point(20, 0), Point(20, 20), Point(0, 20))
    assert q.inner(5) == Quad(Point(4, 4), Point(16, 4), Point(16, 16), Point(4, 16))


def test_offset():
    assert SQUARE.offset(1, -2) == Quad(Point(6, 3), Point(11, 3), Point(11, 8), Point(6, 8))
    assert offset_points([Point(1, 1), Point(1, 1)], 2, 3) == [Point(3, 4), Point(3, 4)]
    assert Point(1, 2).offset(-1, -2) == Point(0, 0)


def test_segment_quad():
    q = segment_quad(Point(0, 0), Point(60, 0), Point(0, 100), Point(60, 100), 8, 2)
    assert q == Quad(Point(9, 1), Point(51, 1), Point(51, 5), Point(9, 5))
