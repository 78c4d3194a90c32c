"""Shared fixtures: decoders built from a 60x100 digit template and
synthetic images with chosen segments drawn dark on a light background."""
import logging

import pytest
from PIL import Image

from meterman_lcd import LcdDecoder
from meterman_lcd.const import LEVEL_RANGE, M_ALL

logging.getLogger("PIL").setLevel(logging.WARNING)

BACKGROUND = 0xE0
SEGMENT = 0x20
# Sampled (inverted 16 bit) values of the two grey levels.
OFF_LEVEL = LEVEL_RANGE - BACKGROUND * 0x101
ON_LEVEL = LEVEL_RANGE - SEGMENT * 0x101

BBOX = (60, 0, 60, 100, 0, 100)
WIDTH = 8
DIGIT_PITCH = 70


def make_decoder(digits=1, dp=None, **options):
    dec = LcdDecoder(**options)
    dec.add_template("A", BBOX, WIDTH, dp)
    for i in range(digits):
        dec.add_digit("A", i * DIGIT_PITCH, 0)
    return dec


def draw(dec, masks, dps=None, size=None, background=BACKGROUND):
    """Image showing masks[i] on digit i (and a lit dp where dps[i])."""
    if size is None:
        size = (len(dec.digits) * DIGIT_PITCH + 10, 110)
    img = Image.new("RGB", size, (background,) * 3)
    dark = (SEGMENT,) * 3
    for i, (d, mask) in enumerate(zip(dec.digits, masks)):
        for s, seg in enumerate(d.segments):
            if mask & (1 << s):
                for p in seg.points:
                    img.putpixel(tuple(p), dark)
        if dps and dps[i]:
            for p in d.dp.points:
                img.putpixel(tuple(p), dark)
    return img


@pytest.fixture
def decoder():
    return make_decoder()


@pytest.fixture
def eights(decoder):
    return draw(decoder, [M_ALL])
