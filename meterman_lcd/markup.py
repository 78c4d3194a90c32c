from __future__ import annotations

from typing import Any, Iterable, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .decoder import LcdDecoder
from .geometry import Point
from .image import LuminanceImage

RED = (255, 0, 0, 50)
GREEN = (0, 255, 0, 50)
WHITE = (255, 255, 255, 255)


def _to_rgba(image: Any) -> Image.Image:
    if isinstance(image, LuminanceImage):
        image = image.source
    if isinstance(image, Image.Image):
        return image.convert("RGBA")
    if isinstance(image, np.ndarray):
        return Image.fromarray(image.astype(np.uint8)).convert("RGBA")
    # Anything else is redrawn from its luminance.
    lum = LuminanceImage(image)
    grey = (lum.gather(*np.meshgrid(np.arange(lum.width), np.arange(lum.height))) >> 8)
    return Image.fromarray(grey.astype(np.uint8)).convert("RGBA")


def _tint(draw: ImageDraw.ImageDraw, points: Iterable[Point], colour: Tuple[int, ...]) -> None:
    xy = [tuple(p) for p in points]
    if xy:
        draw.point(xy, fill=colour)


def _cross(draw: ImageDraw.ImageDraw, points: Iterable[Point], colour: Tuple[int, ...]) -> None:
    for p in points:
        draw.line([(p.x - 2, p.y), (p.x + 2, p.y)], fill=colour)
        draw.line([(p.x, p.y - 2), (p.x, p.y + 2)], fill=colour)


def mark_samples(decoder: LcdDecoder, image: Any, fill: bool = False) -> Image.Image:
    """Copy of image with the digit outlines and sample regions marked.

    Corners and mid points get white crosses. With fill, the off region is
    tinted green and the segment and decimal point samples red.
    """
    base = _to_rgba(image)
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    tint = ImageDraw.Draw(overlay)
    for d in decoder.digits:
        if fill:
            _tint(tint, d.off.points, GREEN)
            for s in d.segments:
                _tint(tint, s.points, RED)
            _tint(tint, d.dp.points, RED)
    out = Image.alpha_composite(base, overlay)
    draw = ImageDraw.Draw(out)
    for d in decoder.digits:
        _cross(draw, d.markers(), WHITE)
    return out.convert("RGB")
