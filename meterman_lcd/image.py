"""Image access for the decoder.

Anything with ``bounds`` and ``at(x, y) -> (r, g, b)`` can be decoded. Pillow
images and numpy arrays are wrapped in LuminanceImage, which keeps a 16 bit
luminance plane so regions can be sampled with a single numpy gather.
"""
from __future__ import annotations

import logging
from io import BytesIO
from os import PathLike
from typing import Any, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .const import LEVEL_RANGE
from .geometry import Point

_LOGGER = logging.getLogger(__name__)

Bounds = Tuple[int, int, int, int]

# Fixed point weights of 0.299, 0.587 and 0.114, summing to 65536.
_WR, _WG, _WB = 19595, 38470, 7471


def luminance16(r: int, g: int, b: int) -> int:
    """16 bit luminance of an 8 bit RGB colour."""
    r, g, b = r * 0x101, g * 0x101, b * 0x101
    return (_WR * r + _WG * g + _WB * b + 0x8000) >> 16


def _luminance_plane(rgb: np.ndarray) -> np.ndarray:
    c = rgb.astype(np.int64) * 0x101
    y = (_WR * c[..., 0] + _WG * c[..., 1] + _WB * c[..., 2] + 0x8000) >> 16
    return y.astype(np.int64)


class LuminanceImage:
    """Read-only image with a precomputed 16 bit luminance plane."""

    def __init__(self, source: Any):
        self.source = source
        if isinstance(source, Image.Image):
            self._y = self._from_pil(source)
        elif isinstance(source, np.ndarray):
            self._y = self._from_array(source)
        elif hasattr(source, "bounds") and hasattr(source, "at"):
            self._y = self._from_protocol(source)
        else:
            raise TypeError(f"Unsupported image type: {type(source).__name__}")
        h, w = self._y.shape
        self.bounds: Bounds = (0, 0, w, h)

    @classmethod
    def open(cls, src: Union[str, bytes, PathLike]) -> "LuminanceImage":
        """Decode an image file (path or raw bytes)."""
        if isinstance(src, bytes):
            im = Image.open(BytesIO(src))
        else:
            im = Image.open(src)
        with im:
            _LOGGER.debug("Decoding %s image (%dx%d)", im.format, im.width, im.height)
            return cls(im.convert("RGB"))

    @staticmethod
    def _from_pil(im: Image.Image) -> np.ndarray:
        if im.mode in ("L", "1"):
            return np.asarray(im.convert("L"), dtype=np.int64) * 0x101
        if im.mode == "I;16":
            return np.asarray(im, dtype=np.int64)
        return _luminance_plane(np.asarray(im.convert("RGB")))

    @staticmethod
    def _from_array(arr: np.ndarray) -> np.ndarray:
        if arr.ndim == 2:
            return arr.astype(np.int64) * 0x101
        if arr.ndim == 3 and arr.shape[2] in (3, 4):
            return _luminance_plane(arr[..., :3])
        raise ValueError(f"Unsupported array shape {arr.shape}")

    @staticmethod
    def _from_protocol(img: Any) -> np.ndarray:
        minx, miny, maxx, maxy = img.bounds
        # The plane is indexed from (0, 0). Pixels at negative coordinates are
        # never sampled, and any gap left of or above minx/miny stays black.
        y = np.zeros((max(maxy, 0), max(maxx, 0)), dtype=np.int64)
        for py in range(max(miny, 0), maxy):
            for px in range(max(minx, 0), maxx):
                y[py, px] = luminance16(*img.at(px, py)[:3])
        return y

    @property
    def width(self) -> int:
        return self.bounds[2]

    @property
    def height(self) -> int:
        return self.bounds[3]

    def at(self, x: int, y: int) -> Tuple[int, int, int]:
        """Grey colour at (x, y), as 8 bit RGB."""
        v = self.luminance(x, y) >> 8
        return (v, v, v)

    def luminance(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self._y[y, x])
        return 0

    def gather(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Luminance at each (xs[i], ys[i]); points outside the image are black."""
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)
        if inside.all():
            return self._y[ys, xs]
        out = np.zeros(xs.shape, dtype=np.int64)
        out[inside] = self._y[ys[inside], xs[inside]]
        return out


def as_image(img: Any) -> LuminanceImage:
    if isinstance(img, LuminanceImage):
        return img
    return LuminanceImage(img)


class Region:
    """A fixed set of sample points, kept as numpy index arrays."""

    __slots__ = ("points", "xs", "ys")

    def __init__(self, points: Sequence[Point]):
        self.points = list(points)
        self.xs = np.fromiter((p.x for p in self.points), dtype=np.int64, count=len(self.points))
        self.ys = np.fromiter((p.y for p in self.points), dtype=np.int64, count=len(self.points))

    def __len__(self) -> int:
        return len(self.points)


def sample_region(img: LuminanceImage, region: Region, inverse: bool = False) -> int:
    """Average brightness of the region, scaled so that 'on' is high.

    LCD segments are darker than the background, so the value is inverted
    unless inverse is set (e.g. for LED displays).
    """
    if not len(region):
        return 0
    mean = int(img.gather(region.xs, region.ys).sum()) // len(region)
    if inverse:
        return mean
    return LEVEL_RANGE - mean
