"""Seven segment LCD decoder for meter panel images."""
from __future__ import annotations

from .config import create_decoder, load_config
from .decoder import (
    CalibrationSummary, DecodeResult, DigitDecode, DigitScan, LcdDecoder,
    new_decoder,
)
from .exceptions import CalibrationIOError, ConfigError, LcdError
from .image import LuminanceImage
from .markup import mark_samples
from .segments import digits_to_segments

__all__ = [
    "CalibrationIOError",
    "CalibrationSummary",
    "ConfigError",
    "DecodeResult",
    "DigitDecode",
    "DigitScan",
    "LcdDecoder",
    "LcdError",
    "LuminanceImage",
    "create_decoder",
    "digits_to_segments",
    "load_config",
    "mark_samples",
    "new_decoder",
]
