from __future__ import annotations


class LcdError(Exception):
    """Base class for decoder errors."""


class ConfigError(LcdError, ValueError):
    """Raised when the decoder is built or calibrated from bad data."""


class CalibrationIOError(LcdError, OSError):
    """Raised when the calibration file cannot be read or written."""
