"""Seven segment LCD decoder.

The decoder samples the segment regions of every configured digit, compares
each sample with the segment's threshold from the current LevelsSet, and maps
the resulting bit mask to a character.

Thresholds drift as the lighting changes, so the decoder keeps a population
of LevelsSets. The caller votes on each decode (good/bad) and periodically
calls recalibrate, which scores the current set, returns it to the population
and picks the best one for use.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import IO, Any, Dict, List, Optional, Sequence

from .const import (
    CONF_HISTORY, CONF_INVERSE, CONF_MAX_LEVELS, CONF_OFF_MARGIN,
    CONF_OFF_TRACKING, CONF_ON_MARGIN, CONF_SAVED_LEVELS, CONF_THRESHOLD,
)
from .exceptions import CalibrationIOError, ConfigError
from .image import LuminanceImage, as_image
from .levels import DigitLevels, LevelsSet
from .persist import read_levels, write_levels
from .population import Population
from .schema import OPTIONS_SCHEMA, validate
from .segments import REVERSE_MAP, lookup
from .template import Digit, Template

_LOGGER = logging.getLogger(__name__)


@dataclass
class DigitScan:
    """Raw samples of one digit."""

    segments: List[int]
    dp: int = 0
    mask: int = 0


@dataclass
class DigitDecode:
    char: str = ""
    valid: bool = False
    dp: bool = False


@dataclass
class DecodeResult:
    image: LuminanceImage
    text: str = ""
    invalid: int = 0
    scans: List[DigitScan] = field(default_factory=list)
    decodes: List[DigitDecode] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.invalid == 0


@dataclass
class CalibrationSummary:
    best: int = 0
    worst: int = 0
    last_quality: int = 0
    last_good: int = 0
    last_bad: int = 0
    count: int = 0
    average: float = 0.0


class LcdDecoder:
    def __init__(self, threshold_percent: Optional[int] = None, history: Optional[int] = None,
                 max_levels: Optional[int] = None, inverse: Optional[bool] = None,
                 **options: Any):
        for key, val in ((CONF_THRESHOLD, threshold_percent), (CONF_HISTORY, history),
                         (CONF_MAX_LEVELS, max_levels), (CONF_INVERSE, inverse)):
            if val is not None:
                options[key] = val
        opts = validate(OPTIONS_SCHEMA, options)
        self.threshold: int = opts[CONF_THRESHOLD]
        self.history: int = opts[CONF_HISTORY]
        self.max_levels: int = opts[CONF_MAX_LEVELS]
        self.saved_levels: int = opts[CONF_SAVED_LEVELS]
        self.on_margin: int = opts[CONF_ON_MARGIN]
        self.off_margin: int = opts[CONF_OFF_MARGIN]
        self.inverse: bool = opts[CONF_INVERSE]
        self.off_tracking: bool = opts[CONF_OFF_TRACKING]

        self.templates: Dict[str, Template] = {}
        self.digits: List[Digit] = []
        self.population = Population(self.max_levels)
        self.summary = CalibrationSummary()
        self._current = LevelsSet()

    def __repr__(self) -> str:
        return (f"LcdDecoder(digits={len(self.digits)}, templates={list(self.templates)}, "
                f"levels={len(self.population)})")

    @property
    def current(self) -> LevelsSet:
        return self._current

    def levels(self, digit: Digit) -> DigitLevels:
        return self._current.digits[digit.index]

    # Construction

    def add_template(self, name: str, bbox: Sequence[int], width: int,
                     dp: Optional[Sequence[int]] = None) -> Template:
        """Add a digit template.

        bbox holds the top right, bottom right and bottom left corners as
        six signed offsets from the implied top left (0, 0). dp is an
        optional offset of the decimal point. width is the segment stroke
        width in pixels.
        """
        if name in self.templates:
            raise ConfigError(f"Duplicate template entry: {name}")
        t = Template(name, list(bbox), width, dp,
                     on_margin=self.on_margin, off_margin=self.off_margin)
        self.templates[name] = t
        return t

    def add_digit(self, template: str, x: int, y: int,
                  levels: Optional[Sequence[int]] = None) -> int:
        """Place a digit of the named template with its top left at (x, y).

        levels is an optional (min, max) pair used to seed the thresholds.
        """
        t = self.templates.get(template)
        if t is None:
            raise ConfigError(f"Unknown template {template}")
        if levels is not None and len(levels) != 2:
            raise ConfigError(f"Invalid digit levels (expected min and max, got {len(levels)} values)")
        index = self._current.add_digit(self.history)
        # Keep saved sets the same shape as the current one.
        for lev in self.population:
            lev.add_digit(self.history)
        d = Digit(index, t, x, y)
        self.digits.append(d)
        if levels is not None:
            self.set_min_max(index, levels[0], levels[1])
        return index

    def set_min_max(self, index: int, lo: int, hi: int) -> None:
        self._current.digits[index].set_min_max(lo, hi, self.threshold)

    # Decoding

    def scan(self, image: Any) -> List[DigitScan]:
        """Sample the segment regions of every digit."""
        img = as_image(image)
        return self._scan(img)

    def _scan(self, img: LuminanceImage) -> List[DigitScan]:
        return [
            DigitScan(d.sample_segments(img, self.inverse), d.sample_dp(img, self.inverse))
            for d in self.digits
        ]

    def decode(self, image: Any) -> DecodeResult:
        img = as_image(image)
        res = DecodeResult(image=img, scans=self._scan(img))
        text = []
        for d, scan in zip(self.digits, res.scans):
            lev = self.levels(d)
            for i, v in enumerate(scan.segments):
                if v >= lev.segments[i].threshold:
                    scan.mask |= 1 << i
            char, valid = lookup(scan.mask)
            dec = DigitDecode(char=char, valid=valid)
            if valid:
                text.append(char)
            else:
                res.invalid += 1
            if d.has_dp and scan.dp >= lev.threshold:
                dec.dp = True
                text.append(".")
            res.decodes.append(dec)
        res.text = "".join(text)
        if res.invalid:
            _LOGGER.debug("Decode: %d invalid digits, masks %s", res.invalid,
                          ["0x%02x" % s.mask for s in res.scans])
        return res

    # Calibration

    def calibrate_from_image(self, image: Any, expected: str) -> None:
        """Calibrate the current levels from an image showing a known string."""
        if len(expected) != len(self.digits):
            raise ConfigError(f"Digit count mismatch (digits: {len(self.digits)}, calibration: {len(expected)})")
        masks = []
        for c in expected:
            mask = REVERSE_MAP.get(c)
            if mask is None:
                raise ConfigError(f"Unknown digit: {c!r}")
            masks.append(mask)
        img = as_image(image)
        self._calibrate(img, self._scan(img), masks)

    def calibrate_from_scan(self, result: DecodeResult) -> None:
        """Calibrate using the masks of a decode that is known to be correct."""
        if len(result.scans) != len(self.digits):
            raise ConfigError(f"Digit count mismatch (digits: {len(self.digits)}, calibration: {len(result.scans)})")
        self._calibrate(result.image, result.scans, [s.mask for s in result.scans])

    def _calibrate(self, img: LuminanceImage, scans: List[DigitScan], masks: List[int]) -> None:
        for d, scan, mask in zip(self.digits, scans, masks):
            off = d.sample_off(img, self.inverse)
            self.levels(d).calibrate(scan.segments, off, mask, self.threshold, self.off_tracking)

    def good(self) -> None:
        self._current.good += 1

    def bad(self) -> None:
        self._current.bad += 1

    def add_calibration(self, lev: LevelsSet) -> None:
        self.population.add(lev)

    def recalibrate(self) -> None:
        """Score the current levels, return them to the population and pick the best."""
        cur = self._current
        cur.update_quality()
        self.summary.last_quality = cur.quality
        self.summary.last_good = cur.good
        self.summary.last_bad = cur.bad
        if not self.population.full:
            # While there is room, keep a spare copy of the current levels.
            self.add_calibration(cur.copy())
        self.add_calibration(cur)
        self.pick_calibration()

    def pick_calibration(self) -> Optional[LevelsSet]:
        """Make the best levels in the population current."""
        worst = self.population.worst()
        best = self.population.pop_best()
        if best is None:
            _LOGGER.warning("No calibration levels available, keeping current levels")
            return None
        s = self.summary
        s.best = best.quality
        s.worst = worst.quality
        s.count = len(self.population) + 1
        s.average = (self.population.total + best.quality) / s.count
        _LOGGER.info("Recalibration: last %3d (good %2d, bad %2d), new %3d, worst %3d, count %d, avg %5.1f",
                     s.last_quality, s.last_good, s.last_bad, s.best, s.worst, s.count, s.average)
        best.reset_votes()
        self._current = best
        return best

    # Persistence

    def save(self, fp: IO[str], max_entries: Optional[int] = None) -> int:
        """Write the best saved levels (at most max_entries) to fp."""
        if max_entries is None:
            max_entries = self.saved_levels
        try:
            return write_levels(fp, self.population.descending()[:max_entries])
        except OSError as err:
            _LOGGER.error("Failed to save calibration: %s", err)
            raise CalibrationIOError(f"Failed to save calibration: {err}") from err

    def restore(self, fp: IO[str]) -> int:
        """Read saved levels into the population, returning the number of sets read."""
        try:
            sets = read_levels(fp, self._current, self.max_levels, self.threshold)
        except OSError as err:
            _LOGGER.error("Failed to restore calibration: %s", err)
            raise CalibrationIOError(f"Failed to restore calibration: {err}") from err
        # Sets are stored best first; insert worst first so equal qualities keep their order.
        for lev in reversed(sets):
            self.add_calibration(lev)
        _LOGGER.info("Restore calibration: %d entries read", len(sets))
        return len(sets)

    def save_file(self, path: str, max_entries: Optional[int] = None) -> int:
        directory = os.path.dirname(os.path.abspath(path))
        try:
            fd, tmp = tempfile.mkstemp(prefix=".levels-", dir=directory)
        except OSError as err:
            raise CalibrationIOError(f"{path}: {err}") from err
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fp:
                count = self.save(fp, max_entries)
            os.replace(tmp, path)
        except CalibrationIOError:
            raise
        except OSError as err:
            raise CalibrationIOError(f"{path}: {err}") from err
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
        return count

    def restore_file(self, path: str) -> int:
        if not os.path.exists(path):
            _LOGGER.info("No calibration file at %s", path)
            return 0
        try:
            # Undecodable bytes become U+FFFD and the line is skipped as malformed.
            with open(path, encoding="utf-8", errors="replace") as fp:
                return self.restore(fp)
        except CalibrationIOError:
            raise
        except OSError as err:
            raise CalibrationIOError(f"{path}: {err}") from err


def new_decoder(threshold_percent: int = 50, history: int = 5, max_levels: int = 100,
                inverse: bool = False, **options: Any) -> LcdDecoder:
    return LcdDecoder(threshold_percent, history, max_levels, inverse, **options)
