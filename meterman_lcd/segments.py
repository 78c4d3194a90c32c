from __future__ import annotations

from typing import Dict, List, Tuple

from .const import M_BL, M_BM, M_BR, M_MM, M_TL, M_TM, M_TR
from .exceptions import ConfigError

_ = 0

# Only a subset of the 128 possible segment masks are characters.
SEGMENT_MAP: Dict[int, str] = {
    _    | _    | _    | _    | _    | _    | _   : " ",
    _    | _    | _    | _    | _    | _    | M_MM: "-",
    M_TL | M_TM | M_TR | M_BR | M_BM | M_BL | _   : "0",
    _    | _    | M_TR | M_BR | _    | _    | _   : "1",
    _    | M_TM | M_TR | _    | M_BM | M_BL | M_MM: "2",
    _    | M_TM | M_TR | M_BR | M_BM | _    | M_MM: "3",
    M_TL | _    | M_TR | M_BR | _    | _    | M_MM: "4",
    M_TL | M_TM | _    | M_BR | M_BM | _    | M_MM: "5",
    M_TL | M_TM | _    | M_BR | M_BM | M_BL | M_MM: "6",
    M_TL | M_TM | M_TR | M_BR | _    | _    | _   : "7",
    _    | M_TM | M_TR | M_BR | _    | _    | _   : "7",  # some meters omit TL
    M_TL | M_TM | M_TR | M_BR | M_BM | M_BL | M_MM: "8",
    M_TL | M_TM | M_TR | M_BR | M_BM | _    | M_MM: "9",
    M_TL | M_TM | M_TR | M_BR | _    | M_BL | M_MM: "A",
    M_TL | _    | _    | M_BR | M_BM | M_BL | M_MM: "b",
    M_TL | M_TM | _    | _    | M_BM | M_BL | _   : "C",
    _    | _    | M_TR | M_BR | M_BM | M_BL | M_MM: "d",
    M_TL | M_TM | _    | _    | M_BM | M_BL | M_MM: "E",
    M_TL | M_TM | _    | _    | _    | M_BL | M_MM: "F",
    M_TL | _    | _    | M_BR | _    | M_BL | M_MM: "h",
    M_TL | _    | M_TR | M_BR | _    | M_BL | M_MM: "H",
    M_TL | _    | _    | _    | M_BM | M_BL | _   : "L",
    M_TL | M_TM | M_TR | M_BR | _    | M_BL | _   : "N",
    _    | _    | _    | M_BR | _    | M_BL | M_MM: "n",
    _    | _    | _    | M_BR | M_BM | M_BL | M_MM: "o",
    M_TL | M_TM | M_TR | _    | _    | M_BL | M_MM: "P",
    _    | _    | _    | _    | _    | M_BL | M_MM: "r",
    M_TL | _    | _    | _    | M_BM | M_BL | M_MM: "t",
}


def _build_reverse(table: Dict[int, str]) -> Dict[str, int]:
    # Where a character has several masks, keep the one with fewest segments.
    reverse: Dict[str, int] = {}
    for mask, char in table.items():
        old = reverse.get(char)
        if old is None or (bin(mask).count("1"), mask) < (bin(old).count("1"), old):
            reverse[char] = mask
    return reverse


REVERSE_MAP: Dict[str, int] = _build_reverse(SEGMENT_MAP)


def lookup(mask: int) -> Tuple[str, bool]:
    char = SEGMENT_MAP.get(mask)
    if char is None:
        return "", False
    return char, True


def digits_to_segments(text: str) -> List[int]:
    """Map each character of text to its segment mask."""
    masks = []
    for i, c in enumerate(text):
        mask = REVERSE_MAP.get(c)
        if mask is None:
            raise ConfigError(f"Unknown character (#{i} - {c!r})")
        masks.append(mask)
    return masks
