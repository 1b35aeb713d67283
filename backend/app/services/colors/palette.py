"""
Palette post-processing: brightness ordering and hex formatting.
"""
import re
from typing import List, Optional, Sequence, Tuple

import numpy as np

from app.config import config
from app.schemas import PaletteColor
from .clustering import InvalidInputError


_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def brightness_key(rgb: Sequence[int]) -> int:
    """Exact integer brightness 299R + 587G + 114B, used for ordering."""
    wr, wg, wb = config.BRIGHTNESS_WEIGHTS
    r, g, b = [int(x) for x in rgb]
    return wr * r + wg * g + wb * b


def perceived_brightness(rgb: Sequence[int]) -> float:
    """Perceived brightness 0.299R + 0.587G + 0.114B."""
    return brightness_key(rgb) / 1000


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to an uppercase #RRGGBB string."""
    r, g, b = [int(x) for x in rgb]
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise InvalidInputError(f"RGB channel out of range: {channel}")
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a #RRGGBB (or RRGGBB) string to an RGB tuple."""
    match = _HEX_RE.match(hex_color.strip())
    if not match:
        raise InvalidInputError(f"Invalid hex color: {hex_color!r}")
    digits = match.group(1)
    return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))


def sort_by_brightness(colors: Sequence[Sequence[int]]) -> List[Tuple[int, int, int]]:
    """
    Order colors from brightest to darkest.

    The sort is stable: colors with equal brightness keep their input order.
    """
    triples = [tuple(int(c) for c in color) for color in colors]
    return sorted(triples, key=brightness_key, reverse=True)


def build_palette(centers: np.ndarray, counts: Optional[np.ndarray] = None) -> List[PaletteColor]:
    """
    Build brightness-ordered palette entries from cluster centers.

    Args:
        centers: Cluster centers, shape (k, 3)
        counts: Members per center, used for dominance ratios

    Returns:
        PaletteColor entries sorted by descending brightness
    """
    centers = np.asarray(centers)
    if counts is None:
        counts = np.zeros(len(centers), dtype=np.int64)
    total = int(np.sum(counts))

    entries = []
    for center, count in zip(centers, counts):
        rgb = [int(x) for x in center]
        entries.append(PaletteColor(
            hex=rgb_to_hex(rgb),
            rgb=rgb,
            brightness=round(perceived_brightness(rgb), 3),
            ratio=float(count) / total if total else 0.0,
        ))

    entries.sort(key=lambda entry: brightness_key(entry.rgb), reverse=True)
    return entries
