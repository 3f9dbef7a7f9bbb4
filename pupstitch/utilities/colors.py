"""
Hex color parsing and human-readable color naming.

classify_color() maps a coat color to a yarn-shop style name. It is total:
any string is accepted, and input that is not a 6-digit hex color comes back
unchanged rather than raising.

All functions are pure.
"""

from __future__ import annotations

import re

_HEX_RE = re.compile(r"^[0-9a-f]{6}$")

RGB = tuple[int, int, int]


def normalize_hex(value: object) -> str | None:
    """Canonical ``#rrggbb`` form of a hex color (leading ``#`` optional), or None."""
    if not isinstance(value, str):
        return None
    h = value.strip().lstrip("#").lower()
    if not _HEX_RE.match(h):
        return None
    return "#" + h


def parse_hex(value: object) -> RGB | None:
    """Parse ``#RRGGBB`` (leading ``#`` optional) into an RGB triple, or None."""
    h = normalize_hex(value)
    if h is None:
        return None
    return int(h[1:3], 16), int(h[3:5], 16), int(h[5:7], 16)


def hue_of(r: int, g: int, b: int) -> float:
    """Standard RGB -> HSV hue in degrees, [0, 360)."""
    hi, lo = max(r, g, b), min(r, g, b)
    if hi == lo:
        return 0.0
    span = hi - lo
    if hi == r:
        hue = 60 * (((g - b) / span) % 6)
    elif hi == g:
        hue = 60 * ((b - r) / span + 2)
    else:
        hue = 60 * ((r - g) / span + 4)
    return hue + 360 if hue < 0 else hue


def classify_color(value: str) -> str:
    """
    Name a hex color.

    Brightness is the channel mean; saturation is (max - min) / max. Near
    black and near white are decided first, then a gray ladder for low
    saturation, then hue buckets with a brightness ladder inside each. Warm
    browns come first since coat colors cluster there.

    Parameters
    ----------
    value:
        ``#RRGGBB`` hex string.

    Returns
    -------
    str
        Color name such as ``"Golden"`` or ``"Charcoal"``, or ``value``
        itself when it cannot be parsed.
    """
    rgb = parse_hex(value)
    if rgb is None:
        return value
    r, g, b = rgb

    brightness = (r + g + b) / 3
    hi, lo = max(rgb), min(rgb)
    saturation = 0.0 if hi == 0 else (hi - lo) / hi

    if brightness < 30:
        return "Black"
    if brightness > 230 and saturation < 0.1:
        return "White"
    if saturation < 0.12:
        if brightness < 80:
            return "Charcoal"
        if brightness < 140:
            return "Gray"
        if brightness < 200:
            return "Light Gray"
        return "Off-White"

    hue = hue_of(r, g, b)

    if 15 <= hue <= 50:
        if brightness < 60:
            return "Dark Brown"
        if brightness < 100:
            return "Brown"
        if brightness < 140:
            return "Warm Brown"
        if brightness < 180:
            return "Tan"
        return "Golden"
    if 10 <= hue < 15:
        return "Rust" if brightness < 100 else "Orange"
    if 50 <= hue < 70:
        return "Olive" if brightness < 120 else "Yellow"
    if hue < 10 or hue >= 340:
        if brightness < 80:
            return "Maroon"
        if brightness < 140:
            return "Dark Red"
        return "Red"
    if 70 <= hue < 170:
        return "Green"
    if 170 <= hue < 260:
        return "Blue"
    if 260 <= hue < 300:
        return "Purple"
    return "Pink"
