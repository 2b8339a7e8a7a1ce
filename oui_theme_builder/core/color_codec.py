"""
Colour conversions for theme variables.

Theme colours are stored as space-separated decimal channels (``"176 132 233"``)
so the front-end can compose them with ``rgb(var(--oui-color-primary))``.
Colour pickers work in ``#rrggbb``; these helpers translate between the two.
"""

from __future__ import annotations

import re
from typing import Optional

__all__ = [
    "hex_to_rgb_triple",
    "rgb_triple_to_hex",
    "is_color_variable",
]

_WHITESPACE = re.compile(r"\s+")
_INT_TOKEN = re.compile(r"^[+-]?\d+$")


def _parse_hex_pair(pair: str) -> Optional[int]:
    try:
        return int(pair, 16)
    except ValueError:
        return None


def hex_to_rgb_triple(hex_color: str) -> str:
    """Convert ``#rrggbb`` (``#`` optional) to ``"R G B"``.

    Input is expected to be a 6-digit hex string. Channels that do not parse
    come out as ``NaN`` rather than raising, so a bad picker value shows up as
    ``"NaN NaN NaN"`` in the sheet instead of crashing the editor.
    """

    raw = hex_color.replace("#", "", 1)
    channels = []
    for start in (0, 2, 4):
        value = _parse_hex_pair(raw[start : start + 2])
        channels.append("NaN" if value is None else str(value))
    return " ".join(channels)


def rgb_triple_to_hex(rgb: str) -> str:
    """Convert ``"R G B"`` to lowercase ``#rrggbb``.

    Returns an empty string when the input is not exactly three integer
    tokens in the 0-255 range; callers treat ``""`` as "no valid colour".
    """

    parts = _WHITESPACE.split(rgb.strip())
    if len(parts) != 3 or not all(_INT_TOKEN.match(part) for part in parts):
        return ""
    r, g, b = (int(part) for part in parts)
    if not all(0 <= channel <= 255 for channel in (r, g, b)):
        return ""
    return f"#{r:02x}{g:02x}{b:02x}"


def is_color_variable(name: str) -> bool:
    # Gradient stops and angles share the gradient prefix but are not colours.
    if "color" in name or "fill" in name:
        return True
    if "gradient" in name:
        return "stop" not in name and "angle" not in name
    return False
