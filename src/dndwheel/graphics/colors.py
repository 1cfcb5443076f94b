"""Color helpers for wheel segments."""

from typing import Optional, Tuple
import colorsys
import hashlib
import random

from dndwheel.engine.model import Entry

Color = Tuple[int, int, int]


def parse_hex_color(value: Optional[str]) -> Optional[Color]:
    """Parse "#rrggbb" (leading # optional). Returns None if malformed."""
    if not value:
        return None
    hex_color = value.strip().lstrip("#")
    if len(hex_color) != 6:
        return None
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def deterministic_color(seed: str) -> Color:
    """Stable, saturated color derived from a label.

    The same label gets the same color on every run and every machine.
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    rng = random.Random(int.from_bytes(digest[:8], "big"))
    hue = rng.uniform(0.0, 360.0)
    saturation = rng.uniform(0.7, 0.9)
    value = rng.uniform(0.8, 0.95)
    r, g, b = colorsys.hsv_to_rgb(hue / 360.0, saturation, value)
    return (int(r * 255), int(g * 255), int(b * 255))


def is_bright(color: Color) -> bool:
    """True if dark text reads better than light text on this color."""
    r, g, b = color
    return 0.299 * r + 0.587 * g + 0.114 * b > 128


def segment_color(entry: Entry) -> Color:
    """Configured color of an entry, falling back to one made from its label."""
    return parse_hex_color(entry.color) or deterministic_color(entry.label)


def text_color_for(background: Color) -> Color:
    return (0, 0, 0) if is_bright(background) else (255, 255, 255)
