"""Drawing helpers. The pygame renderer lives in dndwheel.graphics.wheel."""

from dndwheel.graphics.colors import (
    Color,
    parse_hex_color,
    deterministic_color,
    is_bright,
    segment_color,
    text_color_for,
)

__all__ = [
    "Color",
    "parse_hex_color",
    "deterministic_color",
    "is_bright",
    "segment_color",
    "text_color_for",
]
