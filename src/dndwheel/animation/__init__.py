"""Animation module for the decision wheel."""

from dndwheel.animation.easing import (
    Easing,
    EasingFunc,
    SPIN_EASINGS,
    get_easing,
    resolve_easing,
    is_spin_easing,
    interpolate,
    slope,
)

__all__ = [
    "Easing",
    "EasingFunc",
    "SPIN_EASINGS",
    "get_easing",
    "resolve_easing",
    "is_spin_easing",
    "interpolate",
    "slope",
]
