"""Easing functions for the spin deceleration.

All functions take a normalized time t (0.0 to 1.0) and return a normalized
value. A curve used to drive a spin must be monotonic, start at 0, end at 1
and flatten out at t=1 so the wheel comes to rest instead of stopping dead.
The curves that satisfy this are listed in SPIN_EASINGS.
"""

from enum import Enum, auto
from typing import Callable
import math


class Easing(Enum):
    """Available easing function types."""

    LINEAR = auto()

    # Decelerating
    EASE_OUT_QUAD = auto()
    EASE_OUT_CUBIC = auto()
    EASE_OUT_QUART = auto()
    EASE_OUT_QUINT = auto()
    EASE_OUT_SINE = auto()
    EASE_OUT_EXPO = auto()
    EASE_OUT_CIRC = auto()

    # Wind-up then decelerate
    EASE_IN_OUT_CUBIC = auto()
    EASE_IN_OUT_SINE = auto()


# Type alias for easing functions
EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def ease_out_quad(t: float) -> float:
    """Decelerate to zero velocity."""
    return 1 - (1 - t) * (1 - t)


def ease_out_cubic(t: float) -> float:
    """Decelerate to zero velocity (cubic)."""
    return 1 - pow(1 - t, 3)


def ease_out_quart(t: float) -> float:
    """Decelerate to zero velocity (quartic)."""
    return 1 - pow(1 - t, 4)


def ease_out_quint(t: float) -> float:
    """Decelerate to zero velocity (quintic)."""
    return 1 - pow(1 - t, 5)


def ease_out_sine(t: float) -> float:
    """Decelerate using sine curve."""
    return math.sin((t * math.pi) / 2)


def ease_out_expo(t: float) -> float:
    """Decelerate exponentially."""
    return 1 if t == 1 else 1 - pow(2, -10 * t)


def ease_out_circ(t: float) -> float:
    """Decelerate along circular curve."""
    return math.sqrt(1 - pow(t - 1, 2))


def ease_in_out_cubic(t: float) -> float:
    """Accelerate then decelerate (cubic)."""
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2


def ease_in_out_sine(t: float) -> float:
    """Accelerate then decelerate using sine curve."""
    return -(math.cos(math.pi * t) - 1) / 2


# Mapping from enum to function
_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,

    Easing.EASE_OUT_QUAD: ease_out_quad,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.EASE_OUT_QUART: ease_out_quart,
    Easing.EASE_OUT_QUINT: ease_out_quint,
    Easing.EASE_OUT_SINE: ease_out_sine,
    Easing.EASE_OUT_EXPO: ease_out_expo,
    Easing.EASE_OUT_CIRC: ease_out_circ,

    Easing.EASE_IN_OUT_CUBIC: ease_in_out_cubic,
    Easing.EASE_IN_OUT_SINE: ease_in_out_sine,
}

# String name mapping for convenience
_EASING_BY_NAME: dict[str, Easing] = {e.name.lower(): e for e in Easing}

# Curves with f(0)=0, f(1)=1, monotonic and zero slope at t=1.
# LINEAR never slows down and EASE_OUT_EXPO jumps to 1 at the very end.
SPIN_EASINGS: frozenset[Easing] = frozenset({
    Easing.EASE_OUT_QUAD,
    Easing.EASE_OUT_CUBIC,
    Easing.EASE_OUT_QUART,
    Easing.EASE_OUT_QUINT,
    Easing.EASE_OUT_SINE,
    Easing.EASE_OUT_CIRC,
    Easing.EASE_IN_OUT_CUBIC,
    Easing.EASE_IN_OUT_SINE,
})


def resolve_easing(easing: Easing | str) -> Easing:
    """Turn an enum value or name (e.g. "ease_out_cubic") into an Easing.

    Raises:
        ValueError: If easing name is not recognized
    """
    if isinstance(easing, Easing):
        return easing
    easing_enum = _EASING_BY_NAME.get(easing.lower())
    if easing_enum is None:
        raise ValueError(f"Unknown easing function: {easing}")
    return easing_enum


def get_easing(easing: Easing | str | EasingFunc) -> EasingFunc:
    """Get an easing function by enum or name.

    Plain callables are passed through so hosts can plug in their own curve.

    Raises:
        ValueError: If easing name is not recognized
    """
    if callable(easing) and not isinstance(easing, Easing):
        return easing

    func = _EASING_FUNCTIONS.get(resolve_easing(easing))
    if func is None:
        raise ValueError(f"No function registered for: {easing}")

    return func


def is_spin_easing(easing: Easing | str) -> bool:
    """Check whether a named curve is usable for a spin."""
    return resolve_easing(easing) in SPIN_EASINGS


def interpolate(
    start: float,
    end: float,
    t: float,
    easing: Easing | str | EasingFunc = Easing.LINEAR
) -> float:
    """Interpolate between two values using an easing function.

    Args:
        start: Starting value
        end: Ending value
        t: Progress (0.0 to 1.0), clamped
        easing: Easing function to use

    Returns:
        Interpolated value
    """
    easing_func = get_easing(easing)
    eased_t = easing_func(max(0.0, min(1.0, t)))
    return start + (end - start) * eased_t


def slope(easing: Easing | str | EasingFunc, t: float, h: float = 1e-4) -> float:
    """Numerical derivative of an easing curve at t, clamped to [0, 1]."""
    func = get_easing(easing)
    lo = max(0.0, t - h)
    hi = min(1.0, t + h)
    if hi <= lo:
        return 0.0
    return (func(hi) - func(lo)) / (hi - lo)
