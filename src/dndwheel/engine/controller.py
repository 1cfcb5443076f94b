"""
Spin controller - the Idle -> Spinning -> Settled state machine.

The controller turns a target angle into an eased trajectory and produces
the wheel angle as a function of elapsed time. It always rotates forward,
makes at least the configured number of full turns, and ends exactly on
the target angle (mod 2π).

Angles are on an unwrapped timeline: current_angle keeps growing across
turns. Use normalize_angle() to map it back onto the wheel.
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, ClassVar, Optional, Union
import logging
import math

from dndwheel.animation.easing import Easing, EasingFunc, get_easing, slope
from dndwheel.core.errors import InvalidSpinParameters, SpinInProgress
from dndwheel.engine.model import TAU

logger = logging.getLogger(__name__)

DEFAULT_MIN_ROTATIONS = 3

# Float sums of per-frame deltas can fall a few ulps short of the duration
_SETTLE_EPSILON = 1e-9


class SpinPhase(Enum):
    """Phases of one spin."""
    IDLE = auto()
    SPINNING = auto()
    SETTLED = auto()


@dataclass(frozen=True)
class Idle:
    """No spin has happened yet."""
    current_angle: float = 0.0

    phase: ClassVar[SpinPhase] = SpinPhase.IDLE


@dataclass(frozen=True)
class Spinning:
    """A spin in flight."""
    start_angle: float
    end_angle: float
    target_angle: float
    total_duration: float
    elapsed_time: float = 0.0
    current_angle: float = 0.0

    phase: ClassVar[SpinPhase] = SpinPhase.SPINNING

    @property
    def progress(self) -> float:
        return self.elapsed_time / self.total_duration


@dataclass(frozen=True)
class Settled:
    """Spin finished (or was cancelled) on an entry."""
    current_angle: float
    entry_index: int
    cancelled: bool = False

    phase: ClassVar[SpinPhase] = SpinPhase.SETTLED


SpinState = Union[Idle, Spinning, Settled]

SectorLookup = Callable[[float], int]


def compute_end_angle(current_angle: float, target_angle: float, extra_rotations: int) -> float:
    """Forward-only end angle that lands on target_angle after extra turns."""
    return current_angle + extra_rotations * TAU + (target_angle - current_angle) % TAU


class SpinController:
    """
    Produces the wheel angle for each frame of a spin.

    One controller per wheel, driven from the UI thread only.
    """

    def __init__(
        self,
        sector_lookup: SectorLookup,
        easing: Easing | str | EasingFunc = Easing.EASE_OUT_QUINT,
        min_rotations: int = DEFAULT_MIN_ROTATIONS,
        initial_angle: float = 0.0,
    ) -> None:
        self._lookup = sector_lookup
        self._ease = get_easing(easing)
        self.min_rotations = min_rotations
        self._state: SpinState = Idle(current_angle=initial_angle)

    @property
    def state(self) -> SpinState:
        return self._state

    @property
    def phase(self) -> SpinPhase:
        return self._state.phase

    @property
    def current_angle(self) -> float:
        return self._state.current_angle

    @property
    def is_spinning(self) -> bool:
        return isinstance(self._state, Spinning)

    @property
    def result(self) -> Optional[int]:
        """Winning entry index once settled, otherwise None."""
        if isinstance(self._state, Settled):
            return self._state.entry_index
        return None

    @property
    def progress(self) -> float:
        state = self._state
        if isinstance(state, Spinning):
            return state.progress
        return 1.0 if isinstance(state, Settled) else 0.0

    @property
    def angular_velocity(self) -> float:
        """Radians per second at the current instant."""
        state = self._state
        if not isinstance(state, Spinning):
            return 0.0
        distance = state.end_angle - state.start_angle
        return distance / state.total_duration * slope(self._ease, state.progress)

    def check_parameters(self, extra_rotations: int, duration: float) -> None:
        """Raise InvalidSpinParameters unless a spin with these values could start."""
        if not (isinstance(duration, (int, float)) and math.isfinite(duration) and duration > 0):
            raise InvalidSpinParameters(f"Spin duration must be positive, got {duration!r}")
        if int(extra_rotations) != extra_rotations:
            raise InvalidSpinParameters(f"Rotations must be a whole number, got {extra_rotations!r}")
        if extra_rotations < self.min_rotations:
            raise InvalidSpinParameters(
                f"Need at least {self.min_rotations} rotations, got {extra_rotations}"
            )

    def start(
        self,
        target_angle: float,
        current_angle: float,
        extra_rotations: int,
        duration: float,
    ) -> Spinning:
        """Begin a spin that ends on target_angle.

        Raises:
            InvalidSpinParameters: duration <= 0 or too few rotations
            SpinInProgress: a spin is already running
        """
        if isinstance(self._state, Spinning):
            raise SpinInProgress("Spin already in progress")
        self.check_parameters(extra_rotations, duration)

        end_angle = compute_end_angle(current_angle, target_angle, int(extra_rotations))
        self._state = Spinning(
            start_angle=current_angle,
            end_angle=end_angle,
            target_angle=target_angle,
            total_duration=float(duration),
            elapsed_time=0.0,
            current_angle=current_angle,
        )
        logger.info(
            f"Spin started: {current_angle:.3f} -> {end_angle:.3f} rad "
            f"({extra_rotations} turns, {duration:.2f}s)"
        )
        return self._state

    def advance(self, delta_time: float) -> SpinState:
        """Move the spin forward by delta_time seconds.

        No-op outside of a spin. Settles exactly on the end angle once the
        full duration has elapsed.
        """
        state = self._state
        if not isinstance(state, Spinning):
            return state

        if not delta_time > 0:
            delta_time = 0.0

        elapsed = min(max(state.elapsed_time + delta_time, 0.0), state.total_duration)

        if state.total_duration - elapsed <= _SETTLE_EPSILON * max(1.0, state.total_duration):
            entry_index = self._lookup(state.target_angle)
            self._state = Settled(current_angle=state.end_angle, entry_index=entry_index)
            logger.info(f"Spin settled on entry {entry_index} at {state.end_angle:.3f} rad")
            return self._state

        eased = self._ease(elapsed / state.total_duration)
        angle = state.start_angle + eased * (state.end_angle - state.start_angle)
        # Rounding must never carry the wheel past its end point
        angle = min(max(angle, state.current_angle), state.end_angle)

        self._state = replace(state, elapsed_time=elapsed, current_angle=angle)
        return self._state

    def cancel(self) -> SpinState:
        """Stop where the wheel is now; the entry under that angle wins."""
        state = self._state
        if not isinstance(state, Spinning):
            return state

        entry_index = self._lookup(state.current_angle)
        self._state = Settled(
            current_angle=state.current_angle,
            entry_index=entry_index,
            cancelled=True,
        )
        logger.info(f"Spin cancelled on entry {entry_index} at {state.current_angle:.3f} rad")
        return self._state

    def reset(self, current_angle: Optional[float] = None) -> None:
        """Drop any spin and return to Idle."""
        angle = self.current_angle if current_angle is None else current_angle
        self._state = Idle(current_angle=angle)
