"""Outcome selection - the weighted pick and where inside the sector to land.

The random source is injected so a seeded source reproduces the same
index and angle every time. Selection never looks at the animation.
"""

from bisect import bisect_right
from itertools import accumulate
from typing import Optional, Protocol, Sequence, runtime_checkable
import logging
import random

from dndwheel.core.errors import InvalidConfiguration
from dndwheel.engine.model import Sector

logger = logging.getLogger(__name__)

DEFAULT_BOUNDARY_MARGIN = 0.05  # fraction of the sector span kept clear at each edge
_MIN_MARGIN = 1e-6


@runtime_checkable
class RandomSource(Protocol):
    """Uniform draws in [0, 1)."""

    def next_uniform(self) -> float:
        ...


class SeededRandom:
    """Deterministic source backed by random.Random."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def next_uniform(self) -> float:
        return self._random.random()


class SystemRandomSource:
    """OS entropy, for real games."""

    def __init__(self) -> None:
        self._random = random.SystemRandom()

    def next_uniform(self) -> float:
        return self._random.random()


def _draw(rng: RandomSource) -> float:
    u = rng.next_uniform()
    if not 0.0 <= u < 1.0:
        raise ValueError(f"Random source returned {u!r}, expected a value in [0, 1)")
    return u


def select(sectors: Sequence[Sector], rng: RandomSource) -> int:
    """Weighted pick of an entry index.

    Draws u in [0, 1), scales it by the total weight and finds the sector
    whose cumulative weight range contains it.
    """
    if not sectors:
        raise InvalidConfiguration("Cannot select from an empty wheel")

    cumulative = list(accumulate(s.weight for s in sectors))
    point = _draw(rng) * cumulative[-1]
    pos = min(bisect_right(cumulative, point), len(sectors) - 1)
    return sectors[pos].entry_index


def select_target_angle(
    sector: Sector,
    rng: RandomSource,
    margin_ratio: float = DEFAULT_BOUNDARY_MARGIN,
) -> float:
    """Uniform angle strictly inside the sector.

    A margin is kept clear at both edges so the pointer never comes to rest
    on a tie-line. Narrow sectors degrade to their midpoint.
    """
    span = sector.span
    margin = min(max(margin_ratio, _MIN_MARGIN) * span, span / 2)
    return sector.start_angle + margin + _draw(rng) * (span - 2 * margin)


def draw_rotations(rng: RandomSource, minimum: int, maximum: int) -> int:
    """Whole number of extra turns in [minimum, maximum]."""
    if maximum <= minimum:
        return minimum
    return min(minimum + int(_draw(rng) * (maximum - minimum + 1)), maximum)


class OutcomeSelector:
    """Binds a random source and margin to the selection functions."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        margin_ratio: float = DEFAULT_BOUNDARY_MARGIN,
    ) -> None:
        self.rng = rng if rng is not None else SystemRandomSource()
        self.margin_ratio = margin_ratio

    def select(self, sectors: Sequence[Sector], rng: Optional[RandomSource] = None) -> int:
        return select(sectors, rng or self.rng)

    def select_target_angle(self, sector: Sector, rng: Optional[RandomSource] = None) -> float:
        return select_target_angle(sector, rng or self.rng, self.margin_ratio)

    def draw_rotations(self, minimum: int, maximum: int) -> int:
        return draw_rotations(self.rng, minimum, maximum)
