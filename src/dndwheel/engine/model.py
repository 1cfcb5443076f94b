"""Wheel model - entries and the angular sectors derived from their weights.

Sectors partition [0, 2π) contiguously in entry order. Entries whose weight
is not a positive finite number get no sector and can never win.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math

from dndwheel.core.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

TAU = 2 * math.pi


@dataclass(frozen=True)
class Entry:
    """One selectable outcome."""

    label: str
    weight: float
    color: Optional[str] = None  # "#rrggbb", generated from label if missing


@dataclass(frozen=True)
class Sector:
    """Angular range assigned to one entry.

    entry_index refers to the position in the original entry list, which
    differs from the sector's own position when entries were filtered out.
    """

    entry_index: int
    start_angle: float
    end_angle: float
    weight: float

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def midpoint(self) -> float:
        return self.start_angle + self.span / 2

    def contains(self, angle: float) -> bool:
        """Check if a normalized angle falls in [start, end)."""
        return self.start_angle <= angle < self.end_angle


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2π)."""
    wrapped = angle % TAU
    # Tiny negative inputs round up to exactly TAU
    if wrapped >= TAU:
        return 0.0
    return wrapped


def _usable_weight(weight) -> bool:
    if isinstance(weight, (str, bytes)):
        return False
    try:
        value = float(weight)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


def build_sectors(entries: Sequence[Entry]) -> list[Sector]:
    """Convert entry weights into contiguous sectors covering the full circle.

    Raises:
        InvalidConfiguration: If there are no entries or no positive weight
    """
    if not entries:
        raise InvalidConfiguration("Wheel has no entries")

    usable = [(i, float(e.weight)) for i, e in enumerate(entries) if _usable_weight(e.weight)]
    skipped = len(entries) - len(usable)
    if skipped:
        logger.warning(f"Ignoring {skipped} entries with non-positive weight")

    if not usable:
        raise InvalidConfiguration("No entry has a positive weight")

    total = math.fsum(w for _, w in usable)
    sectors: list[Sector] = []
    cumulative = 0.0
    last = len(usable) - 1

    for n, (entry_index, weight) in enumerate(usable):
        start = TAU * cumulative / total
        cumulative += weight
        # Pin the final edge so the spans sum to exactly 2π
        end = TAU if n == last else TAU * cumulative / total
        sectors.append(Sector(entry_index, start, end, weight))

    return sectors


def sector_position(sectors: Sequence[Sector], angle: float) -> int:
    """Position (in the sector list) of the sector containing angle."""
    if not sectors:
        raise InvalidConfiguration("Wheel has no sectors")
    ends = [s.end_angle for s in sectors]
    pos = bisect_right(ends, normalize_angle(angle))
    return min(pos, len(sectors) - 1)


def sector_at(sectors: Sequence[Sector], angle: float) -> int:
    """Entry index of the sector containing angle (any real angle)."""
    return sectors[sector_position(sectors, angle)].entry_index


class WheelModel:
    """Entries plus their derived sectors.

    Built once per configuration snapshot. Replacing the entries means
    building a new model.
    """

    def __init__(self, entries: Sequence[Entry]) -> None:
        self._entries = tuple(entries)
        self._sectors = build_sectors(self._entries)
        self._ends = [s.end_angle for s in self._sectors]
        self._by_entry = {s.entry_index: s for s in self._sectors}
        self._total_weight = math.fsum(s.weight for s in self._sectors)
        logger.debug(
            f"WheelModel built: {len(self._sectors)} sectors from {len(self._entries)} entries"
        )

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def sectors(self) -> list[Sector]:
        return list(self._sectors)

    @property
    def total_weight(self) -> float:
        return self._total_weight

    @property
    def boundaries(self) -> list[float]:
        """Start angle of every sector - where the pointer ticks."""
        return [s.start_angle for s in self._sectors]

    def sector_at(self, angle: float) -> int:
        """Entry index under the given angle."""
        pos = min(bisect_right(self._ends, normalize_angle(angle)), len(self._sectors) - 1)
        return self._sectors[pos].entry_index

    def sector_for(self, entry_index: int) -> Optional[Sector]:
        """Sector owned by an entry, or None if the entry was filtered out."""
        return self._by_entry.get(entry_index)

    def entry(self, entry_index: int) -> Entry:
        return self._entries[entry_index]

    def label_at(self, angle: float) -> str:
        return self._entries[self.sector_at(angle)].label

    def probability(self, entry_index: int) -> float:
        """Chance of the given entry winning a spin."""
        sector = self._by_entry.get(entry_index)
        if sector is None:
            return 0.0
        return sector.weight / self._total_weight

    def __len__(self) -> int:
        return len(self._sectors)
