"""Tick emitter - boundary crossings between two wheel angles.

Works on the unwrapped, forward-only timeline the controller produces, so a
single fast frame can cross many boundaries (and whole turns). Every
crossing produces its own event.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import math

from dndwheel.engine.model import TAU, Sector


@dataclass(frozen=True)
class TickEvent:
    """The pointer crossed a sector boundary."""

    angle: float                # unwrapped angle of the crossing
    boundary_index: int         # position of the sector whose start was crossed
    entry_index: int            # entry being entered
    previous_entry_index: int   # entry being left


def emit_ticks(previous_angle: float, new_angle: float, sectors: Sequence[Sector]) -> list[TickEvent]:
    """Every boundary strictly between previous_angle and new_angle, in order.

    Returns an empty list when the wheel did not move forward.
    """
    if not sectors or not new_angle > previous_angle:
        return []

    count = len(sectors)
    events: list[TickEvent] = []

    for pos, sector in enumerate(sectors):
        boundary = sector.start_angle
        # First repetition of this boundary strictly after previous_angle
        k = math.floor((previous_angle - boundary) / TAU) + 1
        crossing = boundary + k * TAU
        if crossing <= previous_angle:
            k += 1
            crossing = boundary + k * TAU
        while crossing < new_angle:
            events.append(TickEvent(
                angle=crossing,
                boundary_index=pos,
                entry_index=sector.entry_index,
                previous_entry_index=sectors[(pos - 1) % count].entry_index,
            ))
            k += 1
            crossing = boundary + k * TAU

    events.sort(key=lambda e: e.angle)
    return events


class TickEmitter:
    """Binds a sector list to emit_ticks and counts what it has emitted."""

    def __init__(self, sectors: Optional[Sequence[Sector]] = None) -> None:
        self._sectors: list[Sector] = list(sectors or [])
        self.total_ticks = 0

    @property
    def sectors(self) -> list[Sector]:
        return list(self._sectors)

    def set_sectors(self, sectors: Sequence[Sector]) -> None:
        self._sectors = list(sectors)

    def emit_ticks(
        self,
        previous_angle: float,
        new_angle: float,
        sectors: Optional[Sequence[Sector]] = None,
    ) -> list[TickEvent]:
        events = emit_ticks(previous_angle, new_angle, self._sectors if sectors is None else sectors)
        self.total_ticks += len(events)
        return events

    def reset(self) -> None:
        self.total_ticks = 0
