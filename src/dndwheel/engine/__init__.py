"""Spin engine: weighted outcome, eased spin animation and boundary ticks."""

from dndwheel.engine.model import TAU, Entry, Sector, WheelModel, build_sectors, normalize_angle, sector_at
from dndwheel.engine.selector import (
    OutcomeSelector,
    RandomSource,
    SeededRandom,
    SystemRandomSource,
    select,
    select_target_angle,
)
from dndwheel.engine.controller import Idle, Settled, Spinning, SpinController, SpinPhase, SpinState
from dndwheel.engine.ticks import TickEmitter, TickEvent, emit_ticks
from dndwheel.engine.spin import FrameResult, SpinEngine, SpinRequest

__all__ = [
    "TAU",
    "Entry",
    "Sector",
    "WheelModel",
    "build_sectors",
    "normalize_angle",
    "sector_at",
    "OutcomeSelector",
    "RandomSource",
    "SeededRandom",
    "SystemRandomSource",
    "select",
    "select_target_angle",
    "Idle",
    "Spinning",
    "Settled",
    "SpinController",
    "SpinPhase",
    "SpinState",
    "TickEmitter",
    "TickEvent",
    "emit_ticks",
    "FrameResult",
    "SpinEngine",
    "SpinRequest",
]
