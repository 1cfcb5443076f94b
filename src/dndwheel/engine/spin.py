"""
Spin engine - facade the host frame loop talks to.

spin() decides the outcome up front, then tick(dt) plays the animation
towards it one frame at a time, reporting boundary ticks and the final
result. Nothing here blocks; the host owns the clock.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from dndwheel.animation.easing import EasingFunc, Easing
from dndwheel.config.settings import SpinSettings
from dndwheel.core.errors import InvalidConfiguration, SpinInProgress
from dndwheel.core.events import Event, EventBus, EventType
from dndwheel.engine.controller import (
    Settled,
    SpinController,
    SpinPhase,
    compute_end_angle,
)
from dndwheel.engine.model import Entry, Sector, WheelModel, normalize_angle
from dndwheel.engine.selector import OutcomeSelector, RandomSource, SystemRandomSource
from dndwheel.engine.ticks import TickEmitter, TickEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpinRequest:
    """Everything needed to replay one spin exactly."""

    selected_entry_index: int
    target_angle: float
    extra_full_rotations: int
    duration: float
    start_angle: float

    @property
    def end_angle(self) -> float:
        return compute_end_angle(self.start_angle, self.target_angle, self.extra_full_rotations)


@dataclass(frozen=True)
class FrameResult:
    """What the host needs to draw and sound one frame."""

    current_angle: float
    tick_events: tuple[TickEvent, ...] = ()
    finished: bool = False
    result: Optional[int] = None

    @property
    def wheel_angle(self) -> float:
        """current_angle wrapped onto the wheel."""
        return normalize_angle(self.current_angle)


class SpinEngine:
    """
    Composes wheel model, outcome selector, controller and tick emitter.

    Single-flight: spin() while a spin is running raises SpinInProgress.
    Entry edits during a spin are held back until it settles, so the
    in-flight animation always finishes against the wheel it started on.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        settings: Optional[SpinSettings] = None,
        rng: Optional[RandomSource] = None,
        easing: Easing | str | EasingFunc | None = None,
        event_bus: Optional[EventBus] = None,
        initial_angle: float = 0.0,
    ) -> None:
        self.settings = settings or SpinSettings()
        self.event_bus = event_bus

        self._selector = OutcomeSelector(
            rng if rng is not None else SystemRandomSource(),
            margin_ratio=self.settings.boundary_margin,
        )
        self._emitter = TickEmitter()
        self._model: Optional[WheelModel] = None
        self._config_error: Optional[InvalidConfiguration] = None
        self._pending_entries: Optional[tuple[Entry, ...]] = None
        self._entries: tuple[Entry, ...] = ()

        self._last_request: Optional[SpinRequest] = None
        self._winner: Optional[int] = None
        self._winner_entry: Optional[Entry] = None

        self._controller = SpinController(
            self._lookup,
            easing=easing if easing is not None else self.settings.easing,
            min_rotations=self.settings.min_rotations,
            initial_angle=initial_angle,
        )
        self._apply_entries(tuple(entries))

    # ----- entries -----

    def _lookup(self, angle: float) -> int:
        return self._require_model().sector_at(angle)

    def _require_model(self) -> WheelModel:
        if self._model is None:
            raise self._config_error or InvalidConfiguration("Wheel has no entries")
        return self._model

    def _apply_entries(self, entries: tuple[Entry, ...]) -> None:
        self._entries = entries
        try:
            self._model = WheelModel(entries)
            self._config_error = None
            self._emitter.set_sectors(self._model.sectors)
        except InvalidConfiguration as e:
            logger.warning(f"Wheel configuration rejected: {e}")
            self._model = None
            self._config_error = e
            self._emitter.set_sectors([])
        self._emit(EventType.ENTRIES_CHANGED, count=len(entries), valid=self._model is not None)

    def set_entries(self, entries: Sequence[Entry]) -> None:
        """Replace the wheel's entries.

        Applied immediately when idle, otherwise after the current spin.
        """
        if self._controller.is_spinning:
            self._pending_entries = tuple(entries)
            logger.info("Entries changed mid-spin; applying after it settles")
            return
        self._apply_entries(tuple(entries))

    # ----- properties -----

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def model(self) -> WheelModel:
        """Current wheel model. Raises InvalidConfiguration if there is none."""
        return self._require_model()

    @property
    def sectors(self) -> list[Sector]:
        return self._model.sectors if self._model else []

    @property
    def is_valid(self) -> bool:
        return self._model is not None

    @property
    def controller(self) -> SpinController:
        return self._controller

    @property
    def phase(self) -> SpinPhase:
        return self._controller.phase

    @property
    def is_spinning(self) -> bool:
        return self._controller.is_spinning

    @property
    def current_angle(self) -> float:
        return self._controller.current_angle

    @property
    def wheel_angle(self) -> float:
        return normalize_angle(self._controller.current_angle)

    @property
    def last_request(self) -> Optional[SpinRequest]:
        return self._last_request

    @property
    def winner(self) -> Optional[int]:
        """Entry index of the most recent settled spin."""
        return self._winner

    @property
    def winner_entry(self) -> Optional[Entry]:
        return self._winner_entry

    def pointer_entry(self) -> Optional[int]:
        """Entry index under the pointer right now."""
        if self._model is None:
            return None
        return self._model.sector_at(self._controller.current_angle)

    # ----- spinning -----

    def spin(self) -> SpinRequest:
        """Pick the outcome and start the animation towards it.

        Raises:
            SpinInProgress: a spin is already running
            InvalidConfiguration: entries are empty or all weights non-positive
        """
        if self._controller.is_spinning:
            raise SpinInProgress("Wheel is already spinning")

        model = self._require_model()
        sectors = model.sectors
        index = self._selector.select(sectors)
        target = self._selector.select_target_angle(model.sector_for(index))
        rotations = self._selector.draw_rotations(
            self.settings.rotations_low, self.settings.rotations_high
        )

        request = SpinRequest(
            selected_entry_index=index,
            target_angle=target,
            extra_full_rotations=rotations,
            duration=self.settings.duration,
            start_angle=self._controller.current_angle,
        )
        self._start(request)
        logger.info(f"Spin towards '{model.entry(index).label}' (entry {index})")
        return request

    def replay(self, request: SpinRequest) -> SpinRequest:
        """Run a recorded spin again from its original start angle."""
        if self._controller.is_spinning:
            raise SpinInProgress("Wheel is already spinning")
        self._require_model()
        self._controller.check_parameters(request.extra_full_rotations, request.duration)
        self._controller.reset(request.start_angle)
        self._start(request)
        return request

    def _start(self, request: SpinRequest) -> None:
        self._controller.start(
            target_angle=request.target_angle,
            current_angle=request.start_angle,
            extra_rotations=request.extra_full_rotations,
            duration=request.duration,
        )
        self._last_request = request
        self._winner = None
        self._winner_entry = None
        self._emitter.reset()
        self._emit(
            EventType.SPIN_STARTED,
            entry_index=request.selected_entry_index,
            target_angle=request.target_angle,
            rotations=request.extra_full_rotations,
        )

    def tick(self, delta_time: float) -> FrameResult:
        """Advance one frame.

        Returns the angle to draw, the boundaries crossed during this frame,
        and - on the frame the wheel comes to rest - the winning entry.
        """
        if not self._controller.is_spinning:
            return FrameResult(current_angle=self._controller.current_angle)

        previous = self._controller.current_angle
        state = self._controller.advance(delta_time)
        ticks = tuple(self._emitter.emit_ticks(previous, state.current_angle))

        for tick in ticks:
            self._emit(
                EventType.BOUNDARY_CROSSED,
                angle=tick.angle,
                entry_index=tick.entry_index,
                previous_entry_index=tick.previous_entry_index,
            )

        if isinstance(state, Settled):
            self._settle(state)
            return FrameResult(state.current_angle, ticks, finished=True, result=state.entry_index)

        logger.debug(f"Frame: angle={state.current_angle:.4f} ticks={len(ticks)}")
        return FrameResult(state.current_angle, ticks)

    def cancel(self) -> Optional[FrameResult]:
        """Stop the wheel where it is; the entry under the pointer wins.

        Returns None if nothing was spinning.
        """
        if not self._controller.is_spinning:
            return None
        state = self._controller.cancel()
        self._emit(EventType.SPIN_CANCELLED, entry_index=state.entry_index, angle=state.current_angle)
        self._settle(state)
        return FrameResult(state.current_angle, finished=True, result=state.entry_index)

    def _settle(self, state: Settled) -> None:
        self._winner = state.entry_index
        self._winner_entry = self._entries[state.entry_index]
        label = self._winner_entry.label
        logger.info(f"Winner: '{label}' (entry {state.entry_index}, ticks={self._emitter.total_ticks})")
        self._emit(
            EventType.SPIN_SETTLED,
            entry_index=state.entry_index,
            label=label,
            angle=state.current_angle,
            cancelled=state.cancelled,
        )
        if self._pending_entries is not None:
            pending, self._pending_entries = self._pending_entries, None
            self._apply_entries(pending)

    def _emit(self, event_type: EventType, **data) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(Event(event_type, data=data, source="engine"))
