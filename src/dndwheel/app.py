"""
Desktop wheel window using pygame.

Hosts the spin engine: feeds it frame deltas, draws the wheel and routes
input through the event bus.

Keyboard Mapping:
    SPACE / RETURN: Spin (also: click on the wheel)
    BACKSPACE / C: Stop the wheel where it is
    R: Reload the wheel config file
    M: Mute / unmute
    D: Toggle debug overlay
    ESC / Q: Exit
"""

from pathlib import Path
from typing import Optional
import logging
import math

import pygame

from dndwheel.audio.engine import AudioEngine
from dndwheel.config.settings import DisplaySettings, Settings, SpinSettings
from dndwheel.config.wheel import WheelConfig, load_wheel_config
from dndwheel.core.errors import InvalidConfiguration, SpinInProgress
from dndwheel.core.events import Event, EventBus, EventType, spin_request_event, tick_event
from dndwheel.engine.selector import RandomSource
from dndwheel.engine.spin import SpinEngine
from dndwheel.graphics.wheel import WheelRenderer

logger = logging.getLogger(__name__)

BG_COLOR = (20, 20, 30)
DEBUG_COLOR = (200, 200, 220)
ERROR_COLOR = (255, 90, 90)


def spin_settings_for(settings: Settings, config: WheelConfig) -> SpinSettings:
    """Spin settings with the config file's duration applied, if it has one."""
    duration = config.spin_duration
    if duration is None:
        return settings.spin
    if duration <= 0:
        logger.warning(f"Ignoring non-positive spin_duration_ms in wheel config: {config.spin_duration_ms}")
        return settings.spin
    return settings.spin.model_copy(update={"duration": duration})


def window_flags(display: DisplaySettings) -> int:
    flags = pygame.DOUBLEBUF
    if display.fullscreen:
        flags |= pygame.FULLSCREEN
    elif display.frameless:
        flags |= pygame.NOFRAME
    return flags


class WheelApp:
    """Main window: one wheel, one engine, one frame loop."""

    def __init__(
        self,
        settings: Settings,
        config: WheelConfig,
        config_path: Optional[Path] = None,
        rng: Optional[RandomSource] = None,
        event_bus: Optional[EventBus] = None,
        audio: Optional[AudioEngine] = None,
        initial_angle: float = 0.0,
    ) -> None:
        self.settings = settings
        self.config = config
        self.config_path = config_path
        self.event_bus = event_bus or EventBus()
        self.audio = audio

        self.engine = SpinEngine(
            config.entries(),
            settings=spin_settings_for(settings, config),
            rng=rng,
            event_bus=self.event_bus,
            initial_angle=initial_angle,
        )
        self.renderer = WheelRenderer(
            config,
            radius=settings.display.wheel_radius,
            pointer_angle=settings.display.pointer_angle,
        )

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._running = False
        self._frame_count = 0
        self._show_debug = settings.debug
        self._show_winner = False
        self._error: Optional[str] = None

        self.event_bus.subscribe(EventType.SPIN_REQUESTED, self._on_spin_requested)
        self.event_bus.subscribe(EventType.CANCEL_REQUESTED, self._on_cancel_requested)
        self.event_bus.subscribe(EventType.RELOAD_REQUESTED, self._on_reload_requested)
        self.event_bus.subscribe(EventType.SPIN_SETTLED, self._on_settled)
        self.event_bus.subscribe(EventType.TICK, self._on_tick)

        if not self.engine.is_valid:
            self._error = "No entry has a positive weight"

        logger.info("WheelApp created")

    # ----- input handlers -----

    def _on_spin_requested(self, event: Event) -> None:
        try:
            self.engine.spin()
        except SpinInProgress:
            logger.debug("Spin ignored, wheel already spinning")
            return
        except InvalidConfiguration as e:
            self._error = str(e)
            logger.error(f"Cannot spin: {e}")
            return
        self._show_winner = False
        self._error = None

    def _on_cancel_requested(self, event: Event) -> None:
        self.engine.cancel()

    def _on_reload_requested(self, event: Event) -> None:
        self.reload_config()

    def _on_settled(self, event: Event) -> None:
        self._show_winner = True

    def _on_tick(self, event: Event) -> None:
        delta = min(event.data.get("delta", 0.0), self.settings.spin.max_frame_delta)
        self.engine.tick(delta)

    def reload_config(self) -> bool:
        """Re-read the config file. Keeps the current wheel if the file is broken."""
        if self.config_path is None:
            logger.info("No config file to reload")
            return False
        try:
            config = load_wheel_config(self.config_path)
        except InvalidConfiguration as e:
            logger.error(f"Reload failed, keeping current wheel: {e}")
            self._error = str(e)
            return False

        self.config = config
        self.renderer.set_config(config)
        self.engine.settings = spin_settings_for(self.settings, config)
        self.engine.set_entries(config.entries())
        self._error = None if self.engine.is_valid else "No entry has a positive weight"
        self._show_winner = False
        logger.info("Wheel config reloaded")
        return True

    # ----- pygame -----

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.settings.display.title)

        self._screen = pygame.display.set_mode(
            (self.settings.display.width, self.settings.display.height),
            window_flags(self.settings.display)
        )
        self._clock = pygame.time.Clock()
        pygame.font.init()
        self._font = pygame.font.SysFont(None, 18)

        logger.info(f"Pygame initialized: {self.settings.display.width}x{self.settings.display.height}")

    def _inside_wheel(self, pos: tuple[int, int]) -> bool:
        if not self._screen:
            return False
        cx = self._screen.get_width() / 2
        cy = self._screen.get_height() / 2
        return math.hypot(pos[0] - cx, pos[1] - cy) <= self.settings.display.wheel_radius

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._inside_wheel(event.pos):
                    self.event_bus.emit(spin_request_event(source="mouse"))

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self.event_bus.emit(spin_request_event(source="keyboard"))
        elif key in (pygame.K_BACKSPACE, pygame.K_c):
            self.event_bus.emit(Event(EventType.CANCEL_REQUESTED, source="keyboard"))
        elif key == pygame.K_r:
            self.event_bus.emit(Event(EventType.RELOAD_REQUESTED, source="keyboard"))
        elif key == pygame.K_m:
            if self.audio:
                self.audio.toggle_mute()
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug

    def _render(self) -> None:
        """Render one frame."""
        if not self._screen:
            return

        self._screen.fill(BG_COLOR)

        if self.engine.is_valid:
            winner = self.engine.winner_entry if self._show_winner else None
            self.renderer.render(
                self._screen,
                self.engine.model,
                self.engine.current_angle,
                winner_label=winner.label if winner else None,
            )

        if self._error and self._font:
            text = self._font.render(self._error, True, ERROR_COLOR)
            self._screen.blit(text, (10, self._screen.get_height() - 24))

        if self._show_debug:
            self._render_debug()

        pygame.display.flip()

    def _render_debug(self) -> None:
        if not self._font or not self._clock:
            return
        controller = self.engine.controller
        pointer = self.engine.pointer_entry()
        lines = [
            f"FPS {self._clock.get_fps():.0f}",
            f"phase {controller.phase.name}",
            f"angle {self.engine.wheel_angle:.3f} rad",
            f"speed {controller.angular_velocity:.2f} rad/s",
            f"pointer {pointer}",
        ]
        for n, line in enumerate(lines):
            self._screen.blit(self._font.render(line, True, DEBUG_COLOR), (10, 10 + n * 18))

    def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        if self.audio:
            self.audio.attach(self.event_bus)
        self._running = True

        logger.info("Wheel window started")

        try:
            while self._running:
                self._handle_events()

                if self._clock:
                    delta = self._clock.get_time() / 1000.0
                    self.event_bus.emit(tick_event(delta, self._frame_count))

                self._render()

                if self._clock:
                    self._clock.tick(self.settings.display.fps)

                self._frame_count += 1
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        if self.audio:
            self.audio.cleanup()
        pygame.quit()
        logger.info("Wheel window stopped")

    def stop(self) -> None:
        self._running = False
