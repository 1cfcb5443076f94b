"""
Wheel audio engine - tick per boundary crossing and a win fanfare.

Sounds are synthesized at startup and played through pygame.mixer.
Playback is fire-and-forget; nothing here ever waits on audio.
"""

from typing import Callable, Dict, List, Optional
import logging
import random
import time

import numpy as np
import pygame

from dndwheel.audio import synth
from dndwheel.config.settings import AudioSettings
from dndwheel.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)

TICK_VARIANTS = 8
TICK_COOLDOWN = 0.015  # seconds between audible ticks


class AudioEngine:
    """
    Plays feedback for a spinning wheel.

    Ticks are pre-rendered at several pitches across the configured range;
    each crossing picks one at random with a jittered volume so a fast spin
    sounds like a rattle rather than a drone.
    """

    def __init__(self, settings: Optional[AudioSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or AudioSettings()
        self._rng = rng or random.Random()
        self._initialized = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._tick_names: List[str] = []
        self._muted = False
        self._last_tick = 0.0
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> bool:
        """Initialize the mixer and generate sounds. False if audio is unavailable."""
        if not self.settings.enabled:
            logger.info("Audio disabled in settings")
            return False
        try:
            pygame.mixer.pre_init(synth.SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(16)
        except pygame.error as e:
            logger.error(f"Failed to initialize audio: {e}")
            return False

        self._initialized = True
        self._generate_sounds()
        logger.info(f"Audio engine initialized with {len(self._sounds)} sounds")
        return True

    def _create_sound(self, samples: np.ndarray) -> pygame.mixer.Sound:
        """Create a pygame Sound from mono samples (auto-converted to stereo)."""
        stereo = np.ascontiguousarray(synth.to_stereo(samples))
        return pygame.mixer.Sound(buffer=stereo.tobytes())

    def _generate_sounds(self) -> None:
        low = self.settings.tick_pitch_min
        high = self.settings.tick_pitch_max
        pitches = np.linspace(low, high, TICK_VARIANTS)

        self._tick_names = []
        for n, pitch in enumerate(pitches):
            name = f"tick_{n}"
            self._sounds[name] = self._create_sound(
                synth.tick(float(pitch), self.settings.tick_duration_ms)
            )
            self._tick_names.append(name)

        self._sounds["win"] = self._create_sound(synth.win_fanfare())

    # ===== PLAYBACK API =====

    def play(self, sound_name: str, volume: float = 1.0) -> Optional[pygame.mixer.Channel]:
        """Play a sound effect."""
        if not self._initialized or self._muted:
            return None

        sound = self._sounds.get(sound_name)
        if not sound:
            logger.warning(f"Sound not found: {sound_name}")
            return None

        sound.set_volume(volume * self.settings.volume)
        return sound.play()

    def play_tick(self) -> None:
        now = time.monotonic()
        if not self._tick_names or now - self._last_tick < TICK_COOLDOWN:
            return
        self._last_tick = now
        volume = self._rng.uniform(self.settings.tick_volume_min, self.settings.tick_volume_max)
        self.play(self._rng.choice(self._tick_names), volume=volume)

    def play_win(self) -> None:
        self.play("win")

    # ===== EVENT WIRING =====

    def attach(self, event_bus: EventBus) -> None:
        """Play ticks and the fanfare from engine events."""
        self._unsubscribers.append(
            event_bus.subscribe(EventType.BOUNDARY_CROSSED, self._on_boundary)
        )
        self._unsubscribers.append(
            event_bus.subscribe(EventType.SPIN_SETTLED, self._on_settled)
        )

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _on_boundary(self, event: Event) -> None:
        self.play_tick()

    def _on_settled(self, event: Event) -> None:
        self.play_win()

    # ===== VOLUME =====

    def mute(self) -> None:
        if not self._muted:
            self._muted = True
            if self._initialized:
                pygame.mixer.pause()
            logger.info("Audio muted")

    def unmute(self) -> None:
        if self._muted:
            self._muted = False
            if self._initialized:
                pygame.mixer.unpause()
            logger.info("Audio unmuted")

    def toggle_mute(self) -> bool:
        if self._muted:
            self.unmute()
        else:
            self.mute()
        return self._muted

    def cleanup(self) -> None:
        """Cleanup audio resources."""
        self.detach()
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
            logger.info("Audio engine cleaned up")
