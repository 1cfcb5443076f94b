"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Spin parameters are validated here, once, at startup.
"""

from functools import lru_cache
import math
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dndwheel.animation.easing import is_spin_easing
from dndwheel.core.errors import InvalidSpinParameters


class SpinSettings(BaseSettings):
    """Spin animation tuning."""

    model_config = SettingsConfigDict(
        env_prefix="DNDWHEEL_SPIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Seconds from spin start to rest
    duration: float = 5.0

    # Every spin makes at least this many full turns
    min_rotations: int = 3

    # Extra turns are drawn uniformly from this inclusive range per spin
    rotations_low: int = 10
    rotations_high: int = 13

    easing: str = "ease_out_quint"

    # Fraction of a sector kept clear at each edge when picking the landing point
    boundary_margin: float = 0.05

    # Long frames (window drag, breakpoints) are clamped to this many seconds
    max_frame_delta: float = 0.1

    @field_validator("duration", "max_frame_delta")
    @classmethod
    def _positive(cls, value: float) -> float:
        if not value > 0:
            raise InvalidSpinParameters(f"Expected a positive number of seconds, got {value}")
        return value

    @field_validator("min_rotations")
    @classmethod
    def _at_least_one_turn(cls, value: int) -> int:
        if value < 1:
            raise InvalidSpinParameters(f"min_rotations must be at least 1, got {value}")
        return value

    @field_validator("easing")
    @classmethod
    def _decelerating(cls, value: str) -> str:
        try:
            usable = is_spin_easing(value)
        except ValueError as e:
            raise InvalidSpinParameters(str(e)) from e
        if not usable:
            raise InvalidSpinParameters(f"Easing {value} does not come to rest smoothly")
        return value.lower()

    @field_validator("boundary_margin")
    @classmethod
    def _margin_range(cls, value: float) -> float:
        if not 0.0 <= value < 0.5:
            raise InvalidSpinParameters(f"boundary_margin must be in [0, 0.5), got {value}")
        return value

    @model_validator(mode="after")
    def _rotation_range(self) -> "SpinSettings":
        if self.rotations_low < self.min_rotations:
            raise InvalidSpinParameters(
                f"rotations_low ({self.rotations_low}) is below min_rotations ({self.min_rotations})"
            )
        if self.rotations_high < self.rotations_low:
            raise InvalidSpinParameters(
                f"rotations_high ({self.rotations_high}) is below rotations_low ({self.rotations_low})"
            )
        return self


class DisplaySettings(BaseSettings):
    """Window and wheel geometry."""

    model_config = SettingsConfigDict(
        env_prefix="DNDWHEEL_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    width: int = 600
    height: int = 600
    fps: int = 60
    title: str = "dnd_wheel"
    fullscreen: bool = False
    # No title bar or window border
    frameless: bool = False

    wheel_radius: float = 250.0
    # Pointer sits at the top of the screen (pygame y axis points down)
    pointer_angle: float = 1.5 * math.pi


class AudioSettings(BaseSettings):
    """Tick and win sound settings."""

    model_config = SettingsConfigDict(
        env_prefix="DNDWHEEL_AUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    volume: float = Field(default=1.0, ge=0.0, le=1.0)

    # Each tick gets a slightly different pitch and loudness
    tick_pitch_min: float = 550.0
    tick_pitch_max: float = 650.0
    tick_duration_ms: int = 30
    tick_volume_min: float = Field(default=0.25, ge=0.0, le=1.0)
    tick_volume_max: float = Field(default=0.45, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="DNDWHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Wheel entries and visuals (YAML or TOML); defaults are used when unset
    config_file: Optional[Path] = None

    # Fixed seed for reproducible spins; system entropy when unset
    seed: Optional[int] = None

    # Nested settings
    spin: SpinSettings = Field(default_factory=SpinSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
