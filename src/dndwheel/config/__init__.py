"""Settings and wheel configuration loading."""

from .settings import Settings, SpinSettings, DisplaySettings, AudioSettings, get_settings
from .wheel import SegmentConfig, WheelConfig, load_wheel_config

__all__ = [
    "Settings",
    "SpinSettings",
    "DisplaySettings",
    "AudioSettings",
    "get_settings",
    "SegmentConfig",
    "WheelConfig",
    "load_wheel_config",
]
