"""
Wheel configuration file - the entry list and how the wheel looks.

Files are YAML (.yaml/.yml) or TOML (.toml). Every key is optional;
missing ones fall back to a plain five-entry wheel.

Example (YAML):

    spin_duration_ms: 5000
    winner_message: "The dice gods say:\\n{label}"
    segments:
      - {label: "Critical hit", weight: 1, color: "#FFD700"}
      - {label: "Hit", weight: 6}
      - {label: "Miss", weight: 3}
"""

from pathlib import Path
from typing import Any, Optional
import logging
import tomllib

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from dndwheel.core.errors import InvalidConfiguration
from dndwheel.engine.model import Entry

logger = logging.getLogger(__name__)


class SegmentConfig(BaseModel):
    """One wheel entry as written in the config file."""

    label: str
    weight: float = 1.0  # non-positive weights stay on file but never win
    color: Optional[str] = None


def _default_segments() -> list[SegmentConfig]:
    return [SegmentConfig(label=str(n), weight=1) for n in range(1, 6)]


class WheelConfig(BaseModel):
    """Entries plus the visual options of the wheel."""

    spin_duration_ms: Optional[float] = None
    center_color: str = "#202020"
    center_radius_ratio: float = 0.2
    winner_message: str = "Winner:\n{label}"
    winner_font_size: float = 40.0
    label_font_size: float = 20.0  # 0 hides the labels
    show_segments_borders: bool = True
    segments: list[SegmentConfig] = Field(default_factory=_default_segments)

    @field_validator("center_radius_ratio")
    @classmethod
    def _clamp_ratio(cls, value: float) -> float:
        return max(0.0, min(0.8, value))

    def entries(self) -> list[Entry]:
        """Segments as engine entries, in file order."""
        return [Entry(label=s.label, weight=s.weight, color=s.color) for s in self.segments]

    def winner_text(self, label: str) -> str:
        return self.winner_message.replace("{label}", label)

    @property
    def spin_duration(self) -> Optional[float]:
        """Spin duration in seconds, if the file sets one."""
        if self.spin_duration_ms is None:
            return None
        return self.spin_duration_ms / 1000.0


def _read_raw(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    raise InvalidConfiguration(f"Unsupported config format: {path.suffix or path.name}")


def load_wheel_config(path: Optional[Path | str] = None) -> WheelConfig:
    """Load a wheel config file.

    No path means the built-in defaults.

    Raises:
        InvalidConfiguration: The file is missing, unreadable or invalid
    """
    if path is None:
        logger.info("No wheel config given, using defaults")
        return WheelConfig()

    path = Path(path)
    try:
        raw = _read_raw(path)
    except OSError as e:
        raise InvalidConfiguration(f"Cannot read {path}: {e}") from e
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise InvalidConfiguration(f"Cannot parse {path}: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidConfiguration(f"{path} must contain a mapping at the top level")

    try:
        config = WheelConfig.model_validate(raw)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid wheel config {path}: {e}") from e

    logger.info(f"Loaded {len(config.segments)} segments from {path}")
    return config
