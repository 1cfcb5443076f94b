"""Core framework components for the decision wheel."""

from .errors import WheelError, InvalidConfiguration, InvalidSpinParameters, SpinInProgress
from .events import EventBus, Event, EventType

__all__ = [
    "WheelError",
    "InvalidConfiguration",
    "InvalidSpinParameters",
    "SpinInProgress",
    "EventBus",
    "Event",
    "EventType",
]
