import math
import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from dndwheel.config.settings import SpinSettings
from dndwheel.engine.model import Entry


class ScriptedRandom:
    """Random source that replays a fixed list of draws."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    def next_uniform(self) -> float:
        value = self._values[self.calls % len(self._values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def abc_entries():
    # A:[0, π/2)  B:[π/2, π)  C:[π, 2π)
    return [Entry("A", 1), Entry("B", 1), Entry("C", 2)]


@pytest.fixture
def quarter_entries():
    return [Entry(name, 1) for name in "NESW"]


@pytest.fixture
def fixed_spin_settings():
    return SpinSettings(duration=2.0, min_rotations=3, rotations_low=3, rotations_high=3)


def approx_angle(value):
    return pytest.approx(value, abs=1e-9)


HALF_PI = math.pi / 2
