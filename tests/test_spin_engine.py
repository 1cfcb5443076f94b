import math

import pytest

from dndwheel.config.settings import SpinSettings
from dndwheel.core.errors import InvalidConfiguration, InvalidSpinParameters, SpinInProgress
from dndwheel.core.events import EventBus, EventType
from dndwheel.engine.controller import SpinPhase
from dndwheel.engine.model import Entry, normalize_angle
from dndwheel.engine.selector import SeededRandom
from dndwheel.engine.spin import FrameResult, SpinEngine, SpinRequest


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def engine(abc_entries, fixed_spin_settings, scripted, bus):
    # 0.75 picks C, 0.5 lands in the middle of C (1.5π)
    return SpinEngine(abc_entries, settings=fixed_spin_settings, rng=scripted([0.75, 0.5]), event_bus=bus)


def test_scenario_lands_on_c(engine):
    request = engine.spin()

    assert request.selected_entry_index == 2
    assert request.target_angle == pytest.approx(1.5 * math.pi)
    assert request.extra_full_rotations == 3
    assert request.end_angle == pytest.approx(7.5 * math.pi)

    frame = engine.tick(2.0)

    assert frame.finished is True
    assert frame.result == 2
    assert frame.current_angle == pytest.approx(7.5 * math.pi)
    assert frame.wheel_angle == pytest.approx(1.5 * math.pi)
    assert engine.winner == 2
    assert engine.winner_entry.label == "C"
    assert engine.phase is SpinPhase.SETTLED


def test_scenario_tick_count(engine):
    engine.spin()
    frame = engine.tick(2.0)

    # 0 → 7.5π crosses 2π·k (3), π/2 + 2π·k (4) and π + 2π·k (4)
    assert len(frame.tick_events) == 11
    angles = [t.angle for t in frame.tick_events]
    assert angles == sorted(angles)


def test_ticks_split_over_frames_add_up(engine):
    engine.spin()
    total = 0
    finished = []
    for _ in range(120):
        frame = engine.tick(1 / 60)
        total += len(frame.tick_events)
        finished.append(frame.finished)

    assert total == 11
    assert finished.count(True) == 1
    assert finished[-1] is True


def test_result_reported_once(engine):
    engine.spin()
    assert engine.tick(2.0).result == 2

    after = engine.tick(0.016)
    assert after == FrameResult(current_angle=after.current_angle)
    assert after.finished is False
    assert after.result is None


def test_tick_when_idle(engine):
    frame = engine.tick(0.016)
    assert frame.finished is False
    assert frame.tick_events == ()
    assert frame.current_angle == 0.0


def test_spin_while_spinning_is_refused(engine):
    first = engine.spin()
    engine.tick(0.5)
    angle = engine.current_angle

    with pytest.raises(SpinInProgress):
        engine.spin()

    assert engine.last_request is first
    assert engine.current_angle == angle


def test_spin_again_after_settled_continues_forward(abc_entries, fixed_spin_settings):
    engine = SpinEngine(abc_entries, settings=fixed_spin_settings, rng=SeededRandom(3))
    engine.spin()
    engine.tick(2.0)
    end = engine.current_angle

    second = engine.spin()
    assert second.start_angle == end
    engine.tick(2.0)
    assert engine.current_angle > end
    assert engine.winner == engine.model.sector_at(second.target_angle)


def test_invalid_configuration_surfaces_on_spin(fixed_spin_settings):
    engine = SpinEngine([Entry("a", 0), Entry("b", -2)], settings=fixed_spin_settings, rng=SeededRandom(1))

    assert engine.is_valid is False
    with pytest.raises(InvalidConfiguration):
        engine.spin()
    assert engine.pointer_entry() is None


def test_empty_entries(fixed_spin_settings):
    engine = SpinEngine([], settings=fixed_spin_settings, rng=SeededRandom(1))
    with pytest.raises(InvalidConfiguration):
        engine.spin()


def test_cancel_reports_sector_under_frozen_angle(abc_entries, scripted):
    settings = SpinSettings(duration=2.0, min_rotations=3, rotations_low=3, rotations_high=3, easing="ease_out_cubic")
    engine = SpinEngine(abc_entries, settings=settings, rng=scripted([0.75, 0.5]))
    engine.spin()
    engine.tick(0.05)
    frozen = engine.current_angle

    frame = engine.cancel()

    assert frame.finished is True
    assert frame.result == engine.model.sector_at(frozen) == 1
    assert engine.winner == 1
    assert engine.current_angle == frozen
    assert engine.cancel() is None


def test_events_published(engine, bus):
    engine.spin()
    engine.tick(2.0)

    started = bus.get_history(EventType.SPIN_STARTED)
    crossed = bus.get_history(EventType.BOUNDARY_CROSSED, limit=100)
    settled = bus.get_history(EventType.SPIN_SETTLED)

    assert len(started) == 1
    assert started[0].data["entry_index"] == 2
    assert len(crossed) == 11
    assert len(settled) == 1
    assert settled[0].data["label"] == "C"
    assert settled[0].data["cancelled"] is False


def test_cancel_publishes_cancel_and_settle(engine, bus):
    engine.spin()
    engine.tick(0.3)
    engine.cancel()

    assert len(bus.get_history(EventType.SPIN_CANCELLED)) == 1
    settled = bus.get_history(EventType.SPIN_SETTLED)
    assert settled[-1].data["cancelled"] is True


def test_entry_edits_wait_for_spin_to_finish(engine):
    engine.spin()
    engine.tick(0.5)

    engine.set_entries([Entry("X", 1)])
    assert [e.label for e in engine.entries] == ["A", "B", "C"]

    frame = engine.tick(2.0)
    assert frame.result == 2
    assert engine.winner == 2
    assert engine.winner_entry.label == "C"
    assert [e.label for e in engine.entries] == ["X"]
    assert len(engine.sectors) == 1


def test_entry_edits_apply_immediately_when_idle(engine):
    engine.set_entries([Entry("X", 1), Entry("Y", 1)])
    assert len(engine.sectors) == 2
    assert engine.is_valid


def test_replay_reproduces_spin(abc_entries, fixed_spin_settings):
    engine = SpinEngine(abc_entries, settings=fixed_spin_settings, rng=SeededRandom(99), initial_angle=0.4)
    request = engine.spin()
    first = engine.tick(2.0)

    engine.replay(request)
    assert engine.current_angle == request.start_angle
    second = engine.tick(2.0)

    assert second.current_angle == first.current_angle
    assert second.result == first.result
    assert len(second.tick_events) == len(first.tick_events)


def test_seeded_engines_agree(abc_entries, fixed_spin_settings):
    def play(seed):
        engine = SpinEngine(abc_entries, settings=fixed_spin_settings, rng=SeededRandom(seed))
        results = []
        for _ in range(5):
            engine.spin()
            results.append(engine.tick(2.0).result)
        return results

    assert play(21) == play(21)


def test_landing_matches_selected_entry(abc_entries):
    settings = SpinSettings(duration=1.0)
    engine = SpinEngine(abc_entries, settings=settings, rng=SeededRandom(5))
    for _ in range(50):
        request = engine.spin()
        assert settings.rotations_low <= request.extra_full_rotations <= settings.rotations_high
        frame = engine.tick(1.0)
        assert frame.result == request.selected_entry_index
        assert engine.model.sector_at(frame.current_angle) == request.selected_entry_index


def test_pointer_entry_follows_angle(engine):
    assert engine.pointer_entry() == 0
    engine.spin()
    engine.tick(2.0)
    assert engine.pointer_entry() == 2
    assert engine.wheel_angle == pytest.approx(normalize_angle(7.5 * math.pi))


def test_rejected_replay_leaves_wheel_alone(abc_entries, fixed_spin_settings):
    engine = SpinEngine(abc_entries, settings=fixed_spin_settings, rng=SeededRandom(4), initial_angle=0.3)
    engine.spin()
    engine.tick(2.0)
    angle = engine.current_angle
    winner = engine.winner

    bad = SpinRequest(
        selected_entry_index=0,
        target_angle=0.5,
        extra_full_rotations=1,
        duration=2.0,
        start_angle=5.0,
    )
    with pytest.raises(InvalidSpinParameters):
        engine.replay(bad)

    assert engine.current_angle == angle
    assert engine.phase is SpinPhase.SETTLED
    assert engine.winner == winner
