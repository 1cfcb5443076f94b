import math

import pytest

from dndwheel.core.errors import InvalidConfiguration
from dndwheel.engine.model import Entry, build_sectors
from dndwheel.engine.selector import (
    OutcomeSelector,
    RandomSource,
    SeededRandom,
    SystemRandomSource,
    draw_rotations,
    select,
    select_target_angle,
)


@pytest.fixture
def one_to_three():
    return build_sectors([Entry("A", 1), Entry("B", 3)])


@pytest.mark.parametrize("u, expected", [
    (0.0, 0),
    (0.24, 0),
    (0.25, 1),
    (0.26, 1),
    (0.999999, 1),
])
def test_select_uses_cumulative_weight(one_to_three, scripted, u, expected):
    assert select(one_to_three, scripted([u])) == expected


def test_select_skips_filtered_entries(scripted):
    sectors = build_sectors([Entry("zero", 0), Entry("B", 2), Entry("neg", -1), Entry("D", 2)])

    assert select(sectors, scripted([0.1])) == 1
    assert select(sectors, scripted([0.6])) == 3


def test_select_empty_rejected(scripted):
    with pytest.raises(InvalidConfiguration):
        select([], scripted([0.5]))


def test_select_rejects_out_of_range_draw(one_to_three, scripted):
    with pytest.raises(ValueError):
        select(one_to_three, scripted([1.0]))


def test_weighted_distribution_converges(one_to_three):
    rng = SeededRandom(1234)
    trials = 10_000
    picks = [select(one_to_three, rng) for _ in range(trials)]
    a = picks.count(0)
    b = picks.count(1)

    assert a + b == trials
    assert b / trials == pytest.approx(0.75, abs=0.02)
    assert 2.7 < b / a < 3.3


def test_seeded_selection_is_reproducible(abc_entries):
    sectors = build_sectors(abc_entries)

    def run(seed):
        rng = SeededRandom(seed)
        out = []
        for _ in range(20):
            index = select(sectors, rng)
            out.append((index, select_target_angle(sectors[index], rng)))
        return out

    assert run(7) == run(7)


@pytest.mark.parametrize("u", [0.0, 0.5, 0.999999999])
def test_target_angle_strictly_inside(abc_entries, scripted, u):
    for sector in build_sectors(abc_entries):
        angle = select_target_angle(sector, scripted([u]))
        assert sector.start_angle < angle < sector.end_angle


def test_target_angle_respects_margin(abc_entries, scripted):
    sector = build_sectors(abc_entries)[2]

    low = select_target_angle(sector, scripted([0.0]), margin_ratio=0.1)
    high = select_target_angle(sector, scripted([0.999999999]), margin_ratio=0.1)

    assert low == pytest.approx(sector.start_angle + 0.1 * math.pi)
    assert high == pytest.approx(sector.end_angle - 0.1 * math.pi, abs=1e-6)


def test_target_angle_with_zero_margin_still_inside(abc_entries, scripted):
    sector = build_sectors(abc_entries)[0]
    angle = select_target_angle(sector, scripted([0.0]), margin_ratio=0.0)
    assert angle > sector.start_angle


def test_target_angle_midpoint(abc_entries, scripted):
    sector = build_sectors(abc_entries)[2]
    assert select_target_angle(sector, scripted([0.5])) == pytest.approx(1.5 * math.pi)


def test_draw_rotations_range(scripted):
    assert draw_rotations(scripted([0.0]), 10, 13) == 10
    assert draw_rotations(scripted([0.999]), 10, 13) == 13
    assert draw_rotations(scripted([0.5]), 10, 13) == 12
    assert draw_rotations(scripted([0.5]), 3, 3) == 3


def test_draw_rotations_fixed_range_does_not_consume_randomness(scripted):
    rng = scripted([0.5])
    draw_rotations(rng, 4, 4)
    assert rng.calls == 0


def test_random_sources_satisfy_protocol():
    assert isinstance(SeededRandom(1), RandomSource)
    assert isinstance(SystemRandomSource(), RandomSource)
    for _ in range(100):
        assert 0.0 <= SystemRandomSource().next_uniform() < 1.0


def test_outcome_selector_binds_rng(one_to_three, scripted):
    selector = OutcomeSelector(scripted([0.9, 0.5]), margin_ratio=0.05)

    index = selector.select(one_to_three)
    angle = selector.select_target_angle(one_to_three[index])

    assert index == 1
    assert one_to_three[1].contains(angle)
