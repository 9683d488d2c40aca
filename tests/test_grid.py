import math

import numpy as np
import numpy.testing as npt
import pytest

from epradpy.cross_section import RadiativeCrossSection
from epradpy.grid import Bin, EventGrid, adaptive_bins

BEAM_ENERGY = 1100.0


def test_bin_properties():
    b = Bin(1.0, 3.0, 1.0, 4.0, 9.0)
    assert b.width == 2.0
    assert b.mid == 2.0
    assert b.contains(3.0) and not b.contains(3.5)
    # Simpson is exact for the parabola through the three points
    npt.assert_allclose(b.integral, (27.0 - 1.0) / 3.0)
    npt.assert_allclose(b.interpolate(np.array([1.0, 1.5, 2.5])), [1.0, 2.25, 6.25])


def test_constant_function_needs_no_refinement():
    calls = []

    def func(x):
        calls.append(x)
        return 3.0

    bins = adaptive_bins(func, 0.0, 2.0, 1e-3, min_bins=4)
    assert len(bins) == 4
    assert all(b.precise and b.depth == 0 for b in bins)
    # five edges and four midpoints, each evaluated once
    assert len(calls) == 9


def test_bins_tile_the_range():
    bins = adaptive_bins(lambda x: math.exp(-x), 0.0, 5.0, 1e-2)
    assert bins[0].low == 0.0
    assert bins[-1].high == 5.0
    for left, right in zip(bins[:-1], bins[1:]):
        assert left.high == right.low
    assert all(b.precise for b in bins)
    npt.assert_allclose(sum(b.integral for b in bins), 1.0 - math.exp(-5.0), rtol=1e-5)


def test_steep_linear_function_is_subdivided():
    bins = adaptive_bins(lambda x: 1.0 + x, 0.0, 10.0, 0.01)
    assert len(bins) > 1
    assert all(b.precise for b in bins)
    for b in bins:
        assert max(abs(b.f_low - b.f_mid), abs(b.f_high - b.f_mid)) <= 0.01 * b.f_mid
    # the edge values of the first bin are 1 and 1 + width
    assert bins[0].width <= 2.0 * 0.01 / (1.0 - 0.01)


def test_depth_limit_marks_bins_imprecise(caplog):
    bins = adaptive_bins(lambda x: x * x, 0.0, 1.0, 0.01, max_depth=4)
    # the midpoint value next to the zero at the origin never matches f(0) = 0
    assert not bins[0].precise
    assert bins[0].depth == 4
    assert max(b.depth for b in bins) <= 4
    assert "did not reach" in caplog.text


def test_time_budget_stops_refinement():
    bins = adaptive_bins(lambda x: x * x, 0.0, 1.0, 0.01, min_bins=4, time_budget=1e-9)
    assert len(bins) == 4
    assert all(b.depth == 0 for b in bins)
    assert not bins[0].precise


def test_threaded_evaluation_gives_the_same_bins():
    serial = adaptive_bins(lambda x: math.exp(-x), 0.0, 5.0, 1e-2)
    threaded = adaptive_bins(lambda x: math.exp(-x), 0.0, 5.0, 1e-2, workers=4)
    assert serial == threaded


@pytest.mark.parametrize(
    "low, high, precision, min_bins",
    [(1.0, 1.0, 0.1, 1), (2.0, 1.0, 0.1, 1), (0.0, 1.0, 0.0, 1), (0.0, 1.0, 0.1, 0)],
)
def test_invalid_arguments(low, high, precision, min_bins):
    with pytest.raises(ValueError):
        adaptive_bins(math.exp, low, high, precision, min_bins=min_bins)


@pytest.fixture
def smooth_grid(smooth_cross_section):
    return EventGrid(
        smooth_cross_section,
        BEAM_ENERGY,
        q2_min=1e3,
        q2_max=2e3,
        min_bins=2,
        t_prec=1e-2,
        v_prec=0.1,
    ).build()


def test_grid_integrates_the_total_cross_section(smooth_grid):
    assert smooth_grid.built
    npt.assert_allclose(smooth_grid.total, 1.0 / 1e3 - 1.0 / 2e3, rtol=1e-4)
    assert len(smooth_grid.v_bins) == len(smooth_grid.q2_bins)
    assert len(smooth_grid.cross_sections) == len(smooth_grid.q2_bins)
    for v_bins in smooth_grid.v_bins:
        assert v_bins[0].low == 10.0
        assert v_bins[-1].high == 1000.0


def test_grid_lookup(smooth_grid):
    index, q2_bin = smooth_grid.q2_bin(1500.0)
    assert q2_bin.contains(1500.0)
    assert smooth_grid.q2_bins[index] is q2_bin
    assert smooth_grid.q2_bin(2e3)[0] == len(smooth_grid.q2_bins) - 1

    density = smooth_grid.sample_bin(1500.0, 500.0)
    assert density == pytest.approx(1.0 / (q2_bin.mid * 500.0), rel=0.25)

    with pytest.raises(ValueError):
        smooth_grid.q2_bin(500.0)
    with pytest.raises(ValueError):
        smooth_grid.sample_bin(1500.0, 5.0)
    with pytest.raises(ValueError):
        smooth_grid.sample_bin(1500.0, 2000.0)


def test_grid_table(smooth_grid):
    table = smooth_grid.to_dataframe()
    assert len(table) == sum(len(v_bins) for v_bins in smooth_grid.v_bins)
    assert {"q2_low", "q2_high", "total", "radiative", "v_low", "v_density"} <= set(
        table.columns
    )
    assert table["q2_index"].max() == len(smooth_grid.q2_bins) - 1


def test_grid_before_build(smooth_cross_section):
    grid = EventGrid(smooth_cross_section, BEAM_ENERGY, q2_min=1e3, q2_max=2e3)
    assert not grid.built
    with pytest.raises(RuntimeError):
        grid.q2_bin(1500.0)
    with pytest.raises(RuntimeError):
        grid.to_dataframe()


@pytest.mark.parametrize("q2_min, q2_max", [(0.0, 1e3), (2e3, 1e3), (1e3, 1e7)])
def test_grid_range_outside_kinematics(smooth_cross_section, q2_min, q2_max):
    with pytest.raises(ValueError):
        EventGrid(smooth_cross_section, BEAM_ENERGY, q2_min=q2_min, q2_max=q2_max)


def test_grid_over_radiative_cross_section(small_quadrature):
    calculator = RadiativeCrossSection(v_min=10.0, v_cut=1000.0, quadrature=small_quadrature)
    grid = EventGrid(
        calculator, BEAM_ENERGY, q2_min=5000.0, q2_max=6000.0, min_bins=2, max_depth=1
    ).build()

    assert 2 <= len(grid.q2_bins) <= 4
    assert grid.total > 0.0
    for xs, v_bins in zip(grid.cross_sections, grid.v_bins):
        assert all(math.isfinite(value) for value in xs[:3])
        assert v_bins
        assert all(b.f_mid > 0.0 for b in v_bins)
