import logging
import math

import numpy.testing as npt
import pytest

from epradpy.born import sigma_born
from epradpy.constants import NB_PER_INVERSE_MEV2
from epradpy.cross_section import CrossSections, RadiativeCrossSection
from epradpy.kinematics import v_limit

Q2 = 1e4


@pytest.fixture
def calculator(small_quadrature):
    return RadiativeCrossSection(v_min=10.0, v_cut=5000.0, quadrature=small_quadrature)


def test_cutoffs_inside_kinematic_limit(S, calculator):
    assert calculator.cutoffs(S, Q2) == (10.0, 5000.0, False)


def test_cutoff_clamping_is_reported_once(S, small_quadrature, caplog):
    calculator = RadiativeCrossSection(v_min=10.0, v_cut=1e9, quadrature=small_quadrature)
    with caplog.at_level(logging.WARNING, logger="epradpy"):
        v1, v2, clamped = calculator.cutoffs(S, Q2)
        calculator.cutoffs(S, 2.0 * Q2)

    assert clamped
    assert v1 == 10.0
    assert v2 == float(v_limit(S, Q2))
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_v_min_above_the_limit_collapses_onto_it(S, small_quadrature):
    calculator = RadiativeCrossSection(v_min=1e8, v_cut=1e9, quadrature=small_quadrature)
    v1, v2, clamped = calculator.cutoffs(S, Q2)
    assert v1 == v2
    assert clamped


@pytest.mark.parametrize("v_min, v_cut", [(0.0, 10.0), (-1.0, 10.0), (10.0, 5.0)])
def test_invalid_photon_cuts(v_min, v_cut):
    with pytest.raises(ValueError):
        RadiativeCrossSection(v_min=v_min, v_cut=v_cut)


def test_conversion_to_nb():
    xs = CrossSections(born=1.0, non_radiative=2.0, radiative=0.5, clamped=True)
    converted = xs.to_nb()
    assert converted.clamped
    npt.assert_allclose(converted.total, 2.5 * NB_PER_INVERSE_MEV2)
    npt.assert_allclose(converted.born, NB_PER_INVERSE_MEV2)


def test_no_photon_phase_space_at_elastic_t(S, calculator):
    assert calculator.brem_integrated_over_v(Q2, 0.0, S, Q2, finite=False) == 0.0


def test_radiative_density_is_positive(S, calculator):
    values = [calculator.radiative_density(S, Q2, v) for v in (10.0, 100.0, 1000.0)]
    assert all(math.isfinite(value) and value > 0.0 for value in values)

    with pytest.raises(ValueError):
        calculator.radiative_density(S, Q2, 0.0)


def test_non_finite_results_are_rejected(S, calculator, monkeypatch):
    monkeypatch.setattr(calculator, "sigma_fh", lambda *args: float("nan"))
    with pytest.raises(FloatingPointError):
        calculator.differential_xs(S, Q2)


def test_outside_elastic_region(S, calculator):
    with pytest.raises(ValueError):
        calculator.differential_xs(S, -Q2)


def test_cross_sections_at_representative_point(S):
    calculator = RadiativeCrossSection(v_min=10.0, v_cut=5000.0)
    xs = calculator.differential_xs(S, Q2)

    assert not xs.clamped
    assert all(math.isfinite(value) for value in xs[:3])
    npt.assert_allclose(xs.born, sigma_born(S, Q2), rtol=1e-12)
    assert xs.non_radiative > 0.0
    assert xs.radiative >= 0.0
    assert 0.5 < xs.total / xs.born < 2.5
