import math

import numpy as np
import numpy.testing as npt
import pytest

from epradpy.bremsstrahlung import brem_differential, brem_phik
from epradpy.kinematics import t_max, t_min
from epradpy.quadrature import GaussLegendre

Q2 = 1e4
# photon direction variable (t - Q2) / R, away from the collinear peaks
TAU = 0.05


def point(R):
    """(v, t) at fixed photon direction for the photon invariant R = Q2 + v - t."""
    return R * (1.0 + TAU), Q2 + TAU * R


def test_azimuthal_integral_reproduces_the_closed_form(S):
    quadrature = GaussLegendre(2048)
    for R in (50.0, 476.0):
        v, t = point(R)
        numeric = quadrature.integrate(
            lambda phik: brem_differential(v, t, phik, S, Q2), 0.0, 2.0 * math.pi
        )
        npt.assert_allclose(numeric, brem_phik(v, t, S, Q2, finite=False), rtol=1e-5)


def test_hard_photon_cross_section_is_positive(S):
    v = 500.0
    t = np.linspace(t_min(Q2, v), t_max(Q2, v), 41)[1:-1]
    values = brem_phik(v, t, S, Q2)
    assert values.shape == t.shape
    assert np.all(np.isfinite(values))
    assert np.all(values > 0.0)

    phik = np.linspace(0.0, 2.0 * math.pi, 9)
    differential = brem_differential(v, t[10], phik, S, Q2)
    assert np.all(differential > 0.0)


def test_finite_part_cancels_the_infrared_pole(S):
    raw_coarse = brem_phik(*point(1e-3), S, Q2, finite=False)
    raw_fine = brem_phik(*point(1e-6), S, Q2, finite=False)
    finite_coarse = brem_phik(*point(1e-3), S, Q2, finite=True)
    finite_fine = brem_phik(*point(1e-6), S, Q2, finite=True)

    # 1 / R^2 divergence of the raw cross section
    assert abs(raw_fine / raw_coarse) > 1e5
    # at most the integrable 1 / R remainder survives the subtraction
    assert abs(finite_fine / finite_coarse) < 1e4
    assert abs(finite_fine) < 1e-2 * abs(raw_fine)


def test_scalar_and_array_evaluations_agree(S):
    v = np.array([100.0, 500.0, 2000.0])
    t = 0.5 * (t_min(Q2, v) + t_max(Q2, v))
    values = brem_phik(v, t, S, Q2, finite=True)
    for i in range(v.size):
        npt.assert_allclose(brem_phik(v[i], t[i], S, Q2, finite=True), values[i], rtol=1e-14)


def test_points_outside_the_photon_region(S):
    v = 500.0
    with pytest.raises(ValueError):
        brem_phik(v, t_max(Q2, v) + 1.0, S, Q2)
    with pytest.raises(ValueError):
        brem_phik(0.0, Q2, S, Q2)
    with pytest.raises(ValueError):
        brem_differential(v, t_min(Q2, v) - 1.0, 0.0, S, Q2)
