import math

import numpy.testing as npt
import pytest

from epradpy.born import sigma_born
from epradpy.constants import ALPHA_PI, ELECTRON_MASS, MUON_MASS
from epradpy.kinematics import q2_max, v_max
from epradpy.virtual_soft import (
    VirtualSoftTerms,
    log_ratio,
    vacuum_polarization,
    virtual_and_soft,
)


def test_only_the_infrared_term_is_exponentiated():
    terms = VirtualSoftTerms(born=2.0, amm=0.01, delta_vr=3.0, delta_vac=1.5, delta_inf=-4.0)
    expected = (
        2.0 * (1.0 + ALPHA_PI * (3.0 + 1.5 + 4.0)) * math.exp(-4.0 * ALPHA_PI) + 0.01 + 0.25
    )
    npt.assert_allclose(terms.non_radiative(0.25), expected, rtol=1e-15)


def test_log_ratio_matches_direct_formula():
    m2 = ELECTRON_MASS**2
    Q2 = 1e4
    lam = Q2 * (Q2 + 4.0 * m2)
    direct = math.log((math.sqrt(lam) + Q2) / (math.sqrt(lam) - Q2)) / math.sqrt(lam)
    npt.assert_allclose(log_ratio(Q2, lam, m2 * Q2), direct, rtol=1e-8)


def test_vacuum_polarization_grows_with_momentum_transfer():
    low, high = vacuum_polarization(1e3), vacuum_polarization(2e4)
    assert 0.0 < low < high
    # the muon loop alone is far below the electron loop at these scales
    assert vacuum_polarization(1e3, masses=(MUON_MASS,)) < 0.1 * low


def test_terms_at_representative_point(S):
    Q2 = 1e4
    terms = virtual_and_soft(S, Q2)

    assert all(math.isfinite(value) for value in terms)
    npt.assert_allclose(terms.born, sigma_born(S, Q2), rtol=1e-15)
    # v_max^2 < S X, so the soft-photon exponent is negative
    assert terms.delta_inf < 0.0
    assert terms.delta_vac > 0.0


def test_default_v_max_is_the_kinematic_limit(S):
    Q2 = 5e3
    assert virtual_and_soft(S, Q2) == virtual_and_soft(S, Q2, v_max=float(v_max(S, Q2)))


def test_soft_logarithm_depends_on_v_max(S):
    Q2 = 5e3
    wide = virtual_and_soft(S, Q2, v_max=1e5)
    narrow = virtual_and_soft(S, Q2, v_max=1e3)
    assert wide.delta_vr > narrow.delta_vr
    assert wide.delta_vac == narrow.delta_vac


@pytest.mark.parametrize("Q2", [0.0, -1.0])
def test_unphysical_momentum_transfer(S, Q2):
    with pytest.raises(ValueError):
        virtual_and_soft(S, Q2)


def test_momentum_transfer_above_kinematic_limit(S):
    with pytest.raises(ValueError):
        virtual_and_soft(S, 1.01 * q2_max(S))


@pytest.mark.parametrize("Q2", [1e3, 1e4, 5e4])
def test_electron_loop_matches_high_momentum_limit(Q2):
    # (2/3) (ln(Q2/m^2) - 5/3) for Q2 >> m^2
    reference = 2.0 / 3.0 * (math.log(Q2 / ELECTRON_MASS**2) - 5.0 / 3.0)
    npt.assert_allclose(vacuum_polarization(Q2, masses=(ELECTRON_MASS,)), reference, rtol=1e-3)
