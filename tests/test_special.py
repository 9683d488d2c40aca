import math

import numpy as np
import numpy.testing as npt
import pytest

from epradpy.functions.special import s_phi, s_phi_terms, spence


@pytest.mark.parametrize("x", [0.05, 0.2, 0.5, 0.73, 0.999])
def test_spence_reflection_identity(x):
    lhs = spence(x) + spence(1.0 - x)
    rhs = math.pi**2 / 6.0 - math.log(x) * math.log(1.0 - x)
    npt.assert_allclose(lhs, rhs, rtol=1e-13)


def test_spence_known_values():
    npt.assert_allclose(spence(0.0), 0.0, atol=1e-15)
    npt.assert_allclose(spence(1.0), math.pi**2 / 6.0, rtol=1e-14)
    npt.assert_allclose(spence(-1.0), -(math.pi**2) / 12.0, rtol=1e-14)
    npt.assert_allclose(spence(0.5), math.pi**2 / 12.0 - 0.5 * math.log(2.0) ** 2, rtol=1e-14)
    # real part above the branch point
    npt.assert_allclose(spence(2.0), math.pi**2 / 4.0, rtol=1e-13)


def test_spence_inversion_above_one():
    x = np.array([1.5, 3.0, 10.0, 250.0])
    # Re Li2(x) + Li2(1/x) = pi^2/3 - ln^2(x)/2
    npt.assert_allclose(
        spence(x) + spence(1.0 / x),
        math.pi**2 / 3.0 - 0.5 * np.log(x) ** 2,
        rtol=1e-13,
    )


def test_spence_preserves_shape():
    x = np.linspace(-3.0, 3.0, 12).reshape(3, 4)
    assert spence(x).shape == (3, 4)
    assert isinstance(spence(0.3), float)


def test_s_phi_is_the_sum_of_its_terms():
    # electron kinematics at Q2 = 1e4 MeV^2 and a 1.1 GeV beam
    m2 = 0.51099895**2
    M2 = 938.27208816**2
    S = 2.0 * 938.27208816 * 1100.0
    Q2 = 1e4
    X = S - Q2
    s = Q2 + 2.0 * m2
    l = Q2 * (Q2 + 4.0 * m2)
    a = (S * X - 2.0 * M2 * (Q2 - 2.0 * m2)) / (2.0 * M2)
    b = (Q2 * (S * X - M2 * Q2) - m2 * Q2 * (Q2 + 4.0 * M2)) / M2

    terms = s_phi_terms(s, l, a, b)
    assert len(terms) == 3
    assert all(math.isfinite(term) for term in terms)
    npt.assert_allclose(s_phi(s, l, a, b), sum(terms) * s / 2.0 / math.sqrt(l), rtol=1e-15)
