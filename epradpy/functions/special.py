"""Special functions of the one-loop corrections.

The dilogarithm enters the vertex correction both directly and through the
function ``S_phi`` of the infrared-finite part of the virtual correction.
"""

from __future__ import annotations

import math

import numpy as np
import scipy.special as sc

PI2 = math.pi**2


def spence(x):
    """Real part of the dilogarithm ``Li2(x)`` for any real ``x``.

    Parameters
    ----------
    x:
        Scalar or array argument.

    Returns
    -------
    float or numpy.ndarray
        ``Re Li2(x)`` with the shape of ``x``.

    Notes
    -----
    ``scipy.special.spence(z)`` is ``Li2(1 - z)`` and is real only for
    ``z >= 0``. Arguments ``x > 1`` are mapped with

    .. math::

        \\mathrm{Re}\\,\\mathrm{Li}_2(x) = \\frac{\\pi^2}{3}
            - \\frac{1}{2}\\ln^2 x - \\mathrm{Li}_2(1/x).
    """

    scalar = np.ndim(x) == 0
    x = np.atleast_1d(np.asarray(x, dtype=float))
    out = np.empty_like(x)

    upper = x > 1.0
    lower = ~upper
    out[lower] = sc.spence(1.0 - x[lower])

    x_up = x[upper]
    out[upper] = PI2 / 3.0 - 0.5 * np.log(x_up) ** 2 - sc.spence(1.0 - 1.0 / x_up)

    if scalar:
        return float(out[0])
    return out


def _spence_pair(g: float, gamma_0: float, gamma_j: float) -> float:
    return spence((gamma_0 - g) / (gamma_0 - gamma_j)) + spence(
        (g - 1.0) / (gamma_j - 1.0)
    )


def _phi_term(
    delta: float,
    root: float,
    s: float,
    l: float,
    a: float,
    b: float,
    gamma_u: float,
    gamma_0: float,
) -> float:
    """One term of ``S_phi`` for a given sign ``delta`` and root ``+-sqrt(D)``."""

    sqrt_l = math.sqrt(l)
    sqrt_b = math.sqrt(b)
    a_j = s - delta * sqrt_l
    tau_j = -a * sqrt_l + delta * (b - l) / 2.0 + root
    gamma_j = -(a_j * sqrt_b + math.sqrt(b * a_j * a_j + tau_j * tau_j)) / tau_j

    return -delta * (
        _spence_pair(gamma_u, gamma_0, gamma_j) - _spence_pair(gamma_0, gamma_0, gamma_j)
    )


def s_phi_terms(s: float, l: float, a: float, b: float) -> tuple[float, float, float]:
    """The three contributions to ``S_phi``, before the common prefactor.

    The terms are ordered as ``(delta=+1, -sqrt(D))``, ``(delta=+1, +sqrt(D))``
    and ``(delta=-1, -sqrt(D))``.
    """

    sqrt_l = math.sqrt(l)
    sqrt_b = math.sqrt(b)
    sqrt_d = math.sqrt((s + a) * (l * a - s * b) + (l + b) ** 2 / 4.0)

    gamma_u = (math.sqrt(b + l) - sqrt_b) / sqrt_l
    gamma_0 = -1.0 / (sqrt_b + sqrt_l)

    return (
        _phi_term(1.0, -sqrt_d, s, l, a, b, gamma_u, gamma_0),
        _phi_term(1.0, sqrt_d, s, l, a, b, gamma_u, gamma_0),
        _phi_term(-1.0, -sqrt_d, s, l, a, b, gamma_u, gamma_0),
    )


def s_phi(s: float, l: float, a: float, b: float) -> float:
    """Infrared-finite function ``S_phi(s, l, a, b)`` of the vertex correction."""

    return sum(s_phi_terms(s, l, a, b)) * s / 2.0 / math.sqrt(l)
