import math

import numpy as np
from numba import float64, jit

from epradpy.constants import ALPHA

ALPHA3 = ALPHA**3


@jit(nopython=True, nogil=True, cache=True)
def theta_coefficients(
    F: float,
    F_d: float,
    F_1p: float,
    F_2p: float,
    F_2m: float,
    tau: float,
    R: float,
    q2: float,
    s: float,
    x: float,
    m2: float,
    mt2: float,
):
    """Combines the kinematic form factors into the two bremsstrahlung weights.

    Parameters
    ----------
    F, F_d, F_1p, F_2p, F_2m : float
        Kinematic form factors, either at fixed azimuth or integrated over it.
    tau : float
        Photon direction variable ``(t - Q2) / R``.
    R : float
        Photon invariant ``Q2 + v - t``.
    q2, s, x : float
        Invariants ``Q2``, ``S`` and ``X = S - R - t``.
    m2, mt2 : float
        Squared lepton and target masses.

    Returns
    -------
    tuple
        ``(theta_1, theta_2, F_IR)``, where ``theta_i`` multiply the structure
        functions ``F1(t)`` and ``F2(t)`` and ``F_IR`` is the coefficient of the
        infrared pole ``1 / R^2``.

    """
    smx = s - x
    spx = s + x

    F_IR = F_2p - (q2 + 2.0 * m2) * F_d

    theta_11 = 4.0 * (q2 - 2.0 * m2) * F_IR
    theta_12 = 4.0 * tau * F_IR
    theta_13 = -4.0 * F - 2.0 * tau * tau * F_d
    theta_21 = 2.0 * (s * x - mt2 * q2) * F_IR / mt2
    theta_22 = (
        2.0 * spx * F_2m
        + spx * smx * F_1p
        + 2.0 * (smx - 2.0 * mt2 * tau) * F_IR
        - tau * spx * spx * F_d
    ) / (2.0 * mt2)
    theta_23 = (
        4.0 * mt2 * F + (4.0 * m2 + 2.0 * mt2 * tau * tau - smx * tau) * F_d - spx * F_1p
    ) / (2.0 * mt2)

    theta_1 = theta_11 / (R * R) + theta_12 / R + theta_13
    theta_2 = theta_21 / (R * R) + theta_22 / R + theta_23

    return theta_1, theta_2, F_IR


@jit(nopython=True, nogil=True, cache=True)
def brem_differential_point(
    v: float,
    t: float,
    phik: float,
    f1: float,
    f2: float,
    s: float,
    q2: float,
    m2: float,
    mt2: float,
) -> float:
    lambda_s = s * s - 4.0 * m2 * mt2
    R = q2 + v - t
    x = s - R - t
    smx = s - x
    spx = s + x
    tau = (t - q2) / R

    lambda_y = smx * smx + 4.0 * mt2 * q2
    sqrt_ly = math.sqrt(lambda_y)
    tau_min = (smx - sqrt_ly) / (2.0 * mt2)
    tau_max = (smx + sqrt_ly) / (2.0 * mt2)

    lambda_z = (
        (tau - tau_min)
        * (tau_max - tau)
        * (s * x * q2 - mt2 * q2 * q2 - m2 * lambda_y)
    )
    # rounding at the edges of the tau range
    sqrt_lz = math.sqrt(max(lambda_z, 0.0))
    azimuth = 2.0 * math.sqrt(mt2) * math.cos(phik) * sqrt_lz

    z1 = (q2 * spx + tau * (s * smx + 2.0 * mt2 * q2) - azimuth) / lambda_y
    z2 = (q2 * spx + tau * (x * smx - 2.0 * mt2 * q2) - azimuth) / lambda_y

    F = 1.0 / (2.0 * math.pi * sqrt_ly)
    F_d = F / (z1 * z2)
    F_1p = F * (1.0 / z1 + 1.0 / z2)
    F_2p = F * m2 * (1.0 / (z2 * z2) + 1.0 / (z1 * z1))
    F_2m = F * m2 * (1.0 / (z2 * z2) - 1.0 / (z1 * z1))

    theta_1, theta_2, _ = theta_coefficients(
        F, F_d, F_1p, F_2p, F_2m, tau, R, q2, s, x, m2, mt2
    )

    return -ALPHA3 / (4.0 * math.pi * lambda_s) * (theta_1 * f1 + theta_2 * f2) / (t * t)


@jit(nopython=True, nogil=True, cache=True)
def brem_phik_point(
    v: float,
    t: float,
    f1: float,
    f2: float,
    s: float,
    q2: float,
    born: float,
    finite: bool,
    m2: float,
    mt2: float,
) -> float:
    lambda_s = s * s - 4.0 * m2 * mt2
    R = q2 + v - t
    x = s - R - t
    smx = s - x
    spx = s + x
    tau = (t - q2) / R

    lambda_y = smx * smx + 4.0 * mt2 * q2

    b2 = (-lambda_y * tau + spx * smx * tau + 2.0 * spx * q2) / 2.0
    b1 = (-lambda_y * tau - spx * smx * tau - 2.0 * spx * q2) / 2.0
    mass_term = 4.0 * m2 * (mt2 * tau * tau - smx * tau - q2)
    c1 = (s * tau + q2) ** 2 - mass_term
    c2 = (tau * x - q2) ** 2 - mass_term
    sc1 = math.sqrt(c1)
    sc2 = math.sqrt(c2)

    F = 1.0 / math.sqrt(lambda_y)
    F_d = spx * (smx * tau + 2.0 * q2) / (sc1 * sc2 * (sc1 + sc2))
    F_1p = 1.0 / sc1 + 1.0 / sc2
    F_2p = m2 * (b2 / (sc2 * c2) - b1 / (sc1 * c1))
    F_2m = m2 * (b2 / (sc2 * c2) + b1 / (sc1 * c1))

    theta_1, theta_2, F_IR = theta_coefficients(
        F, F_d, F_1p, F_2p, F_2m, tau, R, q2, s, x, m2, mt2
    )

    res = -ALPHA3 / (4.0 * math.pi * lambda_s) * (theta_1 * f1 + theta_2 * f2) / (t * t)
    if finite:
        # analytic subtraction of the soft-photon pole
        res += ALPHA / (2.0 * math.pi**2) * F_IR / (R * R) * born

    return res


@jit(nopython=True, nogil=True, cache=True)
def brem_differential_kernel(
    v: np.ndarray,
    t: np.ndarray,
    phik: np.ndarray,
    f1: np.ndarray,
    f2: np.ndarray,
    s: float,
    q2: float,
    m2: float,
    mt2: float,
):
    """Evaluates the fully differential bremsstrahlung cross section on a flat array of points.

    Parameters
    ----------
    v, t, phik : np.ndarray
        One-dimensional arrays of equal length with the photon invariants and
        the azimuthal emission angle.
    f1, f2 : np.ndarray
        Structure functions evaluated at ``t``.
    s, q2 : float
        Invariants ``S`` and ``Q2``.
    m2, mt2 : float
        Squared lepton and target masses.

    Returns
    -------
    np.ndarray
        ``dsigma / dQ2 dt dv dphik`` for every point.

    """
    out = np.empty(v.size, dtype=float64)
    for i in range(v.size):
        out[i] = brem_differential_point(
            v[i], t[i], phik[i], f1[i], f2[i], s, q2, m2, mt2
        )
    return out


@jit(nopython=True, nogil=True, cache=True)
def brem_phik_kernel(
    v: np.ndarray,
    t: np.ndarray,
    f1: np.ndarray,
    f2: np.ndarray,
    s: float,
    q2: float,
    born: float,
    finite: bool,
    m2: float,
    mt2: float,
):
    """Evaluates the azimuth-integrated bremsstrahlung cross section on a flat array of points.

    Parameters
    ----------
    v, t : np.ndarray
        One-dimensional arrays of equal length with the photon invariants.
    f1, f2 : np.ndarray
        Structure functions evaluated at ``t``.
    s, q2 : float
        Invariants ``S`` and ``Q2``.
    born : float
        Born cross section at ``(S, Q2)``, only used when ``finite`` is set.
    finite : bool
        Adds the soft-photon subtraction term that removes the ``1 / R^2`` pole.
    m2, mt2 : float
        Squared lepton and target masses.

    Returns
    -------
    np.ndarray
        ``dsigma / dQ2 dt dv`` for every point.

    """
    out = np.empty(v.size, dtype=float64)
    for i in range(v.size):
        out[i] = brem_phik_point(
            v[i], t[i], f1[i], f2[i], s, q2, born, finite, m2, mt2
        )
    return out
