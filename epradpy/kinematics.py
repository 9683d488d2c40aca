"""Kinematic limits for elastic lepton-proton scattering with photon emission.

Variables follow the usual radiative-correction notation:

- ``S = 2 k1.p``: lepton-proton invariant (``2 M E`` for a target at rest)
- ``Q2``: four-momentum transfer squared at the lepton vertex
- ``v``: inelasticity, ``v = 0`` for non-radiative events
- ``t``: four-momentum transfer squared at the hadron vertex

Everything is in MeV^2. The functions accept scalars or numpy arrays.
"""

from __future__ import annotations

import numpy as np

from epradpy.constants import ELECTRON_MASS, PROTON_MASS, V_LIMIT_SAFETY

M2 = PROTON_MASS**2


def beam_invariant(energy: float) -> float:
    """Return ``S = 2 M E`` for a lepton of energy ``energy`` (MeV) on a proton at rest."""
    return 2.0 * PROTON_MASS * energy


def lambda_s(S, lepton_mass: float = ELECTRON_MASS):
    return S * S - 4.0 * lepton_mass**2 * M2


def q2_max(S: float, lepton_mass: float = ELECTRON_MASS) -> float:
    """Largest ``Q2`` reachable in elastic scattering at fixed ``S``."""
    m2 = lepton_mass**2
    return lambda_s(S, lepton_mass) / (S + m2 + M2)


def v_max(S, Q2, lepton_mass: float = ELECTRON_MASS):
    """Kinematic upper limit of the inelasticity ``v`` at fixed ``(S, Q2)``."""
    m2 = lepton_mass**2
    ls = lambda_s(S, lepton_mass)
    lm = Q2 * (Q2 + 4.0 * m2)
    return 2.0 * Q2 * (ls - Q2 * (S + m2 + M2)) / (Q2 * (S + 2.0 * m2) + np.sqrt(ls * lm))


def v_limit(S, Q2, lepton_mass: float = ELECTRON_MASS, safety: float = V_LIMIT_SAFETY):
    """Usable upper limit of ``v``: :func:`v_max` scaled by a safety factor."""
    return safety * v_max(S, Q2, lepton_mass)


def t_min(Q2, v):
    return (2.0 * M2 * Q2 + v * (Q2 + v - np.sqrt((Q2 + v) ** 2 + 4.0 * M2 * Q2))) / (
        2.0 * (M2 + v)
    )


def t_max(Q2, v):
    return (2.0 * M2 * Q2 + v * (Q2 + v + np.sqrt((Q2 + v) ** 2 + 4.0 * M2 * Q2))) / (
        2.0 * (M2 + v)
    )


def vt_min(Q2, t, v):
    """Lower limit of ``v`` at fixed ``(Q2, t)``, bounded from below by ``v``."""
    sqrt_t = np.sqrt(t)
    sqrt_4m2t = np.sqrt(4.0 * M2 + t)
    v_t = np.maximum(
        (t - Q2) * (sqrt_t + sqrt_4m2t) / 2.0 / sqrt_t,
        (t - Q2) * (sqrt_t - sqrt_4m2t) / 2.0 / sqrt_t,
    )
    return np.maximum(v, v_t)


def vt_max(S, Q2, t):
    """Upper limit of ``v`` at fixed ``(S, Q2, t)``."""
    return np.maximum(S - Q2 * S / t, S + t - Q2 - S * t / Q2)


def check_invariants(S: float, Q2: float, lepton_mass: float = ELECTRON_MASS) -> None:
    """Raise ``ValueError`` unless ``(S, Q2)`` lies inside the elastic region."""

    if lambda_s(S, lepton_mass) <= 0.0:
        raise ValueError(f"S = {S} MeV^2 is below the kinematic threshold")
    if not 0.0 < Q2 < q2_max(S, lepton_mass):
        raise ValueError(
            f"Q2 = {Q2} MeV^2 is outside the physical range "
            f"(0, {q2_max(S, lepton_mass)}) for S = {S} MeV^2"
        )


def check_radiative_region(Q2: float, v, t) -> None:
    """Raise ``ValueError`` unless every ``(v, t)`` has ``v > 0`` and ``t`` inside ``[t_min, t_max]``."""

    v = np.asarray(v, dtype=float)
    t = np.asarray(t, dtype=float)
    if np.any(v <= 0.0):
        raise ValueError("v must be strictly positive for photon emission")
    low, high = t_min(Q2, v), t_max(Q2, v)
    # relative slack for points placed exactly on the boundary
    slack = 1e-12 * np.abs(high)
    if np.any(t < low - slack) or np.any(t > high + slack):
        raise ValueError(f"t outside [t_min(Q2, v), t_max(Q2, v)] for Q2 = {Q2} MeV^2")
