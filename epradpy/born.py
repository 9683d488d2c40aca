"""Born (one-photon exchange) cross section of elastic lepton-proton scattering."""

from __future__ import annotations

import math

from epradpy.constants import ALPHA, ELECTRON_MASS
from epradpy.form_factors import PROTON_RATIONAL_FIT, FormFactorFit, structure_functions
from epradpy.kinematics import M2, lambda_s


def born_weights(S, Q2, lepton_mass: float = ELECTRON_MASS):
    """Kinematic weights ``(theta_B1, theta_B2)`` of ``F1`` and ``F2``."""
    X = S - Q2
    return Q2 - 2.0 * lepton_mass**2, (S * X - M2 * Q2) / (2.0 * M2)


def sigma_born(
    S: float,
    Q2,
    lepton_mass: float = ELECTRON_MASS,
    fit: FormFactorFit = PROTON_RATIONAL_FIT,
):
    """Born cross section ``dsigma / dQ2``.

    .. math::

        \\frac{d\\sigma_B}{dQ^2} = \\frac{2 \\pi \\alpha^2}{\\lambda_S Q^4}
            \\left(F_1 \\theta_{B1} + F_2 \\theta_{B2}\\right)

    Parameters
    ----------
    S:
        Lepton-proton invariant ``2 k1.p`` in MeV^2.
    Q2:
        Momentum transfer squared in MeV^2, scalar or array.
    lepton_mass:
        Lepton mass in MeV, kept exactly.
    fit:
        Form-factor table.

    Returns
    -------
    float or numpy.ndarray
        Cross section in MeV^-4.

    Raises
    ------
    ValueError
        If ``S`` is below the kinematic threshold (``lambda_S <= 0``).
    """

    ls = lambda_s(S, lepton_mass)
    if ls <= 0.0:
        raise ValueError(f"S = {S} MeV^2 is below the kinematic threshold")

    f1, f2 = structure_functions(Q2, fit)
    theta_b1, theta_b2 = born_weights(S, Q2, lepton_mass)

    return 2.0 * math.pi * ALPHA**2 / ls / Q2 / Q2 * (f1 * theta_b1 + f2 * theta_b2)
