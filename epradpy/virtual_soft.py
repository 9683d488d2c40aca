"""Virtual-photon and soft-photon corrections to elastic scattering.

The vertex correction and the infrared-divergent part of real photon emission
are combined into closed-form factors ``delta``. Together with the vacuum
polarization and the anomalous-magnetic-moment term they give the
non-radiative cross section

.. math::

    \\sigma_{nrad} = \\sigma_B \\left(1 + \\frac{\\alpha}{\\pi}
        (\\delta_{VR} + \\delta_{vac} - \\delta_{inf})\\right)
        e^{\\alpha \\delta_{inf} / \\pi} + \\sigma_{AMM} + \\sigma_{Fs}.

Only ``delta_inf`` is exponentiated.

References
----------
I. Akushevich, H. Gao, A. Ilyichev, M. Meziane, Eur. Phys. J. A 51, 1 (2015).
"""

from __future__ import annotations

import math
from typing import NamedTuple

from epradpy.born import sigma_born
from epradpy.constants import ALPHA, ALPHA_PI, ELECTRON_MASS, VACUUM_LOOP_MASSES
from epradpy.form_factors import PROTON_RATIONAL_FIT, FormFactorFit, structure_functions
from epradpy.functions.special import s_phi, spence
from epradpy.kinematics import M2, check_invariants, lambda_s, v_max as kinematic_v_max


class VirtualSoftTerms(NamedTuple):
    """Closed-form pieces of the non-radiative cross section at fixed ``(S, Q2)``."""

    born: float
    amm: float
    delta_vr: float
    delta_vac: float
    delta_inf: float

    def non_radiative(self, sigma_fs: float = 0.0) -> float:
        """Combine the terms with the finite soft-photon integral ``sigma_fs``."""
        correction = 1.0 + ALPHA_PI * (self.delta_vr + self.delta_vac - self.delta_inf)
        return (
            self.born * correction * math.exp(ALPHA_PI * self.delta_inf)
            + self.amm
            + sigma_fs
        )


def log_ratio(x: float, lam: float, mass_product: float) -> float:
    """``ln((x + sqrt(lam)) / (x - sqrt(lam))) / sqrt(lam)`` with ``|x^2 - lam| = 4 mass_product``.

    The ratio is rewritten as ``(x + sqrt(lam))^2 / (4 mass_product)`` so that
    no difference of nearly equal numbers is formed.
    """

    sqrt_l = math.sqrt(lam)
    return math.log((x + sqrt_l) ** 2 / (4.0 * mass_product)) / sqrt_l


def vacuum_polarization(Q2: float, masses=VACUUM_LOOP_MASSES) -> float:
    """Lepton-loop vacuum polarization ``delta_vac``, summed over ``masses`` (MeV)."""

    delta = 0.0
    for mass in masses:
        ml2 = mass * mass
        L = log_ratio(Q2, Q2 * (Q2 + 4.0 * ml2), ml2 * Q2)
        delta += (
            2.0 / 3.0 * (Q2 + 2.0 * ml2) * L
            - 10.0 / 9.0
            + 8.0 / 3.0 * ml2 / Q2 * (1.0 - 2.0 * ml2 * L)
        )
    return delta


def virtual_and_soft(
    S: float,
    Q2: float,
    v_max: float | None = None,
    lepton_mass: float = ELECTRON_MASS,
    fit: FormFactorFit = PROTON_RATIONAL_FIT,
) -> VirtualSoftTerms:
    """Born cross section and the virtual/soft correction factors.

    Parameters
    ----------
    S, Q2:
        Invariants in MeV^2.
    v_max:
        Upper limit of the photon invariant entering the soft-photon logarithms.
        Defaults to the kinematic limit at ``(S, Q2)``.
    lepton_mass:
        Lepton mass in MeV.
    fit:
        Form-factor table.

    Returns
    -------
    VirtualSoftTerms
        ``(born, amm, delta_vr, delta_vac, delta_inf)``, cross sections in MeV^-4.

    Raises
    ------
    ValueError
        If ``(S, Q2)`` is outside the elastic region or ``v_max <= 0``.
    """

    check_invariants(S, Q2, lepton_mass)
    if v_max is None:
        v_max = float(kinematic_v_max(S, Q2, lepton_mass))
    if v_max <= 0.0:
        raise ValueError(f"v_max = {v_max} MeV^2 must be positive")

    m = lepton_mass
    m2 = m * m
    M = math.sqrt(M2)
    X = S - Q2

    Q2_m = Q2 + 2.0 * m2
    lambda_m = Q2 * (Q2 + 4.0 * m2)
    sqrt_lm = math.sqrt(lambda_m)
    L_m = log_ratio(Q2, lambda_m, m2 * Q2)
    ls = lambda_s(S, m)
    L_S = log_ratio(S, ls, m2 * M2)
    L_X = log_ratio(X, X * X - 4.0 * m2 * M2, m2 * M2)

    a = (S * X - 2.0 * M2 * (Q2 - 2.0 * m2)) / (2.0 * M2)
    b = (Q2 * (S * X - M2 * Q2) - m2 * Q2 * (Q2 + 4.0 * M2)) / M2

    f1, f2 = structure_functions(Q2, fit)
    born = sigma_born(S, Q2, m, fit)

    delta_vr = (
        2.0 * (Q2_m * L_m - 1.0) * math.log(v_max / m / M)
        + (S * L_S + X * L_X) / 2.0
        + s_phi(Q2_m, lambda_m, a, b)
        + (1.5 * Q2 + 4.0 * m2) * L_m
        - 2.0
        - Q2_m
        / sqrt_lm
        * (
            lambda_m * L_m * L_m / 2.0
            + 2.0 * spence(2.0 * sqrt_lm / (Q2 + sqrt_lm))
            - math.pi**2 / 2.0
        )
    )
    delta_vac = vacuum_polarization(Q2)
    delta_inf = (Q2_m * L_m - 1.0) * math.log(v_max * v_max / S / X)

    amm = ALPHA**3 * m2 * L_m * (12.0 * M2 * f1 - (Q2 + 4.0 * M2) * f2) / (
        2.0 * M2 * Q2 * ls
    )

    return VirtualSoftTerms(
        born=float(born),
        amm=float(amm),
        delta_vr=float(delta_vr),
        delta_vac=float(delta_vac),
        delta_inf=float(delta_inf),
    )
