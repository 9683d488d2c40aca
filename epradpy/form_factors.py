"""Proton electromagnetic form factors and hadronic structure functions.

The form factors follow a rational parametrization in
``tau = Q^2 / (4 M^2)`` (both in GeV^2),

.. math::

    G(\\tau) = \\frac{\\sum_i a_i \\tau^i}{\\sum_i b_i \\tau^i},

with six coefficients in the numerator and the denominator. The magnetic form
factor is additionally scaled by the proton magnetic moment.

Notes
-----
The denominator coefficients of the reference fit are all non-negative, so the
denominators do not vanish for ``tau >= 0``. This is a property of the fit and
is not checked at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from epradpy.constants import PROTON_MASS


@dataclass(frozen=True)
class FormFactorFit:
    """Coefficient table of a rational form-factor parametrization.

    Attributes
    ----------
    ge_numerator, ge_denominator:
        Coefficients of the electric form factor, lowest power first.
    gm_numerator, gm_denominator:
        Coefficients of the magnetic form factor, lowest power first.
    magnetic_moment:
        Normalization of the magnetic form factor at ``Q^2 = 0``.
    """

    ge_numerator: tuple[float, ...]
    ge_denominator: tuple[float, ...]
    gm_numerator: tuple[float, ...]
    gm_denominator: tuple[float, ...]
    magnetic_moment: float


PROTON_RATIONAL_FIT = FormFactorFit(
    ge_numerator=(1.0, 2.90966, -1.11542229, 3.866171e-2, 0.0, 0.0),
    ge_denominator=(1.0, 14.5187212, 40.88333, 99.999998, 4.579e-5, 10.3580447),
    gm_numerator=(1.0, -1.43573, 1.19052066, 2.5455841e-1, 0.0, 0.0),
    gm_denominator=(1.0, 9.70703681, 3.7357e-4, 6.0e-8, 9.9527277, 12.7977739),
    magnetic_moment=2.792782,
)


def _polynomial(coefficients: tuple[float, ...], x: np.ndarray) -> np.ndarray:
    # numpy.polyval expects the highest power first
    return np.polyval(coefficients[::-1], x)


def form_factors(Q2, fit: FormFactorFit = PROTON_RATIONAL_FIT):
    """Electric and magnetic form factors of the proton.

    Parameters
    ----------
    Q2:
        Four-momentum transfer squared in MeV^2 (scalar or array, ``Q2 >= 0``).
    fit:
        Coefficient table.

    Returns
    -------
    tuple
        ``(GE, GM)``, dimensionless, with the shape of ``Q2``.
    """

    # MeV^2 -> GeV^2
    tau = np.asarray(Q2, dtype=float) * 1e-6 / (4.0 * (PROTON_MASS * 1e-3) ** 2)

    ge = _polynomial(fit.ge_numerator, tau) / _polynomial(fit.ge_denominator, tau)
    gm = (
        fit.magnetic_moment
        * _polynomial(fit.gm_numerator, tau)
        / _polynomial(fit.gm_denominator, tau)
    )

    if np.ndim(ge) == 0:
        return float(ge), float(gm)
    return ge, gm


def structure_functions(Q2, fit: FormFactorFit = PROTON_RATIONAL_FIT):
    """Hadronic structure functions ``F1`` and ``F2``.

    ``F1 = 4 tau M^2 GM^2`` and ``F2 = 4 M^2 (GE^2 + tau GM^2) / (1 + tau)``
    with ``tau = Q^2 / (4 M^2)`` in MeV units.
    """

    ge, gm = form_factors(Q2, fit)
    M2 = PROTON_MASS**2
    tau = np.asarray(Q2, dtype=float) / (4.0 * M2)

    f1 = 4.0 * tau * M2 * gm * gm
    f2 = 4.0 * M2 * (ge * ge + tau * gm * gm) / (1.0 + tau)

    if np.ndim(f1) == 0:
        return float(f1), float(f2)
    return f1, f2
