"""Hard-photon bremsstrahlung cross sections.

Two forms are provided:

- :func:`brem_differential`, ``dsigma / dQ2 dt dv dphik``, fully differential
  in the photon invariants and the azimuthal emission angle ``phik``;
- :func:`brem_phik`, ``dsigma / dQ2 dt dv``, the same cross section integrated
  analytically over ``phik``.

Both contain the infrared pole ``1 / R^2`` with ``R = Q2 + v - t``. With
``finite=True`` :func:`brem_phik` adds the soft-photon subtraction term that
cancels it, which is the part folded into the non-radiative cross section.

The point-wise work is done by the compiled kernels in
:mod:`epradpy.functions.cpu_numba`; this module broadcasts the inputs, evaluates
the structure functions at ``t`` and checks the kinematic domain.
"""

from __future__ import annotations

import numpy as np

from epradpy.born import sigma_born
from epradpy.constants import ELECTRON_MASS
from epradpy.form_factors import PROTON_RATIONAL_FIT, FormFactorFit, structure_functions
from epradpy.functions.cpu_numba import brem_differential_kernel, brem_phik_kernel
from epradpy.kinematics import M2, check_invariants, check_radiative_region


def _flatten(*arrays):
    arrays = np.broadcast_arrays(*[np.asarray(a, dtype=float) for a in arrays])
    shape = arrays[0].shape
    return shape, [np.ascontiguousarray(a, dtype=np.float64).ravel() for a in arrays]


def _result(values: np.ndarray, shape: tuple):
    if shape == ():
        return float(values[0])
    return values.reshape(shape)


def brem_differential(
    v,
    t,
    phik,
    S: float,
    Q2: float,
    lepton_mass: float = ELECTRON_MASS,
    fit: FormFactorFit = PROTON_RATIONAL_FIT,
    check: bool = True,
):
    """Fully differential hard-photon cross section ``dsigma / dQ2 dt dv dphik``.

    Parameters
    ----------
    v, t, phik:
        Photon invariants (MeV^2) and azimuthal angle (rad). Scalars or arrays
        that broadcast against each other.
    S, Q2:
        Lepton-proton invariant and momentum transfer squared (MeV^2).
    lepton_mass:
        Mass of the scattered lepton (MeV).
    fit:
        Form-factor table used for ``F1(t)`` and ``F2(t)``.
    check:
        Validate ``(S, Q2)`` and the ``(v, t)`` region before evaluation.

    Returns
    -------
    float or numpy.ndarray
        Cross section in MeV^-6 rad^-1 with the broadcast shape of the inputs.
    """

    shape, (v, t, phik) = _flatten(v, t, phik)
    if check:
        check_invariants(S, Q2, lepton_mass)
        check_radiative_region(Q2, v, t)

    f1, f2 = structure_functions(t, fit)
    values = brem_differential_kernel(
        v, t, phik, np.asarray(f1), np.asarray(f2), S, Q2, lepton_mass**2, M2
    )
    return _result(values, shape)


def brem_phik(
    v,
    t,
    S: float,
    Q2: float,
    finite: bool = False,
    lepton_mass: float = ELECTRON_MASS,
    fit: FormFactorFit = PROTON_RATIONAL_FIT,
    born: float | None = None,
    check: bool = True,
):
    """Hard-photon cross section integrated over the emission azimuth.

    Parameters
    ----------
    v, t:
        Photon invariants (MeV^2), scalars or broadcastable arrays.
    S, Q2:
        Lepton-proton invariant and momentum transfer squared (MeV^2).
    finite:
        Add ``alpha / (2 pi^2) F_IR / R^2 sigma_Born(S, Q2)`` so that the result
        stays bounded for ``R -> 0``.
    lepton_mass:
        Mass of the scattered lepton (MeV).
    fit:
        Form-factor table.
    born:
        Precomputed Born cross section at ``(S, Q2)``. Computed on demand when
        ``finite`` is set and no value is given.
    check:
        Validate the kinematic domain. Quadrature callers that generate their
        nodes inside the region disable it.

    Returns
    -------
    float or numpy.ndarray
        ``dsigma / dQ2 dt dv`` in MeV^-6.
    """

    shape, (v, t) = _flatten(v, t)
    if check:
        check_invariants(S, Q2, lepton_mass)
        check_radiative_region(Q2, v, t)

    if finite and born is None:
        born = sigma_born(S, Q2, lepton_mass, fit)

    f1, f2 = structure_functions(t, fit)
    values = brem_phik_kernel(
        v,
        t,
        np.asarray(f1),
        np.asarray(f2),
        S,
        Q2,
        0.0 if born is None else float(born),
        bool(finite),
        lepton_mass**2,
        M2,
    )
    return _result(values, shape)
