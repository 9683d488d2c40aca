"""Radiatively corrected ``dsigma / dQ2`` of elastic lepton-proton scattering."""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

import numpy as np

from epradpy.bremsstrahlung import brem_phik
from epradpy.constants import ELECTRON_MASS, NB_PER_INVERSE_MEV2
from epradpy.form_factors import PROTON_RATIONAL_FIT, FormFactorFit
from epradpy.kinematics import check_invariants, t_max, t_min, v_limit, vt_max, vt_min
from epradpy.quadrature import GaussLegendre, default_quadrature
from epradpy.virtual_soft import VirtualSoftTerms, virtual_and_soft


class CrossSections(NamedTuple):
    """Born, non-radiative and radiative ``dsigma / dQ2`` in MeV^-4.

    ``clamped`` is set when the configured ``v_cut`` exceeded the kinematic limit
    and was lowered to it.
    """

    born: float
    non_radiative: float
    radiative: float
    clamped: bool = False

    @property
    def total(self) -> float:
        return self.non_radiative + self.radiative

    def to_nb(self) -> "CrossSections":
        """Converts to nb / MeV^2."""
        return self._replace(
            born=self.born * NB_PER_INVERSE_MEV2,
            non_radiative=self.non_radiative * NB_PER_INVERSE_MEV2,
            radiative=self.radiative * NB_PER_INVERSE_MEV2,
        )


class RadiativeCrossSection:
    """Cross-section calculator with the photon-energy cuts of an event generator.

    Radiation with ``v < v_min`` is counted as non-radiative, radiation with
    ``v_min <= v <= v_cut`` is the radiative cross section. Both cuts are
    clamped against the kinematic limit of ``v`` at every query.

    Parameters
    ----------
    v_min : float
        Soft/hard separation of the photon invariant ``v`` (MeV^2), strictly positive.
    v_cut : float
        Upper cut on ``v`` for radiative events (MeV^2).
    lepton_mass : float
        Mass of the scattered lepton (MeV).
    quadrature : GaussLegendre, optional
        Node table for the nested integrals. The shared 2048-node table is used
        by default.
    fit : FormFactorFit
        Form-factor table of the target.
    """

    def __init__(
        self,
        v_min: float,
        v_cut: float,
        lepton_mass: float = ELECTRON_MASS,
        quadrature: GaussLegendre | None = None,
        fit: FormFactorFit = PROTON_RATIONAL_FIT,
    ):
        if v_min <= 0.0:
            raise ValueError(f"v_min needs to be strictly positive, got {v_min}")
        if v_cut < v_min:
            raise ValueError(f"v_cut ({v_cut}) needs to be at least v_min ({v_min})")

        self.v_min = v_min
        self.v_cut = v_cut
        self.lepton_mass = lepton_mass
        self.quadrature = default_quadrature() if quadrature is None else quadrature
        self.fit = fit

        self.log = logging.getLogger(self.__class__.__module__)
        self._clamp_reported = False

    def cutoffs(self, S: float, Q2: float) -> tuple[float, float, bool]:
        """Returns ``(v1, v2, clamped)`` with ``0 < v1 <= v2 <= v_limit(S, Q2)``."""

        limit = float(v_limit(S, Q2, self.lepton_mass))
        clamped = self.v_cut > limit
        v2 = min(self.v_cut, limit)
        v1 = min(self.v_min, v2)

        if clamped and not self._clamp_reported:
            self.log.warning(
                f"v_cut = {self.v_cut} MeV^2 exceeds the kinematic limit {limit:.6g} MeV^2 "
                f"at Q2 = {Q2} MeV^2 and is clamped. Further clampings are not reported."
            )
            self._clamp_reported = True

        return v1, v2, clamped

    def virtual_and_soft(self, S: float, Q2: float) -> VirtualSoftTerms:
        return virtual_and_soft(S, Q2, lepton_mass=self.lepton_mass, fit=self.fit)

    def brem_integrated_over_v(
        self,
        t: float,
        v_low: float,
        S: float,
        Q2: float,
        finite: bool,
        born: float | None = None,
    ) -> float:
        """Integrates the azimuth-integrated bremsstrahlung cross section over ``v``.

        The range is ``[vt_min(Q2, t, v_low), vt_max(S, Q2, t)]``; an empty range
        gives zero.
        """

        low = float(vt_min(Q2, t, v_low))
        high = float(vt_max(S, Q2, t))
        if high <= low:
            return 0.0

        def integrand(v):
            return brem_phik(
                v,
                t,
                S,
                Q2,
                finite=finite,
                lepton_mass=self.lepton_mass,
                fit=self.fit,
                born=born,
                check=False,
            )

        return self.quadrature.integrate(integrand, low, high)

    def _integrate_over_t(
        self,
        t_low: float,
        t_high: float,
        v_low: float,
        S: float,
        Q2: float,
        finite: bool,
        born: float | None,
    ) -> float:
        def integrand(t):
            return np.array(
                [
                    self.brem_integrated_over_v(ti, v_low, S, Q2, finite, born)
                    for ti in t
                ]
            )

        return self.quadrature.integrate(integrand, t_low, t_high)

    def sigma_fs(self, S: float, Q2: float, v1: float, born: float | None = None) -> float:
        """Infrared-subtracted bremsstrahlung remainder, part of the non-radiative cross section."""

        if born is None:
            born = self.virtual_and_soft(S, Q2).born
        return self._integrate_over_t(
            float(t_min(Q2, v1)), float(t_max(Q2, v1)), 0.0, S, Q2, True, born
        )

    def sigma_fh(self, S: float, Q2: float, v1: float, v2: float) -> float:
        """Hard-photon cross section with ``v >= v1`` inside the ``t`` range allowed at ``v2``."""

        return self._integrate_over_t(
            float(t_min(Q2, v2)), float(t_max(Q2, v2)), v1, S, Q2, False, None
        )

    def differential_xs(self, S: float, Q2: float) -> CrossSections:
        """Born, non-radiative and radiative ``dsigma / dQ2`` at ``(S, Q2)``.

        Parameters
        ----------
        S : float
            Lepton-proton invariant in MeV^2.
        Q2 : float
            Momentum transfer squared in MeV^2.

        Returns
        -------
        CrossSections
            Cross sections in MeV^-4.

        Raises
        ------
        ValueError
            If ``(S, Q2)`` is outside the elastic region.
        FloatingPointError
            If any of the results is not finite.
        """

        check_invariants(S, Q2, self.lepton_mass)
        v1, v2, clamped = self.cutoffs(S, Q2)

        terms = self.virtual_and_soft(S, Q2)
        sig_fs = self.sigma_fs(S, Q2, v1, born=terms.born)
        sig_nrad = terms.non_radiative(sig_fs)
        sig_rad = self.sigma_fh(S, Q2, v1, v2)

        result = CrossSections(terms.born, sig_nrad, sig_rad, clamped)
        if not all(math.isfinite(value) for value in result[:3]):
            raise FloatingPointError(
                f"Non-finite cross section at S = {S} MeV^2, Q2 = {Q2} MeV^2: {result}"
            )

        self.log.debug(
            f"Q2 = {Q2:.6g} MeV^2: born = {result.born:.6e}, "
            f"nrad = {result.non_radiative:.6e}, rad = {result.radiative:.6e}"
        )
        return result

    def radiative_density(self, S: float, Q2: float, v: float) -> float:
        """``dsigma / dQ2 dv``: the hard-photon cross section at fixed ``v`` integrated over ``t``."""

        check_invariants(S, Q2, self.lepton_mass)
        if v <= 0.0:
            raise ValueError(f"v = {v} MeV^2 must be strictly positive")

        def integrand(t):
            return brem_phik(
                v,
                t,
                S,
                Q2,
                finite=False,
                lepton_mass=self.lepton_mass,
                fit=self.fit,
                check=False,
            )

        return self.quadrature.integrate(integrand, float(t_min(Q2, v)), float(t_max(Q2, v)))
