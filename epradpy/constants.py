"""Physical constants used by the cross-section formulas.

All masses are in MeV and all kinematic invariants in MeV^2. Values are taken
from CODATA through :mod:`scipy.constants`, except for the tau mass which
CODATA no longer lists.
"""

from __future__ import annotations

import math

from scipy import constants

ELECTRON_MASS = constants.value("electron mass energy equivalent in MeV")
MUON_MASS = constants.value("muon mass energy equivalent in MeV")
# not part of CODATA 2022, PDG 2024 average
TAU_MASS = 1776.93
PROTON_MASS = constants.value("proton mass energy equivalent in MeV")

ALPHA = constants.alpha
ALPHA_PI = ALPHA / math.pi

HBARC = constants.value("reduced Planck constant times c in MeV fm")
# MeV^-2 -> nb, 1 fm^2 = 1e7 nb
NB_PER_INVERSE_MEV2 = HBARC**2 * 1e7

# lepton loops entering the vacuum polarization
VACUUM_LOOP_MASSES = (ELECTRON_MASS, MUON_MASS, TAU_MASS)

# v_limit is scaled by this factor to stay away from the kinematic edge
V_LIMIT_SAFETY = 0.99

LEPTON_MASSES = {
    "electron": ELECTRON_MASS,
    "muon": MUON_MASS,
}
