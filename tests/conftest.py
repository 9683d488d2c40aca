import pytest

from epradpy.constants import ELECTRON_MASS
from epradpy.cross_section import CrossSections
from epradpy.kinematics import beam_invariant
from epradpy.quadrature import GaussLegendre

BEAM_ENERGY = 1100.0


class SmoothCrossSection:
    """Analytic stand-in for RadiativeCrossSection with a fixed radiative share."""

    lepton_mass = ELECTRON_MASS
    v_min = 10.0
    v_cut = 1000.0
    radiative_share = 0.2

    def differential_xs(self, S, Q2):
        total = 1.0 / Q2**2
        return CrossSections(
            born=0.9 * total,
            non_radiative=(1.0 - self.radiative_share) * total,
            radiative=self.radiative_share * total,
        )

    def cutoffs(self, S, Q2):
        return self.v_min, self.v_cut, False

    def radiative_density(self, S, Q2, v):
        return 1.0 / (Q2 * v)


@pytest.fixture
def S() -> float:
    return beam_invariant(BEAM_ENERGY)


@pytest.fixture
def small_quadrature() -> GaussLegendre:
    return GaussLegendre(32)


@pytest.fixture
def smooth_cross_section() -> SmoothCrossSection:
    return SmoothCrossSection()
