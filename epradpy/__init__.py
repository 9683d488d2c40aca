from .born import sigma_born
from .config import Config, GeneratorSettings
from .cross_section import CrossSections, RadiativeCrossSection
from .eprad import EPRad
from .export import Export
from .form_factors import PROTON_RATIONAL_FIT, FormFactorFit, form_factors, structure_functions
from .grid import Bin, EventGrid, adaptive_bins
from .quadrature import GaussLegendre, default_quadrature
from .sampler import Event, EventSampler
from .virtual_soft import VirtualSoftTerms, virtual_and_soft

__version__ = "0.1.0"
