"""Fixed-node Gauss-Legendre quadrature.

A :class:`GaussLegendre` table is built once and shared read-only between all
integrations. The integrand is called once per integration with the full array
of mapped nodes, so closures over outer integration variables vectorize
naturally.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

import numpy as np
from scipy.special import roots_legendre

DEFAULT_NODES = 2048

log = logging.getLogger(__name__)


class GaussLegendre:
    """Gauss-Legendre nodes and weights on ``[-1, 1]``.

    Parameters
    ----------
    n : int
        Number of nodes. The rule is exact for polynomials of degree ``2n - 1``.

    Attributes
    ----------
    nodes, weights : np.ndarray
        Read-only arrays of length ``n``.
    """

    def __init__(self, n: int = DEFAULT_NODES):
        if n < 1:
            raise ValueError(f"The number of quadrature nodes needs to be positive, got {n}")
        self.n = int(n)
        nodes, weights = roots_legendre(self.n)
        nodes.setflags(write=False)
        weights.setflags(write=False)
        self.nodes = nodes
        self.weights = weights

    def points(self, a: float, b: float) -> np.ndarray:
        """Nodes mapped onto ``[a, b]``."""
        return 0.5 * (b - a) * self.nodes + 0.5 * (b + a)

    def integrate(self, func: Callable[..., np.ndarray], a: float, b: float, *args) -> float:
        """Integrates ``func(x, *args)`` over ``[a, b]``.

        Parameters
        ----------
        func : Callable
            Vectorized integrand, called once with the array of mapped nodes.
        a, b : float
            Integration limits. ``b < a`` gives the negated integral.
        *args
            Passed through to ``func``.

        Returns
        -------
        float
            ``(b - a) / 2 * sum(w_i * func(x_i, *args))``.
        """

        values = func(self.points(a, b), *args)
        return 0.5 * (b - a) * float(np.dot(self.weights, values))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={self.n})"


_default: GaussLegendre | None = None
_default_lock = threading.Lock()


def default_quadrature() -> GaussLegendre:
    """Process-wide shared table with :data:`DEFAULT_NODES` nodes, built on first use."""

    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                log.debug("Building the %d-node Gauss-Legendre table", DEFAULT_NODES)
                _default = GaussLegendre(DEFAULT_NODES)
    return _default
