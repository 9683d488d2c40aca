"""Weighted event sampling from an :class:`~epradpy.grid.EventGrid`."""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
import pandas as pd

from epradpy.grid import Bin, EventGrid


class Event(NamedTuple):
    """Candidate kinematic point.

    ``v`` is zero for non-radiative events. ``weight`` is in MeV^-2, its mean
    over many events is the integrated cross section of the grid.
    """

    q2: float
    v: float
    radiative: bool
    weight: float


def _cumulative(bins: list[Bin]) -> np.ndarray:
    integrals = np.clip([b.integral for b in bins], 0.0, None)
    cdf = np.cumsum(integrals)
    if cdf[-1] <= 0.0:
        raise ValueError("The bins carry no positive cross section")
    return cdf / cdf[-1]


class EventSampler:
    """Inverse-transform sampler over the Simpson integrals of the grid bins.

    A ``Q2`` bin is drawn with probability proportional to its integral and
    ``Q2`` is uniform inside it. The event is radiative with the probability
    ``radiative / total`` taken at the bin midpoint, in which case ``v`` is drawn
    the same way from the ``v`` bins of that ``Q2`` bin. Each uniform draw is
    corrected by the ratio of the quadratic interpolant to the bin average,
    clipped at zero. Draws in bins flagged ``precise=False`` keep the bin
    average.

    Parameters
    ----------
    grid : EventGrid
        A built grid.
    seed : int, optional
        Seed of the :func:`numpy.random.default_rng` generator.
    """

    def __init__(self, grid: EventGrid, seed: int | None = None):
        if not grid.built:
            raise ValueError("The grid has to be built before sampling")
        self.grid = grid
        self.rng = np.random.default_rng(seed)
        self.log = logging.getLogger(self.__class__.__module__)

        self.total = grid.total
        self._q2_cdf = _cumulative(grid.q2_bins)
        self._radiative_fraction = []
        self._v_cdf = []
        for xs, v_bins in zip(grid.cross_sections, grid.v_bins):
            radiative = max(xs.radiative, 0.0)
            denominator = max(xs.non_radiative, 0.0) + radiative
            has_v = bool(v_bins) and sum(b.integral for b in v_bins) > 0.0
            if not has_v or denominator <= 0.0:
                self._radiative_fraction.append(0.0)
                self._v_cdf.append(None)
                continue
            self._radiative_fraction.append(radiative / denominator)
            self._v_cdf.append(_cumulative(v_bins))

        self.log.info(
            f"Sampler over {len(grid.q2_bins)} Q2 bins, "
            f"integrated cross section {self.total:.6e} MeV^-2"
        )

    @staticmethod
    def _draw(rng: np.random.Generator, bins: list[Bin], cdf: np.ndarray):
        index = min(int(np.searchsorted(cdf, rng.random(), side="right")), len(bins) - 1)
        b = bins[index]
        x = b.low + rng.random() * b.width
        # the quadratic interpolant of an unresolved bin can change sign
        if not b.precise:
            return index, x, 1.0
        return index, x, max(float(b.interpolate(x)) / (b.integral / b.width), 0.0)

    def sample(self) -> Event:
        """Draws one weighted event."""

        index, q2, factor = self._draw(self.rng, self.grid.q2_bins, self._q2_cdf)
        weight = self.total * factor

        if self.rng.random() >= self._radiative_fraction[index]:
            return Event(q2, 0.0, False, weight)

        _, v, factor = self._draw(self.rng, self.grid.v_bins[index], self._v_cdf[index])
        return Event(q2, v, True, weight * factor)

    def sample_many(self, n: int) -> pd.DataFrame:
        """Draws ``n`` events into a DataFrame with the fields of :class:`Event`."""
        return pd.DataFrame([self.sample() for _ in range(n)], columns=Event._fields)
