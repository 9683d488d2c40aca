"""Adaptive phase-space grid for event generation.

The ``Q2`` range is split into bins whose edge values of the total cross
section agree with the midpoint value within a relative precision, and every
``Q2`` bin carries its own partition of the radiative ``v`` range. The bins
are the input of :class:`epradpy.sampler.EventSampler`.
"""

from __future__ import annotations

import bisect
import logging
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

import numpy as np
import pandas as pd

from epradpy.cross_section import CrossSections, RadiativeCrossSection
from epradpy.kinematics import beam_invariant
from epradpy.kinematics import q2_max as kinematic_q2_max

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bin:
    """Accepted leaf of the adaptive partition.

    Attributes
    ----------
    low, high : float
        Bin edges.
    f_low, f_mid, f_high : float
        Function values at the edges and at the midpoint.
    precise : bool
        ``False`` when the bin was kept at the depth limit or after the time
        budget ran out without meeting the precision.
    depth : int
        Number of bisections from the initial bin.
    """

    low: float
    high: float
    f_low: float
    f_mid: float
    f_high: float
    precise: bool = True
    depth: int = 0

    @property
    def width(self) -> float:
        return self.high - self.low

    @property
    def mid(self) -> float:
        return 0.5 * (self.low + self.high)

    @property
    def integral(self) -> float:
        """Simpson estimate of the integral over the bin."""
        return self.width / 6.0 * (self.f_low + 4.0 * self.f_mid + self.f_high)

    def contains(self, x: float) -> bool:
        return self.low <= x <= self.high

    def interpolate(self, x):
        """Quadratic interpolant through the three stored values."""
        u = (np.asarray(x, dtype=float) - self.mid) / (0.5 * self.width)
        return (
            0.5 * u * (u - 1.0) * self.f_low
            + (1.0 - u * u) * self.f_mid
            + 0.5 * u * (u + 1.0) * self.f_high
        )


def adaptive_bins(
    func: Callable[[float], float],
    low: float,
    high: float,
    precision: float,
    min_bins: int = 1,
    max_depth: int = 10,
    workers: int = 1,
    time_budget: float | None = None,
) -> list[Bin]:
    """Partitions ``[low, high]`` by breadth-first bisection.

    A bin is accepted when both edge values agree with the midpoint value,
    ``max(|f_low - f_mid|, |f_high - f_mid|) <= precision |f_mid|``. Bins reaching
    ``max_depth`` or still open when ``time_budget`` (seconds) is exhausted are
    accepted with ``precise=False``.

    Parameters
    ----------
    func : Callable
        Scalar function to resolve. Every abscissa is evaluated once.
    low, high : float
        Range to partition, ``low < high``.
    precision : float
        Relative tolerance of the acceptance test.
    min_bins : int
        Number of equal initial bins.
    max_depth : int
        Maximal number of bisections of an initial bin.
    workers : int
        Threads used to evaluate the abscissas of one generation of bins.
    time_budget : float, optional
        Wall-clock limit of the refinement.

    Returns
    -------
    list[Bin]
        Accepted bins ordered by ``low``. Neighbouring bins share their edge.
    """

    if not low < high:
        raise ValueError(f"Empty range [{low}, {high}]")
    if min_bins < 1:
        raise ValueError(f"min_bins needs to be at least 1, got {min_bins}")
    if precision <= 0.0:
        raise ValueError(f"precision needs to be positive, got {precision}")

    cache: dict[float, float] = {}
    executor = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None

    def evaluate(points):
        missing = list(dict.fromkeys(x for x in points if x not in cache))
        if executor is None:
            values = [func(x) for x in missing]
        else:
            values = list(executor.map(func, missing))
        cache.update(zip(missing, (float(value) for value in values)))

    edges = np.linspace(low, high, min_bins + 1)
    edges[0], edges[-1] = low, high
    queue = deque((float(a), float(b), 0) for a, b in zip(edges[:-1], edges[1:]))
    accepted: list[Bin] = []
    start = time.monotonic()

    try:
        while queue:
            generation = list(queue)
            queue.clear()
            evaluate(
                x
                for a, b, _ in generation
                for x in (a, 0.5 * (a + b), b)
            )
            out_of_time = (
                time_budget is not None and time.monotonic() - start > time_budget
            )

            for a, b, depth in generation:
                m = 0.5 * (a + b)
                f_a, f_m, f_b = cache[a], cache[m], cache[b]
                if max(abs(f_a - f_m), abs(f_b - f_m)) <= precision * abs(f_m):
                    accepted.append(Bin(a, b, f_a, f_m, f_b, True, depth))
                elif depth >= max_depth or out_of_time:
                    accepted.append(Bin(a, b, f_a, f_m, f_b, False, depth))
                else:
                    queue.append((a, m, depth + 1))
                    queue.append((m, b, depth + 1))
    finally:
        if executor is not None:
            executor.shutdown()

    accepted.sort(key=lambda b: b.low)

    imprecise = sum(not b.precise for b in accepted)
    if imprecise:
        log.warning(
            f"{imprecise} of {len(accepted)} bins on [{low:.6g}, {high:.6g}] "
            f"did not reach the relative precision {precision}"
        )
    log.debug(f"{len(accepted)} bins from {len(cache)} evaluations")

    return accepted


class EventGrid:
    """Two-level adaptive grid in ``(Q2, v)``.

    Parameters
    ----------
    cross_section : RadiativeCrossSection
        Calculator providing ``differential_xs`` and ``radiative_density``.
    energy : float
        Beam energy in MeV, target at rest.
    q2_min, q2_max : float
        Momentum-transfer range of the grid (MeV^2).
    min_bins : int
        Initial number of bins of both axes.
    t_prec : float
        Relative precision of the ``Q2`` axis.
    v_prec : float
        Relative precision of the ``v`` axes.
    max_depth : int
        Bisection limit of both axes.
    workers : int
        Threads used for sibling evaluations.
    time_budget : float, optional
        Wall-clock limit in seconds of each axis refinement.
    """

    def __init__(
        self,
        cross_section: RadiativeCrossSection,
        energy: float,
        q2_min: float,
        q2_max: float,
        min_bins: int = 10,
        t_prec: float = 0.01,
        v_prec: float = 0.05,
        max_depth: int = 10,
        workers: int = 1,
        time_budget: float | None = None,
    ):
        self.cross_section = cross_section
        self.energy = energy
        self.S = beam_invariant(energy)
        self.q2_min = q2_min
        self.q2_max = q2_max
        self.min_bins = min_bins
        self.t_prec = t_prec
        self.v_prec = v_prec
        self.max_depth = max_depth
        self.workers = workers
        self.time_budget = time_budget

        self.log = logging.getLogger(self.__class__.__module__)

        limit = kinematic_q2_max(self.S, cross_section.lepton_mass)
        if not 0.0 < q2_min < q2_max < limit:
            raise ValueError(
                f"The Q2 range [{q2_min}, {q2_max}] MeV^2 needs to lie inside "
                f"(0, {limit:.6g}) for a {energy} MeV beam"
            )

        self.q2_bins: list[Bin] = []
        self.v_bins: list[list[Bin]] = []
        self.cross_sections: list[CrossSections] = []
        self._lows: list[float] = []

    @property
    def built(self) -> bool:
        return len(self.q2_bins) > 0

    @property
    def total(self) -> float:
        """Integrated cross section over the ``Q2`` range (MeV^-2)."""
        return float(sum(b.integral for b in self.q2_bins))

    def build(self) -> "EventGrid":
        evaluated: dict[float, CrossSections] = {}

        def total(Q2: float) -> float:
            xs = self.cross_section.differential_xs(self.S, Q2)
            evaluated[Q2] = xs
            return xs.total

        start = time.monotonic()
        self.q2_bins = adaptive_bins(
            total,
            self.q2_min,
            self.q2_max,
            self.t_prec,
            min_bins=self.min_bins,
            max_depth=self.max_depth,
            workers=self.workers,
            time_budget=self.time_budget,
        )
        self.log.info(
            f"Q2 axis: {len(self.q2_bins)} bins in {time.monotonic() - start:.2f} s"
        )

        self.cross_sections = [evaluated[b.mid] for b in self.q2_bins]
        self.v_bins = []
        start = time.monotonic()
        for q2_bin in self.q2_bins:
            v1, v2, _ = self.cross_section.cutoffs(self.S, q2_bin.mid)
            if v2 <= v1:
                self.v_bins.append([])
                continue

            def density(v: float, Q2: float = q2_bin.mid) -> float:
                return self.cross_section.radiative_density(self.S, Q2, v)

            self.v_bins.append(
                adaptive_bins(
                    density,
                    v1,
                    v2,
                    self.v_prec,
                    min_bins=self.min_bins,
                    max_depth=self.max_depth,
                    workers=self.workers,
                    time_budget=self.time_budget,
                )
            )
        self.log.info(
            f"v axes: {sum(len(b) for b in self.v_bins)} bins "
            f"in {time.monotonic() - start:.2f} s"
        )

        self._lows = [b.low for b in self.q2_bins]
        return self

    def _check_built(self) -> None:
        if not self.built:
            raise RuntimeError("The grid has not been built yet, call build() first")

    def q2_bin(self, Q2: float) -> tuple[int, Bin]:
        """Index and bin containing ``Q2``."""

        self._check_built()
        if not self.q2_bins[0].low <= Q2 <= self.q2_bins[-1].high:
            raise ValueError(
                f"Q2 = {Q2} MeV^2 is outside the grid "
                f"[{self.q2_bins[0].low}, {self.q2_bins[-1].high}]"
            )
        index = max(bisect.bisect_right(self._lows, Q2) - 1, 0)
        return index, self.q2_bins[index]

    def sample_bin(self, Q2: float, v: float) -> float:
        """Representative ``dsigma / dQ2 dv`` (MeV^-6) of the cell containing ``(Q2, v)``."""

        index, _ = self.q2_bin(Q2)
        v_bins = self.v_bins[index]
        if not v_bins or not v_bins[0].low <= v <= v_bins[-1].high:
            raise ValueError(f"v = {v} MeV^2 is outside the radiative range at Q2 = {Q2} MeV^2")
        lows = [b.low for b in v_bins]
        return v_bins[max(bisect.bisect_right(lows, v) - 1, 0)].f_mid

    def to_dataframe(self) -> pd.DataFrame:
        """One row per ``(Q2, v)`` cell, ``Q2`` bins without radiative range get one row."""

        self._check_built()
        rows = []
        for index, (q2_bin, xs) in enumerate(zip(self.q2_bins, self.cross_sections)):
            q2_row = dict(
                q2_index=index,
                q2_low=q2_bin.low,
                q2_high=q2_bin.high,
                q2_precise=q2_bin.precise,
                total=q2_bin.f_mid,
                born=xs.born,
                non_radiative=xs.non_radiative,
                radiative=xs.radiative,
            )
            cells = self.v_bins[index] or [None]
            for v_bin in cells:
                rows.append(
                    q2_row
                    | dict(
                        v_low=np.nan if v_bin is None else v_bin.low,
                        v_high=np.nan if v_bin is None else v_bin.high,
                        v_density=np.nan if v_bin is None else v_bin.f_mid,
                        v_precise=True if v_bin is None else v_bin.precise,
                    )
                )
        return pd.DataFrame(rows)
