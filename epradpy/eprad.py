import cProfile
import logging
import pstats
from pathlib import Path

import numpy as np
import pandas as pd
import pyperf

from epradpy.config import Config
from epradpy.cross_section import RadiativeCrossSection
from epradpy.export import Export
from epradpy.grid import EventGrid
from epradpy.quadrature import DEFAULT_NODES, GaussLegendre, default_quadrature
from epradpy.sampler import EventSampler


class EPRad:
    """Generator front end: reads a configuration and wires the calculator, the grid and the sampler.

    Parameters
    ----------
    path_config : str
        Path of the json or yaml configuration file.
    config : Config, optional
        Already loaded configuration, takes precedence over ``path_config``.
    """

    path_config: str
    _config: Config

    def __init__(self, path_config: str = "", config: Config | None = None):
        self.path_config = path_config
        self._config = Config(path_config) if config is None else config
        self.log = logging.getLogger(self.__class__.__module__)

        settings = self.settings
        nodes = settings.numerics.quadrature_nodes
        quadrature = (
            default_quadrature() if nodes == DEFAULT_NODES else GaussLegendre(nodes)
        )

        self.cross_section = RadiativeCrossSection(
            v_min=settings.radiation.v_min,
            v_cut=settings.radiation.v_cut,
            lepton_mass=settings.beam.lepton_mass,
            quadrature=quadrature,
        )
        self.grid = EventGrid(
            self.cross_section,
            energy=settings.beam.energy,
            q2_min=settings.grid.q2_min,
            q2_max=settings.grid.q2_max,
            min_bins=settings.grid.min_bins,
            t_prec=settings.grid.t_prec,
            v_prec=settings.grid.v_prec,
            max_depth=settings.grid.max_depth,
            workers=settings.numerics.workers,
            time_budget=settings.numerics.time_budget,
        )
        self.sampler: EventSampler | None = None

    @property
    def config(self) -> Config:
        return self._config

    @property
    def settings(self):
        return self._config.settings

    def cross_sections(self, q2: np.ndarray, nb: bool = True) -> pd.DataFrame:
        """Born, non-radiative and radiative ``dsigma / dQ2`` for every value of ``q2``."""

        S = self.settings.beam.S
        rows = []
        for value in np.atleast_1d(q2):
            xs = self.cross_section.differential_xs(S, float(value))
            if nb:
                xs = xs.to_nb()
            rows.append(
                dict(
                    q2=float(value),
                    born=xs.born,
                    non_radiative=xs.non_radiative,
                    radiative=xs.radiative,
                    total=xs.total,
                    clamped=xs.clamped,
                )
            )
        return pd.DataFrame(rows)

    def run(self) -> EventGrid:
        self.log.info(
            f"Building the grid for a {self.settings.beam.energy} MeV "
            f"{self.settings.beam.lepton} beam"
        )
        self.grid.build()
        self.sampler = EventSampler(self.grid, seed=self.settings.sampler.seed)
        return self.grid

    def sample(self, n: int) -> pd.DataFrame:
        if self.sampler is None:
            self.run()
        return self.sampler.sample_many(n)

    def export(self, filename: str | Path | None = None) -> Path:
        if not self.grid.built:
            self.run()
        filename = Path(self.config.output_filename if filename is None else filename)
        Export.from_grid(self.grid).save(filename)
        self.log.info(f"Grid written to {filename}")
        return filename

    @staticmethod
    def benchmark(config_path: str | None = None, runner: pyperf.Runner | None = None):
        if config_path is None:
            raise ValueError("Please provide a config file!")
        if runner is None:
            raise ValueError("Please provide a runner for benchmarking!")
        runner.bench_func("eprad_init", lambda: EPRad(config_path))
        eprad_instance = EPRad(config_path)
        S = eprad_instance.settings.beam.S
        q2 = 0.5 * (
            eprad_instance.settings.grid.q2_min + eprad_instance.settings.grid.q2_max
        )
        runner.bench_func(
            "eprad_differential_xs",
            lambda: eprad_instance.cross_section.differential_xs(S, q2),
        )
        runner.bench_func("eprad_run", lambda: eprad_instance.run())

    @staticmethod
    def profiler(config_path: str | None = None, output: str | None = None):
        if config_path is None:
            raise ValueError("Please provide a config file!")
        with cProfile.Profile() as pr:
            eprad_instance = EPRad(config_path)
            eprad_instance.run()
            stats = pstats.Stats(pr).sort_stats(pstats.SortKey.TIME)
            stats.print_stats() if output is None else stats.dump_stats(output)
            return eprad_instance
