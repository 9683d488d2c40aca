import json
import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, model_validator
from typing_extensions import Self

from epradpy.constants import LEPTON_MASSES
from epradpy.kinematics import beam_invariant, q2_max
from epradpy.quadrature import DEFAULT_NODES


class BeamSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    energy: float = Field(default=1100.0, gt=0.0)
    lepton: Literal["electron", "muon"] = Field(default="electron")

    @property
    def lepton_mass(self) -> float:
        return LEPTON_MASSES[self.lepton]

    @property
    def S(self) -> float:
        return beam_invariant(self.energy)


class RadiationSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    v_min: float = Field(default=10.0, gt=0.0)
    v_cut: float = Field(default=5000.0, gt=0.0)

    @model_validator(mode="after")
    def ordered_cuts(self) -> Self:
        if self.v_cut < self.v_min:
            raise ValueError(
                f"v_cut ({self.v_cut}) needs to be at least v_min ({self.v_min})"
            )
        return self


class GridSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    q2_min: float = Field(default=100.0, gt=0.0)
    q2_max: float = Field(default=30000.0, gt=0.0)
    min_bins: int = Field(default=10, ge=1)
    t_prec: float = Field(default=0.01, gt=0.0)
    v_prec: float = Field(default=0.05, gt=0.0)
    max_depth: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def ordered_range(self) -> Self:
        if self.q2_max <= self.q2_min:
            raise ValueError(
                f"q2_max ({self.q2_max}) needs to be larger than q2_min ({self.q2_min})"
            )
        return self


class NumericsSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    quadrature_nodes: int = Field(default=DEFAULT_NODES, ge=1)
    workers: int = Field(default=1, ge=1)
    time_budget: PositiveFloat | None = Field(default=None)


class SamplerSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int | None = Field(default=None)


class OutputSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    folder: str = Field(default=".")
    filename: str = Field(default="grid")
    extension: str = Field(default="json", pattern=r"^(json|yaml|yml|pkl|bz2|mat)$")


class GeneratorSettings(BaseModel):
    """Validated settings of the cross-section calculator, the grid and the sampler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    beam: BeamSettings = Field(default_factory=BeamSettings)
    radiation: RadiationSettings = Field(default_factory=RadiationSettings)
    grid: GridSettings = Field(default_factory=GridSettings)
    numerics: NumericsSettings = Field(default_factory=NumericsSettings)
    sampler: SamplerSettings = Field(default_factory=SamplerSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @model_validator(mode="after")
    def grid_inside_kinematics(self) -> Self:
        limit = q2_max(self.beam.S, self.beam.lepton_mass)
        if self.grid.q2_max >= limit:
            raise ValueError(
                f"q2_max ({self.grid.q2_max}) needs to be below the kinematic limit "
                f"{limit:.6g} MeV^2 of a {self.beam.energy} MeV {self.beam.lepton} beam"
            )
        return self


class Config:
    """Reads a json or yaml configuration file into :class:`GeneratorSettings`.

    Parameters
    ----------
    path_config : str
        Path of a ``.json``, ``.yaml`` or ``.yml`` file.
    """

    config: dict = {}

    def __init__(self, path_config: str):
        if not isinstance(path_config, (str, Path)):
            raise ValueError("The config file path needs to be a string!")
        _path_config = Path(path_config)
        self.file_type = _path_config.suffix
        self.log = logging.getLogger(self.__class__.__module__)

        match self.file_type:
            case ".json":
                with open(_path_config) as data:
                    self.config = json.load(data)
            case ".yaml" | ".yml":
                with open(_path_config) as data:
                    self.config = yaml.safe_load(data)
            case _:
                raise ValueError(
                    "The provided config file needs to be a json or yaml file!"
                )
        if self.config is None:
            raise ValueError(f"Could not read config file {path_config}, it is empty.")

        self.settings = GeneratorSettings(**self.config)
        self.log.info(f"Read configuration from {_path_config}")
        self.__folder()

    @classmethod
    def from_dict(cls, config: dict) -> "Config":
        instance = cls.__new__(cls)
        instance.file_type = ""
        instance.log = logging.getLogger(cls.__module__)
        instance.config = config
        instance.settings = GeneratorSettings(**config)
        instance.__folder()
        return instance

    def __folder(self):
        output = self.settings.output
        folder = os.sep.join(output.folder.replace("\\", "/").split("/"))
        filename = output.filename
        filename = (
            f"{filename}.{output.extension}"
            if len(filename.split(".")) == 1
            else filename
        )
        self.output_filename = os.path.join(folder, filename)
