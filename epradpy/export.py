import _pickle
import bz2
import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.dataclasses import dataclass
from scipy.io import savemat
from typing_extensions import Self

from epradpy.constants import NB_PER_INVERSE_MEV2
from epradpy.grid import EventGrid


@dataclass
class Beam:
    energy: float = Field()
    lepton_mass: float = Field()
    S: float = Field()
    v_min: float = Field()
    v_cut: float = Field()


@dataclass
class Q2Axis:
    low: list[float] = Field(default=[])
    high: list[float] = Field(default=[])
    precise: list[bool] = Field(default=[])
    total: list[float] = Field(default=[])
    born: list[float] = Field(default=[])
    non_radiative: list[float] = Field(default=[])
    radiative: list[float] = Field(default=[])

    @model_validator(mode="after")
    def number_of_elements(self) -> Self:
        lengths = {
            len(self.low),
            len(self.high),
            len(self.precise),
            len(self.total),
            len(self.born),
            len(self.non_radiative),
            len(self.radiative),
        }
        if len(lengths) > 1:
            raise ValueError(f"The Q2 axis columns have different lengths {sorted(lengths)}")
        return self


@dataclass
class VAxis:
    q2_index: list[int] = Field(default=[])
    low: list[float] = Field(default=[])
    high: list[float] = Field(default=[])
    precise: list[bool] = Field(default=[])
    density: list[float] = Field(default=[])

    @model_validator(mode="after")
    def number_of_elements(self) -> Self:
        lengths = {
            len(self.q2_index),
            len(self.low),
            len(self.high),
            len(self.precise),
            len(self.density),
        }
        if len(lengths) > 1:
            raise ValueError(f"The v axis columns have different lengths {sorted(lengths)}")
        return self


class Export(BaseModel):
    """Serializable table of a built grid.

    Cross sections are stored in nb-based units: ``dsigma / dQ2`` in
    nb / MeV^2 and ``dsigma / dQ2 dv`` in nb / MeV^4.
    """

    source: str = Field(default="epradpy", pattern=r"epradpy")
    unit: float = Field(default=NB_PER_INVERSE_MEV2)
    beam: Beam | dict = Field(default={})
    q2: Q2Axis | dict = Field(default={})
    v: VAxis | dict = Field(default={})

    model_config: ConfigDict = ConfigDict(arbitrary_types_allowed=True)

    def model_post_init(self, __context: Any) -> None:
        if isinstance(self.beam, dict):
            self.beam = Beam(**self.beam)
        if isinstance(self.q2, dict):
            self.q2 = Q2Axis(**self.q2)
        if isinstance(self.v, dict):
            self.v = VAxis(**self.v)

    @classmethod
    def from_grid(cls, grid: EventGrid) -> "Export":
        if not grid.built:
            raise ValueError("Only built grids can be exported")

        xs = grid.cross_section
        q2 = dict(
            low=[b.low for b in grid.q2_bins],
            high=[b.high for b in grid.q2_bins],
            precise=[b.precise for b in grid.q2_bins],
            total=[b.f_mid * NB_PER_INVERSE_MEV2 for b in grid.q2_bins],
            born=[c.born * NB_PER_INVERSE_MEV2 for c in grid.cross_sections],
            non_radiative=[
                c.non_radiative * NB_PER_INVERSE_MEV2 for c in grid.cross_sections
            ],
            radiative=[c.radiative * NB_PER_INVERSE_MEV2 for c in grid.cross_sections],
        )
        v = dict(q2_index=[], low=[], high=[], precise=[], density=[])
        for index, v_bins in enumerate(grid.v_bins):
            for b in v_bins:
                v["q2_index"].append(index)
                v["low"].append(b.low)
                v["high"].append(b.high)
                v["precise"].append(b.precise)
                v["density"].append(b.f_mid * NB_PER_INVERSE_MEV2)

        return cls(
            beam=dict(
                energy=grid.energy,
                lepton_mass=xs.lepton_mass,
                S=grid.S,
                v_min=xs.v_min,
                v_cut=xs.v_cut,
            ),
            q2=q2,
            v=v,
        )

    @classmethod
    def load(cls, filename: str | Path) -> "Export":
        if isinstance(filename, str):
            filename = Path(filename)

        match filename.suffix:
            case ".json":
                with open(filename) as f:
                    return cls(**json.load(f))
            case ".yml" | ".yaml":
                with open(filename) as f:
                    return cls(**yaml.safe_load(f))
            case ".pkl":
                with open(filename, "rb") as f:
                    return cls(**_pickle.load(f))
            case ".bz2":
                with bz2.BZ2File(filename, "r") as infile:
                    return cls(**_pickle.load(infile))
            case _:
                raise ValueError(f"Unknown file extension {filename.suffix}")

    def save(self, filename: str | Path) -> None:
        if isinstance(filename, str):
            filename = Path(filename)

        match filename.suffix:
            case ".json":
                with open(filename, "w") as f:
                    json.dump(self.model_dump(), f, indent=4)
            case ".yml" | ".yaml":
                with open(filename, "w") as f:
                    yaml.dump(self.model_dump(), f)
            case ".pkl":
                with open(filename, "wb") as f:
                    _pickle.dump(self.model_dump(), f)
            case ".bz2":
                with bz2.BZ2File(filename, "w") as outfile:
                    _pickle.dump(self.model_dump(), outfile)
            case ".mat":
                savemat(filename, self.model_dump())
            case _:
                raise ValueError(f"Unknown file extension {filename.suffix}")
