import logging

import numpy as np
from epradpy import EPRad

formatter = logging.Formatter("%(levelname)s (%(name)s): %(message)s")
console = logging.StreamHandler()
console.setFormatter(formatter)
logger = logging.getLogger("epradpy")
logger.addHandler(console)
logger.setLevel(logging.INFO)

handler = EPRad("prad.yaml")

# nb / MeV^2
table = handler.cross_sections(np.geomspace(200.0, 20000.0, 7))
table["correction"] = table["total"] / table["born"] - 1.0
print(table.to_string(index=False))

handler.run()
events = handler.sample(10000)
print(
    f"Mean weight {events['weight'].mean():.6e} MeV^-2, "
    f"grid total {handler.grid.total:.6e} MeV^-2, "
    f"radiative fraction {events['radiative'].mean():.3f}"
)

handler.export()
