#!/usr/bin/env python3
import pyperf

from epradpy import EPRad

runner = pyperf.Runner()
EPRad.benchmark("examples/prad/prad.yaml", runner)
