from importlib.metadata import version as _version

from landagg._io import *  # noqa: F401, F403
from landagg.context import ReportingContext  # noqa: F401
from landagg.diagnostics import Diagnostic, Diagnostics  # noqa: F401
from landagg.grid import read_grid_land, split_other_land  # noqa: F401
from landagg.land import land  # noqa: F401
from landagg.mapping import SpatialMapping, remap  # noqa: F401
from landagg.report import (  # noqa: F401
    read_nutrient_surplus,
    report_land_use,
    report_nutrient_surplus,
)
from landagg.store import ResultStore, read_variable  # noqa: F401
from landagg.taxonomy import TAXONOMY, LandCategory, expand  # noqa: F401


try:
    __version__ = _version("landagg")
except Exception:
    # Local copy or not installed with setuptools.
    __version__ = "999"
