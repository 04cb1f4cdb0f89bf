"""Provides helpers for reading configuration files and writing results.

The default configuration values are provided in landagg.RC_DEFAULTS.
"""
import os
from collections.abc import Mapping

import yaml

from landagg.grid import to_dataset
from landagg.utils import isstr, logger, pd_write


__all__ = ["RC_DEFAULTS", "RunControl", "write_array"]

RC_DEFAULTS = """
store:
    space: j
    time: t
    land: [ov_land, ovm_land]
    forestry: [ov32_land, ov_land_fore]
    secdforest: [ov35_secdforest, ov_natveg_secdforest]
    other: [ov35_other, ov_natveg_other]
    croparea: [ov_area]
files:
    mapping: clustermap*.csv
    grid_land: cell.land_0.5.nc
    init_land: avl_land_full_t_0.5.nc
    nutrient_surplus:
        cropland: nutrientSurplus_cropland_0.5.nc
        pasture: nutrientSurplus_pasture_0.5.nc
        manure: nutrientSurplus_manure_0.5.nc
        nonagland: nutrientSurplus_nonAgLand_0.5.nc
mapping:
    weight: weight
grid:
    base_year: 1985
bioenergy_crops: [begr, betr]
global_region: GLO
"""


def _recursive_update(d, u):
    for k, v in u.items():
        if isinstance(v, Mapping):
            r = _recursive_update(d.get(k, {}), v)
            d[k] = r
        else:
            d[k] = u[k]
    return d


class RunControl(Mapping):
    """
    A thin wrapper around a Python Dictionary to support configuration of
    land reporting. Input can be provided as dictionaries or YAML files.
    """

    def __init__(self, rc=None, defaults=None):
        """
        Parameters
        ----------
        rc : string, file, dictionary, optional
            a path to a YAML file, a file handle for a YAML file, or a
            dictionary describing run control configuration
        defaults : string, file, dictionary, optional
            a path to a YAML file, a file handle for a YAML file, or a
            dictionary describing **default** run control configuration
        """
        rc = rc or {}
        defaults = defaults or RC_DEFAULTS

        rc = self._load_yaml(rc)
        defaults = self._load_yaml(defaults)
        self.store = _recursive_update(defaults, rc)

    def __getitem__(self, k):
        return self.store[k]

    def __iter__(self):
        return iter(self.store)

    def __len__(self):
        return len(self.store)

    def __repr__(self):
        return self.store.__repr__()

    def _load_yaml(self, obj):
        if hasattr(obj, "read"):  # it's a file
            obj = obj.read()
        if isstr(obj) and os.path.exists(obj):
            with open(obj) as f:
                obj = f.read()
        if not isinstance(obj, dict):
            obj = yaml.safe_load(obj) or {}
        return obj

    def recursive_update(self, k, d):
        """
        Recursively update a top-level option in the run control

        Parameters
        ----------
        k : string
            the top-level key
        d : dictionary or similar
            the dictionary to use for updating
        """
        u = self.__getitem__(k)
        self.store[k] = _recursive_update(u, d)


def write_array(data, path, comment=None, mapping=None, name=None):
    """
    Write a LandArray to `path`, the format is chosen by the file extension.

    Parameters
    ----------
    data : pd.DataFrame
        LandArray with years as columns
    path : str or Path
        target file, ``.csv``, ``.xlsx`` or ``.nc``
    comment : str, optional
        free-text comment, e.g. the unit; written as a leading ``*`` line to
        CSV files and as the ``comment`` attribute to NetCDF files
    mapping : SpatialMapping, optional
        supplies ``lon``/``lat`` coordinates for cell-level NetCDF output
    name : str, optional
        NetCDF variable name
    """
    path = os.fspath(path)
    logger().info(f"Writing result to: {path}")
    if path.endswith(".nc"):
        ds = to_dataset(data, mapping=mapping, name=name or "value", comment=comment)
        ds.to_netcdf(path, engine="h5netcdf")
    elif path.endswith(".csv") and comment is not None:
        with open(path, "w") as f:
            f.write(f"* {comment}\n")
            data.to_csv(f, index=True)
    else:
        pd_write(data, path, index=True)
