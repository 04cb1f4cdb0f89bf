"""
Gridded land data: reading rasters, splitting other land into primary and
secondary other land, and conversion to NetCDF datasets.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr
from pandas_indexing import assignlevel

from .errors import MissingFileError
from .mapping import needs_mapping, remap
from .utils import TOTAL, Pathy, logger, parse_year, space_level


if TYPE_CHECKING:
    from .context import ReportingContext
    from .mapping import SpatialMapping


CELL = "cell"


def open_raster(path: Pathy) -> pd.Series:
    """
    Reads a NetCDF data array into a series indexed by its dimensions.
    """
    path = Path(path)
    if not path.exists():
        raise MissingFileError(f"{path} does not exist on the filesystem.")

    with xr.open_dataarray(path, engine="h5netcdf") as da:
        series = da.load().to_series()

    if CELL not in series.index.names:
        raise ValueError(f"Raster {path} has no `{CELL}` dimension")
    return series.rename(index=str, level=CELL)


def read_raster(path: Pathy, time: str = "year") -> pd.DataFrame:
    """
    Reads a gridded NetCDF data array with a time dimension.

    Returns
    -------
    pd.DataFrame
        indexed by ``cell`` and the other dimensions, years as columns
    """
    series = open_raster(path)
    if time not in series.index.names:
        raise ValueError(f"Raster {path} has no `{time}` dimension")

    frame = series.unstack(time)
    frame.columns = pd.Index([parse_year(c) for c in frame.columns], name="year")
    others = [n for n in frame.index.names if n != CELL]
    if others:
        frame = frame.reorder_levels([CELL] + others)
    return frame.sort_index(axis=1)


def _as_land(frame, path):
    others = [n for n in frame.index.names if n != CELL]
    if len(others) != 1:
        raise ValueError(f"Raster {path} needs exactly one land type dimension")
    return frame.rename_axis(index={others[0]: "land"})


def drop_base_year(frame, rc):
    # the base year precedes the simulation start and only serves as reference
    return frame.drop(columns=rc["grid"]["base_year"], errors="ignore")


def read_grid_land(directory: Pathy, rc) -> pd.DataFrame:
    """
    Reads the land area of all grid cells.

    Returns
    -------
    pd.DataFrame
        LandArray on ``cell`` level with the sub-category ``total``
    """
    path = Path(directory) / rc["files"]["grid_land"]
    logger().info(f"Reading grid land from {path}")
    land = drop_base_year(_as_land(read_raster(path), path), rc)
    return assignlevel(land, sub=TOTAL)


def primary_other_land(other: pd.DataFrame, initial: pd.Series) -> pd.DataFrame:
    """
    Primary other land in each period.

    Primary land can be converted but never regrows, so its area is the
    running minimum of the initial primary area and the other land area in
    all periods up to the current one.

    Parameters
    ----------
    other : pd.DataFrame
        other land per cell, years as columns
    initial : pd.Series
        primary other land per cell before the simulation start
    """
    initial = initial.reindex(other.index, fill_value=0.0)
    running = np.minimum.accumulate(
        np.column_stack([initial.to_numpy(), other.to_numpy()]), axis=1
    )
    return pd.DataFrame(running[:, 1:], index=other.index, columns=other.columns).clip(
        lower=0.0
    )


def split_other_land(
    directory: Pathy, level: str, context: ReportingContext
) -> pd.DataFrame:
    """
    Splits other land into primary and secondary other land.

    Parameters
    ----------
    directory : str or Path
        output directory with the grid land, initialisation raster and mapping
    level : str
        target resolution, see `remap`
    context : ReportingContext

    Returns
    -------
    pd.DataFrame
        LandArray with the land types ``primother`` and ``secdother``
    """
    rc = context.rc
    directory = Path(directory)

    path = directory / rc["files"]["grid_land"]
    other = _as_land(read_raster(path), path).xs("other", level="land")

    init_path = directory / rc["files"]["init_land"]
    init = open_raster(init_path)
    if "year" in init.index.names:
        init = init.unstack("year").iloc[:, 0]
    init = init.rename_axis(
        index={n: "land" for n in init.index.names if n != CELL}
    ).xs("primother", level="land")

    primother = primary_other_land(other, init)
    secdother = (other - primother).clip(lower=0.0)

    split = pd.concat(
        {"primother": primother, "secdother": secdother}, names=["land"]
    ).reorder_levels([CELL, "land"])
    split = assignlevel(drop_base_year(split, rc), sub=TOTAL)

    mapping = context.mapping(directory) if needs_mapping(split, level) else None
    return remap(split, mapping, level, global_region=context.global_region)


def to_dataset(
    data: pd.DataFrame,
    mapping: SpatialMapping | None = None,
    name: str = "value",
    comment: str | None = None,
) -> xr.Dataset:
    """
    Converts a LandArray to a dataset, with cell coordinates from `mapping`.
    """
    series = data.rename_axis(columns="year").stack()
    da = xr.DataArray.from_series(series)

    if mapping is not None and space_level(data) == CELL:
        lon, lat = mapping.coordinates
        if {CELL, lon, lat} <= set(mapping.table.columns):
            coords = (
                mapping.table.drop_duplicates(CELL)
                .set_index(CELL)[[lon, lat]]
                .reindex(da.indexes[CELL])
            )
            da = da.assign_coords(
                {
                    lon: (CELL, coords[lon].to_numpy()),
                    lat: (CELL, coords[lat].to_numpy()),
                }
            )

    if name in da.dims:
        raise ValueError(f"Variable name `{name}` collides with a dimension")
    ds = da.to_dataset(name=name)
    if comment is not None:
        ds.attrs["comment"] = comment
    return ds
