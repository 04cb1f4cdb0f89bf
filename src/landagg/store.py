"""
Read access to the simulation result store.

The store holds named variables as long tables, one column per dimension and
a `value` column. Variables are renamed across model versions, so every read
names an ordered list of candidates and the first one present wins.
"""

from collections.abc import Mapping
from pathlib import Path

import pandas as pd
from pandas_indexing import assignlevel, isin

from .errors import MissingFileError, MissingVariableError
from .utils import TOTAL, isstr, logger, parse_year, pd_read


VALUE = "value"


class ResultStore(Mapping):
    """
    Read-only mapping from variable name to its long table.
    """

    def __init__(self, variables=None):
        self._variables = dict(variables or {})

    @classmethod
    def from_directory(cls, path):
        """
        Loads every ``*.csv`` file in `path`, the file stem naming the variable.
        """
        path = Path(path)
        if not path.is_dir():
            raise MissingFileError(f"{path} is not a directory")
        variables = {f.stem: pd_read(f) for f in sorted(path.glob("*.csv"))}
        logger().info(f"Read {len(variables)} variables from {path}")
        return cls(variables)

    def __getitem__(self, name):
        return self._variables[name]

    def __iter__(self):
        return iter(self._variables)

    def __len__(self):
        return len(self._variables)

    def __repr__(self):
        return f"ResultStore({', '.join(self._variables)})"


def read_variable(store, names, select=None):
    """
    Reads the first variable of `names` which exists in `store`.

    Parameters
    ----------
    store : Mapping
        variable name to long table
    names : str or list of str
        candidate variable names in order of preference
    select : dict, optional
        labels to select on dimensions, e.g. ``{"type": "level"}``; the
        selected dimensions are dropped, selectors on dimensions the variable
        does not have are ignored

    Returns
    -------
    pd.Series
        values indexed by the remaining dimensions, named after the variable

    Raises
    ------
    MissingVariableError
        if none of `names` exists or the selection is empty
    """
    if isstr(names):
        names = [names]
    select = select or {}

    for name in names:
        if name not in store:
            continue

        table = store[name]
        dims = [c for c in table.columns if c != VALUE]
        series = table.set_index(dims)[VALUE].rename(name)

        selectors = {dim: label for dim, label in select.items() if dim in dims}
        if selectors:
            series = series.loc[isin(**selectors)].droplevel(list(selectors))
        if series.empty:
            raise MissingVariableError(
                f"Variable `{name}` holds no data for selection {selectors}"
            )
        return series

    raise MissingVariableError(
        f"None of the variables {', '.join(names)} found in the store"
    )


def to_land_array(series, rc, land=None):
    """
    Turns a store variable into a LandArray on cluster level.

    The first dimension besides space and time becomes the land type, or the
    sub-category if `land` is given; any further dimensions (like age
    classes) are summed.

    Parameters
    ----------
    series : pd.Series
        as returned by `read_variable`
    rc : RunControl
        provides the store's space and time dimension names
    land : str, optional
        land type the sub-categories in `series` belong to

    Returns
    -------
    pd.DataFrame
        indexed by ``cluster``, ``land`` and ``sub`` with years as columns
    """
    space, time = rc["store"]["space"], rc["store"]["time"]
    missing = {space, time}.difference(series.index.names)
    if missing:
        raise ValueError(
            f"Variable `{series.name}` lacks dimension(s): {', '.join(missing)}"
        )

    series = series.rename_axis(index={space: "cluster", time: "year"})
    extra = [n for n in series.index.names if n not in ("cluster", "year")]
    if not extra:
        raise ValueError(f"Variable `{series.name}` has no category dimension")

    category = "land" if land is None else "sub"
    series = series.rename_axis(index={extra[0]: category})

    frame = (
        series.groupby(level=["cluster", category, "year"], sort=False)
        .sum()
        .unstack("year")
        .fillna(0.0)
    )
    frame.columns = pd.Index([parse_year(c) for c in frame.columns], name="year")
    frame = frame.sort_index(axis=1)
    # mapping tables carry their units as strings
    frame.index = frame.index.set_levels(
        frame.index.levels[0].astype(str), level="cluster"
    )

    if land is None:
        frame = assignlevel(frame, sub=TOTAL)
    else:
        frame = assignlevel(frame, land=land)
    return frame.reorder_levels(["cluster", "land", "sub"])
