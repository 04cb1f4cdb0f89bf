import pandas as pd
from pandas_indexing import assignlevel, isin

from ._io import write_array
from .context import ReportingContext
from .diagnostics import NOT_FOUND, UNSUPPORTED, Diagnostics
from .errors import MissingVariableError
from .grid import read_grid_land, split_other_land
from .mapping import level_name, needs_mapping, remap, resolve_level
from .store import read_variable, to_land_array
from .taxonomy import LEVEL, expand
from .utils import TOTAL, logger, skipempty, space_level


SPLIT_TYPES = ("primother", "secdother")


def read_land(store, rc):
    """
    Reads the land area of all land types on cluster level.
    """
    series = read_variable(store, rc["store"]["land"], select=LEVEL)
    logger().info(f"Reading land from `{series.name}`")
    return to_land_array(series, rc)


def land(
    store,
    file=None,
    level="region",
    types=None,
    subcategories=None,
    sum_types=False,
    dir=".",
    context=None,
    diagnostics=None,
):
    """
    Land area by land type in million ha.

    Parameters
    ----------
    store : Mapping
        result store of a model run, see `ResultStore`
    file : str or Path, optional
        file the result is written to
    level : str, default "region"
        spatial resolution: ``cluster``, ``region``, ``global``, ``regglo``,
        ``country``, ``grid`` or any level of the mapping; ``country`` and
        ``grid`` are based on the gridded land of the run
    types : list of str, optional
        land types to return, all if None: ``crop``, ``past``, ``forestry``,
        ``primforest``, ``secdforest``, ``urban``, ``other``, ``primother``
        and ``secdother``
    subcategories : list of str, optional
        land types to break down into their sub-categories; meaningful for
        ``crop``, ``forestry``, ``secdforest`` and ``other``
    sum_types : bool, default False
        sum over all (selected) land types
    dir : str or Path, default "."
        output directory of the run with the mapping file and rasters
    context : ReportingContext, optional
        configuration and mapping cache shared between calls
    diagnostics : Diagnostics, optional
        collects the warnings of this call

    Returns
    -------
    pd.DataFrame or None
        LandArray, None if the store holds no land data
    """
    context = ReportingContext() if context is None else context
    diagnostics = Diagnostics() if diagnostics is None else diagnostics
    rc = context.rc
    level = resolve_level(level)

    if level in ("grid", "country"):
        x = read_grid_land(dir, rc)
        if level == "country":
            x = remap(x, context.mapping(dir), level)
        if subcategories:
            diagnostics.warn(
                UNSUPPORTED, "argument subcategories is ignored for cellular data"
            )
    else:
        try:
            x = read_land(store, rc)
        except MissingVariableError as exc:
            diagnostics.warn(
                NOT_FOUND,
                "Land area cannot be calculated as land data could not be found "
                f"({exc.args[0]})! None is returned!",
            )
            return None

        if subcategories:
            x = expand(x, subcategories, store, rc=rc, diagnostics=diagnostics)

        mapping = context.mapping(dir) if needs_mapping(x, level) else None
        x = remap(x, mapping, level, global_region=context.global_region)

    if types is not None:
        types = [types] if isinstance(types, str) else list(types)
        if set(types) & set(SPLIT_TYPES):
            split = split_other_land(dir, level, context)
            x = concat_land(x, split)
        x = x.loc[isin(land=types)]

    if sum_types:
        label = " ".join(types) if types else TOTAL
        x = assignlevel(x.groupby(space_level(x), sort=False).sum(), land=label)
    elif (x.index.get_level_values("sub") == TOTAL).all():
        x = x.droplevel("sub")

    if file is not None:
        mapping = None
        if level_name(level) == "cell":
            mapping = context.mapping(dir, required=False)
        write_array(x, file, comment="unit: Mha", mapping=mapping)

    return x


def concat_land(*frames):
    """
    Joins LandArrays of the same resolution along the land type axis.
    """
    frames = skipempty(*frames)
    names = frames[0].index.names
    return pd.concat([f.reorder_levels(names) for f in frames]).fillna(0.0)
