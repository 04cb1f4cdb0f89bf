"""
Spatial mappings and the remapping of LandArrays between resolutions.
"""

from pathlib import Path

import pandas as pd
import pandas_indexing.accessors  # noqa: F401
from attrs import define, fields

from .errors import MappingError, MissingFileError
from .utils import logger, normalize, pd_read, space_level


GLOBAL = "global"
REGGLO = "regglo"

# resolution name to the name of the spatial index level
LEVELS = {
    "grid": "cell",
    "cluster": "cluster",
    "region": "region",
    "country": "country",
    GLOBAL: "region",
    REGGLO: "region",
}

ALIASES = {"reg": "region", "glo": GLOBAL, "iso": "country"}


def resolve_level(level):
    """
    Returns the canonical resolution name for `level`.

    Names which are neither canonical nor an alias are passed through, since
    they may name a user-defined column of a mapping.
    """
    return ALIASES.get(level, level)


def level_name(level):
    """
    Returns the name of the spatial index level data at `level` carries.
    """
    level = resolve_level(level)
    return LEVELS.get(level, level)


@define(frozen=True, eq=False)
class SpatialMapping:
    """
    Correspondence between nested spatial units.

    Attributes
    ----------
    table : pd.DataFrame
        one row per finest unit (usually a grid cell) with one column per
        resolution, e.g. ``cell``, ``cluster``, ``region``, ``country``
    weight : str or None, default "weight"
        column with the weight of each row, used to split coarse values onto
        several finer units
    coordinates : tuple of str
        columns holding cell coordinates for gridded output

    Notes
    -----
    Every fine unit which maps to a single coarse unit is aggregated without
    weights. A fine unit spread over several coarse units is split according
    to the weights of its rows, equally if all of them are zero.
    """

    table: pd.DataFrame
    weight: str | None = "weight"
    coordinates: tuple[str, str] = ("lon", "lat")

    @classmethod
    def from_file(cls, path, weight="weight"):
        path = Path(path)
        if not path.exists():
            raise MissingFileError(f"{path} does not exist on the filesystem.")

        table = pd_read(path, str_cols=True)
        if table.empty:
            raise MappingError(f"Mapping in {path} is empty")
        if weight not in table.columns:
            weight = None

        skip = {weight, *fields(cls).coordinates.default}
        levels = [c for c in table.columns if c not in skip]
        table[levels] = table[levels].astype(str)
        instance = cls(table, weight)
        logger().info(
            f"Read mapping with levels {', '.join(instance.levels)} from {path}"
        )
        return instance

    @classmethod
    def from_directory(cls, directory, pattern="clustermap*.csv", weight="weight"):
        files = sorted(Path(directory).glob(pattern))
        if not files:
            raise MissingFileError(f"No mapping file `{pattern}` in {directory}")
        if len(files) > 1:
            logger().warning(
                f"Found {len(files)} mapping files in {directory}, "
                f"using {files[0].name}"
            )
        return cls.from_file(files[0], weight=weight)

    @property
    def levels(self):
        skip = {self.weight, *self.coordinates}
        return [c for c in self.table.columns if c not in skip]

    def units(self, level):
        return pd.Index(self.table[level].unique(), name=level)

    def shares(self, fine, coarse):
        """
        Share of each fine unit which belongs to each coarse unit.

        Returns
        -------
        pd.Series
            indexed by `fine` and `coarse`, summing to 1 for each fine unit

        Raises
        ------
        MappingError
            if a level is unknown, or a fine unit belongs to several coarse
            units and there are no weights
        """
        for level in (fine, coarse):
            if level not in self.levels:
                raise MappingError(
                    f"Mapping has no level `{level}`, only: {', '.join(self.levels)}"
                )

        if self.weight is None or self.weight not in self.table.columns:
            pairs = self.table[[fine, coarse]].drop_duplicates()
            ambiguous = pairs.loc[pairs[fine].duplicated(keep=False)]
            if not ambiguous.empty:
                raise MappingError(
                    f"Units of `{fine}` map to several `{coarse}` units, "
                    "which needs a weight column:\n"
                    + ambiguous.to_string(index=False, max_rows=100)
                )
            return pd.Series(1.0, pd.MultiIndex.from_frame(pairs), name="share")

        weights = self.table.groupby([fine, coarse])[self.weight].sum()
        shares = weights.groupby(level=fine).transform(normalize)
        equal = 1.0 / weights.groupby(level=fine).transform("size")
        return shares.where(shares.notna(), equal).rename("share")


def _to_global(data, global_region):
    others = list(data.index.names[1:])
    return pd.concat(
        {global_region: data.groupby(others, sort=False).sum()}, names=["region"]
    )


def remap(data, mapping, to, global_region="GLO"):
    """
    Aggregates or disaggregates a LandArray to another resolution.

    Values are treated as absolute quantities: aggregation sums the finer
    units, disaggregation redistributes by the mapping's shares. Totals are
    preserved either way.

    Parameters
    ----------
    data : pd.DataFrame
        LandArray, the first index level names its resolution
    mapping : SpatialMapping or None
        needed for all targets but the current resolution and global
    to : str
        target resolution: ``cluster``, ``region``, ``regglo``, ``global``,
        ``country``, ``grid`` (or the aliases ``reg``, ``glo``, ``iso``) or any
        level of `mapping`
    global_region : str, default "GLO"
        name of the synthetic global unit

    Returns
    -------
    pd.DataFrame

    Raises
    ------
    MappingError
        if `mapping` is missing, or it does not cover exactly the spatial
        units of `data`
    """
    to = resolve_level(to)
    fine = space_level(data)

    if to == GLOBAL:
        return _to_global(data, global_region)
    if to == REGGLO:
        regions = remap(data, mapping, "region", global_region=global_region)
        return pd.concat([regions, _to_global(regions, global_region)])

    coarse = level_name(to)
    if coarse == fine:
        return data
    if mapping is None:
        raise MappingError(f"Remapping from `{fine}` to `{coarse}` needs a mapping")

    shares = mapping.shares(fine, coarse)

    units = data.index.unique(fine)
    mapped = shares.index.unique(fine)
    unmapped = units.difference(mapped)
    if not unmapped.empty:
        raise MappingError(
            f"No mapping to `{coarse}` for {len(unmapped)} `{fine}` unit(s): "
            + ", ".join(map(str, unmapped[:20]))
        )
    uncovered = mapped.difference(units)
    if not uncovered.empty:
        raise MappingError(
            f"Data lacks {len(uncovered)} `{fine}` unit(s) of the mapping: "
            + ", ".join(map(str, uncovered[:20]))
        )

    others = [n for n in data.index.names if n != fine]
    remapped = data.pix.multiply(shares, join="inner")
    return remapped.groupby([coarse] + others, sort=False).sum()


def needs_mapping(data, to):
    """
    Returns True if remapping `data` to `to` requires a SpatialMapping.
    """
    to = resolve_level(to)
    if to == GLOBAL:
        return False
    if to == REGGLO:
        return space_level(data) != "region"
    return level_name(to) != space_level(data)
