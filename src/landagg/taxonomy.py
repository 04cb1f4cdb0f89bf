"""
The land-type taxonomy and the expansion of aggregate land types into their
model-derived sub-categories.
"""

from collections.abc import Callable

import numpy as np
import pandas as pd
from attrs import define
from pandas_indexing import isin

from ._io import RunControl
from .diagnostics import (
    DATA_CONSISTENCY,
    NO_BREAKDOWN,
    NOT_FOUND,
    UNSUPPORTED,
    Diagnostics,
)
from .errors import MissingVariableError
from .store import read_variable, to_land_array
from .utils import space_level


LEVEL = {"type": "level"}


def fetch_level(store, rc, land):
    """
    Reads the sub-category breakdown of `land` from its dedicated variable.
    """
    series = read_variable(store, rc["store"][land], select=LEVEL)
    return to_land_array(series, rc, land=land)


def fetch_crop(store, rc, land="crop"):
    """
    Splits crop area by product into bioenergy (``bio``) and all other crops
    (``nobio``).
    """
    series = read_variable(store, rc["store"]["croparea"], select=LEVEL)
    area = to_land_array(series, rc, land=land)

    isbio = area.index.get_level_values("sub").isin(rc["bioenergy_crops"])
    labels = pd.Index(np.where(isbio, "bio", "nobio"), name="sub")
    full = pd.MultiIndex.from_product(
        [area.index.unique("cluster"), [land], ["nobio", "bio"]],
        names=["cluster", "land", "sub"],
    )
    return area.groupby(["cluster", "land", labels]).sum().reindex(full, fill_value=0.0)


@define(frozen=True)
class LandCategory:
    """
    A primary land type.

    Attributes
    ----------
    name : str
    tolerance : float or None
        largest absolute difference between the total and the sum of the
        sub-categories which is accepted without a diagnostic; None skips
        the check
    fetch : callable or None
        ``fetch(store, rc, land)`` returning the sub-category breakdown; None
        for land types without one
    """

    name: str
    tolerance: float | None = None
    fetch: Callable | None = None

    @property
    def has_breakdown(self):
        return self.fetch is not None

    def breakdown(self, store, rc):
        return self.fetch(store, rc, self.name)

    def reconcile(self, total, breakdown, diagnostics):
        """
        Compares the total of this land type with the sum of its breakdown.

        Returns
        -------
        float or None
            absolute summed difference, None if there is no tolerance
        """
        if self.tolerance is None:
            return None

        space = space_level(total)
        subsum = breakdown.groupby([space, "land"]).sum()
        diff = total.droplevel("sub").sub(subsum, fill_value=0.0)
        discrepancy = abs(np.nansum(diff.to_numpy()))
        if discrepancy > self.tolerance:
            diagnostics.warn(
                DATA_CONSISTENCY,
                f"{self.name}: Total and sum of subcategory land types diverge "
                f"by {discrepancy:.3g} (tolerance {self.tolerance:g})!",
                category=self.name,
            )
        return discrepancy


TAXONOMY = {
    category.name: category
    for category in (
        LandCategory("crop", fetch=fetch_crop),
        LandCategory("past"),
        LandCategory("forestry", 2e-05, fetch_level),
        LandCategory("primforest"),
        LandCategory("secdforest", 1e-05, fetch_level),
        LandCategory("urban"),
        LandCategory("other", 1e-07, fetch_level),
        LandCategory("primother"),
        LandCategory("secdother"),
    )
}


def expand(totals, subcategories, store, rc=None, diagnostics=None, taxonomy=None):
    """
    Replaces land type totals by their sub-category breakdown.

    Parameters
    ----------
    totals : pd.DataFrame
        LandArray with the sub-category ``total`` for each land type
    subcategories : iterable of str
        land types to break down
    store : Mapping
        result store the breakdowns are read from
    rc : RunControl, optional
    diagnostics : Diagnostics, optional
        collects warnings, a fresh collector is used if None
    taxonomy : dict, optional
        land type name to LandCategory, defaults to `TAXONOMY`

    Returns
    -------
    pd.DataFrame
        LandArray with the breakdowns in place of the requested totals

    Notes
    -----
    Problems with one land type are reported to `diagnostics` and its total
    is kept; they never keep other land types from being broken down.
    """
    rc = RunControl() if rc is None else rc
    diagnostics = Diagnostics() if diagnostics is None else diagnostics
    taxonomy = TAXONOMY if taxonomy is None else taxonomy

    requested = set(subcategories or ())
    present = list(totals.index.unique("land"))
    for name in sorted(requested.difference(present)):
        diagnostics.warn(
            UNSUPPORTED,
            f"Cannot break down {name}, it is not a land type of the data",
            category=name,
        )

    parts = []
    for name in present:
        total = totals.loc[isin(land=name)]
        category = taxonomy.get(name)
        if name not in requested:
            parts.append(total)
            continue

        if category is None or not category.has_breakdown:
            diagnostics.warn(
                NO_BREAKDOWN,
                f"There are no subcategories for {name}. Returning total {name} area",
                category=name,
            )
            parts.append(total)
            continue

        try:
            breakdown = category.breakdown(store, rc)
        except MissingVariableError as exc:
            diagnostics.warn(
                NOT_FOUND,
                f"{name}: {exc.args[0]}. Returning total {name} area",
                category=name,
            )
            parts.append(total)
            continue

        breakdown = breakdown.reindex(columns=total.columns, fill_value=0.0)
        category.reconcile(total, breakdown, diagnostics)
        parts.append(breakdown)

    return pd.concat(parts)
