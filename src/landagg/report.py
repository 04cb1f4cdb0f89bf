"""
Report assembly: named, unit-annotated report variables built from land
areas and nutrient budgets.
"""

from pathlib import Path

import numpy as np
import pandas as pd
import pyam
from openscm_units import unit_registry
from pandas_indexing import assignlevel, isin

from ._io import write_array
from .grid import drop_base_year, read_raster
from .utils import country_name, logger, space_level


NUTRIENT_UNIT = "Mt N"
INTENSITY_UNIT = "kg N / ha"

# upstream budget: (report name, report variable)
SURPLUS_SOURCES = {
    "cropland": ("nutrientSurplus_cropland", "Nutrient surplus from cropland"),
    "pasture": ("nutrientSurplus_pasture", "Nutrient surplus from pasture"),
    "manure": (
        "nutrientSurplus_manure",
        "Nutrient surplus from manure losses in confinements",
    ),
    "nonagland": (
        "nutrientSurplus_nonAgLand",
        "Nutrient surplus from non-agricultural land",
    ),
}

LAND_USE_VARIABLES = {
    "crop": "Resources|Land Cover|+|Cropland",
    "past": "Resources|Land Cover|+|Pastures and Rangelands",
    "forestry": "Resources|Land Cover|Forest|+|Managed Forest",
    "primforest": "Resources|Land Cover|Forest|Natural Forest|+|Primary Forest",
    "secdforest": "Resources|Land Cover|Forest|Natural Forest|+|Secondary Forest",
    "urban": "Resources|Land Cover|+|Urban Area",
    "other": "Resources|Land Cover|+|Other Land",
}
FOREST_TYPES = ["forestry", "primforest", "secdforest"]
LAND_USE_UNIT = "million ha"


def intensity_factor():
    """
    Conversion factor from Mt per Mha to kg per ha.
    """
    return unit_registry.Quantity(1, "Mt / megahectare").to("kg / hectare").magnitude


def format_report(x, name):
    """
    Sums `x` per spatial unit and labels it as the report variable `name`.
    """
    x = x.groupby(level=space_level(x), sort=False).sum()
    return assignlevel(x, variable=name)


def read_nutrient_surplus(directory, rc):
    """
    Reads the gridded nutrient surplus of each land use from `directory`.
    """
    directory = Path(directory)
    return {
        source: drop_base_year(read_raster(directory / fname), rc)
        for source, fname in rc["files"]["nutrient_surplus"].items()
    }


def report_nutrient_surplus(
    surpluses, land, report_dir=None, scenario=None, mapping=None
):
    """
    Reports nutrient surplus indicators on grid level.

    Parameters
    ----------
    surpluses : dict
        gridded nutrient surplus in Mt N for ``cropland``, ``pasture``,
        ``manure`` (losses in confinements) and ``nonagland``
    land : pd.DataFrame
        gridded land area in Mha, summed over all land types
    report_dir : str or Path, optional
        directory the reports are written to; without it or `scenario`
        nothing is written
    scenario : str, optional
        scenario name used as file name prefix
    mapping : SpatialMapping, optional
        supplies cell coordinates for the NetCDF files

    Returns
    -------
    dict
        report name to pd.DataFrame indexed by ``cell`` and ``variable``

    Notes
    -----
    The intensity is the total surplus over the total land area of a cell;
    cells without land area get an intensity of 0.
    """
    missing = set(SURPLUS_SOURCES).difference(surpluses)
    if missing:
        raise ValueError(f"Nutrient surplus missing for: {', '.join(sorted(missing))}")

    def save(x, name, unit):
        if report_dir is not None and scenario is not None:
            for ext in ("csv", "nc"):
                write_array(
                    x,
                    Path(report_dir) / f"{scenario}-{name}.{ext}",
                    comment=f"unit: {unit}",
                    mapping=mapping,
                    name=name,
                )

    logger().info("report_nutrient_surplus: Calculating total nutrient surplus")

    reports = {}
    for source, (name, variable) in SURPLUS_SOURCES.items():
        reports[name] = format_report(surpluses[source], variable)
        save(reports[name], name, NUTRIENT_UNIT)

    total = format_report(
        pd.concat([x.droplevel("variable") for x in reports.values()]),
        "Nutrient surplus from land and manure management",
    )
    reports["nutrientSurplus_total"] = total
    save(total, "nutrientSurplus_total", NUTRIENT_UNIT)

    surplus = total.droplevel("variable")
    area = land.groupby(level=space_level(land), sort=False).sum()
    missing_units = surplus.index.difference(area.index)
    missing_years = surplus.columns.difference(area.columns)
    if len(missing_units) or len(missing_years):
        raise ValueError(
            "Land area does not cover the nutrient surplus: missing "
            f"{len(missing_units)} unit(s) and year(s) {list(missing_years)}"
        )
    area = area.reindex(index=surplus.index, columns=surplus.columns)
    intensity = surplus / area * intensity_factor()
    # cells without land area
    intensity = intensity.where(np.isfinite(intensity), 0.0)
    intensity = assignlevel(
        intensity, variable="Nutrient surplus intensity, incl natural vegetation"
    )
    reports["nutrientSurplus_intensity"] = intensity
    save(intensity, "nutrientSurplus_intensity", INTENSITY_UNIT)

    return reports


def report_land_use(data, model, scenario, global_region="GLO"):
    """
    Land use in IAMC format.

    Parameters
    ----------
    data : pd.DataFrame
        LandArray on region or country level, with or without sub-categories
    model, scenario : str
    global_region : str, default "GLO"
        reported as ``World``

    Returns
    -------
    pyam.IamDataFrame
    """
    space = space_level(data)
    by_type = data.groupby([space, "land"], sort=False).sum()
    by_type = by_type.loc[isin(land=list(LAND_USE_VARIABLES))]

    variables = by_type.rename(index=LAND_USE_VARIABLES, level="land")
    forest = assignlevel(
        by_type.loc[isin(land=FOREST_TYPES)].groupby(level=space, sort=False).sum(),
        land="Resources|Land Cover|+|Forest",
    )
    total = assignlevel(
        by_type.groupby(level=space, sort=False).sum(), land="Resources|Land Cover"
    )

    df = pd.concat([total, variables, forest]).rename_axis(
        index={space: "region", "land": "variable"}
    )
    if space == "country":
        df = df.rename(index=country_name, level="region")
    df = df.rename(index={global_region: "World"}, level="region")

    df = assignlevel(df, model=model, scenario=scenario, unit=LAND_USE_UNIT)
    return pyam.IamDataFrame(df.reset_index())
