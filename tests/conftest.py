import numpy as np
import pandas as pd
import pytest
import xarray as xr

from landagg import ReportingContext, ResultStore, RunControl, SpatialMapping


CLUSTERS = ["R1.1", "R1.2", "R2.3"]
YEARS = ["y1995", "y2000"]

# land type: values per cluster and year
LAND = {
    "crop": [[10, 12], [20, 18], [5, 5]],
    "past": [[5, 5], [5, 5], [8, 8]],
    "forestry": [[3, 4], [7, 7], [2, 2]],
    "primforest": [[30, 29], [10, 10], [40, 39]],
    "secdforest": [[6, 6], [4, 4], [9, 9]],
    "urban": [[1, 1], [1, 1], [0.5, 0.5]],
    "other": [[12, 12], [8, 8], [6, 6]],
}

FORESTRY_SHARES = {"aff": 0.5, "ndc": 0.2, "plant": 0.3}
SECDFOREST_SHARES = {"ac0": 0.25, "ac10": 0.75}
OTHER_SHARES = {"othernat": 0.9, "youngsecdf": 0.1}
CROP_AREA = {"tece": 4.0, "maiz": 3.0, "begr": 1.0, "betr": 0.5}


def long_table(values, dim, extra=None):
    """
    Builds a store table from nested per cluster and year values.

    `extra` names a further dimension and the shares the values are split into.
    """
    extra_dim, splits = extra if extra else (None, {None: 1.0})
    rows = []
    for name, per_cluster in values.items():
        for j, per_year in zip(CLUSTERS, per_cluster):
            for t, v in zip(YEARS, per_year):
                for label, share in splits.items():
                    key = {"t": t, "j": j, dim: name}
                    if extra_dim is not None:
                        key[extra_dim] = label
                    rows.append(key | {"type": "level", "value": float(v) * share})
                    rows.append(key | {"type": "marginal", "value": 99.0})
    return pd.DataFrame(rows)


def breakdown_table(land, shares, dim, extra=None):
    values = {
        sub: [[v * share for v in per_year] for per_year in LAND[land]]
        for sub, share in shares.items()
    }
    return long_table(values, dim, extra=extra)


def make_variables():
    crop_area = {
        kcr: [[area] * len(YEARS)] * len(CLUSTERS) for kcr, area in CROP_AREA.items()
    }
    return {
        "ov_land": long_table(LAND, "land"),
        "ov32_land": breakdown_table(
            "forestry",
            FORESTRY_SHARES,
            "type32",
            extra=("ac", {"ac0": 0.5, "ac5": 0.5}),
        ),
        "ov35_secdforest": breakdown_table("secdforest", SECDFOREST_SHARES, "ac"),
        "ov35_other": breakdown_table("other", OTHER_SHARES, "othertype35"),
        "ov_area": long_table(
            crop_area, "kcr", extra=("w", {"rainfed": 0.5, "irrigated": 0.5})
        ),
    }


@pytest.fixture
def variables():
    return make_variables()


@pytest.fixture
def store(variables):
    return ResultStore(variables)


@pytest.fixture
def rc():
    return RunControl()


@pytest.fixture
def cluster_mapping():
    return SpatialMapping(
        pd.DataFrame({"cluster": CLUSTERS, "region": ["R1", "R1", "R2"]}), weight=None
    )


# grid cells: cluster, country, weight, lon, lat
CELLS = pd.DataFrame(
    {
        "cell": ["c1", "c2", "c3", "c4"],
        "cluster": ["R1.1", "R1.1", "R1.2", "R2.3"],
        "region": ["R1", "R1", "R1", "R2"],
        "country": ["DEU", "FRA", "FRA", "IND"],
        "weight": [1.0, 3.0, 2.0, 1.0],
        "lon": [10.25, 2.25, 3.75, 78.25],
        "lat": [51.25, 46.75, 45.25, 22.75],
    }
)

GRID_YEARS = [1985, 1995, 2000]
GRID_LAND = {
    # land type: per cell and year
    "crop": [[1, 2, 1], [3, 3, 4], [0, 0, 0], [2, 2, 2]],
    "other": [[5, 4, 6], [2, 2, 1], [0, 0, 0], [1, 1, 1]],
}
INIT_PRIMOTHER = [3.0, 2.0, 0.0, 1.0]


@pytest.fixture
def cell_mapping():
    return SpatialMapping(CELLS.copy())


@pytest.fixture
def run_dir(tmp_path):
    """
    Output directory with gridded land, initialisation raster and mapping.
    """
    values = np.array([GRID_LAND[land] for land in GRID_LAND], dtype=float)
    da = xr.DataArray(
        values.transpose(1, 0, 2),
        dims=("cell", "land", "year"),
        coords={"cell": CELLS["cell"], "land": list(GRID_LAND), "year": GRID_YEARS},
    )
    da.to_netcdf(tmp_path / "cell.land_0.5.nc", engine="h5netcdf")

    init = xr.DataArray(
        np.array([INIT_PRIMOTHER, [0.0] * len(CELLS)]).T,
        dims=("cell", "land"),
        coords={"cell": CELLS["cell"], "land": ["primother", "crop"]},
    )
    init.to_netcdf(tmp_path / "avl_land_full_t_0.5.nc", engine="h5netcdf")

    CELLS.to_csv(tmp_path / "clustermap_rev4.59_c200.csv", index=False)
    return tmp_path


@pytest.fixture
def context(rc):
    return ReportingContext(rc=rc)
