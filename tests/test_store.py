import pandas as pd
import pytest

from landagg.errors import MissingFileError, MissingVariableError
from landagg.store import ResultStore, read_variable, to_land_array

from conftest import LAND


def test_read_first_found(store):
    obs = read_variable(store, ["ovm_land", "ov_land"], select={"type": "level"})
    assert obs.name == "ov_land"
    assert obs.index.names == ["t", "j", "land"]
    assert obs.loc[("y1995", "R1.1", "crop")] == 10.0


def test_read_renamed(variables):
    store = ResultStore({"ovm_land": variables["ov_land"]})
    obs = read_variable(store, ["ov_land", "ovm_land"], select={"type": "level"})
    assert obs.name == "ovm_land"


def test_read_missing(store):
    with pytest.raises(MissingVariableError, match="ov_foo, ov_bar"):
        read_variable(store, ["ov_foo", "ov_bar"])


def test_read_empty_selection(store):
    with pytest.raises(MissingVariableError):
        read_variable(store, "ov_land", select={"type": "upper"})


def test_read_ignores_unknown_selector(store):
    obs = read_variable(store, "ov_land", select={"type": "level", "scen": "a"})
    assert (obs != 99.0).all()


def test_to_land_array(store, rc):
    series = read_variable(store, "ov_land", select={"type": "level"})
    obs = to_land_array(series, rc)
    assert obs.index.names == ["cluster", "land", "sub"]
    assert list(obs.columns) == [1995, 2000]
    assert set(obs.index.unique("land")) == set(LAND)
    assert (obs.index.get_level_values("sub") == "total").all()
    assert obs.loc[("R1.2", "crop", "total"), 2000] == 18.0


def test_to_land_array_sums_extra_dims(store, rc):
    series = read_variable(store, "ov32_land", select={"type": "level"})
    obs = to_land_array(series, rc, land="forestry")
    assert set(obs.index.unique("sub")) == {"aff", "ndc", "plant"}
    assert obs.loc[("R1.1", "forestry", "aff"), 1995] == pytest.approx(1.5)


def test_to_land_array_fills_sparse(rc):
    series = pd.DataFrame(
        {"t": ["y1995", "y2000"], "j": ["A.1", "A.2"], "land": ["crop", "crop"]}
    ).assign(value=[1.0, 2.0]).set_index(["t", "j", "land"])["value"]
    obs = to_land_array(series, rc)
    assert obs.loc[("A.1", "crop", "total"), 2000] == 0.0


def test_to_land_array_lacks_dimension(rc):
    series = pd.Series([1.0], pd.Index(["A.1"], name="j"), name="ov_x")
    with pytest.raises(ValueError, match="lacks dimension"):
        to_land_array(series, rc)


def test_from_directory(tmp_path, variables):
    variables["ov_land"].to_csv(tmp_path / "ov_land.csv", index=False)
    store = ResultStore.from_directory(tmp_path)
    assert list(store) == ["ov_land"]
    assert len(store["ov_land"]) == len(variables["ov_land"])


def test_from_missing_directory(tmp_path):
    with pytest.raises(MissingFileError):
        ResultStore.from_directory(tmp_path / "nope")


def test_to_land_array_numeric_clusters(rc):
    series = pd.DataFrame(
        {"t": ["y1995", "y1995"], "j": [1, 2], "land": "crop", "value": [1.0, 2.0]}
    ).set_index(["t", "j", "land"])["value"]
    obs = to_land_array(series, rc)
    assert list(obs.index.unique("cluster")) == ["1", "2"]
