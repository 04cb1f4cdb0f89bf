import pandas as pd
import pytest

import landagg.utils as utils


@pytest.mark.parametrize("label", ["y1995", "1995", 1995])
def test_parse_year(label):
    assert utils.parse_year(label) == 1995


def test_normalize():
    obs = utils.normalize(pd.Series([1.0, 3.0]))
    assert obs.tolist() == [0.25, 0.75]


def test_country_name():
    assert utils.country_name("DEU") == "Germany"
    assert utils.country_name("GLO") == "GLO"


def test_space_level():
    df = pd.DataFrame(
        {1995: [1.0]},
        index=pd.MultiIndex.from_tuples([("R1", "crop")], names=["region", "land"]),
    )
    assert utils.space_level(df) == "region"


def test_skipempty():
    df = pd.DataFrame({1995: [1.0]})
    obs = utils.skipempty(df, pd.DataFrame(), None)
    assert len(obs) == 1
    assert obs[0] is df
