import logging
import os
from pathlib import Path
from typing import TypeAlias

import pandas as pd
import pycountry


Pathy: TypeAlias = str | Path

_logger = None

# placeholder sub-category of a not expanded land type
TOTAL = "total"


def logger():
    """
    Global Logger used for landagg.
    """
    global _logger
    if _logger is None:
        logging.basicConfig()
        _logger = logging.getLogger()
        _logger.setLevel("INFO")
    return _logger


def isstr(x):
    """
    Returns True if x is a string.
    """
    return isinstance(x, str)


def parse_year(label):
    """
    Turns a period label like `y1995` or `"1995"` into the integer year.
    """
    if isinstance(label, str):
        label = label.lstrip("yY")
    return int(label)


def space_level(df):
    """
    Returns the name of the spatial index level of a LandArray.
    """
    return df.index.names[0]


def pd_read(f, str_cols=False, *args, **kwargs):
    """
    Try to read a file with pandas, supports CSV and XLSX.

    Parameters
    ----------
    f : string or Path
        the file to read in
    str_cols : bool, optional
        turn all columns into strings (numerical column names are sometimes
        read in as numerical dtypes)
    args, kwargs : sent directly to the Pandas read function

    Returns
    -------
    df : pd.DataFrame
    """
    f = os.fspath(f)
    if f.endswith("csv"):
        df = pd.read_csv(f, *args, **kwargs)
    else:
        df = pd.read_excel(f, *args, **kwargs)

    if str_cols:
        df.columns = [str(x) for x in df.columns]

    return df


def pd_write(df, f, *args, **kwargs):
    """
    Try to write a file with pandas, supports CSV and XLSX.
    """
    f = os.fspath(f)
    # guess whether to use index, unless we're told otherwise
    index = kwargs.pop("index", isinstance(df.index, pd.MultiIndex))

    if f.endswith("csv"):
        df.to_csv(f, index=index, *args, **kwargs)
    else:
        with pd.ExcelWriter(f, engine="xlsxwriter") as writer:
            df.to_excel(writer, index=index, *args, **kwargs)


def normalize(s):
    return s / s.sum()


def country_name(iso: str):
    country_obj = pycountry.countries.get(alpha_3=iso)
    return iso if country_obj is None else country_obj.name


def skipempty(*dfs):
    return [df for df in dfs if df is not None and not df.empty]
