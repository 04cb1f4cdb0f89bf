#!/usr/bin/env python
from subprocess import call

from setuptools import Command, setup


# Thanks to http://patorjk.com/software/taag/
logo = r"""
  _                 _
 | | __ _ _ __   __| | __ _  __ _  __ _
 | |/ _` | '_ \ / _` |/ _` |/ _` |/ _` |
 | | (_| | | | | (_| | (_| | (_| | (_| |
 |_|\__,_|_| |_|\__,_|\__,_|\__, |\__, |
                            |___/ |___/
"""

REQUIREMENTS = [
    "numpy",
    "pandas>=2",
    "pandas-indexing>=0.4",
    "xarray",
    "h5netcdf[h5py]",
    "attrs",
    "PyYAML",
    "openpyxl",
    "xlsxwriter",
    "pycountry",
    "pyam-iamc",
    "openscm-units",
]

EXTRA_REQUIREMENTS = {
    "tests": ["pytest", "coverage", "pytest-cov"],
    "deploy": ["twine", "setuptools", "wheel"],
}


# thank you https://stormpath.com/blog/building-simple-cli-interfaces-in-python
class RunTests(Command):
    """Run all tests."""

    description = "run tests"
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        """Run all tests!"""
        errno = call(["py.test", "--cov=landagg", "--cov-report=term-missing"])
        raise SystemExit(errno)


def main():
    print(logo)
    classifiers = [
        "License :: OSI Approved :: Apache Software License",
    ]
    packages = [
        "landagg",
    ]
    pack_dir = {
        "": "src",
    }
    entry_points = {
        "console_scripts": [
            # list CLIs here
            "landagg=landagg.cli:main",
        ],
    }
    setup_kwargs = {
        "name": "landagg",
        "version": "0.1.0",
        "description": "Land-type decomposition and spatial aggregation of "
        "land-use model results",
        "cmdclass": {"test": RunTests},
        "classifiers": classifiers,
        "license": "Apache License 2.0",
        "packages": packages,
        "package_dir": pack_dir,
        "entry_points": entry_points,
        "python_requires": ">=3.10",
        "install_requires": REQUIREMENTS,
        "extras_require": EXTRA_REQUIREMENTS,
    }
    setup(**setup_kwargs)


if __name__ == "__main__":
    main()
