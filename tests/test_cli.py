import pandas as pd

from landagg import cli

from conftest import make_variables


def test_read_args():
    args = cli.read_args(
        ["land", "store", "--level", "regglo", "--types", "crop", "past"]
    )
    assert args.command == "land"
    assert args.types == ["crop", "past"]
    assert not args.sum


def test_land(tmp_path):
    store = tmp_path / "store"
    store.mkdir()
    for name, table in make_variables().items():
        table.to_csv(store / f"{name}.csv", index=False)

    output = tmp_path / "land.csv"
    cli.main(["land", str(store), "--level", "glo", "--sum", "--output", str(output)])

    obs = pd.read_csv(output, comment="*", index_col=[0, 1])
    assert obs.loc[("GLO", "total"), "1995"] == 192.5


def test_nutrient_surplus(run_dir, tmp_path):
    rc = tmp_path / "rc.yaml"
    rc.write_text(
        "files:\n  nutrient_surplus:\n"
        + "".join(
            f"    {source}: cell.land_0.5.nc\n"
            for source in ("cropland", "pasture", "manure", "nonagland")
        )
    )
    report_dir = tmp_path / "reports"
    report_dir.mkdir()
    cli.main(
        [
            "--rc",
            str(rc),
            "nutrient-surplus",
            str(run_dir),
            "--report-dir",
            str(report_dir),
            "--scenario",
            "SSP2",
        ]
    )
    assert (report_dir / "SSP2-nutrientSurplus_intensity.nc").exists()
