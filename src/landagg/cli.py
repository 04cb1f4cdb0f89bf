"""
Land reporting CLI for landagg.
"""

import argparse
import os

import landagg
from landagg.utils import logger


def read_args(argv=None):
    # construct parser
    descr = """
    Report land areas and nutrient surplus of land-use model runs.

    Example usage:

    landagg land output/run1/store --dir output/run1 --level regglo --output land.csv
    landagg nutrient-surplus output/run1 --report-dir reports --scenario SSP2
    """
    parser = argparse.ArgumentParser(
        description=descr, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    rc = "Runcontrol YAML file overriding the default configuration."
    parser.add_argument("--rc", help=rc, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    land = subparsers.add_parser("land", help="Land area by land type.")
    land.add_argument("store", help="Directory with the result store variables.")
    land.add_argument(
        "--dir", help="Run output directory with mapping and rasters.", default="."
    )
    land.add_argument("--level", help="Spatial resolution.", default="region")
    land.add_argument("--types", nargs="+", help="Land types to report.", default=None)
    land.add_argument(
        "--subcategories",
        nargs="+",
        help="Land types to break down into sub-categories.",
        default=None,
    )
    land.add_argument(
        "--sum", action="store_true", help="Sum over all selected land types."
    )
    land.add_argument(
        "--strict", action="store_true", help="Abort on the first warning."
    )
    land.add_argument("--output", help="Output file (.csv, .xlsx or .nc).")

    surplus = subparsers.add_parser(
        "nutrient-surplus", help="Gridded nutrient surplus indicators."
    )
    surplus.add_argument("dir", help="Run output directory with the grid rasters.")
    surplus.add_argument("--report-dir", help="Directory to write reports to.")
    surplus.add_argument("--scenario", help="Scenario name used in file names.")

    return parser.parse_args(argv)


def report_land(args, context):
    store = landagg.ResultStore.from_directory(args.store)
    diagnostics = landagg.Diagnostics(strict=args.strict)
    x = landagg.land(
        store,
        file=args.output,
        level=args.level,
        types=args.types,
        subcategories=args.subcategories,
        sum_types=args.sum,
        dir=args.dir,
        context=context,
        diagnostics=diagnostics,
    )
    if diagnostics.events:
        logger().info(f"Finished with {len(diagnostics)} warning(s)")
    if x is not None and args.output is None:
        print(x.to_string())
    return x


def report_surplus(args, context):
    if args.report_dir and not os.path.exists(args.report_dir):
        raise OSError(f"{args.report_dir} does not exist on the filesystem.")

    surpluses = landagg.read_nutrient_surplus(args.dir, context.rc)
    grid_land = landagg.land(None, level="grid", dir=args.dir, context=context)
    return landagg.report_nutrient_surplus(
        surpluses,
        grid_land,
        report_dir=args.report_dir,
        scenario=args.scenario,
        mapping=context.mapping(args.dir, required=False),
    )


def main(argv=None):
    # parse cli
    args = read_args(argv)
    context = landagg.ReportingContext(rc=landagg.RunControl(rc=args.rc))

    # run program
    if args.command == "land":
        report_land(args, context)
    else:
        report_surplus(args, context)


if __name__ == "__main__":
    main()
