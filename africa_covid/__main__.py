import argparse
import logging
import sys

import pandas as pd
import requests

from .config import LOG_FORMAT, ReportConfig
from .export import write_report
from .geo import load_boundaries
from .loader import ParseError, load_cases
from .report import build_report


logger = logging.getLogger("africa_covid")


def _log_level(value: str) -> str:
    level = value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise argparse.ArgumentTypeError(f"unknown logging level {value!r}")
    return level


def parse_args(argv=None, config=None):
    parser = argparse.ArgumentParser(
        prog="africa_covid",
        description="Render the Africa COVID-19 report as a standalone HTML document.",
    )
    if config is None:
        try:
            config = ReportConfig.from_env()
        except ValueError as exc:
            parser.error(f"invalid environment setting: {exc}")

    parser.add_argument("csv", nargs="?", default=config.csv_path, help="case count CSV (default: %(default)s)")
    parser.add_argument("-o", "--output", default=str(config.output_path), help="HTML output path (default: %(default)s)")
    parser.add_argument("--reference-date", type=pd.Timestamp, default=config.reference_date,
                        help="report date as YYYY-MM-DD; the snapshot is the day before (default: latest observation)")
    parser.add_argument("--geojson", default=config.geojson_source,
                        help="country boundaries URL or path; empty string disables the map")
    parser.add_argument("--feature-key", default=config.feature_key, help="GeoJSON property to join on (default: %(default)s)")
    parser.add_argument("--top", type=int, default=config.top_n, help="countries per ranking chart (default: %(default)s)")
    parser.add_argument("--log-level", type=_log_level, default=config.log_level,
                        help="logging level (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        cases = load_cases(args.csv)
    except (ParseError, FileNotFoundError) as exc:
        logger.error("Cannot load %s: %s", args.csv, exc)
        return 1
    if cases.empty and args.reference_date is None:
        logger.error("%s has no observations and no reference date was given", args.csv)
        return 1

    geojson = None
    if args.geojson:
        try:
            geojson = load_boundaries(args.geojson)
        except (requests.RequestException, OSError, ValueError) as exc:
            logger.warning("Country boundaries unavailable, map omitted: %s", exc)

    report = build_report(cases, args.reference_date)
    write_report(report, args.output, geojson=geojson, top_n=args.top, featureidkey=args.feature_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
