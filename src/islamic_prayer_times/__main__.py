"""Command-line entrypoint for islamic_prayer_times."""

from __future__ import annotations

import argparse
import json
import logging
import os
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from islamic_prayer_times.calendar.hijri import HijriDate
from islamic_prayer_times.contracts import TimeMap
from islamic_prayer_times.geo.coordinates import Coordinates
from islamic_prayer_times.geo.qibla import Qibla
from islamic_prayer_times.io.payloads import (
    DateRangePayload,
    LocationPayload,
    ParamsPayload,
    RunConfig,
    WeatherPayload,
    dump_days,
)
from islamic_prayer_times.orchestrate.batch import compute_range
from islamic_prayer_times.prayer.params import Method

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    """Parse ISO calendar date string."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date: {value}") from exc


def _parse_method(value: str) -> Method:
    try:
        return Method.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="islamic_prayer_times",
        description="Islamic prayer times command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("PRAYER_TIMES_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )

    subparsers = parser.add_subparsers(dest="command")
    times = subparsers.add_parser(
        "times",
        help="Compute prayer times for a location over a date range.",
    )
    times.add_argument("-l", "--latitude", type=float)
    times.add_argument("-t", "--longitude", type=float)
    times.add_argument("-e", "--elevation", type=float, default=0.0)
    times.add_argument("-g", "--gmt", type=float)
    times.add_argument(
        "-m",
        "--method",
        type=_parse_method,
        default=os.getenv("PRAYER_TIMES_METHOD", "isna"),
    )
    times.add_argument("-s", "--start-date", type=_parse_date, default=None)
    times.add_argument("-n", "--end-date", type=_parse_date, default=None)
    times.add_argument("-p", "--params-file", default=None)
    times.add_argument("-i", "--input-file", default=None)
    times.add_argument("-o", "--output-file", default=None)
    times.add_argument("--workers", type=int, default=os.getenv("PRAYER_TIMES_WORKERS"))

    qibla = subparsers.add_parser("qibla", help="Print the qibla bearing for a location.")
    qibla.add_argument("-l", "--latitude", type=float, required=True)
    qibla.add_argument("-t", "--longitude", type=float, required=True)

    hijri = subparsers.add_parser("hijri", help="Convert a Gregorian date to the Hijri calendar.")
    hijri.add_argument("-d", "--date", type=_parse_date, default=None)

    return parser


def _run_config_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> RunConfig:
    """Build the run configuration from an input file or from individual options."""
    if args.input_file:
        return RunConfig.load_json(args.input_file)

    missing = [name for name in ("latitude", "longitude", "gmt") if getattr(args, name) is None]
    if missing:
        parser.error("the following arguments are required without --input-file: " + ", ".join(
            f"--{name}" for name in missing
        ))

    if args.params_file:
        params = ParamsPayload.model_validate(
            json.loads(Path(args.params_file).read_text(encoding="utf-8"))
        )
    else:
        params = ParamsPayload(method=args.method)

    start = args.start_date or date.today()
    return RunConfig(
        params=params,
        location=LocationPayload(
            latitude=args.latitude,
            longitude=args.longitude,
            elevation=args.elevation,
            gmt=args.gmt,
        ),
        date_range=DateRangePayload(start_date=start, end_date=args.end_date or start),
        weather=WeatherPayload(),
    )


def format_day(day: date, times: TimeMap) -> str:
    """Render one date's prayer times as indented text."""
    lines = [f"{HijriDate.from_gregorian(day)} ({day:%A, %B %d, %Y})"]
    for prayer, value in times.items():
        label = prayer.name.capitalize()
        if value is None:
            lines.append(f"  {label}: Invalid")
        else:
            suffix = " (extreme)" if value.extreme else ""
            lines.append(f"  {label}: {value.time.isoformat(timespec='seconds')}{suffix}")
    return "\n".join(lines)


def _run_times(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        config = _run_config_from_args(parser, args)
        params = config.params.to_params()
        location = config.location.to_location()
        date_range = config.date_range.to_range()
        weather = config.weather.to_weather() if config.weather else None
        if args.workers is not None and args.workers <= 0:
            raise ValueError(f"--workers must be positive, got {args.workers}.")
    except (OSError, ValidationError, ValueError) as exc:
        parser.error(str(exc))

    results = compute_range(params, location, date_range, weather=weather, workers=args.workers)

    if args.output_file:
        Path(args.output_file).write_text(json.dumps(dump_days(results), indent=2), encoding="utf-8")
        logger.info("wrote %d days to %s", len(results), args.output_file)
    else:
        print("\n\n".join(format_day(day, times) for day, times in results.items()))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "times":
        return _run_times(parser, args)

    if args.command == "qibla":
        try:
            coords = Coordinates(latitude=args.latitude, longitude=args.longitude)
        except ValueError as exc:
            parser.error(str(exc))
        print(Qibla.from_coordinates(coords))
        return 0

    if args.command == "hijri":
        print(HijriDate.from_gregorian(args.date or date.today()))
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
