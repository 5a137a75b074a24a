"""Command-line interface for solarprep.

Prepares a historical dataset from the configured store and prints its
quality report and statistics.

Usage:
    solarprep prepare
    solarprep prepare --days 30
    solarprep prepare --days 30 --format json --include-records
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from solarprep import __version__
from solarprep.config import settings
from solarprep.pipeline import Dataset, HistoricalDataService

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="solarprep",
        description="solarprep — historical energy time-series preparation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  solarprep prepare
  solarprep prepare --days 30
  solarprep prepare --days 30 --format json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Load, align and clean historical data",
        description="Prepare the hourly dataset and report its quality",
    )
    prepare_parser.add_argument(
        "--days",
        type=int,
        default=None,
        help=f"Lookback window in days (default: {settings.lookback_days})",
    )
    prepare_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    prepare_parser.add_argument(
        "--include-records",
        action="store_true",
        help="With --format json, include raw samples and aligned slots",
    )

    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def format_report(dataset: Dataset) -> str:
    """Human-readable summary of a dataset."""
    stats = dataset.statistics
    quality = stats.data_quality
    time_range = dataset.time_range

    lines = [
        f"Slots: {time_range.hours} ({quality.time_span})",
    ]
    if time_range.start and time_range.end:
        lines.append(f"Range: {time_range.start.isoformat()} → {time_range.end.isoformat()}")
    lines.append(f"Quality: {quality.score:.1f}/100")
    for issue in quality.issues:
        lines.append(f"  - {issue}")

    lines.append("")
    lines.append(f"{'field':<10}{'count':>8}{'mean':>12}{'min':>12}{'max':>12}{'std':>12}")
    for name, field_stats in (
        ("solar", stats.solar),
        ("load", stats.load),
        ("price", stats.price),
        ("battery", stats.battery),
    ):
        lines.append(
            f"{name:<10}{field_stats.count:>8}{field_stats.mean:>12.2f}"
            f"{field_stats.min:>12.2f}{field_stats.max:>12.2f}{field_stats.std:>12.2f}"
        )

    lines.append("")
    lines.append("Correlations:")
    for pair, value in stats.correlations.items():
        lines.append(f"  {pair:<24}{value:>8.3f}")
    return "\n".join(lines)


def cmd_prepare(args: argparse.Namespace) -> int:
    """Execute the prepare command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        if args.days is not None and args.days < 1:
            print("Error: --days must be >= 1", file=sys.stderr)
            return 1

        service = HistoricalDataService()
        dataset = asyncio.run(service.load_historical_data(args.days))

        if args.format == "json":
            print(json.dumps(dataset.to_dict(include_records=args.include_records), indent=2))
        else:
            print(format_report(dataset))

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Preparation failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    print(f"solarprep v{__version__}")
    print("Historical energy time-series preparation")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "prepare":
        return cmd_prepare(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
