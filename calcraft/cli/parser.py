"""Command-line argument parsing for CalCraft."""

import argparse
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .. import __version__
from ..layout.page_geometry import DimensionUnit, PageSize

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]
OUTPUT_FORMATS = ["console", "json"]


def parse_month(value: str) -> int:
    """Parse a 1-12 month number into a 0-based month index.

    Raises:
        argparse.ArgumentTypeError: If the value is not a month number
    """
    try:
        month = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Invalid month: {value}. Use 1-12") from err
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Invalid month: {value}. Use 1-12")
    return month - 1


def parse_non_negative(value: str) -> int:
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from err
    if number < 0:
        raise argparse.ArgumentTypeError(f"Must be 0 or greater, got {value}")
    return number


def parse_positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Invalid dimension: {value}") from err
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Dimension must be positive, got {value}")
    return number


def parse_timezone(value: str) -> str:
    """Validate an IANA timezone name."""
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise argparse.ArgumentTypeError(f"Unknown timezone: {value}") from err
    return value


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["family.ics", "--year", "2030", "--month", "7"])
        >>> args.month
        6
    """
    parser = argparse.ArgumentParser(
        prog="calcraft",
        description="CalCraft - lay out printable month calendars from ICS files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s family.ics                        # Preview every month of this year
  %(prog)s family.ics work.ics --year 2030   # Merge two calendars for 2030
  %(prog)s family.ics --month 7 --grid-rows 2  # July as a two-row strip
  %(prog)s family.ics --page-size custom --width 8.5 --height 11 --unit in --format json
        """,
    )

    parser.add_argument("files", nargs="+", type=Path, metavar="FILE", help="ICS files to import")

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version information"
    )

    # Calendar arguments
    calendar_group = parser.add_argument_group("calendar", "Year, month and event options")

    calendar_group.add_argument("--year", type=int, help="Calendar year (default: current year)")

    calendar_group.add_argument(
        "--month", type=parse_month, metavar="1-12", help="Render a single month instead of the full year"
    )

    calendar_group.add_argument(
        "--color", help="Accent color for the imported calendars (default: #8295AF)"
    )

    calendar_group.add_argument(
        "--timezone",
        type=parse_timezone,
        dest="local_timezone",
        help="IANA timezone used to place UTC events on a day (default: system local)",
    )

    # Layout arguments
    layout_group = parser.add_argument_group("layout", "Grid and page size options")

    layout_group.add_argument(
        "--grid-rows",
        type=parse_non_negative,
        metavar="R",
        help="0 for the standard week grid, R > 0 for an R-row linear strip",
    )

    layout_group.add_argument(
        "--page-size", choices=[size.value for size in PageSize], help="Page size (default: A4)"
    )

    layout_group.add_argument("--width", type=parse_positive_float, help="Custom page width")

    layout_group.add_argument("--height", type=parse_positive_float, help="Custom page height")

    layout_group.add_argument(
        "--unit", choices=[unit.value for unit in DimensionUnit], help="Unit of custom dimensions"
    )

    layout_group.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="console",
        dest="output_format",
        help="console prints text grids, json prints the render tree",
    )

    # Logging arguments
    logging_group = parser.add_argument_group("logging", "Logging configuration options")

    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )

    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    logging_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show errors on console (sets console level to ERROR)",
    )

    logging_group.add_argument(
        "--log-dir", type=Path, help="Write timestamped log files to this directory"
    )

    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser


def settings_overrides(args: argparse.Namespace) -> dict:
    """Collect settings fields explicitly given on the command line."""
    mapping = {
        "year": "year",
        "grid_rows": "grid_rows",
        "page_size": "page_size",
        "width": "custom_width",
        "height": "custom_height",
        "unit": "dimension_unit",
        "local_timezone": "local_timezone",
        "color": "default_calendar_color",
    }
    return {
        setting: getattr(args, arg)
        for arg, setting in mapping.items()
        if getattr(args, arg, None) is not None
    }


__all__ = [
    "create_parser",
    "parse_month",
    "parse_non_negative",
    "parse_positive_float",
    "parse_timezone",
    "settings_overrides",
]
