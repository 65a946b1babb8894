"""CLI module for CalCraft.

Imports ICS files, renders every month of the target year and prints the
result as text grids or as the JSON render tree.
"""

import json
from typing import Optional

from ..config.settings import CalCraftSettings
from ..display.console_renderer import ConsoleRenderer
from ..exceptions import CalCraftError
from ..layout.month_page import MonthPage
from ..state import create_state, import_calendar_file, render_year
from ..utils.logging import apply_command_line_overrides, get_logger, setup_logging
from .parser import create_parser, parse_month, settings_overrides

logger = get_logger("cli")


def format_pages(pages: list[MonthPage], output_format: str) -> str:
    """Format rendered pages for standard output."""
    if output_format == "json":
        return json.dumps([page.model_dump(mode="json") for page in pages], indent=2)
    return ConsoleRenderer().render_year(pages)


async def main_entry(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = CalCraftSettings(**settings_overrides(args))
    apply_command_line_overrides(settings, args)
    setup_logging(settings)

    try:
        state = create_state(settings)
        for path in args.files:
            state = await import_calendar_file(state, path)

        pages = render_year(state, tz=settings.tz)
        if args.month is not None:
            pages = [pages[args.month]]

        print(format_pages(pages, args.output_format))

    except CalCraftError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        return 1
    except OSError as e:
        logger.error(f"Could not read calendar file: {e}")
        return 1

    return 0


__all__ = [
    "create_parser",
    "format_pages",
    "main_entry",
    "parse_month",
    "settings_overrides",
]
