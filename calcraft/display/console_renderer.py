"""Console-based renderer for month page render trees."""

import logging
from typing import Any

from ..layout.grid import Blank, DayCell, MonthGrid, WeekdayHeader
from ..layout.month_page import GridBlock, HeaderBlock, ImageBlock, MonthPage

logger = logging.getLogger(__name__)

EVENT_MARKER = "*"


class ConsoleRenderer:
    """Renders month pages as plain-text grids for terminal preview."""

    def __init__(self, width: int = 72) -> None:
        """Initialize console renderer.

        Args:
            width: Console display width
        """
        self.width = width

        logger.debug("Console renderer initialized")

    def render_year(self, pages: list[MonthPage]) -> str:
        """Render a sequence of month pages separated by blank lines."""
        return "\n\n".join(self.render_page(page) for page in pages)

    def render_page(self, page: MonthPage) -> str:
        """Render one month page block by block, in layout order."""
        lines = ["=" * self.width]

        for block in page.blocks:
            if isinstance(block, HeaderBlock):
                lines.extend(self._render_header(block))
            elif isinstance(block, ImageBlock):
                lines.append(f"[image: {block.image}]" if block.image else f"[{block.alt} image placeholder]")
            elif isinstance(block, GridBlock):
                lines.append(self.render_grid(block.grid))
                lines.extend(self._render_event_list(block.grid))
            lines.append("-" * self.width)

        lines.append(page.footer.text)
        lines.append("=" * self.width)
        return "\n".join(lines)

    def _render_header(self, block: HeaderBlock) -> list[str]:
        title = block.title or ""
        year = str(block.year) if block.year is not None else ""
        if not title or not year:
            return [title or year]

        padding = self.width - len(title) - len(year)
        if block.same_alignment or padding < 1:
            return [f"{title} {year}"]
        return [f"{title}{' ' * padding}{year}"]

    def _cell_width(self, grid: MonthGrid) -> int:
        return max(3, min(10, self.width // grid.columns))

    def render_grid(self, grid: MonthGrid) -> str:
        """Render grid cells row by row; days with events are marked."""
        cell_width = self._cell_width(grid)
        rows = []

        for start in range(0, len(grid.cells), grid.columns):
            row = grid.cells[start : start + grid.columns]
            rows.append("".join(self._format_cell(cell, cell_width) for cell in row).rstrip())

        return "\n".join(rows)

    def _format_cell(self, cell: Any, cell_width: int) -> str:
        if isinstance(cell, WeekdayHeader):
            text = cell.label
        elif isinstance(cell, DayCell):
            text = f"{cell.day}{EVENT_MARKER if cell.events else ''}"
        elif isinstance(cell, Blank):
            text = ""
        else:
            text = "?"
        return text[: cell_width - 1].rjust(cell_width - 1) + " "

    def _render_event_list(self, grid: MonthGrid) -> list[str]:
        """List the visible events of each day, with the hidden count."""
        lines: list[str] = []
        for cell in grid.day_cells():
            if not cell.events:
                continue
            for event in cell.visible_events:
                lines.append(self._format_event_line(cell.day, event.title))
            if cell.overflow_count:
                lines.append(f"{'':>4}+{cell.overflow_count} more")

        if lines:
            lines.insert(0, "")
        return lines

    def _format_event_line(self, day: int, title: str) -> str:
        limit = self.width - 6
        if len(title) > limit:
            title = title[: limit - 3] + "..."
        return f"{day:>3}  {title}"
