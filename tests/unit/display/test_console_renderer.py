"""Unit tests for the console renderer."""

from datetime import datetime, timezone

import pytest

from calcraft.display.console_renderer import ConsoleRenderer
from calcraft.layout.grid import build_month_grid
from calcraft.layout.month_page import MonthTarget, StyleConfig, build_month_page
from calcraft.layout.page_geometry import PageGeometry

UTC = timezone.utc


@pytest.fixture
def renderer():
    return ConsoleRenderer(width=72)


@pytest.fixture
def a4():
    return PageGeometry(width_mm=210, height_mm=297)


class TestRenderGrid:
    """Tests for grid rendering."""

    def test_standard_grid_rows(self, renderer):
        grid = build_month_grid(1, 2026, [])

        lines = renderer.render_grid(grid).split("\n")

        assert len(lines) == grid.total_rows
        assert lines[0].split() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        assert lines[1].split() == ["1", "2", "3", "4", "5", "6", "7"]
        assert lines[-1].split() == [str(day) for day in range(22, 29)]

    def test_days_with_events_are_marked(self, renderer, make_event):
        grid = build_month_grid(6, 2030, [make_event("Fourth", datetime(2030, 7, 4, tzinfo=UTC))])

        output = renderer.render_grid(grid)

        assert "4*" in output
        assert "5*" not in output

    def test_strip_grid(self, renderer):
        grid = build_month_grid(0, 2024, [], grid_rows=2)

        lines = renderer.render_grid(grid).split("\n")

        assert len(lines) == 4
        assert lines[0].split()[:2] == ["M", "T"]
        assert lines[3].split()[-1] == "31"

    def test_wide_strip_keeps_columns_aligned(self, renderer, make_event):
        """Test that marked days never overflow a narrow cell."""
        events = [make_event(f"Day {day}", datetime(2024, 1, day, tzinfo=UTC)) for day in (10, 31)]
        grid = build_month_grid(0, 2024, events, grid_rows=1)

        label_row, day_row = renderer.render_grid(grid).split("\n")

        assert grid.columns == 31
        assert len(day_row) == 31 * 3 - 1
        assert day_row[27:29] == "10"
        assert day_row[90:92] == "31"
        assert len(label_row) == len(day_row)


class TestRenderPage:
    """Tests for full page rendering."""

    def test_page_sections(self, renderer, a4, make_event):
        events = [make_event(f"Party {i}", datetime(2030, 7, 4, tzinfo=UTC)) for i in range(3)]
        page = build_month_page(MonthTarget(month=6, year=2030), events, StyleConfig(), a4)

        output = renderer.render_page(page)

        assert output.split("\n")[1].startswith("July")
        assert output.split("\n")[1].endswith("2030")
        assert "[July image placeholder]" in output
        assert "  4  Party 0" in output
        assert "  4  Party 1" in output
        assert "Party 2" not in output
        assert "+1 more" in output
        assert "July 2030 • Crafted by CalCraft Studio" in output

    def test_image_reference(self, renderer, a4):
        page = build_month_page(MonthTarget(month=0, year=2030, image="jan.png"), [], StyleConfig(), a4)

        assert "[image: jan.png]" in renderer.render_page(page)

    def test_same_alignment_header(self, renderer, a4):
        style = StyleConfig(year_align="left")
        page = build_month_page(MonthTarget(month=0, year=2030), [], style, a4)

        assert "January 2030" in renderer.render_page(page).split("\n")[1]

    def test_long_titles_are_truncated(self, a4, make_event):
        renderer = ConsoleRenderer(width=30)
        event = make_event("A" * 100, datetime(2030, 7, 4, tzinfo=UTC))
        page = build_month_page(MonthTarget(month=6, year=2030), [event], StyleConfig(), a4)

        event_line = next(line for line in renderer.render_page(page).split("\n") if "AAA" in line)

        assert event_line.endswith("...")
        assert len(event_line) <= 30

    def test_render_year(self, renderer, a4):
        pages = [
            build_month_page(MonthTarget(month=month, year=2030), [], StyleConfig(), a4) for month in range(2)
        ]

        output = renderer.render_year(pages)

        assert "January 2030 •" in output
        assert "February 2030 •" in output
