"""Unit tests for the month page render tree builder."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from calcraft.layout.grid import DayCell
from calcraft.layout.month_page import (
    GridBlock,
    HeaderBlock,
    ImageBlock,
    MonthTarget,
    StyleConfig,
    build_month_page,
)
from calcraft.layout.page_geometry import PageGeometry

UTC = timezone.utc


@pytest.fixture
def a4():
    return PageGeometry(width_mm=210, height_mm=297)


@pytest.fixture
def a5():
    return PageGeometry(width_mm=148, height_mm=210)


@pytest.fixture
def july_2030():
    return MonthTarget(month=6, year=2030)


@pytest.fixture
def fourth_of_july(make_event):
    return make_event("Independence Day", datetime(2030, 7, 4, tzinfo=UTC), color="#ff0000")


class TestStyleConfig:
    """Tests for style defaults and validation."""

    def test_defaults(self):
        style = StyleConfig()

        assert (style.title_size, style.year_size, style.grid_size) == (42, 24, 14)
        assert (style.day_size, style.event_size) == (9, 10)
        assert (style.header_height, style.image_height, style.grid_height) == (80, 350, 0)
        assert style.primary_color == "#6366f1"
        assert style.layout_order == ["header", "image", "grid"]
        assert style.grid_rows == 0

    def test_invalid_block_name(self):
        with pytest.raises(ValidationError):
            StyleConfig(layout_order=["header", "footer"])

    def test_invalid_alignment(self):
        with pytest.raises(ValidationError):
            StyleConfig(title_align="justify")

    def test_month_target_range(self):
        with pytest.raises(ValidationError):
            MonthTarget(month=12, year=2030)


class TestBuildMonthPage:
    """Test suite for build_month_page."""

    def test_default_page(self, july_2030, a4, fourth_of_july):
        """Test block order, page box and footer on A4."""
        page = build_month_page(july_2030, [fourth_of_july], StyleConfig(), a4)

        assert page.month_name == "July"
        assert (page.month, page.year) == (6, 2030)
        assert (page.width_mm, page.height_mm) == (210, 297)
        assert page.padding_mm == pytest.approx(12)
        assert [block.kind for block in page.blocks] == ["header", "image", "grid"]
        assert page.footer.text == "July 2030 • Crafted by CalCraft Studio"
        assert page.footer.style.size == pytest.approx(7)

    def test_sizes_scale_with_page_width(self, july_2030, a5):
        """Test that every size is multiplied by the page scale."""
        page = build_month_page(july_2030, [], StyleConfig(), a5)
        scale = 148 / 210
        header, image, grid = page.blocks

        assert page.padding_mm == pytest.approx(12 * scale)
        assert header.title_style.size == pytest.approx(42 * scale)
        assert header.year_style.size == pytest.approx(24 * scale)
        assert header.height == pytest.approx(80 * scale)
        assert image.height == pytest.approx(350 * scale)
        assert image.radius == pytest.approx(12 * scale)
        assert grid.day_number_style.size == pytest.approx(14 * scale)
        assert grid.label_style.size == pytest.approx(9 * scale)
        assert grid.cell_min_height == pytest.approx(40 * scale)
        assert grid.height is None

    def test_header_content(self, july_2030, a4):
        """Test header text, alignment and accent border."""
        header = build_month_page(july_2030, [], StyleConfig(), a4).blocks[0]

        assert isinstance(header, HeaderBlock)
        assert (header.title, header.year) == ("July", 2030)
        assert header.title_style.align == "left"
        assert header.year_style.align == "right"
        assert header.same_alignment is False
        assert header.border_color == "#6366f1"

    def test_header_omitted_without_title_and_year(self, july_2030, a4):
        style = StyleConfig(show_title=False, show_year=False)

        page = build_month_page(july_2030, [], style, a4)

        assert [block.kind for block in page.blocks] == ["image", "grid"]

    def test_header_with_year_only(self, july_2030, a4):
        header = build_month_page(july_2030, [], StyleConfig(show_title=False), a4).blocks[0]

        assert header.title is None
        assert header.year == 2030

    def test_layout_order_is_followed(self, july_2030, a4):
        """Test that blocks follow layout_order and skip disabled ones."""
        style = StyleConfig(layout_order=["grid", "image", "header"], show_images=False)

        page = build_month_page(july_2030, [], style, a4)

        assert [block.kind for block in page.blocks] == ["grid", "header"]

    def test_image_reference(self, a4):
        """Test that the month target image is carried on the image block."""
        target = MonthTarget(month=0, year=2030, image="images/january.png")

        image = build_month_page(target, [], StyleConfig(), a4).blocks[1]

        assert isinstance(image, ImageBlock)
        assert image.image == "images/january.png"
        assert image.alt == "January"

    def test_grid_hidden(self, july_2030, a4):
        page = build_month_page(july_2030, [], StyleConfig(show_grid=False), a4)

        assert not any(isinstance(block, GridBlock) for block in page.blocks)

    def test_event_chip_colors(self, july_2030, a4, fourth_of_july, make_event):
        """Test chips use the calendar color, or the primary color when untagged."""
        untagged = make_event("Picnic", datetime(2030, 7, 4, tzinfo=UTC))

        grid = build_month_page(july_2030, [fourth_of_july, untagged], StyleConfig(), a4).blocks[2]
        tagged_chip, untagged_chip = grid.chips[4]

        assert tagged_chip.title == "Independence Day"
        assert tagged_chip.border_color == "#ff0000"
        assert tagged_chip.background_color == "#ff000010"
        assert untagged_chip.border_color == "#6366f1"
        assert tagged_chip.text_style.size == pytest.approx(10)

    def test_accent_off_uses_neutral_colors(self, july_2030, a4, fourth_of_july):
        """Test that disabling accents neutralizes chips and the header border."""
        page = build_month_page(july_2030, [fourth_of_july], StyleConfig(show_accent=False), a4)
        header, _, grid = page.blocks
        chip = grid.chips[4][0]

        assert header.border_color == "transparent"
        assert chip.border_color == "#cbd5e1"
        assert chip.background_color == "#f1f5f9"

    def test_events_hidden(self, july_2030, a4, fourth_of_july):
        """Test that show_events=False leaves cells and chips empty."""
        grid = build_month_page(july_2030, [fourth_of_july], StyleConfig(show_events=False), a4).blocks[2]

        assert grid.chips == {}
        assert all(not cell.events for cell in grid.grid.day_cells())

    def test_chips_only_for_visible_events(self, july_2030, a4, make_event):
        """Test that chips follow the visible cap while cells keep every event."""
        events = [make_event(f"E{i}", datetime(2030, 7, 9, tzinfo=UTC)) for i in range(4)]

        grid = build_month_page(july_2030, events, StyleConfig(), a4).blocks[2]
        cell = grid.grid.day_cells()[8]

        assert [chip.title for chip in grid.chips[9]] == ["E0", "E1"]
        assert isinstance(cell, DayCell)
        assert cell.overflow_count == 2

    def test_grid_lines_and_transparency(self, july_2030, a4):
        style = StyleConfig(grid_show_lines=False, grid_transparent=True)

        grid = build_month_page(july_2030, [], style, a4).blocks[2]

        assert grid.line_color == "transparent"
        assert grid.gap == 0
        assert grid.cell_background == "transparent"
        assert grid.blank_background == "transparent"
        assert grid.label_background == "transparent"

    def test_strip_grid(self, july_2030, a4):
        grid = build_month_page(july_2030, [], StyleConfig(grid_rows=2, grid_height=300), a4).blocks[2]

        assert grid.grid.grid_rows == 2
        assert grid.grid.columns == 16
        assert grid.height == pytest.approx(300)

    def test_render_tree_serializes(self, july_2030, a4, fourth_of_july):
        """Test that the whole tree dumps to JSON-compatible data."""
        page = build_month_page(july_2030, [fourth_of_july], StyleConfig(), a4)

        data = page.model_dump(mode="json")

        assert data["blocks"][2]["kind"] == "grid"
        day_four = next(
            cell for cell in data["blocks"][2]["grid"]["cells"] if cell["kind"] == "day" and cell["day"] == 4
        )
        assert day_four["events"][0]["start"]["value"] == "2030-07-04T00:00:00+00:00"
