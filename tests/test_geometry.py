"""Tests for the coordinate mapper (selection.geometry)."""

import pytest

from cultimap.selection.geometry import GridLayout, GridPoint, gap_for_cell_size
from cultimap.utils.exceptions import ValidationError


class TestGap:
    def test_small_cells_use_one_pixel_gap(self):
        assert gap_for_cell_size(15) == 1
        assert gap_for_cell_size(39) == 1

    def test_threshold_and_above_use_four_pixel_gap(self):
        assert gap_for_cell_size(40) == 4
        assert gap_for_cell_size(120) == 4


class TestGridLayout:
    def test_offset_and_stride_at_80(self):
        layout = GridLayout(cell_size=80)
        # header 40 + padding 16 + border 1 + gap 4
        assert layout.offset == 61
        assert layout.stride == 84

    def test_offset_and_stride_at_20(self):
        layout = GridLayout(cell_size=20)
        assert layout.offset == 58
        assert layout.stride == 21

    def test_first_cell(self):
        layout = GridLayout(cell_size=80)
        assert layout.raw_cell_at(61, 61) == (0, 0)
        assert layout.raw_cell_at(144, 144) == (0, 0)
        assert layout.raw_cell_at(145, 145) == (1, 1)

    def test_header_area_gives_negative_indices(self):
        layout = GridLayout(cell_size=80)
        assert layout.raw_cell_at(0, 0) == (-1, -1)
        assert layout.raw_cell_at(10, 200) == (1, -1)

    def test_far_outside_overflows(self):
        layout = GridLayout(cell_size=80)
        row, col = layout.raw_cell_at(10_000, 10_000)
        assert row > 100 and col > 100

    def test_cell_at_clamps_to_grid(self):
        layout = GridLayout(cell_size=80)
        assert layout.cell_at(0, 0, 10, 10) == GridPoint(0, 0)
        assert layout.cell_at(10_000, 10_000, 10, 10) == GridPoint(9, 9)

    def test_cell_at_on_empty_grid(self):
        layout = GridLayout(cell_size=80)
        assert layout.cell_at(500, 500, 0, 0) == GridPoint(0, 0)

    def test_is_inside(self):
        layout = GridLayout(cell_size=80)
        assert layout.is_inside(70, 70, 10, 10)
        assert not layout.is_inside(10, 70, 10, 10)
        assert not layout.is_inside(10_000, 70, 10, 10)

    @pytest.mark.parametrize("cell_size", [15, 20, 39, 40, 50, 80, 120])
    @pytest.mark.parametrize("row,col", [(0, 0), (0, 9), (3, 7), (9, 9)])
    def test_cell_center_maps_back_to_cell(self, cell_size, row, col):
        layout = GridLayout(cell_size=cell_size)
        x, y = layout.cell_center(row, col)
        assert layout.raw_cell_at(x, y) == (row, col)

    def test_deterministic(self):
        layout = GridLayout(cell_size=50)
        assert layout.raw_cell_at(333.3, 777.7) == layout.raw_cell_at(333.3, 777.7)

    def test_content_size(self):
        layout = GridLayout(cell_size=80)
        width, height = layout.content_size(2, 3)
        assert width == 61 + 3 * 84 + 17
        assert height == 61 + 2 * 84 + 17

    def test_with_cell_size_keeps_chrome(self):
        layout = GridLayout(cell_size=80, header_size=30)
        smaller = layout.with_cell_size(20)
        assert smaller.cell_size == 20
        assert smaller.header_size == 30
        assert smaller.gap == 1

    def test_non_positive_cell_size_raises(self):
        with pytest.raises(ValidationError):
            GridLayout(cell_size=0)


class TestGridPoint:
    def test_negative_raises(self):
        with pytest.raises(ValidationError):
            GridPoint(-1, 0)
