import math

import pytest

from tmx_layout.coords import (advance_cursor, cell_center, cell_in_bounds,
                               isometric_pixel_to_cell, layer_fill_order,
                               offset_to_position, sprite_anchor)
from tmx_layout.model import MapGeometry, Orientation


def test_fill_order_starts_top_left_and_ends_bottom_right():
    order = list(layer_fill_order(3, 2))
    assert order == [(0, 1), (1, 1), (2, 1), (0, 0), (1, 0), (2, 0)]


def test_fill_order_visits_every_cell_once():
    order = list(layer_fill_order(5, 4))
    assert len(order) == 20
    assert len(set(order)) == 20
    assert order[0] == (0, 3)
    assert order[-1] == (4, 0)


def test_advance_cursor_wraps_to_next_row_down():
    assert advance_cursor(0, 1, 2) == (1, 1)
    assert advance_cursor(1, 1, 2) == (0, 0)
    assert advance_cursor(1, 0, 2) == (0, -1)


def test_cell_in_bounds():
    assert cell_in_bounds(0, 0, 2, 2)
    assert cell_in_bounds(1, 1, 2, 2)
    assert not cell_in_bounds(2, 0, 2, 2)
    assert not cell_in_bounds(0, -1, 2, 2)


def test_offset_y_is_inverted():
    assert offset_to_position(4, 8) == (4.0, -8.0)
    assert offset_to_position(0, -3.5) == (0.0, 3.5)


def test_isometric_pixel_to_cell_literal_formula():
    # floor(16/16) - 1 = 0 ; floor(2 - 16/16) = 1
    assert isometric_pixel_to_cell(16, 16, 16, 2) == (0, 1)
    assert isometric_pixel_to_cell(40, 8, 16, 4) == (1, 3)


def test_isometric_pixel_to_cell_reports_out_of_bounds_unchanged():
    column, row = isometric_pixel_to_cell(0, 0, 16, 2)
    assert (column, row) == (-1, 2)
    assert not cell_in_bounds(column, row, 2, 2)


def test_isometric_pixel_to_cell_floors_negative_values():
    assert isometric_pixel_to_cell(-1, 40, 16, 2) == (-2, -1)


def test_cell_center_grid():
    geometry = MapGeometry(4, 3, 32, 16, Orientation.GRID)
    assert cell_center(0, 0, geometry) == (16.0, 8.0)
    assert cell_center(3, 2, geometry) == (112.0, 40.0)


def test_cell_center_isometric():
    geometry = MapGeometry(2, 2, 32, 16, Orientation.ISOMETRIC)
    # top diamond of the map
    assert cell_center(0, 1, geometry) == (32.0, 24.0)
    # bottom diamond
    assert cell_center(1, 0, geometry) == (32.0, 8.0)
    # left and right diamonds share the middle height
    assert cell_center(0, 0, geometry) == (16.0, 16.0)
    assert cell_center(1, 1, geometry) == (48.0, 16.0)


def test_cell_center_hexagonal_is_unsupported():
    geometry = MapGeometry(2, 2, 16, 16, Orientation.HEXAGONAL_FLAT)
    with pytest.raises(ValueError):
        cell_center(0, 0, geometry)


def test_sprite_anchor():
    assert sprite_anchor(Orientation.GRID, 16, 32) == (0.0, 0.0)
    assert sprite_anchor(Orientation.ISOMETRIC, 16, 32) == (0.5, 0.25)
    assert sprite_anchor(Orientation.ISOMETRIC, 16, 0) == (0.5, 0.0)


def test_absent_offset_has_no_negative_zero():
    x, y = offset_to_position(0, 0)
    assert repr((x, y)) == "(0.0, 0.0)"
    assert math.copysign(1.0, y) == 1.0
