"""
Coordinate conversion helpers

=============================================================================
TWO COORDINATE SPACES
=============================================================================

PIXEL coordinates come straight from the TMX file (object x/y, layer
offsets). Tiled's pixel Y axis points DOWN.

CELL coordinates are (column, row) indices into the layout grid, with row 0
at the BOTTOM of the map (Y up), the convention of the scene graphs the
layout feeds.

The tile stream of a layer is stored top row first, so the first tile of a
layer lands on (0, rows - 1) and the last one on (columns - 1, 0):

    stream:  t0 t1 t2 t3 t4 t5          columns = 3, rows = 2

    row 1  | t0 | t1 | t2 |
    row 0  | t3 | t4 | t5 |

=============================================================================
"""

import math
from typing import Iterator, Optional, Tuple

from .model import MapGeometry, Orientation


def layer_fill_order(columns: int, rows: int) -> Iterator[Tuple[int, int]]:
    """
    Yield (column, row) in the order tiles appear in a layer's data.

    Starts at (0, rows - 1), goes right, then down one row at a time.
    """
    for row in range(rows - 1, -1, -1):
        for column in range(columns):
            yield column, row


def advance_cursor(column: int, row: int, columns: int) -> Tuple[int, int]:
    """Next placement position after (column, row) in raster order."""
    if column >= columns - 1:
        return 0, row - 1
    return column + 1, row


def cell_in_bounds(column: int, row: int, columns: int, rows: int) -> bool:
    return 0 <= column < columns and 0 <= row < rows


def offset_to_position(offsetx: float, offsety: float) -> Tuple[float, float]:
    """
    Turn a TMX layer offset into a node position.

    Tiled offsets grow downward; positions grow upward, so Y flips sign.
    """
    return float(offsetx), 0.0 - float(offsety)


def isometric_pixel_to_cell(x: float, y: float, tile_height: float, rows: int) -> Tuple[int, int]:
    """
    Convert an isometric object's pixel position to a (column, row) cell.

        column = floor(x / tile_height) - 1
        row    = floor(rows - y / tile_height)

    Both axes are divided by the tile HEIGHT. Tiled measures isometric
    object coordinates along the tile diagonal in units of tile height, so
    this is the literal conversion used by the maps in circulation.

    Results outside the map are returned unchanged; callers decide whether
    that deserves a warning.
    """
    column = math.floor(x / tile_height) - 1
    row = math.floor(rows - y / tile_height)
    return column, row


def cell_center(column: int, row: int, geometry: MapGeometry) -> Tuple[float, float]:
    """
    Pixel position of the center of a cell, Y up, origin at the bottom-left
    corner of the map's bounding box.

    For isometric maps the diamond grid is projected the way Tiled draws it,
    with the top corner of cell (0, rows - 1) at the top middle of the box:

                  /\\
                 /  \\        <- (0, rows - 1)
                /\\  /\\
               /  \\/  \\
               \\  /\\  /
                \\/  \\/
                 \\  /        <- (columns - 1, 0)
                  \\/

    Hexagonal maps have no defined cell projection and raise ValueError.
    """
    tw, th = geometry.tile_width, geometry.tile_height

    if geometry.orientation == Orientation.GRID:
        return (column + 0.5) * tw, (row + 0.5) * th

    if geometry.orientation == Orientation.ISOMETRIC:
        # Tiled counts rows from the top
        tiled_row = geometry.rows - 1 - row
        x = (column - tiled_row) * tw / 2 + geometry.rows * tw / 2
        y_down = (column + tiled_row + 1) * th / 2
        total_height = (geometry.columns + geometry.rows) * th / 2
        return x, total_height - y_down

    raise ValueError(f"no cell projection defined for {geometry.orientation.name} maps")


def sprite_anchor(orientation: Orientation, tile_height: float,
                  sprite_height: Optional[float]) -> Tuple[float, float]:
    """
    Anchor point of a tile object's sprite, in unit sprite coordinates.

    Orthogonal tile objects are positioned by their bottom-left corner.
    Isometric ones sit on the center of a cell: the sprite is centered
    horizontally and lifted so its bottom edge lands on the bottom corner of
    the cell's diamond, half a tile below the center.
    """
    if orientation != Orientation.ISOMETRIC:
        return 0.0, 0.0
    if not sprite_height:
        return 0.5, 0.0
    return 0.5, (tile_height / 2) / sprite_height
