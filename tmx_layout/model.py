"""
Layout model produced by the TMX parser

=============================================================================
WHAT ENDS UP IN MEMORY
=============================================================================

A parsed document becomes a small tree of plain objects:

    Layout
    └── BaseGrid                  map geometry (columns, rows, tile size)
        ├── TileLayer "Ground"    columns x rows cells -> TileGroup
        ├── TileLayer "Walls"
        ├── ObjectGroup "Props"   ordered Node / SpriteNode list
        └── ...

Tile layers come first, then object groups, each in document order.

=============================================================================
CELL ADDRESSING
=============================================================================

Cells are addressed by (column, row) with row 0 at the BOTTOM of the map:

    row 1  | (0,1) | (1,1) |     <- first row in the TMX tile stream
    row 0  | (0,0) | (1,0) |     <- last row in the TMX tile stream

Internally a layer stores a numpy int32 array indexed [row, column]. Each
value is the index of a TileGroup inside the layer's tileset, -1 = empty.
Every non-empty cell of a layer refers to the SAME tileset.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .errors import ParseWarning
from .textures import TextureRef

EMPTY_CELL = -1


# =============================================================================
# ORIENTATION
# =============================================================================

class Orientation(Enum):
    """Map projection, keyed by the TMX `orientation` attribute value."""
    GRID = "orthogonal"
    ISOMETRIC = "isometric"
    HEXAGONAL_FLAT = "hexagonal"

    @classmethod
    def from_attribute(cls, value: Optional[str]) -> Optional['Orientation']:
        """Return the orientation for a TMX value, None if unknown or absent."""
        for orientation in cls:
            if orientation.value == value:
                return orientation
        return None


@dataclass(frozen=True)
class MapGeometry:
    """
    Document metadata read from the <map> element.

    Frozen: it is set once and every layer is sized from it.
    """
    columns: int
    rows: int
    tile_width: int
    tile_height: int
    orientation: Orientation = Orientation.GRID

    @property
    def tile_size(self) -> Tuple[int, int]:
        return self.tile_width, self.tile_height

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    @property
    def pixel_size(self) -> Tuple[int, int]:
        """Size of the whole map in pixels for a straight grid."""
        return self.columns * self.tile_width, self.rows * self.tile_height


# =============================================================================
# PROPERTIES
# =============================================================================

@dataclass
class Property:
    """
    Custom property attached to a tile definition.

    XML format:
        <property name="solid" type="bool" value="true"/>
        <property name="damage" type="int" value="10"/>
        <property name="label" value="door"/>    (type defaults to string)

    Types other than int, float and bool (color, file, object, class...)
    keep their raw string value.
    """
    name: str
    type: str = "string"
    value: Any = None

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> 'Property':
        """
        Build a property from a <property> element's attributes.

        Raises:
        -------
        KeyError : `name` or `value` is missing
        ValueError : the value can't be converted to the declared type
        """
        name = attributes['name']
        raw = attributes['value']
        prop_type = attributes.get('type', 'string')

        if prop_type == 'int':
            value = int(raw)
        elif prop_type == 'float':
            value = float(raw)
        elif prop_type == 'bool':
            lowered = raw.strip().lower()
            if lowered in ('true', '1'):
                value = True
            elif lowered in ('false', '0'):
                value = False
            else:
                raise ValueError(f"invalid bool literal {raw!r}")
        else:
            value = raw

        return cls(name=name, type=prop_type, value=value)


# =============================================================================
# TILES AND TILESETS
# =============================================================================

@dataclass
class TileDefinition:
    """
    One tile of a tileset: its local id, texture and custom properties.

    The local id is relative to the tileset; the global id is only known
    while the tileset is being parsed (firstgid + local id).
    """
    local_id: int
    texture: Optional[TextureRef] = None
    properties: Dict[str, Property] = field(default_factory=dict)

    @property
    def user_data(self) -> Dict[str, Any]:
        """Property values keyed by name."""
        return {name: prop.value for name, prop in self.properties.items()}


@dataclass(eq=False)
class TileGroup:
    """The unit a layer cell points at. Wraps a single definition."""
    definition: TileDefinition

    @property
    def name(self) -> Optional[str]:
        texture = self.definition.texture
        return texture.name if texture else None


@dataclass(eq=False)
class TileSet:
    """
    Ordered collection of tile groups sharing one texture namespace.

    Compared by identity: two tilesets with the same name are still two
    different tile sources for the one-tileset-per-layer rule.
    """
    name: str = ""
    orientation: Orientation = Orientation.GRID
    tile_groups: List[TileGroup] = field(default_factory=list)
    # id(group) -> index in tile_groups
    _positions: Dict[int, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        for index, group in enumerate(self.tile_groups):
            self._positions[id(group)] = index

    def add_group(self, group: TileGroup) -> int:
        """Append a group and return its index."""
        self.tile_groups.append(group)
        index = len(self.tile_groups) - 1
        self._positions[id(group)] = index
        return index

    def index_of(self, group: TileGroup) -> int:
        try:
            return self._positions[id(group)]
        except KeyError:
            raise ValueError(
                f"tile group {group.name!r} does not belong to tileset {self.name!r}") from None

    def __repr__(self) -> str:
        return f"TileSet(name={self.name!r}, groups={len(self.tile_groups)})"


# =============================================================================
# TILE LAYER
# =============================================================================

class TileLayer:
    """
    A columns x rows grid of tile placements.

    All placed tiles come from `tileset`. A layer that never received a tile
    has `tileset` None and only empty cells.
    """

    def __init__(self, geometry: MapGeometry, name: Optional[str] = None,
                 tileset: Optional[TileSet] = None,
                 position: Tuple[float, float] = (0.0, 0.0)):
        self.geometry = geometry
        self.name = name
        self.tileset = tileset
        self.position = position

        # [row, column] -> tile group index, EMPTY_CELL when nothing is placed
        self.cells = np.full((geometry.rows, geometry.columns), EMPTY_CELL, dtype=np.int32)

    @property
    def number_of_columns(self) -> int:
        return self.geometry.columns

    @property
    def number_of_rows(self) -> int:
        return self.geometry.rows

    def in_bounds(self, column: int, row: int) -> bool:
        return 0 <= column < self.geometry.columns and 0 <= row < self.geometry.rows

    def set_tile_group(self, group: TileGroup, column: int, row: int):
        """Place `group` at (column, row). The group must belong to the layer's tileset."""
        if self.tileset is None:
            raise ValueError("layer has no tileset; tiles can't be placed")
        self.cells[row, column] = self.tileset.index_of(group)

    def tile_group_at(self, column: int, row: int) -> Optional[TileGroup]:
        """Tile group at (column, row), None when empty or out of bounds."""
        if not self.in_bounds(column, row):
            return None
        index = int(self.cells[row, column])
        if index == EMPTY_CELL:
            return None
        return self.tileset.tile_groups[index]

    def is_occupied(self, column: int, row: int) -> bool:
        return self.tile_group_at(column, row) is not None

    @property
    def occupancy(self) -> np.ndarray:
        """Boolean [row, column] mask of placed tiles."""
        return self.cells != EMPTY_CELL

    @property
    def tile_count(self) -> int:
        return int(np.count_nonzero(self.occupancy))

    def iter_tiles(self) -> Iterator[Tuple[int, int, TileGroup]]:
        """Yield (column, row, group) for every placed tile."""
        rows, columns = np.nonzero(self.occupancy)
        for row, column in zip(rows.tolist(), columns.tolist()):
            yield column, row, self.tileset.tile_groups[int(self.cells[row, column])]

    def __repr__(self) -> str:
        return (f"TileLayer(name={self.name!r}, tileset={self.tileset!r}, "
                f"tiles={self.tile_count}/{self.geometry.cell_count})")


# =============================================================================
# OBJECTS
# =============================================================================

@dataclass
class Node:
    """A free-standing object without a visual."""
    name: Optional[str] = None
    position: Tuple[float, float] = (0.0, 0.0)
    object_id: Optional[int] = None


@dataclass
class SpriteNode(Node):
    """
    A free-standing object drawn with a tile texture.

    anchor is expressed in unit coordinates of the sprite (0..1 on each
    axis, origin at the bottom-left), like the scene graphs that consume it.
    """
    texture: Optional[TextureRef] = None
    size: Tuple[float, float] = (0.0, 0.0)
    anchor: Tuple[float, float] = (0.5, 0.5)


@dataclass
class ObjectGroup:
    """Named, ordered collection of objects positioned by its offset."""
    name: Optional[str] = None
    position: Tuple[float, float] = (0.0, 0.0)
    objects: List[Node] = field(default_factory=list)


# =============================================================================
# BASE GRID AND LAYOUT
# =============================================================================

class BaseGrid:
    """Root container sized to the document geometry; parent of all layers."""

    def __init__(self, geometry: MapGeometry):
        self.geometry = geometry
        self.children: List[Any] = []

    @property
    def number_of_columns(self) -> int:
        return self.geometry.columns

    @property
    def number_of_rows(self) -> int:
        return self.geometry.rows

    def add_child(self, child):
        self.children.append(child)

    def __repr__(self) -> str:
        g = self.geometry
        return (f"BaseGrid({g.columns}x{g.rows}, tile={g.tile_width}x{g.tile_height}, "
                f"{g.orientation.name}, children={len(self.children)})")


@dataclass
class Layout:
    """The document model returned by a successful parse."""
    base_grid: BaseGrid
    layers: List[TileLayer] = field(default_factory=list)
    object_groups: List[ObjectGroup] = field(default_factory=list)
    warnings: List[ParseWarning] = field(default_factory=list)

    @property
    def geometry(self) -> MapGeometry:
        return self.base_grid.geometry

    @property
    def orientation(self) -> Orientation:
        return self.base_grid.geometry.orientation

    @property
    def number_of_columns(self) -> int:
        return self.base_grid.number_of_columns

    @property
    def number_of_rows(self) -> int:
        return self.base_grid.number_of_rows

    def layer_named(self, name: str) -> Optional[TileLayer]:
        """First tile layer called `name`."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def object_group_named(self, name: str) -> Optional[ObjectGroup]:
        for group in self.object_groups:
            if group.name == name:
                return group
        return None
