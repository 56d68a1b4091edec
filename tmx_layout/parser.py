"""
Streaming TMX parser

=============================================================================
HOW THE PARSER WORKS
=============================================================================

The document is never loaded as a tree. ElementTree hands out a flat
sequence of start/end events (see events.py) and a ParserSession reacts to
each one according to a single piece of state, the PARSE CONTEXT:

    Idle ──<tileset>──> InTileSet ──<tile id>──> InTileDefinition
      │                    ^                            │
      │                    └────────────</tile>─────────┘
      ├──<tileset> without firstgid──> SkippedTileSet
      ├──<layer>───────> InLayer        (owns a LayerBuilder + cursor)
      └──<objectgroup>─> InObjectGroup

Only one context is active at a time, so "a tile definition outside a
tileset" or "a layer inside a tileset" simply can't be represented.

Sub-trees the model doesn't cover (collision shapes inside a tile
definition...) switch to an Ignoring context that swallows every event
until the sub-tree closes, then restores what was there before.

=============================================================================
ONE ELEMENT NAME, TWO GRAMMARS
=============================================================================

<tile> means two different things in TMX:

    <tileset firstgid="1" name="terrain">
        <tile id="0">...</tile>           <- DEFINITION (local id)
    </tileset>
    <layer name="Ground">
        <data>
            <tile gid="1"/>               <- PLACEMENT (global id)
        </data>
    </layer>

The only thing telling them apart is whether a tileset is open, so <tile>
dispatches to one of two rules: _define_tile() when the context is
InTileSet, _place_tile() otherwise.

=============================================================================
GLOBAL TILE IDS
=============================================================================

When a tile definition closes it is registered under

    gid = tileset.firstgid + tile.id

and layers reference tiles by that gid. GID 0 is the empty cell. The
firstgid itself only lives in the InTileSet context; once the tileset closes
only the registry entries remain.

=============================================================================
ERRORS
=============================================================================

Two things abort the parse (StructuralError):
- missing or invalid map geometry (MissingGeometryError)
- tiles from two different tilesets in one layer (TileSetMismatchError)

Everything else is recorded as a ParseWarning and skipped: the offending
cell stays empty, the object is dropped, the tileset is ignored...

=============================================================================
"""

import base64
import binascii
import gzip
import logging
import zlib
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .assembler import LayoutAssembler
from .config import LoaderConfig
from .coords import (advance_cursor, cell_center, cell_in_bounds,
                     isometric_pixel_to_cell, offset_to_position, sprite_anchor)
from .errors import (MalformedDocumentError, MissingGeometryError, ParseWarning,
                     ResourceUnavailableError, TileSetMismatchError)
from .events import END, START, ElementEvent, iter_events
from .model import (BaseGrid, Layout, MapGeometry, Node, ObjectGroup,
                    Orientation, Property, SpriteNode, TileDefinition,
                    TileGroup, TileLayer, TileSet)
from .registry import TileRegistry
from .resources import ResourceLocator, read_file
from .textures import TextureCache, TextureLookup

logger = logging.getLogger(__name__)

# Tiled stores flip/rotation flags in the top bits of a gid
GID_FLAG_BITS = 0xF0000000
GID_MASK = 0x0FFFFFFF

IGNORED_ELEMENTS = ('tileoffset', 'animation', 'frame')


# =============================================================================
# PARSE CONTEXTS
# =============================================================================

@dataclass
class Idle:
    """Nothing open (directly under <map>)."""


@dataclass
class InTileSet:
    tileset: TileSet
    firstgid: int


@dataclass
class InTileDefinition:
    parent: InTileSet
    definition: TileDefinition


@dataclass
class SkippedTileSet:
    """A <tileset> that couldn't be used; its tiles are never registered."""


@dataclass
class InLayer:
    builder: 'LayerBuilder'


@dataclass
class InObjectGroup:
    group: ObjectGroup


@dataclass
class Ignoring:
    """Inside a sub-tree that isn't modeled."""
    resume: object
    depth: int = 1


# =============================================================================
# LAYER BUILDER
# =============================================================================

@dataclass
class PendingLayer:
    """A layer that hasn't placed a tile yet, so it has no tile source."""
    name: Optional[str]
    position: Tuple[float, float]

    def allocate(self, geometry: MapGeometry, tileset: Optional[TileSet]) -> TileLayer:
        return TileLayer(geometry, name=self.name, tileset=tileset, position=self.position)


class LayerBuilder:
    """
    Builds one tile layer in two phases.

    1. PENDING: created at <layer>. Knows its name and offset only.
    2. ALLOCATED: the first successful placement creates the TileLayer with
       the placed tile's tileset as the layer's tile source. Every later
       placement must come from that same tileset.

    The placement cursor starts at (0, rows - 1) and walks the grid in
    raster order whether or not a tile is actually placed.
    """

    def __init__(self, geometry: MapGeometry, name: Optional[str],
                 position: Tuple[float, float]):
        self.geometry = geometry
        self.state: Union[PendingLayer, TileLayer] = PendingLayer(name, position)
        self.cursor: Tuple[int, int] = (0, geometry.rows - 1)

        # <data> attributes of the current layer
        self.encoding: Optional[str] = None
        self.compression: Optional[str] = None
        self.flags_reported = False
        self.overflow_reported = False

    @property
    def name(self) -> Optional[str]:
        return self.state.name

    @property
    def cursor_in_bounds(self) -> bool:
        column, row = self.cursor
        return cell_in_bounds(column, row, self.geometry.columns, self.geometry.rows)

    def advance(self):
        self.cursor = advance_cursor(*self.cursor, self.geometry.columns)

    def place(self, group: TileGroup, tileset: TileSet) -> Tuple[int, int]:
        """
        Place `group` at the cursor and return the cell used.

        Raises:
        -------
        TileSetMismatchError : the layer already holds tiles of another tileset
        """
        if isinstance(self.state, PendingLayer):
            self.state = self.state.allocate(self.geometry, tileset)

        layer = self.state
        if layer.tileset is not tileset:
            raise TileSetMismatchError(
                f"all tiles of a layer should come from the same tileset: layer "
                f"{layer.name!r} uses {layer.tileset.name!r}, got a tile from {tileset.name!r}")

        column, row = self.cursor
        layer.set_tile_group(group, column, row)
        return column, row

    def finish(self) -> TileLayer:
        """The built layer; an empty one if nothing was placed."""
        if isinstance(self.state, PendingLayer):
            return self.state.allocate(self.geometry, None)
        return self.state


# =============================================================================
# PARSER SESSION
# =============================================================================

class ParserSession:
    """
    All mutable state of ONE parse: registry, context, cursor, warnings.

    Created by TiledParser.parse() for every document and dropped once the
    Layout is returned, so parses never share state.
    """

    def __init__(self, textures: TextureLookup, atlas_prefix: str = "",
                 resources: Optional[ResourceLocator] = None,
                 base_dir: Optional[Path] = None):
        self.textures = textures
        self.atlas_prefix = atlas_prefix
        self.resources = resources
        self.base_dir = base_dir

        self.registry = TileRegistry()
        self.assembler = LayoutAssembler()
        self.geometry: Optional[MapGeometry] = None
        self.base_grid: Optional[BaseGrid] = None
        self.context = Idle()
        self.warnings: List[ParseWarning] = []
        # Set while the events of an external tileset are replayed
        self.external_source: Optional[str] = None

        self._start_rules = {
            'map': self._start_map,
            'tileset': self._start_tileset,
            'tile': self._start_tile,
            'image': self._start_image,
            'property': self._start_property,
            'layer': self._start_layer,
            'data': self._start_data,
            'objectgroup': self._start_objectgroup,
            'object': self._start_object,
            'group': self._start_group,
        }
        self._end_rules = {
            'tileset': self._end_tileset,
            'tile': self._end_tile,
            'data': self._end_data,
            'layer': self._end_layer,
            'objectgroup': self._end_objectgroup,
        }

    # =========================================================================
    # DRIVER
    # =========================================================================

    def run(self, events: Iterable[ElementEvent]) -> Layout:
        """
        Consume the whole event stream and return the Layout.

        Raises:
        -------
        StructuralError : missing geometry or tileset mismatch
        MalformedDocumentError : the tokenizer failed
        """
        for event in events:
            self.dispatch(event)

        if self.base_grid is None:
            raise MissingGeometryError("document has no <map> element")

        if not isinstance(self.context, Idle):
            self.warn(f"document ended inside {type(self.context).__name__}; "
                      f"unfinished element dropped")

        layout = self.assembler.build(self.base_grid, self.warnings)
        logger.info("parsed %dx%d map: %d tile layers, %d object groups, %d warnings",
                    layout.number_of_columns, layout.number_of_rows,
                    len(layout.layers), len(layout.object_groups), len(self.warnings))
        return layout

    def dispatch(self, event: ElementEvent):
        if isinstance(self.context, Ignoring):
            self._skip(event)
            return

        if event.kind == START:
            if self.geometry is None and event.tag != 'map':
                raise MissingGeometryError(
                    f"<{event.tag}> found before map geometry was defined",
                    event.tag, event.ordinal)
            if event.tag in IGNORED_ELEMENTS:
                self.warn(f"ignored element '{event.tag}'", event)
                return
            rule = self._start_rules.get(event.tag)
        else:
            rule = self._end_rules.get(event.tag)

        if rule is not None:
            rule(event)

    def _skip(self, event: ElementEvent):
        ctx = self.context
        if event.kind == START:
            ctx.depth += 1
            return
        ctx.depth -= 1
        if ctx.depth == 0:
            self.context = ctx.resume

    def _ignore_subtree(self, event: ElementEvent, reason: str):
        self.warn(reason, event)
        self.context = Ignoring(resume=self.context)

    def warn(self, message: str, event: Optional[ElementEvent] = None):
        if self.external_source is not None:
            message = f"{self.external_source}: {message}"
        if event is None:
            warning = ParseWarning(message)
        else:
            warning = ParseWarning(message, event.tag, event.ordinal)
        self.warnings.append(warning)
        logger.warning("%s", warning)

    # =========================================================================
    # <map>
    # =========================================================================

    def _start_map(self, event: ElementEvent):
        if self.geometry is not None:
            self._ignore_subtree(event, "nested <map> element ignored")
            return

        attrs = event.attributes
        columns = self._geometry_value(attrs, 'width', event)
        rows = self._geometry_value(attrs, 'height', event)
        tile_width = self._geometry_value(attrs, 'tilewidth', event)
        tile_height = self._geometry_value(attrs, 'tileheight', event)

        value = attrs.get('orientation')
        orientation = Orientation.from_attribute(value)
        if orientation is None:
            self.warn(f"unsupported orientation {value!r}; will use grid instead", event)
            orientation = Orientation.GRID

        self.geometry = MapGeometry(columns, rows, tile_width, tile_height, orientation)
        self.base_grid = BaseGrid(self.geometry)
        logger.debug("map geometry: %s", self.geometry)

    @staticmethod
    def _geometry_value(attrs: Dict[str, str], key: str, event: ElementEvent) -> int:
        raw = attrs.get(key)
        if raw is None:
            raise MissingGeometryError(f"missing map attribute '{key}'", event.tag, event.ordinal)
        try:
            value = int(raw)
        except ValueError:
            raise MissingGeometryError(
                f"map attribute '{key}' is not an integer: {raw!r}",
                event.tag, event.ordinal) from None
        if value <= 0:
            raise MissingGeometryError(
                f"map attribute '{key}' must be positive, got {value}",
                event.tag, event.ordinal)
        return value

    # =========================================================================
    # <tileset>
    # =========================================================================

    def _start_tileset(self, event: ElementEvent):
        attrs = event.attributes
        try:
            firstgid = int(attrs['firstgid'])
        except (KeyError, ValueError):
            self.warn("invalid tileset definition (missing or invalid 'firstgid'); "
                      "tileset definition will be skipped", event)
            self.context = SkippedTileSet()
            return

        tileset = TileSet(name=attrs.get('name', ''), orientation=self.geometry.orientation)
        self.context = InTileSet(tileset, firstgid)

        source = attrs.get('source')
        if source:
            self._load_external_tileset(source, event)

    def _load_external_tileset(self, source: str, event: ElementEvent):
        """
        Replay the events of a .tsx file inside the current tileset context.

        The .tsx root is itself a <tileset> element; only its name is used,
        its children are dispatched as if they were inline.
        """
        ctx = self.context
        try:
            if self.resources is not None:
                data, _ = self.resources.read(source, extension='.tsx', base_dir=self.base_dir)
            elif self.base_dir is not None:
                data = read_file(self.base_dir / source)
            else:
                self.warn(f"external tileset '{source}' can't be located without a "
                          f"resource locator; tileset will be empty", event)
                return

            self._replay_tileset(data, source, ctx, event)
        except (ResourceUnavailableError, MalformedDocumentError) as e:
            self.warn(f"couldn't load external tileset '{source}': {e}", event)
        finally:
            # Whatever happened inside the .tsx, the outer tileset is open again
            self.context = ctx

    def _replay_tileset(self, data: bytes, source: str, ctx: InTileSet, event: ElementEvent):
        # Ordinals of replayed events count inside the .tsx, warnings name it
        self.external_source = source
        try:
            depth = 0
            for inner in iter_events(data):
                if inner.kind == START:
                    depth += 1
                    if depth == 1:
                        if inner.tag != 'tileset':
                            self.warn(f"root element is <{inner.tag}>, not <tileset>; "
                                      f"tileset will be empty", event)
                            return
                        ctx.tileset.name = inner.attributes.get('name', ctx.tileset.name)
                        continue
                else:
                    depth -= 1
                    if depth == 0:
                        continue
                self.dispatch(inner)
        finally:
            self.external_source = None

    def _end_tileset(self, event: ElementEvent):
        if isinstance(self.context, InTileSet):
            logger.debug("tileset %r registered with %d tiles",
                         self.context.tileset.name, len(self.context.tileset.tile_groups))
        self.context = Idle()

    # =========================================================================
    # <tile>: definition or placement
    # =========================================================================

    def _start_tile(self, event: ElementEvent):
        if isinstance(self.context, InTileSet):
            self._define_tile(event)
        elif isinstance(self.context, SkippedTileSet):
            # Already reported when the tileset opened
            return
        else:
            self._place_tile(event)

    def _define_tile(self, event: ElementEvent):
        try:
            local_id = int(event.attributes['id'])
        except (KeyError, ValueError):
            self._ignore_subtree(event, "missing or invalid property 'id' on tile element; "
                                        "tile definition will be skipped")
            return
        self.context = InTileDefinition(self.context, TileDefinition(local_id))

    def _place_tile(self, event: ElementEvent):
        if not isinstance(self.context, InLayer):
            self.warn("tile placement outside of a layer; tile won't be placed", event)
            return

        raw = event.attributes.get('gid')
        if raw is None:
            builder = self.context.builder
            self.warn(f"missing property 'gid' on tile element; tile at position "
                      f"{builder.cursor} won't be placed", event)
            builder.advance()
            return
        try:
            gid = int(raw)
        except ValueError:
            builder = self.context.builder
            self.warn(f"invalid gid {raw!r}; tile at position {builder.cursor} "
                      f"won't be placed", event)
            builder.advance()
            return

        self._place_gid(gid, event)

    def _place_gid(self, gid: int, event: ElementEvent):
        """Apply one gid at the cursor of the open layer, then advance."""
        builder = self.context.builder
        try:
            if not builder.cursor_in_bounds:
                if not builder.overflow_reported:
                    self.warn(f"more tiles than cells in layer {builder.name!r}; "
                              f"extra tiles won't be placed", event)
                    builder.overflow_reported = True
                return

            if gid & GID_FLAG_BITS:
                if not builder.flags_reported:
                    self.warn(f"tile flip/rotation flags in layer {builder.name!r} "
                              f"are not supported and were ignored", event)
                    builder.flags_reported = True
                gid &= GID_MASK

            if gid == 0:
                return

            entry = self.registry.resolve(gid)
            if entry is None:
                self.warn(f"unassigned tile gid {gid}; tile at position "
                          f"{builder.cursor} won't be placed", event)
                return

            group, tileset = entry
            try:
                builder.place(group, tileset)
            except TileSetMismatchError as e:
                raise TileSetMismatchError(str(e), event.tag, event.ordinal) from None
        finally:
            builder.advance()

    def _end_tile(self, event: ElementEvent):
        ctx = self.context
        if not isinstance(ctx, InTileDefinition):
            return

        self.context = ctx.parent
        definition = ctx.definition
        if definition.texture is None:
            self.warn(f"undefined tile texture for tile id {definition.local_id}; "
                      f"tile definition will be skipped", event)
            return

        group = TileGroup(definition)
        tileset = ctx.parent.tileset
        tileset.add_group(group)
        self.registry.register(ctx.parent.firstgid + definition.local_id, group, tileset)

    # =========================================================================
    # <image> and <property>
    # =========================================================================

    def _start_image(self, event: ElementEvent):
        ctx = self.context
        if isinstance(ctx, InTileSet):
            self.warn("tileset-level image (sprite sheet) is not supported; "
                      "only per-tile images are used", event)
            return
        if not isinstance(ctx, InTileDefinition):
            logger.debug("image outside of a tile definition ignored (#%d)", event.ordinal)
            return

        stem = _texture_stem(event.attributes.get('source'))
        if stem is None:
            self.warn("missing or invalid property 'source' on image element; "
                      "texture will be skipped", event)
            return

        name = _texture_name(self.atlas_prefix, ctx.parent.tileset.name, stem)
        texture = self.textures.resolve(name)
        if texture is None:
            self.warn(f"texture '{name}' couldn't be resolved", event)
            return
        ctx.definition.texture = texture

    def _start_property(self, event: ElementEvent):
        try:
            prop = Property.from_attributes(event.attributes)
        except KeyError:
            self.warn("failed to parse custom property (missing 'name' or 'value'); "
                      "property will be ignored", event)
            return
        except ValueError as e:
            self.warn(f"failed to parse custom property "
                      f"{event.attributes.get('name')!r}: {e}; property will be ignored", event)
            return

        if isinstance(self.context, InTileDefinition):
            self.context.definition.properties[prop.name] = prop
        else:
            self.warn(f"ignored custom property {prop.name!r} "
                      f"(only tile properties are supported)", event)

    # =========================================================================
    # <layer> and <data>
    # =========================================================================

    def _start_layer(self, event: ElementEvent):
        attrs = event.attributes
        position = self._offset(attrs, event)
        self.context = InLayer(LayerBuilder(self.geometry, attrs.get('name'), position))

    def _start_data(self, event: ElementEvent):
        if isinstance(self.context, InLayer):
            builder = self.context.builder
            builder.encoding = event.attributes.get('encoding')
            builder.compression = event.attributes.get('compression')

    def _end_data(self, event: ElementEvent):
        if not isinstance(self.context, InLayer):
            return
        builder = self.context.builder
        if builder.encoding is None:
            # XML encoding: the gids came as <tile> children
            return

        gids = self._decode_data(builder.encoding, builder.compression, event)
        builder.encoding = builder.compression = None
        if gids is None:
            return
        if len(gids) != self.geometry.cell_count:
            self.warn(f"layer {builder.name!r} has {len(gids)} tiles for "
                      f"{self.geometry.cell_count} cells", event)
        for gid in gids:
            self._place_gid(gid, event)

    def _decode_data(self, encoding: str, compression: Optional[str],
                     event: ElementEvent) -> Optional[List[int]]:
        """
        Decode CSV or Base64 tile data into a list of gids.

        Base64 data is a little-endian uint32 per tile, optionally
        compressed with zlib, gzip or zstd. Returns None (after a warning)
        if the data can't be decoded.
        """
        text = (event.text or '').strip()

        if encoding == 'csv':
            try:
                return [int(value) for value in text.replace('\n', '').split(',')
                        if value.strip()]
            except ValueError as e:
                self.warn(f"invalid CSV tile data: {e}; layer data skipped", event)
                return None

        if encoding != 'base64':
            self.warn(f"unsupported tile data encoding {encoding!r}; layer data skipped", event)
            return None

        try:
            raw = base64.b64decode(text, validate=False)
            if compression == 'zlib':
                raw = zlib.decompress(raw)
            elif compression == 'gzip':
                raw = gzip.decompress(raw)
            elif compression == 'zstd':
                raw = _zstd_decompress(raw)
            elif compression:
                self.warn(f"unsupported tile data compression {compression!r}; "
                          f"layer data skipped", event)
                return None
        except (binascii.Error, zlib.error, OSError, EOFError, ValueError) as e:
            self.warn(f"couldn't decode tile data: {e}; layer data skipped", event)
            return None
        except ImportError as e:
            self.warn(f"{e}; layer data skipped", event)
            return None

        if len(raw) % 4:
            self.warn(f"tile data length {len(raw)} is not a multiple of 4; "
                      f"layer data skipped", event)
            return None
        return np.frombuffer(raw, dtype='<u4').tolist()

    def _end_layer(self, event: ElementEvent):
        if not isinstance(self.context, InLayer):
            return
        layer = self.context.builder.finish()
        self.assembler.add_layer(layer)
        self.context = Idle()
        logger.debug("layer %r: %d tiles", layer.name, layer.tile_count)

    # =========================================================================
    # <objectgroup> and <object>
    # =========================================================================

    def _start_objectgroup(self, event: ElementEvent):
        if isinstance(self.context, SkippedTileSet):
            self.context = Ignoring(resume=self.context)
            return
        if isinstance(self.context, (InTileDefinition, InTileSet)):
            # Per-tile collision shapes
            self._ignore_subtree(event, "object group inside a tileset is not supported")
            return
        attrs = event.attributes
        group = ObjectGroup(name=attrs.get('name'), position=self._offset(attrs, event))
        self.context = InObjectGroup(group)

    def _end_objectgroup(self, event: ElementEvent):
        if not isinstance(self.context, InObjectGroup):
            return
        self.assembler.add_object_group(self.context.group)
        self.context = Idle()

    def _start_object(self, event: ElementEvent):
        if not isinstance(self.context, InObjectGroup):
            self.warn("object outside of an object group ignored", event)
            return

        attrs = event.attributes
        try:
            x = float(attrs['x'])
            y = float(attrs['y'])
        except (KeyError, ValueError):
            self.warn("missing or invalid object position; object will be skipped", event)
            return

        position = self._object_position(x, y, event)
        if position is None:
            return

        name = attrs.get('name')
        object_id = _optional_int(attrs.get('id'))
        node = Node(name=name, position=position, object_id=object_id)

        raw_gid = attrs.get('gid')
        if raw_gid is not None:
            node = self._sprite_node(node, raw_gid, attrs, event)

        self.context.group.objects.append(node)

    def _object_position(self, x: float, y: float,
                         event: ElementEvent) -> Optional[Tuple[float, float]]:
        geometry = self.geometry

        if geometry.orientation == Orientation.GRID:
            return x, y

        if geometry.orientation == Orientation.ISOMETRIC:
            column, row = isometric_pixel_to_cell(x, y, geometry.tile_height, geometry.rows)
            if not cell_in_bounds(column, row, geometry.columns, geometry.rows):
                self.warn(f"object at ({x}, {y}) maps to cell ({column}, {row}), "
                          f"outside the {geometry.columns}x{geometry.rows} map", event)
            return cell_center(column, row, geometry)

        self.warn("object placement on hexagonal maps is not supported; "
                  "object will be skipped", event)
        return None

    def _sprite_node(self, node: Node, raw_gid: str, attrs: Dict[str, str],
                     event: ElementEvent) -> Node:
        try:
            gid = int(raw_gid) & GID_MASK
        except ValueError:
            self.warn(f"invalid object gid {raw_gid!r}; object placed without texture", event)
            return node

        texture = self.registry.texture_of(gid)
        if texture is None:
            self.warn(f"unassigned tile gid {gid} on object; "
                      f"object placed without texture", event)
            return node

        width = _optional_float(attrs.get('width'), texture.width)
        height = _optional_float(attrs.get('height'), texture.height)
        anchor = sprite_anchor(self.geometry.orientation, self.geometry.tile_height, height)
        return SpriteNode(name=node.name, position=node.position, object_id=node.object_id,
                          texture=texture, size=(width, height), anchor=anchor)

    # =========================================================================
    # MISC
    # =========================================================================

    def _start_group(self, event: ElementEvent):
        logger.debug("flattening layer group %r (#%d)",
                     event.attributes.get('name'), event.ordinal)

    def _offset(self, attrs: Dict[str, str], event: ElementEvent) -> Tuple[float, float]:
        values = []
        for key in ('offsetx', 'offsety'):
            raw = attrs.get(key, '0')
            try:
                values.append(float(raw))
            except ValueError:
                self.warn(f"invalid {key} {raw!r}; using 0", event)
                values.append(0.0)
        return offset_to_position(*values)


def _texture_stem(source: Optional[str]) -> Optional[str]:
    """'../tiles/grass.png' -> 'grass'"""
    if not source:
        return None
    filename = PurePosixPath(source.replace('\\', '/')).name
    stem = filename.split('.')[0]
    return stem or None


def _texture_name(prefix: str, tileset_name: str, stem: str) -> str:
    """
    Every tileset is its own atlas named prefix + tileset name:

        ("Tiles/", "summer", "grass") -> "Tiles/summer/grass"
        ("Tiles/", "", "grass")       -> "Tiles/grass"
    """
    if not tileset_name:
        return f"{prefix}{stem}"
    return f"{prefix}{tileset_name}/{stem}"


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _optional_float(raw: Optional[str], default: float) -> float:
    if raw is None:
        return float(default)
    try:
        return float(raw)
    except ValueError:
        return float(default)


def _zstd_decompress(raw: bytes) -> bytes:
    # zstd requires an external library (not in stdlib)
    try:
        import zstandard
    except ImportError:
        raise ImportError(
            "zstandard library required for zstd compression. "
            "Install with: pip install zstandard") from None
    return zstandard.ZstdDecompressor().decompressobj().decompress(raw)


# =============================================================================
# PUBLIC ENTRY POINT
# =============================================================================

class TiledParser:
    """
    Converts TMX documents into Layouts.

    ==========================================================================
    USAGE
    ==========================================================================

    ```python
    parser = TiledParser(TextureAtlas("assets"), LoaderConfig(atlas_prefix="Tiles/"))
    layout = parser.load_layout("level1")          # searches level1.tmx
    graph = build_graph(layout, layer_names=["Walls"])
    ```

    The parser itself only holds configuration and collaborators; every
    call to parse() runs in its own ParserSession, so one parser can load
    any number of documents.

    ==========================================================================
    """

    def __init__(self, textures: Optional[TextureLookup] = None,
                 config: Optional[LoaderConfig] = None):
        self.config = config or LoaderConfig()
        self.textures = textures if textures is not None else TextureCache()
        self.resources = ResourceLocator(self.config.search_paths, self.config.map_extension)

    def parse(self, events: Iterable[ElementEvent], base_dir: Optional[Path] = None) -> Layout:
        """
        Build a Layout from an element event stream.

        base_dir is where external tilesets are looked up first.
        """
        session = ParserSession(self.textures, self.config.atlas_prefix,
                                self.resources, base_dir)
        return session.run(events)

    def parse_bytes(self, data: bytes, base_dir: Optional[Path] = None) -> Layout:
        return self.parse(iter_events(data), base_dir)

    def load_file(self, path: Union[str, Path]) -> Layout:
        """
        Load a TMX file by path.

        Raises:
        -------
        ResourceNotFoundError / ResourceReadError : file unavailable
        MalformedDocumentError / StructuralError : file unusable
        """
        path = Path(path)
        layout = self.parse_bytes(read_file(path), base_dir=path.parent)
        logger.info("loaded layout from %s", path)
        return layout

    def load_layout(self, name: str) -> Layout:
        """Find `name` through the configured search paths and load it."""
        data, path = self.resources.read(name)
        layout = self.parse_bytes(data, base_dir=path.parent)
        logger.info("loaded layout '%s' from %s", name, path)
        return layout
