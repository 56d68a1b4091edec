"""
TMX Layout - Tiled maps as layered grid models

Requisites:
    pip install numpy pillow networkx
"""

from .config import LoaderConfig
from .coords import isometric_pixel_to_cell, layer_fill_order
from .errors import (LayoutError, MalformedDocumentError, MissingGeometryError,
                     ParseWarning, ResourceNotFoundError, ResourceReadError,
                     ResourceUnavailableError, StructuralError, TileSetMismatchError)
from .events import ElementEvent, iter_events
from .graph import build_graph
from .model import (BaseGrid, Layout, MapGeometry, Node, ObjectGroup, Orientation,
                    Property, SpriteNode, TileDefinition, TileGroup, TileLayer, TileSet)
from .parser import TiledParser
from .registry import TileRegistry
from .textures import TextureAtlas, TextureCache, TextureLookup, TextureRef

__version__ = "1.0.0"
__all__ = [
    "TiledParser",
    "LoaderConfig",
    "Layout",
    "BaseGrid",
    "MapGeometry",
    "Orientation",
    "TileLayer",
    "TileSet",
    "TileGroup",
    "TileDefinition",
    "Property",
    "ObjectGroup",
    "Node",
    "SpriteNode",
    "TileRegistry",
    "TextureLookup",
    "TextureAtlas",
    "TextureCache",
    "TextureRef",
    "ElementEvent",
    "iter_events",
    "build_graph",
    "layer_fill_order",
    "isometric_pixel_to_cell",
    "LayoutError",
    "ResourceUnavailableError",
    "ResourceNotFoundError",
    "ResourceReadError",
    "MalformedDocumentError",
    "StructuralError",
    "MissingGeometryError",
    "TileSetMismatchError",
    "ParseWarning",
]
