#!/usr/bin/env python3

"""
TMX Layout - inspect how a Tiled map loads

Usage:
    python -m tmx_layout <map.tmx> [obstacle-layer ...] [--prefix PREFIX] [-v]

Textures are looked up as image files under the map directory, at
PREFIX + tileset name + "/" + image stem. The listed layers (all tile
layers by default) are used as obstacles for the navigation graph summary.
"""

import logging
import sys
from pathlib import Path

from .config import LoaderConfig
from .errors import LayoutError
from .graph import build_graph
from .parser import TiledParser
from .textures import TextureAtlas


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = False
    if '-v' in args:
        args.remove('-v')
        verbose = True

    prefix = ""
    if '--prefix' in args:
        index = args.index('--prefix')
        if index + 1 >= len(args):
            print("Error: --prefix needs a value")
            return 1
        prefix = args[index + 1]
        del args[index:index + 2]

    if not args:
        print(__doc__)
        return 1

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)-7s %(name)s: %(message)s")

    source_path = Path(args[0])
    obstacle_layers = args[1:] or None

    config = LoaderConfig.for_directory(source_path.parent, atlas_prefix=prefix)
    parser = TiledParser(TextureAtlas(source_path.parent), config)

    try:
        layout = parser.load_file(source_path)
    except LayoutError as e:
        print(f"Error: {e}")
        return 1

    geometry = layout.geometry
    print(f"Map: {geometry.columns}x{geometry.rows} cells, "
          f"tiles {geometry.tile_width}x{geometry.tile_height}, {geometry.orientation.name}")
    for layer in layout.layers:
        tileset = layer.tileset.name if layer.tileset else "-"
        print(f"  layer {layer.name!r}: {layer.tile_count} tiles from tileset {tileset!r}")
    for group in layout.object_groups:
        print(f"  object group {group.name!r}: {len(group.objects)} objects")

    graph = build_graph(layout, layer_names=obstacle_layers)
    print(f"Navigation graph: {graph.number_of_nodes()} cells, {graph.number_of_edges()} edges")

    if layout.warnings:
        print(f"{len(layout.warnings)} warnings")
    return 0


if __name__ == "__main__":
    sys.exit(main())
