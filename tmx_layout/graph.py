"""
Navigation grid graph extraction

=============================================================================
FROM LAYERS TO A GRAPH
=============================================================================

Pathfinding works on a graph with one node per cell and an edge between
4-adjacent cells (no diagonals):

    (0,1) ── (1,1) ── (2,1)
      │        │        │
    (0,0) ── (1,0) ── (2,0)

Any cell holding a tile in one of the OBSTACLE layers is removed from the
graph together with its edges. The obstacle layers are combined into one
boolean mask first (the same idea as a collision map: "is this position
blocked?"), so a cell marked by several layers is removed only once.

Nodes are (column, row) tuples, row 0 at the bottom, like the layout cells.

=============================================================================
"""

import logging
from typing import Iterable, List, Optional, Sequence

import networkx as nx
import numpy as np

from .model import Layout, TileLayer

logger = logging.getLogger(__name__)


def select_layers(layout: Layout, layer_names: Iterable[str]) -> List[TileLayer]:
    """Tile layers of `layout` whose name is in `layer_names`, in layout order."""
    wanted = set(layer_names)
    selected = [layer for layer in layout.layers if layer.name in wanted]

    missing = wanted - {layer.name for layer in selected}
    for name in sorted(missing):
        logger.warning("no tile layer named %r; it won't contribute obstacles", name)
    return selected


def obstacle_mask(layers: Iterable[TileLayer], columns: int, rows: int) -> np.ndarray:
    """Boolean [row, column] mask of cells occupied in any of `layers`."""
    mask = np.zeros((rows, columns), dtype=bool)
    for layer in layers:
        mask |= layer.occupancy
    return mask


def build_graph(layout: Layout, layers: Optional[Sequence[TileLayer]] = None,
                layer_names: Optional[Iterable[str]] = None) -> nx.Graph:
    """
    Build the navigation graph of `layout`.

    Parameters:
    -----------
    layout : Layout
        A finished layout; it is only read.
    layers : sequence of TileLayer, optional
        Layers whose tiles are obstacles.
    layer_names : iterable of str, optional
        Alternative to `layers`: pick the layout's layers by name.

    With neither argument every tile layer of the layout is an obstacle
    layer.

    Returns:
    --------
    networkx.Graph : reachable cells, 4-connected
    """
    if layers is not None and layer_names is not None:
        raise ValueError("pass either layers or layer_names, not both")

    if layer_names is not None:
        layers = select_layers(layout, layer_names)
    elif layers is None:
        layers = layout.layers

    columns, rows = layout.number_of_columns, layout.number_of_rows
    graph = nx.grid_2d_graph(columns, rows)

    mask = obstacle_mask(layers, columns, rows)
    blocked_rows, blocked_columns = np.nonzero(mask)
    graph.remove_nodes_from(zip(blocked_columns.tolist(), blocked_rows.tolist()))

    logger.debug("grid graph %dx%d: %d obstacles, %d reachable cells",
                 columns, rows, len(blocked_rows), graph.number_of_nodes())
    return graph
