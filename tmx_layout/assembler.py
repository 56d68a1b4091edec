"""Collects finished layers and object groups into a Layout"""

import logging
from typing import Iterable, List, Optional

from .errors import ParseWarning
from .model import BaseGrid, Layout, ObjectGroup, Orientation, TileLayer

logger = logging.getLogger(__name__)


class LayoutAssembler:
    """
    Receives completed entities from the parser as their elements close and
    builds the final Layout.

    Tile layers are parented under the base grid before object groups;
    inside each class the document order is kept.
    """

    def __init__(self):
        self.layers: List[TileLayer] = []
        self.object_groups: List[ObjectGroup] = []

    def add_layer(self, layer: TileLayer):
        self.layers.append(layer)

    def add_object_group(self, group: ObjectGroup):
        self.object_groups.append(group)

    def build(self, base_grid: BaseGrid,
              warnings: Iterable[ParseWarning] = ()) -> Layout:
        """Finalize with everything collected so far."""
        layout = self.finalize(base_grid, self.layers, self.object_groups,
                               base_grid.geometry.orientation)
        layout.warnings.extend(warnings)
        return layout

    @staticmethod
    def finalize(base_grid: BaseGrid, layers: Iterable[TileLayer],
                 object_groups: Iterable[ObjectGroup],
                 orientation: Optional[Orientation] = None) -> Layout:
        """
        Parent layers then object groups under `base_grid`.

        Raises:
        -------
        ValueError : `orientation` disagrees with the base grid geometry
        """
        if orientation is not None and orientation != base_grid.geometry.orientation:
            raise ValueError(
                f"orientation {orientation.name} doesn't match base grid "
                f"({base_grid.geometry.orientation.name})")

        layers = list(layers)
        object_groups = list(object_groups)

        for layer in layers:
            base_grid.add_child(layer)
        for group in object_groups:
            base_grid.add_child(group)

        logger.debug("assembled %r", base_grid)
        return Layout(base_grid=base_grid, layers=layers, object_groups=object_groups)
