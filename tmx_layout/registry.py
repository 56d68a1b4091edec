"""Global tile id -> (tile group, tileset) lookup"""

from typing import Dict, Optional, Tuple

from .model import TileGroup, TileSet
from .textures import TextureRef


class TileRegistry:
    """
    Maps global tile ids to the tile group and tileset they were defined in.

    Tilesets register their tiles one by one as each <tile> definition
    closes, under gid = firstgid + local id. The registry does not check
    that tileset id ranges are disjoint: the last registration for a gid
    wins.

    GID 0 is never registered; it means "no tile".
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[TileGroup, TileSet]] = {}

    def register(self, gid: int, tile_group: TileGroup, tileset: TileSet):
        self._entries[gid] = (tile_group, tileset)

    def resolve(self, gid: int) -> Optional[Tuple[TileGroup, TileSet]]:
        return self._entries.get(gid)

    def texture_of(self, gid: int) -> Optional[TextureRef]:
        entry = self._entries.get(gid)
        if entry is None:
            return None
        return entry[0].definition.texture

    def __contains__(self, gid: int) -> bool:
        return gid in self._entries

    def __len__(self) -> int:
        return len(self._entries)
