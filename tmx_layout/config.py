"""Loader configuration"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass
class LoaderConfig:
    """
    Settings shared by every load performed with one TiledParser.

    atlas_prefix:
        Prepended to the tileset name to form its atlas name; tile images
        are looked up by file stem inside that atlas
        ("Tiles/" + "summer" + "/grass" -> "Tiles/summer/grass").
    search_paths:
        Directories where documents named by load_layout() and external
        tilesets (.tsx) are looked up, in order.
    map_extension:
        Appended to names given without an extension.
    """
    atlas_prefix: str = ""
    search_paths: List[Path] = field(default_factory=lambda: [Path(".")])
    map_extension: str = ".tmx"

    def __post_init__(self):
        self.search_paths = [Path(p) for p in self.search_paths]

    @classmethod
    def for_directory(cls, directory: Union[str, Path], atlas_prefix: str = "") -> 'LoaderConfig':
        """Configuration searching a single directory."""
        return cls(atlas_prefix=atlas_prefix, search_paths=[Path(directory)])
