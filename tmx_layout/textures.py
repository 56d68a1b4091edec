"""
Texture lookup (uses PIL)

=============================================================================
ROLE
=============================================================================

The parser never touches pixels. Every tileset is an atlas of its own,
named after the tileset. When a tile definition names an image:

    <tileset firstgid="1" name="summer">
        <tile id="0"><image source="tiles/grass.png"/></tile>
    </tileset>

it strips the file down to its stem ("grass") and asks a texture lookup
for that stem inside the tileset's atlas, prepending the configured atlas
prefix:

    lookup.resolve("Tiles/summer/grass") -> TextureRef or None

A tileset without a name has no atlas: the name is prefix + stem.

None means "texture absent": the tile definition is later discarded with a
warning. What a texture really is (GPU handle, sprite sheet region...) is up
to the host; the parser only needs a name and a pixel size.

Two lookups are provided:

- TextureAtlas: images on disk under a root directory, sizes read with PIL.
- TextureCache: textures registered in memory by the host (or by tests).

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextureRef:
    """A resolved texture: its namespaced name, pixel size and origin file."""
    name: str
    width: int = 0
    height: int = 0
    path: Optional[Path] = None

    @property
    def size(self):
        return self.width, self.height


class TextureLookup:
    """Interface of the texture collaborator."""

    def resolve(self, name: str) -> Optional[TextureRef]:
        raise NotImplementedError


class TextureCache(TextureLookup):
    """
    Textures registered in memory.

    ```python
    textures = TextureCache()
    textures.add("Tiles/grass", 32, 32)
    textures.add_image("Tiles/tree", Image.open("tree.png"))
    ```
    """

    def __init__(self, textures: Optional[Dict[str, TextureRef]] = None):
        self._textures: Dict[str, TextureRef] = dict(textures or {})

    def add(self, name: str, width: int = 0, height: int = 0,
            path: Optional[Path] = None) -> TextureRef:
        texture = TextureRef(name=name, width=width, height=height, path=path)
        self._textures[name] = texture
        return texture

    def add_image(self, name: str, image: Image.Image) -> TextureRef:
        """Register a PIL image under `name` using its pixel size."""
        width, height = image.size
        return self.add(name, width, height)

    def resolve(self, name: str) -> Optional[TextureRef]:
        return self._textures.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._textures

    def __len__(self) -> int:
        return len(self._textures)


class TextureAtlas(TextureLookup):
    """
    Texture lookup backed by image files under a root directory.

    A name maps to a relative path without extension:

        root/
        └── Tiles/
            ├── summer/
            │   └── grass.png  <- "Tiles/summer/grass"
            └── winter/
                └── grass.png  <- "Tiles/winter/grass"

    Each file is opened once with PIL to read its size; results (including
    misses) are cached for the lifetime of the atlas.
    """

    DEFAULT_EXTENSIONS = ('.png', '.gif', '.bmp', '.jpg', '.jpeg', '.webp')

    def __init__(self, root: Union[str, Path], extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.root = Path(root)
        self.extensions = tuple(extensions)
        self._cache: Dict[str, Optional[TextureRef]] = {}

    def _find_file(self, name: str) -> Optional[Path]:
        base = self.root / name
        for extension in self.extensions:
            candidate = base.with_name(base.name + extension)
            if candidate.is_file():
                return candidate
        return None

    def resolve(self, name: str) -> Optional[TextureRef]:
        if name in self._cache:
            return self._cache[name]

        texture = None
        path = self._find_file(name)
        if path is None:
            logger.debug("no image for texture '%s' under %s", name, self.root)
        else:
            try:
                with Image.open(path) as image:
                    width, height = image.size
            except OSError as e:
                # PIL.UnidentifiedImageError is an OSError too
                logger.warning("couldn't read texture image %s: %s", path, e)
            else:
                texture = TextureRef(name=name, width=width, height=height, path=path)

        self._cache[name] = texture
        return texture
