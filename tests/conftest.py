import pytest

from tmx_layout import LoaderConfig, TextureCache, TiledParser


SIZES = {"grass": (16, 16), "water": (16, 16), "tree": (16, 32)}


@pytest.fixture
def textures():
    """The same three images in the atlases of the tilesets tests use."""
    cache = TextureCache()
    for atlas in ("terrain", "t", "a", "b"):
        for stem, (width, height) in SIZES.items():
            cache.add(f"{atlas}/{stem}", width, height)
    return cache


@pytest.fixture
def parser(textures):
    return TiledParser(textures)


@pytest.fixture
def make_map():
    """Wrap element text into a <map> document (bytes)."""

    def _make(body="", width=2, height=2, tilewidth=16, tileheight=16,
              orientation="orthogonal"):
        attrs = f'width="{width}" height="{height}" tilewidth="{tilewidth}" tileheight="{tileheight}"'
        if orientation is not None:
            attrs += f' orientation="{orientation}"'
        return f'<?xml version="1.0" encoding="UTF-8"?>\n<map {attrs}>{body}</map>'.encode()

    return _make


@pytest.fixture
def tileset_xml():
    """An embedded tileset whose tile i uses images[i]."""

    def _make(firstgid=1, images=("grass",), name="terrain"):
        tiles = "".join(
            f'<tile id="{i}"><image source="tiles/{image}.png"/></tile>'
            for i, image in enumerate(images))
        first = f' firstgid="{firstgid}"' if firstgid is not None else ""
        return f'<tileset{first} name="{name}">{tiles}</tileset>'

    return _make


@pytest.fixture
def layer_xml():
    """A layer with XML-encoded tile data."""

    def _make(gids, name="ground", extra=""):
        tiles = "".join(f'<tile gid="{gid}"/>' for gid in gids)
        return f'<layer name="{name}"{extra}><data>{tiles}</data></layer>'

    return _make


@pytest.fixture
def config_for(tmp_path):
    def _make(prefix=""):
        return LoaderConfig.for_directory(tmp_path, atlas_prefix=prefix)
    return _make
