import pytest

from tmx_layout import (LoaderConfig, ResourceNotFoundError, ResourceReadError,
                        TiledParser)
from tmx_layout.resources import ResourceLocator, read_file

MAP = """<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="orthogonal" width="2" height="2" tilewidth="16" tileheight="16">
 <tileset firstgid="1" source="terrain.tsx"/>
 <layer id="1" name="ground" width="2" height="2">
  <data encoding="csv">
1,2,
2,1
</data>
 </layer>
</map>
"""

TSX = """<?xml version="1.0" encoding="UTF-8"?>
<tileset version="1.10" name="terrain" tilewidth="16" tileheight="16" tilecount="2">
 <tile id="0"><image width="16" height="16" source="tiles/grass.png"/></tile>
 <tile id="1"><image width="16" height="16" source="tiles/water.png"/></tile>
</tileset>
"""


def test_load_layout_by_name(tmp_path, textures, config_for):
    (tmp_path / "level.tmx").write_text(MAP)
    (tmp_path / "terrain.tsx").write_text(TSX)

    layout = TiledParser(textures, config_for()).load_layout("level")

    layer = layout.layer_named("ground")
    assert layer.tileset.name == "terrain"
    assert layer.tile_group_at(0, 1).name == "terrain/grass"
    assert layer.tile_group_at(1, 1).name == "terrain/water"
    assert layer.tile_count == 4
    assert layout.warnings == []


def test_load_file_resolves_tsx_next_to_map(tmp_path, textures):
    maps = tmp_path / "maps"
    maps.mkdir()
    (maps / "level.tmx").write_text(MAP)
    (maps / "terrain.tsx").write_text(TSX)

    layout = TiledParser(textures).load_file(maps / "level.tmx")
    assert layout.layers[0].tile_count == 4


def test_missing_external_tileset_is_a_warning(tmp_path, textures):
    (tmp_path / "level.tmx").write_text(MAP)

    layout = TiledParser(textures).load_file(tmp_path / "level.tmx")

    assert layout.layers[0].tile_count == 0
    assert any("couldn't load external tileset" in w.message for w in layout.warnings)
    assert sum("unassigned tile gid" in w.message for w in layout.warnings) == 4


def test_malformed_external_tileset_is_a_warning(tmp_path, textures):
    (tmp_path / "level.tmx").write_text(MAP)
    (tmp_path / "terrain.tsx").write_text("<tileset name='terrain'><tile id='0'>")

    layout = TiledParser(textures).load_file(tmp_path / "level.tmx")
    assert any("couldn't load external tileset" in w.message for w in layout.warnings)
    assert layout.layers[0].tile_count == 0


def test_missing_document(tmp_path, textures, config_for):
    parser = TiledParser(textures, config_for())
    with pytest.raises(ResourceNotFoundError) as excinfo:
        parser.load_layout("nowhere")
    assert excinfo.value.name == "nowhere.tmx"


def test_missing_file_path(tmp_path, textures):
    with pytest.raises(ResourceNotFoundError):
        TiledParser(textures).load_file(tmp_path / "nowhere.tmx")


def test_unreadable_file(tmp_path):
    with pytest.raises(ResourceReadError):
        read_file(tmp_path)


def test_locator_search_order(tmp_path):
    first, second = tmp_path / "a", tmp_path / "b"
    first.mkdir()
    second.mkdir()
    (second / "level.tmx").write_text("x")
    (first / "other.tmx").write_text("y")

    locator = ResourceLocator([first, second])
    assert locator.locate("level") == second / "level.tmx"
    assert locator.locate("other.tmx") == first / "other.tmx"
    data, path = locator.read("level")
    assert data == b"x"


def test_locator_prefers_base_dir(tmp_path):
    base, shared = tmp_path / "base", tmp_path / "shared"
    base.mkdir()
    shared.mkdir()
    (base / "t.tsx").write_text("base")
    (shared / "t.tsx").write_text("shared")

    locator = ResourceLocator([shared])
    assert locator.locate("t", extension=".tsx", base_dir=base) == base / "t.tsx"
    assert locator.locate("t", extension=".tsx") == shared / "t.tsx"


def test_config_normalizes_paths(tmp_path):
    config = LoaderConfig(search_paths=[str(tmp_path)])
    assert config.search_paths == [tmp_path]
    assert LoaderConfig.for_directory(tmp_path, "Tiles/").atlas_prefix == "Tiles/"


def test_warnings_from_external_tileset_name_the_file(tmp_path, textures):
    (tmp_path / "level.tmx").write_text(MAP)
    (tmp_path / "terrain.tsx").write_text(
        '<tileset name="terrain">'
        '<tile id="0"><image source="tiles/grass.png"/></tile>'
        '<tile id="1"><image source="tiles/lava.png"/></tile>'
        '</tileset>')

    layout = TiledParser(textures).load_file(tmp_path / "level.tmx")

    from_tsx = [w for w in layout.warnings if w.message.startswith("terrain.tsx: ")]
    assert [w.element for w in from_tsx] == ["image", "tile"]
    # ordinals count inside the .tsx: tileset, tile, image, tile, image
    assert from_tsx[0].ordinal == 5
    unassigned = [w for w in layout.warnings if "unassigned tile gid 2" in w.message]
    assert len(unassigned) == 2
    assert not any(w.message.startswith("terrain.tsx") for w in unassigned)
