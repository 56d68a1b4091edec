import pytest

from tmx_layout import BaseGrid, MapGeometry, ObjectGroup, Orientation, TileLayer
from tmx_layout.assembler import LayoutAssembler


@pytest.fixture
def geometry():
    return MapGeometry(columns=4, rows=3, tile_width=32, tile_height=16,
                       orientation=Orientation.ISOMETRIC)


def test_layers_come_before_object_groups(geometry):
    base_grid = BaseGrid(geometry)
    first, second = TileLayer(geometry, name="first"), TileLayer(geometry, name="second")
    objects = ObjectGroup(name="objects")

    layout = LayoutAssembler.finalize(base_grid, [first, second], [objects])

    assert base_grid.children == [first, second, objects]
    assert layout.layers == [first, second]
    assert layout.object_groups == [objects]
    assert layout.orientation is Orientation.ISOMETRIC


def test_orientation_mismatch(geometry):
    with pytest.raises(ValueError):
        LayoutAssembler.finalize(BaseGrid(geometry), [], [], Orientation.GRID)


def test_build_carries_warnings(geometry):
    assembler = LayoutAssembler()
    assembler.add_object_group(ObjectGroup(name="spawns"))
    assembler.add_layer(TileLayer(geometry, name="ground"))

    layout = assembler.build(BaseGrid(geometry), ["careful"])

    assert [c.name for c in layout.base_grid.children] == ["ground", "spawns"]
    assert layout.warnings == ["careful"]
    assert layout.number_of_columns == 4
    assert layout.number_of_rows == 3
