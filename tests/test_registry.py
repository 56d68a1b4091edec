from tmx_layout import TextureRef, TileDefinition, TileGroup, TileRegistry, TileSet


def make_group(name):
    return TileGroup(TileDefinition(local_id=0, texture=TextureRef(name, 16, 16)))


def test_resolve_returns_registered_pair():
    registry = TileRegistry()
    tileset = TileSet(name="terrain")
    group = make_group("grass")
    tileset.add_group(group)

    registry.register(5, group, tileset)

    resolved_group, resolved_tileset = registry.resolve(5)
    assert resolved_group is group
    assert resolved_tileset is tileset
    assert registry.texture_of(5).name == "grass"
    assert 5 in registry
    assert len(registry) == 1


def test_unknown_gid():
    registry = TileRegistry()
    assert registry.resolve(1) is None
    assert registry.texture_of(1) is None
    assert 0 not in registry


def test_last_registration_wins():
    registry = TileRegistry()
    first, second = TileSet(name="a"), TileSet(name="b")
    registry.register(1, make_group("grass"), first)
    registry.register(1, make_group("water"), second)

    group, tileset = registry.resolve(1)
    assert tileset is second
    assert group.name == "water"
    assert len(registry) == 1


def test_definition_without_texture_has_no_texture():
    registry = TileRegistry()
    registry.register(3, TileGroup(TileDefinition(local_id=2)), TileSet())
    assert registry.resolve(3) is not None
    assert registry.texture_of(3) is None
