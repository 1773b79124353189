from litewire import Factory, Registry, create_registry, create_registry_and_factory


def test_create_registry_without_items_is_empty():
    registry = create_registry()

    assert isinstance(registry, Registry)
    assert registry.get_all() == ()


def test_create_registry_with_items():
    registry = create_registry({"std-dev": {"name": "std-dev", "cpu": 2}, "skipped": None})

    assert registry.get_many(["std-dev", "missing"]) == ({"name": "std-dev", "cpu": 2},)
    assert not registry.has("skipped")


def test_create_registry_and_factory_wires_transformer():
    registry, factory = create_registry_and_factory(
        {"item1": {"name": "item1", "value": 10}},
        lambda t: {**t, "value": t["value"] * 2},
    )

    assert isinstance(factory, Factory)
    assert factory.get_registry() is registry
    assert factory.create("item1") == {"name": "item1", "value": 20}
