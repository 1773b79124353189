from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from ._factory import Factory
from ._registry import Registry


if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Hashable, Mapping

T = TypeVar("T")


def create_registry(
    items: Mapping[Hashable, T | None] | None = None,
    *,
    logger: logging.Logger | None = None,
) -> Registry[T]:
    """Create a registry pre-populated with `items`."""
    registry: Registry[T] = Registry(logger=logger)
    if items:
        registry.register_many(items)
    return registry


def create_registry_and_factory(
    items: Mapping[Hashable, T | None],
    transformer: Callable[[T], T] | None = None,
    *,
    logger: logging.Logger | None = None,
) -> tuple[Registry[T], Factory[T]]:
    registry = create_registry(items, logger=logger)
    return registry, Factory(registry, transformer=transformer, logger=logger)
