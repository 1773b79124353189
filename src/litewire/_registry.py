from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._errors import ErrorCode, RegistrationError, ValidationError
from ._token import describe_key, is_absent


if TYPE_CHECKING:
    from ._container import Container


T = TypeVar("T")

_GET_ALL = ("getAll",)


class Registry(Generic[T]):
    """Named item store with cached bulk queries.

    - items are plain values or classes, keyed by a non-empty name
    - `get_all` / `get_many` return tuples, cached until the next mutation
    - every register/unregister/clear drops the whole query cache.
    """

    _source = "Registry"

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._items: dict[Hashable, T] = {}
        self._cache: dict[tuple[Any, ...], tuple[T, ...]] = {}
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger(__name__)

    def register(self, name: Hashable, item: T) -> None:
        if is_absent(name):
            msg = "Name cannot be empty"
            raise ValidationError(msg, code=ErrorCode.NAME_REQUIRED, source=self._source)

        if item is None:
            msg = "Item cannot be None"
            raise ValidationError(
                msg, code=ErrorCode.INVALID_ITEM, context={"name": describe_key(name)}, source=self._source
            )

        self._logger.debug("Registering item with name: %s", describe_key(name))

        with self._lock:
            if name in self._items:
                msg = f"Item {describe_key(name)!r} already exists in registry"
                raise RegistrationError(
                    msg, code=ErrorCode.ITEM_ALREADY_EXISTS, context={"name": describe_key(name)}, source=self._source
                )
            self._items[name] = item
            self._clear_cache()

    def register_many(self, items: Mapping[Hashable, T | None]) -> None:
        """Register every name/item pair; pairs without an item are skipped.

        Stops at the first failing pair. Pairs registered before it stay registered.
        """
        if not isinstance(items, Mapping):
            msg = f"Items must be a mapping, got {type(items).__name__}"
            raise ValidationError(msg, code=ErrorCode.NOT_A_MAPPING, source=self._source)

        self._logger.debug("Registering %d items", len(items))

        registered = 0
        for name, item in items.items():
            if item is None:
                continue
            self.register(name, item)
            registered += 1

        self._logger.debug("%d items registered", registered)

    def get(self, name: Hashable) -> T | None:
        if is_absent(name):
            self._logger.warning("Attempted to get item with empty name")
            return None

        item = self._items.get(name)
        self._logger.debug("Item %s: %s", "found" if item is not None else "not found", describe_key(name))
        return item

    def get_all(self) -> tuple[T, ...]:
        with self._lock:
            cached = self._cache.get(_GET_ALL)
            if cached is not None:
                self._logger.debug("Cache hit for getAll query")
                return cached

            result = tuple(self._items.values())
            self._cache[_GET_ALL] = result
            self._logger.debug("Cached result for getAll query with %d items", len(result))
            return result

    def get_many(self, names: Sequence[Hashable]) -> tuple[T, ...]:
        """Return the registered items among `names`, in the order given.

        Each distinct ordered sequence of names is cached separately.
        """
        self._require_sequence(names, "Names")

        key = ("getMany", *names)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._logger.debug("Cache hit for getMany query of %d names", len(names))
                return cached

            result = tuple(item for item in map(self.get, names) if item is not None)
            self._cache[key] = result
            self._logger.debug("Cached getMany result: %d of %d names found", len(result), len(names))
            return result

    def has(self, name: Hashable) -> bool:
        if is_absent(name):
            return False
        return name in self._items

    def unregister(self, name: Hashable) -> None:
        if is_absent(name):
            msg = "Name cannot be empty"
            raise ValidationError(msg, code=ErrorCode.NAME_REQUIRED, source=self._source)

        with self._lock:
            removed = self._items.pop(name, None) is not None
            self._clear_cache()

        if removed:
            self._logger.debug("Item unregistered: %s", describe_key(name))
        else:
            self._logger.debug("Item not found for unregistering: %s", describe_key(name))

    def unregister_many(self, names: Sequence[Hashable]) -> None:
        self._require_sequence(names, "Names")

        for name in names:
            self.unregister(name)

        self._logger.debug("%d items unregistered", len(names))

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._clear_cache()
        self._logger.debug("Registry cleared")

    def _clear_cache(self) -> None:
        self._cache.clear()

    def _require_sequence(self, value: object, label: str) -> None:
        if not isinstance(value, (list, tuple)):
            msg = f"{label} must be a list or tuple, got {type(value).__name__}"
            raise ValidationError(msg, code=ErrorCode.NOT_A_SEQUENCE, source=self._source)


class ContainerDirectory(Registry["Container"]):
    """Name -> Container map shared by containers that resolve across each other.

    Containers add themselves on construction; entries leave only through `unregister`.
    """

    _source = "ContainerDirectory"
