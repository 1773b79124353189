from __future__ import annotations

import copy
import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._errors import ErrorCode, NotFoundError
from ._token import describe_key


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from ._registry import Registry


T = TypeVar("T")


class Factory(Generic[T]):
    """Produce instances from the templates stored in a `Registry`.

    - class templates are called with the arguments given to the first
      `create`; that instance is returned as is and cached
    - value templates are transformed (or deep-copied) once and cached
    - later calls return a deep copy of the cached value and ignore their
      arguments until `clear_cache` drops it.

    The cache is not told about registry changes: call `clear_cache` after
    mutating the registry.
    """

    def __init__(
        self,
        registry: Registry[T],
        *,
        transformer: Callable[[T], T] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._transformer = transformer
        self._cache: dict[Hashable, T] = {}
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger(__name__)

    def create(self, name: Hashable, *args: Any, **kwargs: Any) -> T:
        """Create an instance of the template registered under `name`.

        Constructor exceptions and transformer exceptions propagate unchanged.
        """
        label = describe_key(name)
        self._logger.debug("Creating instance: %s", label)

        with self._lock:
            if name in self._cache:
                self._logger.debug("Retrieved item from cache: %s", label)
                return copy.deepcopy(self._cache[name])

            template = self._registry.get(name)
            if template is None:
                msg = f"Template not found: {label}"
                self._logger.error(msg, extra={"context": {"name": label}})
                raise NotFoundError(msg, code=ErrorCode.TEMPLATE_NOT_FOUND, context={"name": label}, source="Factory")

            if inspect.isclass(template):
                instance = template(*args, **kwargs)
                self._cache[name] = instance
                self._logger.info("Instance created from constructor: %s", label)
                return instance

            if self._transformer is not None:
                produced = self._transformer(template)
            else:
                produced = copy.deepcopy(template)

            self._cache[name] = produced
            self._logger.debug("Created and cached item: %s", label)
            return copy.deepcopy(produced)

    def clear_cache(self, name: Hashable | None = None) -> None:
        with self._lock:
            if name is None:
                self._cache.clear()
                self._logger.debug("Factory cache cleared")
            else:
                self._cache.pop(name, None)
                self._logger.debug("Cache cleared for item: %s", describe_key(name))

    def get_registry(self) -> Registry[T]:
        return self._registry
