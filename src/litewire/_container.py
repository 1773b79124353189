from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from ._errors import (
    ErrorCode,
    FactoryExecutionError,
    NotFoundError,
    RegistrationError,
    ResolutionError,
    ValidationError,
)
from ._injection import InjectionDescriptor, describe, injectable_parameters, is_injectable
from ._registry import ContainerDirectory
from ._token import describe_key, is_absent


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Sequence

    T = TypeVar("T")


class RegistrationKind(Enum):
    INSTANCE = "instance"
    CONSTRUCTOR = "constructor"
    FACTORY = "factory"


@dataclass
class Registration:
    kind: RegistrationKind
    provider: Any
    instance: Any = None
    resolved: bool = False  # instance is memoized


@dataclass(frozen=True)
class ResolutionContext:
    """Handed to dynamic factories so they can pull their own dependencies."""

    container: Container

    def get(self, token: Hashable) -> Any:
        return self.container.get(token)


class Container:
    """Token-keyed service container.

    - register instances, injectable classes or factory functions
    - resolve classes through constructor injection (see `litewire.injectable`)
    - constructors and factories run once; their result is memoized
    - named containers are listed in a `ContainerDirectory` so that classes can
      be resolved by the container that owns them.
    """

    def __init__(
        self,
        name: Hashable | None = None,
        *,
        directory: ContainerDirectory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registrations: dict[Any, Registration] = {}
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger(__name__)
        self._name = name
        self._directory = directory if directory is not None else ContainerDirectory(logger=logger)

        if not is_absent(name):
            self._directory.register(name, self)

    @property
    def name(self) -> Hashable | None:
        return self._name

    @property
    def directory(self) -> ContainerDirectory:
        return self._directory

    def register(self, token: Hashable, impl: Any) -> None:
        """Register an instance, an injectable class or a factory function.

        - injectable class (see `injectable`): resolved on first `get`
        - other callable: called once with a `ResolutionContext`
        - anything else, including non-injectable classes: returned as is.

        Instances that define `__call__` count as factories and get called on
        the first `get`. Use `register_instance` to store such an object itself.

        Example:
          container.register(CONFIG, {"api_url": "x"})
          container.register(WIDGET, Widget)
          container.register(CLIENT, lambda ctx: Client(ctx.get(CONFIG)))

        """
        self._add(token, impl, _classify(impl))

    def register_instance(self, token: Hashable, instance: object) -> None:
        """Register a value as is, even if it is callable."""
        self._add(token, instance, RegistrationKind.INSTANCE)

    def register_many(self, tokens: Sequence[Hashable], implementations: Mapping[Hashable, Any]) -> None:
        """Register every token that has an entry in `implementations`.

        Tokens without an entry are skipped with a warning.
        """
        _require_sequence(tokens, "Tokens")
        if not isinstance(implementations, Mapping):
            msg = f"Implementations must be a mapping, got {type(implementations).__name__}"
            raise ValidationError(msg, code=ErrorCode.NOT_A_MAPPING, source="Container")

        self._logger.debug("Attempting to register %d dependencies", len(tokens))

        registered = 0
        for token in tokens:
            if token not in implementations:
                self._logger.warning(
                    "Token %s provided in tokens but missing in implementations. Skipping.", describe_key(token)
                )
                continue
            self.register(token, implementations[token])
            registered += 1

        self._logger.debug("%d dependencies registered", registered)

    def get(self, token: Hashable) -> Any:
        """Return the instance registered under `token`.

        Instances are returned as registered. Classes and factories are
        resolved on the first call and the result is reused afterwards.
        """
        if is_absent(token):
            msg = "Token cannot be None or empty"
            raise ValidationError(msg, code=ErrorCode.TOKEN_REQUIRED, source="Container")

        label = describe_key(token)

        with self._lock:
            reg = self._registrations.get(token)

            if reg is None:
                self._logger.warning('Dependency not found for token "%s"', label)
                msg = f'Dependency not found for token "{label}"'
                raise NotFoundError(
                    msg, code=ErrorCode.DEPENDENCY_NOT_FOUND, context={"token": label}, source="Container"
                )

            if reg.resolved:
                return reg.instance

            if reg.kind is RegistrationKind.FACTORY:
                instance = self._execute_factory(label, reg.provider)
            else:
                instance = self._resolve_constructor(label, reg.provider)

            reg.instance = instance
            reg.resolved = True
            return instance

    def get_all(self) -> list[Any]:
        """Resolve every registered token, in registration order."""
        with self._lock:
            tokens = list(self._registrations)
            return [self.get(token) for token in tokens]

    def get_many(self, tokens: Sequence[Hashable]) -> list[Any]:
        """Resolve `tokens` in order; the first failure propagates."""
        _require_sequence(tokens, "Tokens")

        self._logger.debug("Getting %d dependencies by token", len(tokens))
        return [self.get(token) for token in tokens]

    def has(self, token: Hashable) -> bool:
        if is_absent(token):
            return False
        return token in self._registrations

    def unregister(self, token: Hashable) -> None:
        if is_absent(token):
            msg = "Token cannot be None or empty"
            raise ValidationError(msg, code=ErrorCode.TOKEN_REQUIRED, source="Container")

        with self._lock:
            removed = self._registrations.pop(token, None) is not None

        if removed:
            self._logger.debug("Dependency unregistered: %s", describe_key(token))
        else:
            self._logger.debug("Dependency not found for unregistering: %s", describe_key(token))

    def unregister_many(self, tokens: Sequence[Hashable]) -> None:
        _require_sequence(tokens, "Tokens")

        for token in tokens:
            self.unregister(token)

    def clear(self) -> None:
        with self._lock:
            self._registrations.clear()
        self._logger.debug("Container cleared")

    def resolve(self, cls: type[T]) -> T:
        """Instantiate an injectable class with its dependencies injected.

        Dependencies are fetched from the container that owns `cls` (named in
        its `injectable` marker), looked up in this container's directory.
        The caller is responsible for memoizing the result.
        """
        class_name = getattr(cls, "__qualname__", repr(cls))
        self._logger.debug("Resolving class: %s", class_name)

        descriptor = describe(cls)
        if descriptor is None:
            msg = f"Class {class_name} is not marked as injectable."
            raise ResolutionError(
                msg, code=ErrorCode.CLASS_NOT_INJECTABLE, context={"class_name": class_name}, source="Container"
            )

        owner = describe_key(descriptor.container)
        target = self._directory.get(descriptor.container)
        if target is None:
            msg = (
                f'Container with name "{owner}" not found for resolving {class_name}. '
                "Ensure this container is created before resolving dependents."
            )
            raise ResolutionError(
                msg,
                code=ErrorCode.CONTAINER_NOT_FOUND,
                context={"class_name": class_name, "container_name": owner},
                source="Container",
            )

        args, kwargs = self._resolve_arguments(cls, class_name, descriptor, target)

        self._logger.debug("Instantiating %s with %d resolved arguments", class_name, len(args) + len(kwargs))
        try:
            instance = cls(*args, **kwargs)
        except Exception as e:
            self._logger.error("Error during instantiation of %s: %s", class_name, e)
            msg = f"Failed to instantiate class {class_name}. Check constructor implementation."
            raise ResolutionError(
                msg, code=ErrorCode.INSTANTIATION_FAILED, context={"class_name": class_name}, source="Container"
            ) from e

        self._logger.info("Successfully resolved and instantiated %s.", class_name)
        return instance

    def _add(self, token: Hashable, impl: Any, kind: RegistrationKind) -> None:
        if is_absent(token):
            msg = "Token cannot be None or empty"
            raise ValidationError(msg, code=ErrorCode.INVALID_TOKEN, source="Container")

        label = describe_key(token)
        self._logger.debug("Registering %s with token: %s", kind.value, label)

        with self._lock:
            if token in self._registrations:
                msg = f'Dependency already exists in container for token "{label}"'
                raise RegistrationError(
                    msg, code=ErrorCode.DUPLICATE_TOKEN, context={"token": label}, source="Container"
                )

            reg = Registration(kind=kind, provider=impl)
            if kind is RegistrationKind.INSTANCE:
                reg.instance = impl
                reg.resolved = True
            self._registrations[token] = reg

    def _execute_factory(self, label: str, factory: Callable[[ResolutionContext], Any]) -> Any:
        self._logger.debug("Token %s corresponds to a dynamic factory. Executing...", label)
        try:
            return factory(ResolutionContext(container=self))
        except Exception as e:
            self._logger.error("Failed to execute factory for token %s: %s", label, e)
            msg = f"Failed to create dependency from factory for token {label}"
            raise FactoryExecutionError(
                msg, code=ErrorCode.FACTORY_EXECUTION_FAILED, context={"token": label}, source="Container"
            ) from e

    def _resolve_constructor(self, label: str, cls: type) -> Any:
        self._logger.debug("Token %s corresponds to injectable constructor %s. Resolving...", label, cls.__name__)
        try:
            return self.resolve(cls)
        except Exception as e:
            self._logger.error("Failed to resolve constructor for token %s: %s", label, e)
            msg = f'Failed to resolve dependency for token "{label}"'
            raise ResolutionError(
                msg, code=ErrorCode.DEPENDENCY_RESOLUTION_FAILED, context={"token": label}, source="Container"
            ) from e

    def _resolve_arguments(
        self,
        cls: type,
        class_name: str,
        descriptor: InjectionDescriptor,
        target: Container,
    ) -> tuple[list[Any], dict[str, Any]]:
        params = injectable_parameters(cls)
        if params is None:
            # no introspectable signature: the descriptor alone defines the arity
            count = max(descriptor.tokens, default=-1) + 1
            self._logger.warning(
                "Constructor signature unavailable for %s, injecting %d positional arguments from its descriptor",
                class_name,
                count,
            )
            params = [inspect.Parameter(f"arg{i}", inspect.Parameter.POSITIONAL_ONLY) for i in range(count)]

        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for index, p in enumerate(params):
            token = descriptor.tokens.get(index)

            if token is None:
                msg = (
                    f"Constructor parameter at index {index} for class {class_name} has no injection token. "
                    "All constructor parameters must be injected."
                )
                raise ResolutionError(
                    msg,
                    code=ErrorCode.MISSING_INJECT_DECORATOR,
                    context={"class_name": class_name, "parameter_index": index},
                    source="Container",
                )

            value = self._resolve_parameter(target, token, class_name, index, descriptor.container)
            if p.kind is p.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[p.name] = value

        return args, kwargs

    def _resolve_parameter(
        self,
        target: Container,
        token: Hashable,
        class_name: str,
        index: int,
        owner: Hashable,
    ) -> Any:
        label = describe_key(token)
        self._logger.debug("Resolving dependency for param %d of %s using token: %s", index, class_name, label)
        try:
            return target.get(token)
        except Exception as e:
            context = {
                "class_name": class_name,
                "dependency_token": label,
                "parameter_index": index,
                "target_container": describe_key(owner),
            }
            self._logger.error(
                "Failed to get dependency for token %s from container %s while resolving %s",
                label,
                describe_key(owner),
                class_name,
                extra={"context": context},
            )
            msg = f"Failed to resolve dependency [{label}] for parameter {index} of class {class_name}."
            raise ResolutionError(
                msg, code=ErrorCode.DEPENDENCY_RESOLUTION_FAILED, context=context, source="Container"
            ) from e


def _classify(impl: Any) -> RegistrationKind:
    if inspect.isclass(impl):
        return RegistrationKind.CONSTRUCTOR if is_injectable(impl) else RegistrationKind.INSTANCE
    if callable(impl):
        return RegistrationKind.FACTORY
    return RegistrationKind.INSTANCE


def _require_sequence(value: object, label: str) -> None:
    if not isinstance(value, (list, tuple)):
        msg = f"{label} must be a list or tuple, got {type(value).__name__}"
        raise ValidationError(msg, code=ErrorCode.NOT_A_SEQUENCE, source="Container")
