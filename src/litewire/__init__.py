"""Service container and template registry.

This package provides a small in-process service container with constructor
injection, plus a named template registry and a factory that instantiates
templates on demand.

Exports:
- `Container`: token-keyed container; memoizes resolved constructors and factories.
- `ContainerDirectory`: name -> Container map used to find the container that owns a class.
- `Token`: opaque, identity-compared registration key.
- `injectable`, `Inject`: mark classes and constructor parameters for injection.
- `Registry`: named item store with cached bulk queries.
- `Factory`: creates instances from registry templates, with optional transformer.
- `WireError` and subclasses: errors carrying a stable `ErrorCode`.
"""

from ._container import Container, Registration, RegistrationKind, ResolutionContext
from ._errors import (
    ErrorCode,
    FactoryExecutionError,
    NotFoundError,
    RegistrationError,
    ResolutionError,
    ValidationError,
    WireError,
)
from ._factory import Factory
from ._helpers import create_registry, create_registry_and_factory
from ._injection import Inject, InjectionDescriptor, describe, injectable
from ._registry import ContainerDirectory, Registry
from ._token import Token


__all__ = [
    "Container",
    "ContainerDirectory",
    "ErrorCode",
    "Factory",
    "FactoryExecutionError",
    "Inject",
    "InjectionDescriptor",
    "NotFoundError",
    "Registration",
    "RegistrationError",
    "RegistrationKind",
    "Registry",
    "ResolutionContext",
    "ResolutionError",
    "Token",
    "ValidationError",
    "WireError",
    "create_registry",
    "create_registry_and_factory",
    "describe",
    "injectable",
]
