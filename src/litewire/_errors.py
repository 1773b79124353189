from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    # caller input
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_REQUIRED = "TOKEN_REQUIRED"
    INVALID_ITEM = "INVALID_ITEM"
    NAME_REQUIRED = "NAME_REQUIRED"
    NOT_A_SEQUENCE = "NOT_A_SEQUENCE"
    NOT_A_MAPPING = "NOT_A_MAPPING"
    INVALID_TARGET = "INVALID_TARGET"
    # duplicates
    DUPLICATE_TOKEN = "DUPLICATE_TOKEN"
    ITEM_ALREADY_EXISTS = "ITEM_ALREADY_EXISTS"
    # lookups
    DEPENDENCY_NOT_FOUND = "DEPENDENCY_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    # resolution
    CLASS_NOT_INJECTABLE = "CLASS_NOT_INJECTABLE"
    CONTAINER_NOT_FOUND = "CONTAINER_NOT_FOUND"
    MISSING_INJECT_DECORATOR = "MISSING_INJECT_DECORATOR"
    DEPENDENCY_RESOLUTION_FAILED = "DEPENDENCY_RESOLUTION_FAILED"
    INSTANTIATION_FAILED = "INSTANTIATION_FAILED"
    FACTORY_EXECUTION_FAILED = "FACTORY_EXECUTION_FAILED"


class WireError(RuntimeError):
    """Base error for everything raised by litewire.

    - `code`: stable machine-readable `ErrorCode`
    - `context`: structured diagnostic data
    - `source`: component that raised the error
    - `cause`: the wrapped error, set through `raise ... from`.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = dict(context) if context else {}
        self.source = source

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code.value})"


class ValidationError(WireError, ValueError):
    """Invalid caller input: absent keys, wrong argument shapes."""


class RegistrationError(WireError):
    """A key is already registered."""


class NotFoundError(WireError, LookupError):
    """A token or template name is not registered."""


class ResolutionError(WireError):
    """Constructor injection failed."""


class FactoryExecutionError(WireError):
    """A dynamic factory raised while producing its instance."""
