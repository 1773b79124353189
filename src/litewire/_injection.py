"""Injection descriptors: which container owns a class, and what to inject where.

A class opts into constructor injection with `@injectable`:

    @injectable("App", CONFIG)
    class Widget:
        def __init__(self, config): ...

or by marking parameters individually:

    @injectable("App")
    class Widget:
        def __init__(self, config: Annotated[dict, Inject(CONFIG)]): ...
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from ._errors import ErrorCode, ValidationError
from ._token import is_absent


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping


logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

_MARKER_ATTR = "__litewire_injectable__"


@dataclass(frozen=True)
class Inject:
    """Parameter marker: `Annotated[T, Inject(token)]`."""

    token: Hashable


@dataclass(frozen=True)
class InjectionDescriptor:
    container: Hashable
    tokens: Mapping[int, Hashable] = field(default_factory=dict)


@dataclass(frozen=True)
class _Injectable:
    container: Hashable
    tokens: tuple[Hashable, ...]


def injectable(container: Hashable, *tokens: Hashable) -> Callable[[C], C]:
    """Mark a class as resolvable by the container named `container`.

    `tokens`, when given, are injected into the constructor parameters in order.
    """
    if is_absent(container):
        msg = "Injectable container name cannot be empty"
        raise ValidationError(msg, code=ErrorCode.NAME_REQUIRED, source="Injectable")

    def decorator(cls: C) -> C:
        if not inspect.isclass(cls):
            msg = "injectable can only be applied to classes"
            raise ValidationError(
                msg, code=ErrorCode.INVALID_TARGET, context={"target": repr(cls)}, source="Injectable"
            )
        setattr(cls, _MARKER_ATTR, _Injectable(container=container, tokens=tuple(tokens)))
        return cls

    return decorator


def is_injectable(cls: type) -> bool:
    return isinstance(cls.__dict__.get(_MARKER_ATTR), _Injectable)


def describe(cls: type) -> InjectionDescriptor | None:
    """Return the injection descriptor of `cls`, or None if it is not injectable.

    Only the class's own marker counts: subclasses of an injectable class must
    be decorated themselves.
    """
    marker = cls.__dict__.get(_MARKER_ATTR) if inspect.isclass(cls) else None
    if not isinstance(marker, _Injectable):
        return None

    tokens: dict[int, Hashable] = {}
    params = injectable_parameters(cls)
    if params is not None:
        hints = _get_init_type_hints(cls)
        for index, p in enumerate(params):
            token = _inject_token(hints.get(p.name))
            if token is not None:
                tokens[index] = token

    # decorator tokens win over Annotated markers
    tokens.update(enumerate(marker.tokens))
    return InjectionDescriptor(container=marker.container, tokens=tokens)


def injectable_parameters(cls: type) -> list[inspect.Parameter] | None:
    """Constructor parameters in declared order, without *args/**kwargs.

    None when the signature cannot be introspected.
    """
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return None

    return [p for p in sig.parameters.values() if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)]


def _inject_token(annotation: Any) -> Hashable | None:
    if get_origin(annotation) is not Annotated:
        return None
    for extra in get_args(annotation)[1:]:
        if isinstance(extra, Inject):
            return extra.token
    return None


def _get_init_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
        hints = get_type_hints(init, include_extras=True)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    return hints
