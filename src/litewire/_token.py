from __future__ import annotations

from typing import Any


class Token:
    """Opaque registration key compared by identity.

    Two tokens created with the same description are distinct keys; the
    description only shows up in logs and error context.
    """

    __slots__ = ("description",)

    def __init__(self, description: str = "") -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"Token({self.description!r})"


def is_absent(key: Any) -> bool:
    """True for keys that cannot name a registration (None or empty string)."""
    return key is None or (isinstance(key, str) and not key)


def describe_key(key: Any) -> str:
    if isinstance(key, Token):
        return key.description or repr(key)
    if isinstance(key, type):
        return key.__qualname__
    return str(key)
