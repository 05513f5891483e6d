"""Core type definitions for twinkit.

Model capability protocols describe the minimum a source model has to offer.
Plain attributes are enough for reading and writing; the protocols below are
only required by `save()` and by the callback events that look at persistence.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeAlias, runtime_checkable

Model: TypeAlias = Any
"""Any object exposing the accessors declared in a schema."""


class TwinError(Exception):
    """Base class for all twinkit errors."""

    pass


@runtime_checkable
class Persistable(Protocol):
    """Model with a zero-argument persistence action."""

    def save(self) -> bool: ...


@runtime_checkable
class Destroyable(Protocol):
    """Collection element model that can be destroyed."""

    def destroy(self) -> Any: ...


@runtime_checkable
class HasPersisted(Protocol):
    """Model that knows whether it already exists in storage."""

    persisted: Any
