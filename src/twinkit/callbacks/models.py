"""Callback models: events, bindings, groups and composition operations.

Groups are immutable. Every method returns a new Group instance, so a parent
group can be shared by any number of refined child groups.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, TypeAlias

from twinkit.core.types import TwinError

if TYPE_CHECKING:
    from twinkit.callbacks.runner import Invocation
    from twinkit.twin.twin import Twin

Handler: TypeAlias = Callable[["Twin", Any], Any]
"""Called as handler(twin, context) for every matching twin."""

Path: TypeAlias = tuple[str, ...]


class GroupError(TwinError):
    """Raised when a group composition refers to bindings that do not exist."""

    pass


class Event(Enum):
    """Tracked state a callback reacts to."""

    UPDATE = auto()  # Persisted at construction and changed now
    ADD = auto()  # Added to its collection
    DELETE = auto()  # Removed from its collection
    DESTROY = auto()  # Destroy action ran during save
    CHANGE = auto()  # Changed, optionally one property


CREATE = "create"
"""Qualifier for ADD: the added twin must be persisted by now."""


def normalize_path(path: str | Sequence[str]) -> Path:
    """Accept "songs.composer", ("songs", "composer") or "" for the root."""
    if isinstance(path, str):
        return tuple(part for part in path.split(".") if part)
    return tuple(path)


@dataclass(frozen=True, slots=True)
class Callback:
    """One binding of an event at a property path to a handler.

    Attributes:
        event: Event kind to match.
        handler: Callable invoked as handler(twin, context).
        path: Property path from the root twin; empty for the root itself.
        qualifier: For ADD, CREATE; for CHANGE, a property name; else None.
    """

    event: Event
    handler: Handler
    path: Path = ()
    qualifier: str | None = None

    def under(self, *prefix: str) -> Callback:
        """Same binding, relative to a nested property path."""
        return replace(self, path=tuple(prefix) + self.path)

    def matches(self, event: Event, handler: Handler) -> bool:
        return self.event is event and self.handler == handler

    def within(self, path: Path) -> bool:
        """True when this binding sits at `path` or below it."""
        return self.path[: len(path)] == path


def on_update(handler: Handler, *, path: str | Sequence[str] = "") -> Callback:
    return Callback(Event.UPDATE, handler, normalize_path(path))


def on_add(handler: Handler, *, create: bool = False, path: str | Sequence[str] = "") -> Callback:
    return Callback(Event.ADD, handler, normalize_path(path), CREATE if create else None)


def on_delete(handler: Handler, *, path: str | Sequence[str] = "") -> Callback:
    return Callback(Event.DELETE, handler, normalize_path(path))


def on_destroy(handler: Handler, *, path: str | Sequence[str] = "") -> Callback:
    return Callback(Event.DESTROY, handler, normalize_path(path))


def on_change(
    handler: Handler,
    property_name: str | None = None,
    *,
    path: str | Sequence[str] = "",
) -> Callback:
    return Callback(Event.CHANGE, handler, normalize_path(path), property_name)


@dataclass(frozen=True)
class Group:
    """Ordered, immutable sequence of callbacks.

    Usage:
        group = (
            Group(on_change(expire_cache))
            .collection("songs", on_add(notify_album), on_delete(notify_album))
            .nested("artist", on_change(refresh_artist))
        )
        group.run(album_twin, context=request)
    """

    callbacks: tuple[Callback, ...] = ()

    def __init__(self, *callbacks: Callback):
        object.__setattr__(self, "callbacks", tuple(callbacks))

    def __iter__(self) -> Iterator[Callback]:
        return iter(self.callbacks)

    def __len__(self) -> int:
        return len(self.callbacks)

    def add(self, *callbacks: Callback) -> Group:
        """New group with `callbacks` appended."""
        return Group(*self.callbacks, *callbacks)

    def collection(self, name: str | Sequence[str], *callbacks: Callback) -> Group:
        """New group with `callbacks` appended under collection `name`."""
        prefix = normalize_path(name)
        return self.add(*(c.under(*prefix) for c in callbacks))

    def nested(self, name: str | Sequence[str], *callbacks: Callback) -> Group:
        """New group with `callbacks` appended under nested property `name`."""
        return self.collection(name, *callbacks)

    def inherit(self, *operations: Operation) -> Group:
        """Child group resolved from this one. See `compose`."""
        from twinkit.callbacks.group import compose

        return compose(self, *operations)

    def run(
        self,
        twin: Twin,
        context: Any = None,
        events: Sequence[Event] | None = None,
    ) -> list[Invocation]:
        """Evaluate this group against `twin`. See `run_callbacks`."""
        from twinkit.callbacks.runner import run_callbacks

        return run_callbacks(self, twin, context, events)


@dataclass(frozen=True)
class Append:
    """Add callbacks at the end of the inherited sequence."""

    callbacks: tuple[Callback, ...] = ()

    def __init__(self, *callbacks: Callback):
        object.__setattr__(self, "callbacks", tuple(callbacks))


@dataclass(frozen=True)
class Remove:
    """Strike every inherited callback with this event and handler."""

    event: Event
    handler: Handler


@dataclass(frozen=True)
class Refine:
    """Add callbacks under an already declared property path."""

    path: Path
    callbacks: tuple[Callback, ...] = ()

    def __init__(self, path: str | Sequence[str], *callbacks: Callback):
        object.__setattr__(self, "path", normalize_path(path))
        object.__setattr__(self, "callbacks", tuple(callbacks))


Operation = Append | Remove | Refine
