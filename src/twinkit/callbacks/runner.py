"""Callback evaluation: walk a twin graph and dispatch matching handlers.

Usage:
    group = Group(on_change(expire_cache)).collection("songs", on_add(notify))
    twin.save()
    invocations = run_callbacks(group, twin, context=request)

Callbacks run strictly in group order. For each callback every candidate twin
addressed by its path is checked, and the handler runs once per match. A
failing handler stops evaluation; handlers that already ran are not undone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from twinkit.callbacks.models import CREATE, Callback, Event, Group, GroupError
from twinkit.core.schema import PropertyKind
from twinkit.twin.collection import CollectionProxy

if TYPE_CHECKING:
    from twinkit.twin.twin import Twin

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Invocation:
    """A handler call that happened during evaluation."""

    callback: Callback
    twin: Twin


def run_callbacks(
    group: Group,
    twin: Twin,
    context: Any = None,
    events: Sequence[Event] | None = None,
) -> list[Invocation]:
    """Evaluate `group` against the graph rooted at `twin`.

    Args:
        group: Resolved callback group.
        twin: Root twin the callback paths are relative to.
        context: Passed as second argument to every handler.
        events: Only evaluate callbacks for these events. All when None.

    Returns:
        Invocations in the order the handlers ran.
    """
    invocations: list[Invocation] = []
    for callback in group:
        if events is not None and callback.event not in events:
            continue
        for candidate, owner in _candidates(twin, callback):
            if not _satisfies(candidate, owner, callback):
                continue
            logger.debug(
                "%s %s -> %r", callback.event.name, ".".join(callback.path) or "<root>", candidate
            )
            callback.handler(candidate, context)
            invocations.append(Invocation(callback, candidate))
    return invocations


def _members(collection: CollectionProxy, event: Event) -> tuple[Twin, ...]:
    if event is Event.ADD:
        return collection.added
    if event is Event.DELETE:
        return collection.deleted
    if event is Event.DESTROY:
        return collection.destroyed
    return collection.current


def _candidates(root: Twin, callback: Callback) -> Iterator[tuple[Twin, CollectionProxy | None]]:
    """Twins addressed by the callback path, each with its owning collection.

    Raises:
        GroupError: If a path segment names a scalar property.
    """
    nodes: list[tuple[Twin, CollectionProxy | None]] = [(root, None)]
    last = len(callback.path) - 1
    for depth, name in enumerate(callback.path):
        resolved: list[tuple[Twin, CollectionProxy | None]] = []
        for node, _ in nodes:
            if node.schema[name].kind is PropertyKind.SCALAR:
                path = ".".join(callback.path)
                raise GroupError(f"Path {path!r} names scalar property {name!r}")
            value = node.get(name)
            if isinstance(value, CollectionProxy):
                members = _members(value, callback.event) if depth == last else value.current
                resolved.extend((member, value) for member in members)
            elif value is not None:
                resolved.append((value, None))
        nodes = resolved
    return iter(nodes)


def _satisfies(candidate: Twin, owner: CollectionProxy | None, callback: Callback) -> bool:
    event = callback.event
    if event is Event.UPDATE:
        return candidate.changes.persisted_at_construction and candidate.changed()
    if event is Event.CHANGE:
        return candidate.changed(callback.qualifier)
    if owner is None:
        return False
    if event is Event.ADD:
        if candidate not in owner.added:
            return False
        return callback.qualifier != CREATE or candidate.persisted()
    if event is Event.DELETE:
        return candidate in owner.deleted
    if event is Event.DESTROY:
        return candidate in owner.destroyed
    return False
