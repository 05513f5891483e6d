"""Sync: recursive write-back of a twin graph into its models.

Usage:
    sync(twin)                          # write every writeable property back
    payload = sync(twin, lambda nested: nested)   # no model is written
    to_nested(twin)                     # {"title": ..., "songs": [{...}]}

Nested twins and collection elements are synced before the parent writes the
reference to them, so a parent never points at a half-updated child model.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from twinkit.core.binding import Binding
from twinkit.core.schema import PropertyKind

if TYPE_CHECKING:
    from twinkit.twin.twin import Twin

logger = logging.getLogger(__name__)

SyncBlock: TypeAlias = Callable[[dict[str, Any]], Any]
"""Receives the nested plain structure instead of writing to models."""


def sync(twin: Twin, block: SyncBlock | None = None) -> Any:
    """Write the current twin graph back into the model graph.

    Args:
        twin: Root of the graph to sync.
        block: If given, no model is written; the block receives
            `to_nested(twin)` and its return value is returned.

    Returns:
        The block's return value, or None.

    Raises:
        BindingError: If a property cannot be written to its model. Earlier
            writes of the same pass stay in place.
    """
    if block is not None:
        return block(to_nested(twin))
    _write_back(twin)
    return None


def _write_back(twin: Twin) -> None:
    logger.debug("Syncing %s", twin.schema.name)
    for descriptor in twin.schema:
        if not descriptor.writes_model:
            continue
        value = twin.get(descriptor.name)
        if descriptor.kind is PropertyKind.NESTED:
            if value is not None:
                _write_back(value)
                value = value.model
        elif descriptor.kind is PropertyKind.COLLECTION:
            for element in value:
                _write_back(element)
            value = value.models()
        Binding(descriptor).write(twin.model, value)


def to_nested(twin: Twin) -> dict[str, Any]:
    """Plain nested structure of every writeable property's current value.

    Nested twins become dicts, collections become lists of dicts. Virtual
    and unwriteable properties are left out.
    """
    result: dict[str, Any] = {}
    for descriptor in twin.schema:
        if not descriptor.writes_model:
            continue
        value = twin.get(descriptor.name)
        if descriptor.kind is PropertyKind.NESTED:
            result[descriptor.name] = to_nested(value) if value is not None else None
        elif descriptor.kind is PropertyKind.COLLECTION:
            result[descriptor.name] = [to_nested(element) for element in value]
        else:
            result[descriptor.name] = value
    return result
