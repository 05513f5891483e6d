"""Pure functions for callback group composition.

A child group is described as its parent plus a list of operations and is
resolved into one flat, ordered sequence before it is ever evaluated.
"""

from __future__ import annotations

from twinkit.callbacks.models import Append, Callback, Group, GroupError, Operation, Refine, Remove


def compose(parent: Group, *operations: Operation) -> Group:
    """Resolve a child group from `parent` and composition operations.

    Operations are applied in the order given:
    - Append: callbacks go to the end of the sequence.
    - Remove: every callback with the same event and handler is struck.
    - Refine: callbacks are re-rooted under the refined path and spliced in
      right after the last callback at or below that path.

    Args:
        parent: Group to inherit from. It is left untouched.
        *operations: Append, Remove and Refine operations.

    Returns:
        New group with the resolved sequence.

    Raises:
        GroupError: If a Remove matches nothing or a Refine path was never declared.
        TypeError: If an operation is of an unknown type.
    """
    callbacks = list(parent.callbacks)
    for operation in operations:
        if isinstance(operation, Append):
            callbacks.extend(operation.callbacks)
        elif isinstance(operation, Remove):
            callbacks = _remove(callbacks, operation)
        elif isinstance(operation, Refine):
            callbacks = _refine(callbacks, operation)
        else:
            raise TypeError(f"Unknown group operation: {operation!r}")
    return Group(*callbacks)


def _remove(callbacks: list[Callback], operation: Remove) -> list[Callback]:
    kept = [c for c in callbacks if not c.matches(operation.event, operation.handler)]
    if len(kept) == len(callbacks):
        raise GroupError(
            f"Cannot remove {operation.event.name} {operation.handler!r}: no such callback"
        )
    return kept


def _refine(callbacks: list[Callback], operation: Refine) -> list[Callback]:
    last = -1
    for i, callback in enumerate(callbacks):
        if callback.within(operation.path):
            last = i
    if last < 0:
        raise GroupError(f"Cannot refine {'.'.join(operation.path)!r}: path is not declared")
    refined = [c.under(*operation.path) for c in operation.callbacks]
    return callbacks[: last + 1] + refined + callbacks[last + 1 :]
