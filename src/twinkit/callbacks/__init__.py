"""Callback groups: event-to-handler bindings evaluated against a twin graph."""

from twinkit.callbacks.group import compose
from twinkit.callbacks.models import (
    CREATE,
    Append,
    Callback,
    Event,
    Group,
    GroupError,
    Handler,
    Operation,
    Refine,
    Remove,
    normalize_path,
    on_add,
    on_change,
    on_delete,
    on_destroy,
    on_update,
)
from twinkit.callbacks.runner import Invocation, run_callbacks

__all__ = [
    # Models
    "Event",
    "Callback",
    "Handler",
    "Group",
    "GroupError",
    "CREATE",
    "normalize_path",
    # Builders
    "on_update",
    "on_add",
    "on_delete",
    "on_destroy",
    "on_change",
    # Composition
    "Operation",
    "Append",
    "Remove",
    "Refine",
    "compose",
    # Evaluation
    "Invocation",
    "run_callbacks",
]
