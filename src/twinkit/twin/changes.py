"""Per-twin dirty bookkeeping.

Only writer calls mark properties dirty. Construction, including values passed
as overrides, never does. Nested twins and collections report their own state;
the aggregation happens in `Twin.changed()`.
"""

from __future__ import annotations


class ChangeTracker:
    """Dirty flags for one twin's own properties.

    Args:
        persisted_at_construction: Whether the source model already existed
            in storage when the twin was built.
    """

    __slots__ = ("_dirty", "persisted_at_construction")

    def __init__(self, persisted_at_construction: bool = False) -> None:
        self._dirty: dict[str, bool] = {}
        self.persisted_at_construction = persisted_at_construction

    def __repr__(self) -> str:
        return f"ChangeTracker(dirty={list(self.dirty_names())})"

    def mark(self, name: str) -> None:
        """Record a writer call for `name`."""
        self._dirty[name] = True

    def is_dirty(self, name: str) -> bool:
        return self._dirty.get(name, False)

    def dirty_names(self) -> tuple[str, ...]:
        """Names written since construction, in first-write order."""
        return tuple(name for name, dirty in self._dirty.items() if dirty)
