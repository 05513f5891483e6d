"""Collection proxy: ordered, tracked container of element twins.

Usage:
    songs = album["songs"]

    songs.append(Song("Adondo", 1))      # twinned, tracked in songs.added
    songs.insert(0, other_song_twin)     # twins are kept as-is
    songs.delete(songs[1])               # removed, tracked in songs.deleted
    songs.destroy(songs[0])              # removed, destroyed on save()

    assert songs.changed()

Membership in every tracking list is by identity: two twins over equal
models are still different elements.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from twinkit.config.settings import TwinSettings
from twinkit.core.capabilities import destroy_model
from twinkit.core.schema.models import PropertyDescriptor

if TYPE_CHECKING:
    from twinkit.twin.twin import Twin


def _index_of(items: list[Twin], twin: Twin) -> int:
    for i, item in enumerate(items):
        if item is twin:
            return i
    return -1


def _contains(items: list[Twin], twin: Any) -> bool:
    return _index_of(items, twin) >= 0


class CollectionProxy:
    """Mutable list of twins bound to one collection property.

    Args:
        descriptor: The collection property this proxy belongs to.
        items: Raw models or twins to seed the collection with.
        settings: Settings propagated to newly twinned elements.
        added: Record the seed items as added (assignment is a bulk add).
    """

    def __init__(
        self,
        descriptor: PropertyDescriptor,
        items: Iterable[Any] = (),
        *,
        settings: TwinSettings,
        added: bool = False,
    ) -> None:
        self._descriptor = descriptor
        self._settings = settings
        self._current: list[Twin] = []
        self._added: list[Twin] = []
        self._deleted: list[Twin] = []
        self._to_destroy: list[Twin] = []
        self._destroyed: list[Twin] = []
        for item in items:
            twin = self._twin(item)
            self._current.append(twin)
            if added:
                self._added.append(twin)

    def _twin(self, value: Any) -> Twin:
        # Late import to avoid circular dependency
        from twinkit.twin.twin import twin_element

        if value is None:
            raise TypeError(f"Collection {self._descriptor.name!r} cannot hold None")
        return twin_element(self._descriptor.nested_schema, value, self._settings)

    def _admit(self, value: Any) -> Twin:
        twin = self._twin(value)
        if _contains(self._destroyed, twin):
            raise ValueError(
                f"{twin!r} was destroyed and cannot rejoin {self._descriptor.name!r}"
            )
        return twin

    def _require_member(self, twin: Twin) -> int:
        index = _index_of(self._current, twin)
        if index < 0:
            raise ValueError(f"{twin!r} is not in collection {self._descriptor.name!r}")
        return index

    def _track_added(self, twin: Twin) -> None:
        # A re-added element is no longer pending removal
        self._deleted = [item for item in self._deleted if item is not twin]
        self._to_destroy = [item for item in self._to_destroy if item is not twin]
        if not _contains(self._added, twin):
            self._added.append(twin)

    def _track_deleted(self, twin: Twin) -> None:
        if not _contains(self._deleted, twin):
            self._deleted.append(twin)

    # Sequence protocol

    def __repr__(self) -> str:
        return f"CollectionProxy({self._descriptor.name!r}, {self._current!r})"

    def __len__(self) -> int:
        return len(self._current)

    def __iter__(self) -> Iterator[Twin]:
        return iter(list(self._current))

    def __getitem__(self, index: int) -> Twin:
        return self._current[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self.replace(index, value)

    def __contains__(self, twin: object) -> bool:
        return _contains(self._current, twin)

    def __bool__(self) -> bool:
        return bool(self._current)

    def index(self, twin: Twin) -> int:
        """Position of `twin` in the collection.

        Raises:
            ValueError: If `twin` is not an element.
        """
        return self._require_member(twin)

    # Tracking views

    @property
    def descriptor(self) -> PropertyDescriptor:
        return self._descriptor

    @property
    def current(self) -> tuple[Twin, ...]:
        return tuple(self._current)

    @property
    def added(self) -> tuple[Twin, ...]:
        """Twins added since construction, in insertion order."""
        return tuple(self._added)

    @property
    def deleted(self) -> tuple[Twin, ...]:
        """Twins removed by delete() or destroy()."""
        return tuple(self._deleted)

    @property
    def to_destroy(self) -> tuple[Twin, ...]:
        """Twins whose models will be destroyed on save."""
        return tuple(self._to_destroy)

    @property
    def destroyed(self) -> tuple[Twin, ...]:
        """Twins whose destroy action has run."""
        return tuple(self._destroyed)

    # Mutation

    def append(self, value: Any) -> Twin:
        """Twin `value` if needed and add it at the end.

        Re-adding a deleted element takes it out of `deleted` and `to_destroy`.

        Returns:
            The element twin that was added.

        Raises:
            ValueError: If the element's model was already destroyed.
        """
        twin = self._admit(value)
        self._current.append(twin)
        self._track_added(twin)
        return twin

    def extend(self, values: Iterable[Any]) -> list[Twin]:
        return [self.append(value) for value in values]

    def insert(self, index: int, value: Any) -> Twin:
        """Twin `value` if needed and insert it before `index`."""
        twin = self._admit(value)
        self._current.insert(index, twin)
        self._track_added(twin)
        return twin

    def delete(self, twin: Twin) -> Twin:
        """Remove `twin` from the collection without touching its model.

        Raises:
            ValueError: If `twin` is not an element.
        """
        index = self._require_member(twin)
        del self._current[index]
        self._track_deleted(twin)
        return twin

    def destroy(self, twin: Twin) -> Twin:
        """Remove `twin` like delete() and destroy its model on the next save.

        Raises:
            ValueError: If `twin` is not an element.
        """
        self.delete(twin)
        if not _contains(self._to_destroy, twin):
            self._to_destroy.append(twin)
        return twin

    def replace(self, index: int, value: Any) -> Twin:
        """Swap the element at `index`; the old one counts as deleted, the new as added."""
        old = self._current[index]
        twin = self._admit(value)
        if twin is old:
            return twin
        self._current[index] = twin
        self._track_deleted(old)
        self._track_added(twin)
        return twin

    def move(self, twin: Twin, index: int) -> None:
        """Reorder `twin` to `index`. Reordering is not tracked as a change."""
        del self._current[self._require_member(twin)]
        self._current.insert(index, twin)

    def find_by(self, **attributes: Any) -> Twin | None:
        """First element whose properties equal all given values."""
        for twin in self._current:
            if all(twin.get(name) == value for name, value in attributes.items()):
                return twin
        return None

    # Tracking queries

    def changed(self) -> bool:
        """True when elements were added, deleted or marked for destruction,
        or when any current element changed."""
        if self._added or self._deleted or self._to_destroy:
            return True
        return any(twin.changed() for twin in self._current)

    def models(self) -> list[Any]:
        """Source models of the current elements, in order."""
        return [twin.model for twin in self._current]

    def finalize_destroys(self) -> list[Twin]:
        """Run the destroy action for every pending `to_destroy` member.

        Each member is destroyed at most once, no matter how often this runs.

        Returns:
            The twins destroyed by this call.
        """
        finalized: list[Twin] = []
        for twin in self._to_destroy:
            if _contains(self._destroyed, twin):
                continue
            destroy_model(twin.model, self._settings)
            self._destroyed.append(twin)
            finalized.append(twin)
        return finalized
