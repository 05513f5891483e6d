"""Twin: a schema-bound, independently mutable decorator over source models.

Usage:
    album = Album(title="Nice Try", songs=[])
    twin = Twin(album_schema, album)

    twin["title"] = "Skamobile"            # twin only, album untouched
    twin["songs"].append(Song("Adondo", 1))

    assert album.title == "Nice Try"
    twin.sync()                            # now album.title == "Skamobile"

    # Composition over several models
    request = Twin(request_schema, {"song": song, "requester": requester})
"""

from __future__ import annotations

import warnings
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from twinkit.config.settings import TwinSettings, get_settings
from twinkit.core.binding import Binding, BindingError
from twinkit.core.capabilities import source_persisted
from twinkit.core.schema import PropertyDescriptor, PropertyKind, Schema
from twinkit.core.types import Model
from twinkit.twin.changes import ChangeTracker
from twinkit.twin.collection import CollectionProxy

if TYPE_CHECKING:
    from twinkit.sync.engine import SyncBlock


def twin_element(schema: Schema, value: Any, settings: TwinSettings) -> Twin | None:
    """Turn a raw model into a twin of `schema`, keeping existing twins as-is.

    Args:
        schema: Schema the element must conform to.
        value: None, an existing Twin, or a raw model.
        settings: Settings for a newly built twin.

    Returns:
        None for None, the same twin for a twin of `schema`, a new twin otherwise.

    Raises:
        TypeError: If `value` is a twin of a different schema.
    """
    if value is None:
        return None
    if isinstance(value, Twin):
        if value.schema is not schema:
            raise TypeError(
                f"Expected a twin of {schema.name}, got a twin of {value.schema.name}"
            )
        return value
    return Twin(schema, value, settings=settings)


def twin_value(
    descriptor: PropertyDescriptor,
    value: Any,
    settings: TwinSettings,
    *,
    added: bool = False,
) -> Any:
    """Convert a raw value into what the twin stores for `descriptor`.

    Used uniformly by construction and by writers:
    - scalar: the value itself
    - nested: None, or a Twin of the nested schema
    - collection: a fresh CollectionProxy of element twins

    Args:
        descriptor: The property being populated.
        value: Raw model value, twin, or None.
        settings: Settings propagated to new twins.
        added: Track collection elements as added (writer assignment).
    """
    if descriptor.kind is PropertyKind.SCALAR:
        return value
    if descriptor.kind is PropertyKind.COLLECTION:
        return CollectionProxy(descriptor, value or (), settings=settings, added=added)
    return twin_element(descriptor.nested_schema, value, settings)


class Twin:
    """Node of the mutable twin graph.

    Holds the current value of every schema property. Nested and collection
    properties only ever hold twins and collection proxies, never raw models.
    The source model is not written until `sync()` or `save()`.

    Args:
        schema: Schema describing this twin type. Frozen on first use.
        model: Source model, or a mapping of composition key to model.
        overrides: Initial values taken verbatim instead of reading the model.
            Overridden properties are not marked changed.
        settings: Engine settings, defaults to the process-wide settings.

    Raises:
        BindingError: If a property cannot be read from its model.
    """

    def __init__(
        self,
        schema: Schema,
        model: Model | Mapping[str, Model],
        overrides: Mapping[str, Any] | None = None,
        *,
        settings: TwinSettings | None = None,
    ) -> None:
        self._schema = schema.freeze()
        self._model = model
        self._settings = settings or get_settings()

        if schema.is_composition and not isinstance(model, Mapping):
            raise BindingError(
                f"{schema.name} is a composition of {list(schema.composition_keys())}, "
                f"expected a mapping of models, got {model!r}"
            )

        overrides = dict(overrides or {})
        unknown = [name for name in overrides if name not in schema]
        if unknown:
            warnings.warn(
                f"{schema.name} ignores overrides for undeclared properties: {unknown}",
                stacklevel=2,
            )

        self._values: dict[str, Any] = {}
        for descriptor in schema:
            if descriptor.name in overrides:
                raw = overrides[descriptor.name]
            else:
                raw = Binding(descriptor).read(model)
            self._values[descriptor.name] = twin_value(descriptor, raw, self._settings)

        self._changes = ChangeTracker(
            persisted_at_construction=source_persisted(
                model, schema.is_composition, self._settings
            )
        )

    def __repr__(self) -> str:
        scalars = {
            d.name: self._values[d.name] for d in self._schema if d.kind is PropertyKind.SCALAR
        }
        return f"<Twin {self._schema.name} {scalars!r}>"

    def _descriptor(self, name: str) -> PropertyDescriptor:
        return self._schema[name]

    # Attributes

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def model(self) -> Model | Mapping[str, Model]:
        """The source model, or the composition mapping."""
        return self._model

    @property
    def settings(self) -> TwinSettings:
        return self._settings

    @property
    def changes(self) -> ChangeTracker:
        return self._changes

    # Reader / writer

    def get(self, name: str) -> Any:
        """Current value of property `name`.

        Raises:
            KeyError: If the schema does not declare `name`.
        """
        self._descriptor(name)
        return self._values[name]

    def set(self, name: str, value: Any) -> None:
        """Assign property `name` on the twin and mark it changed.

        Nested values are twinned, collection assignments replace the whole
        collection with every element tracked as added. The model is untouched.

        Raises:
            KeyError: If the schema does not declare `name`.
            TypeError: If `value` is a twin of the wrong schema.
        """
        descriptor = self._descriptor(name)
        if (
            descriptor.kind is PropertyKind.SCALAR
            and not self._settings.mark_identical_writes_dirty
            and self._values[name] == value
        ):
            return
        self._values[name] = twin_value(descriptor, value, self._settings, added=True)
        self._changes.mark(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._schema

    def __iter__(self) -> Iterator[str]:
        return iter(self._schema.names())

    # Change tracking

    def changed(self, name: str | None = None) -> bool:
        """Whether the twin, or one property of it, changed since construction.

        A property is changed when it was written, or when the nested twin or
        collection it holds reports a change.

        Args:
            name: Property to check. Checks the whole twin when omitted.
        """
        if name is None:
            return any(self.changed(n) for n in self._schema.names())
        descriptor = self._descriptor(name)
        if self._changes.is_dirty(name):
            return True
        value = self._values[name]
        if descriptor.kind is PropertyKind.NESTED:
            return value is not None and value.changed()
        if descriptor.kind is PropertyKind.COLLECTION:
            return value.changed()
        return False

    def changed_properties(self) -> list[str]:
        """Names of all properties for which `changed(name)` is true."""
        return [name for name in self._schema.names() if self.changed(name)]

    def persisted(self) -> bool:
        """Whether the source model(s) currently report being persisted."""
        return source_persisted(self._model, self._schema.is_composition, self._settings)

    def created(self) -> bool:
        """True when the model was new at construction and is persisted now."""
        return not self._changes.persisted_at_construction and self.persisted()

    # Write-back

    def sync(self, block: SyncBlock | None = None) -> Any:
        """Write the twin graph back to its models. See `twinkit.sync.sync`."""
        from twinkit.sync import sync

        return sync(self, block)

    def save(self, block: SyncBlock | None = None) -> Any:
        """Sync and persist the twin graph. See `twinkit.sync.save`."""
        from twinkit.sync import save

        return save(self, block)
