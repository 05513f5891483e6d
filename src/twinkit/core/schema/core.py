"""Schema builder: declarative description of a twin type.

Usage:
    song = Schema("Song").property("name").property("index")

    album = (
        Schema("Album")
        .property("title")
        .property("preview", virtual=True, default="")
        .collection("songs", twin=song)
    )

    # Nested declaration instead of an explicit schema
    album.property("artist", nested=lambda artist: artist.property("name"))

    # Composition: one twin over several named models
    request = (
        Schema("Request")
        .property("song_title", on="song", from_="title")
        .property("name", on="requester")
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from twinkit.core.schema.models import _NO_DEFAULT, PropertyDescriptor, PropertyKind, SchemaError


class Schema:
    """Ordered set of property descriptors shared by all twins of one type.

    A schema is mutable while it is being declared and frozen as soon as a twin
    is built from it. Frozen schemas are read-only and may be shared freely.

    Args:
        name: Human readable type name used in error messages.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._properties: dict[str, PropertyDescriptor] = {}
        self._frozen = False

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, {list(self._properties)})"

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._properties.values())

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __getitem__(self, name: str) -> PropertyDescriptor:
        try:
            return self._properties[name]
        except KeyError:
            raise KeyError(f"{self.name} has no property {name!r}") from None

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def is_composition(self) -> bool:
        """True when any property reads from a named model of a composition."""
        return any(d.on is not None for d in self)

    def names(self) -> tuple[str, ...]:
        return tuple(self._properties)

    def composition_keys(self) -> tuple[str, ...]:
        """Composition keys in the order they are first used."""
        keys: dict[str, None] = {}
        for descriptor in self:
            if descriptor.on is not None:
                keys.setdefault(descriptor.on, None)
        return tuple(keys)

    def property(
        self,
        name: str,
        *,
        virtual: bool = False,
        on: str | None = None,
        from_: str | None = None,
        twin: Schema | None = None,
        nested: Callable[[Schema], Any] | None = None,
        default: Any = _NO_DEFAULT,
        readable: bool = True,
        writeable: bool = True,
    ) -> Schema:
        """Declare a scalar or nested-twin property.

        The property is nested when either `twin` or `nested` is given.

        Args:
            name: Property name.
            virtual: Keep the value on the twin only.
            on: Composition key of the model holding this property.
            from_: Accessor name on the model if it differs from `name`.
            twin: Explicit nested schema.
            nested: Callable declaring properties on a fresh nested schema.
            default: Initial value for properties that are not read from a model.
            readable: Read the initial value from the model.
            writeable: Write the value back on sync.

        Returns:
            This schema, for chaining.

        Raises:
            SchemaError: If the declaration contradicts itself or the schema is frozen.
        """
        nested_schema = self._resolve_nested(name, twin, nested)
        kind = PropertyKind.NESTED if nested_schema is not None else PropertyKind.SCALAR
        return self._define(
            PropertyDescriptor(
                name=name,
                kind=kind,
                virtual=virtual,
                on=on,
                from_=from_,
                schema=nested_schema,
                default=default,
                readable=readable,
                writeable=writeable,
            )
        )

    def collection(
        self,
        name: str,
        *,
        virtual: bool = False,
        on: str | None = None,
        from_: str | None = None,
        twin: Schema | None = None,
        nested: Callable[[Schema], Any] | None = None,
        default: Any = _NO_DEFAULT,
        readable: bool = True,
        writeable: bool = True,
    ) -> Schema:
        """Declare a collection-of-twins property.

        Takes the same options as `property`; a nested schema is mandatory.

        Raises:
            SchemaError: If no element schema is given, or as for `property`.
        """
        nested_schema = self._resolve_nested(name, twin, nested)
        if nested_schema is None:
            raise SchemaError(f"{self.name}.{name}: collection requires `twin` or `nested`")
        return self._define(
            PropertyDescriptor(
                name=name,
                kind=PropertyKind.COLLECTION,
                virtual=virtual,
                on=on,
                from_=from_,
                schema=nested_schema,
                default=default,
                readable=readable,
                writeable=writeable,
            )
        )

    def freeze(self) -> Schema:
        """Make this schema and every nested schema read-only."""
        if self._frozen:
            return self
        self._frozen = True
        for descriptor in self:
            if descriptor.schema is not None:
                descriptor.schema.freeze()
        return self

    def _define(self, descriptor: PropertyDescriptor) -> Schema:
        if self._frozen:
            raise SchemaError(
                f"{self.name} is frozen, cannot define {descriptor.name!r} after twins were built"
            )
        if descriptor.name in self._properties:
            raise SchemaError(f"{self.name}.{descriptor.name} is already defined")
        self._properties[descriptor.name] = descriptor
        return self

    def _resolve_nested(
        self,
        name: str,
        twin: Schema | None,
        nested: Callable[[Schema], Any] | None,
    ) -> Schema | None:
        if twin is not None and nested is not None:
            raise SchemaError(f"{self.name}.{name}: `twin` and `nested` are mutually exclusive")
        if nested is not None:
            schema = Schema(f"{self.name}.{name}")
            nested(schema)
            return schema
        if twin is not None:
            if not isinstance(twin, Schema):
                raise SchemaError(f"{self.name}.{name}: `twin` must be a Schema, got {twin!r}")
            if _reaches(twin, self):
                raise SchemaError(f"{self.name}.{name}: nested schema {twin.name} forms a cycle")
        return twin


def _reaches(schema: Schema, target: Schema) -> bool:
    """Check whether `target` is `schema` or nested anywhere below it."""
    if schema is target:
        return True
    return any(d.schema is not None and _reaches(d.schema, target) for d in schema)
