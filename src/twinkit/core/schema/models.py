"""Schema models: property kinds and descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from twinkit.core.types import TwinError

if TYPE_CHECKING:
    from twinkit.core.schema.core import Schema


class SchemaError(TwinError):
    """Raised when a schema declaration contradicts itself."""

    pass


class PropertyKind(Enum):
    """Shape of the value a property holds on a twin."""

    SCALAR = auto()  # Copied as-is
    NESTED = auto()  # Wrapped into a single nested Twin
    COLLECTION = auto()  # Wrapped into a CollectionProxy of Twins


_NO_DEFAULT = object()


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One declared property of a schema.

    Attributes:
        name: Property name, unique within its schema.
        kind: Scalar, nested twin, or collection of twins.
        virtual: Value lives only on the twin, never read from or written to a model.
        on: Composition key selecting the model when the twin wraps several.
        from_: Accessor name on the model, defaults to `name`.
        schema: Nested schema for NESTED and COLLECTION properties.
        default: Initial value when the model is not read. Callables are invoked.
        readable: Whether the initial value is read from the model.
        writeable: Whether sync writes the value back to the model.
    """

    name: str
    kind: PropertyKind = PropertyKind.SCALAR
    virtual: bool = False
    on: str | None = None
    from_: str | None = None
    schema: Schema | None = None
    default: Any = _NO_DEFAULT
    readable: bool = True
    writeable: bool = True

    @property
    def accessor(self) -> str:
        """Name of the attribute read from and written to the model."""
        return self.from_ or self.name

    @property
    def is_twinned(self) -> bool:
        return self.kind is not PropertyKind.SCALAR

    @property
    def reads_model(self) -> bool:
        return self.readable and not self.virtual

    @property
    def writes_model(self) -> bool:
        return self.writeable and not self.virtual

    @property
    def nested_schema(self) -> Schema:
        """Schema of the twins this property holds.

        Raises:
            SchemaError: If the property is a scalar without a nested schema.
        """
        if self.schema is None:
            raise SchemaError(f"Property {self.name!r} has no nested schema")
        return self.schema

    def default_value(self) -> Any:
        """Resolve the declared default, calling it when it is callable."""
        if self.default is _NO_DEFAULT:
            return [] if self.kind is PropertyKind.COLLECTION else None
        if callable(self.default):
            return self.default()
        return self.default
