"""Property binding: reading initial values from models and writing them back.

A binding only knows how to find the model and the accessor for one property.
Twinning, collections and dirty tracking are layered on top in `twinkit.twin`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from twinkit.core.schema.models import PropertyDescriptor
from twinkit.core.types import Model, TwinError


class BindingError(TwinError):
    """Raised when a property cannot be resolved on its model."""

    pass


@dataclass(frozen=True, slots=True)
class Binding:
    """Resolver for one property against a model or a composition mapping."""

    descriptor: PropertyDescriptor

    def resolve_model(self, source: Model | Mapping[str, Model]) -> Model:
        """Pick the model holding this property.

        Args:
            source: A single model, or a mapping of composition key to model.

        Returns:
            The model the accessor is looked up on.

        Raises:
            BindingError: If the composition key is missing from `source`.
        """
        key = self.descriptor.on
        if key is None:
            return source
        if not isinstance(source, Mapping):
            raise BindingError(
                f"Property {self.descriptor.name!r} is bound on {key!r} "
                f"but the source is not a composition: {source!r}"
            )
        try:
            return source[key]
        except KeyError:
            raise BindingError(
                f"Property {self.descriptor.name!r}: composition has no model {key!r} "
                f"(available: {sorted(source)})"
            ) from None

    def read(self, source: Model | Mapping[str, Model]) -> Any:
        """Read the raw initial value for this property.

        Virtual and unreadable properties never touch the model and return
        the declared default instead.

        Raises:
            BindingError: If the accessor does not exist on the resolved model.
        """
        if not self.descriptor.reads_model:
            return self.descriptor.default_value()
        model = self.resolve_model(source)
        accessor = self.descriptor.accessor
        try:
            return getattr(model, accessor)
        except AttributeError:
            raise BindingError(
                f"Property {self.descriptor.name!r}: {type(model).__name__} {model!r} "
                f"has no readable attribute {accessor!r}"
            ) from None

    def write(self, source: Model | Mapping[str, Model], value: Any) -> None:
        """Write a value back to the model. No-op for virtual and unwriteable properties.

        Raises:
            BindingError: If the accessor does not exist or cannot be assigned.
        """
        if not self.descriptor.writes_model:
            return
        model = self.resolve_model(source)
        accessor = self.descriptor.accessor
        if not hasattr(model, accessor):
            raise BindingError(
                f"Property {self.descriptor.name!r}: {type(model).__name__} {model!r} "
                f"has no writable attribute {accessor!r}"
            )
        try:
            setattr(model, accessor, value)
        except AttributeError as e:
            raise BindingError(
                f"Property {self.descriptor.name!r}: cannot write {accessor!r} "
                f"on {type(model).__name__} {model!r}: {e}"
            ) from e
