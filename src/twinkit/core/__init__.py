"""Core functionalities: schema declaration, property binding and model protocols.

Architecture Note:
    core/ contains the declarative and stateless building blocks. Schemas are
    frozen once used and bindings hold no state of their own.
    For the mutable twin graph, see twin/; for write-back, see sync/.
"""

from twinkit.core.binding import Binding, BindingError
from twinkit.core.capabilities import (
    PersistenceError,
    destroy_model,
    model_persisted,
    persist_model,
    source_persisted,
)
from twinkit.core.schema import PropertyDescriptor, PropertyKind, Schema, SchemaError
from twinkit.core.types import Destroyable, HasPersisted, Model, Persistable, TwinError

__all__ = [
    # Types
    "Model",
    "TwinError",
    "Persistable",
    "Destroyable",
    "HasPersisted",
    # Schema
    "Schema",
    "PropertyDescriptor",
    "PropertyKind",
    "SchemaError",
    # Binding
    "Binding",
    "BindingError",
    # Capabilities
    "PersistenceError",
    "model_persisted",
    "source_persisted",
    "persist_model",
    "destroy_model",
]
