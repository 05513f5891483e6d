"""Schema functionality: descriptors and the schema builder."""

from twinkit.core.schema.core import Schema
from twinkit.core.schema.models import PropertyDescriptor, PropertyKind, SchemaError

__all__ = [
    # Models
    "PropertyDescriptor",
    "PropertyKind",
    "SchemaError",
    # Core
    "Schema",
]
