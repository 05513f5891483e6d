"""twinkit: mutable twin graphs over persistent models with deferred writes.

Usage:
    from twinkit import Group, Schema, Twin, on_add

    song = Schema("Song").property("name").property("index")
    album = Schema("Album").property("title").collection("songs", twin=song)

    twin = Twin(album, album_model)
    twin["title"] = "Skamobile"
    twin["songs"].append(Song("Adondo", 1))

    twin.save()        # writes back, then persists album and songs
    Group().collection("songs", on_add(notify)).run(twin)
"""

__version__ = "0.1.0"

# Callbacks
from twinkit.callbacks import (
    Append,
    Callback,
    Event,
    Group,
    GroupError,
    Invocation,
    Refine,
    Remove,
    compose,
    on_add,
    on_change,
    on_delete,
    on_destroy,
    on_update,
    run_callbacks,
)

# Configuration
from twinkit.config import TwinSettings, get_settings

# Core primitives
from twinkit.core import (
    BindingError,
    PersistenceError,
    PropertyDescriptor,
    PropertyKind,
    Schema,
    SchemaError,
    TwinError,
)

# Sync and save
from twinkit.sync import save, sync, to_nested

# Twin graph
from twinkit.twin import ChangeTracker, CollectionProxy, Twin

__all__ = [
    # Version
    "__version__",
    # Config
    "TwinSettings",
    "get_settings",
    # Core
    "Schema",
    "PropertyDescriptor",
    "PropertyKind",
    "TwinError",
    "SchemaError",
    "BindingError",
    "PersistenceError",
    # Twin
    "Twin",
    "CollectionProxy",
    "ChangeTracker",
    # Sync
    "sync",
    "save",
    "to_nested",
    # Callbacks
    "Event",
    "Callback",
    "Group",
    "GroupError",
    "Invocation",
    "Append",
    "Remove",
    "Refine",
    "compose",
    "run_callbacks",
    "on_update",
    "on_add",
    "on_delete",
    "on_destroy",
    "on_change",
]
