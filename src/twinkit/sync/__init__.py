"""Sync and save: committing a twin graph to its models."""

from twinkit.core.capabilities import PersistenceError
from twinkit.sync.engine import SyncBlock, sync, to_nested
from twinkit.sync.save import save

__all__ = [
    "sync",
    "save",
    "to_nested",
    "SyncBlock",
    "PersistenceError",
]
