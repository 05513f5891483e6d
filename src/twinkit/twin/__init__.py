"""Twin graph: twins, collection proxies and change tracking."""

from twinkit.twin.changes import ChangeTracker
from twinkit.twin.collection import CollectionProxy
from twinkit.twin.twin import Twin, twin_element, twin_value

__all__ = [
    "Twin",
    "CollectionProxy",
    "ChangeTracker",
    "twin_value",
    "twin_element",
]
