"""Save: sync followed by persistence and destroy actions.

Order of a save:
1. sync the whole graph (no-block form)
2. persist the twin's own model(s)
3. recurse into nested twins
4. for each collection, save every current element in order, then destroy
   the models of elements marked with `destroy()`

Save is NOT transactional. A failure leaves every model written or saved
earlier in the traversal as it is; wrap the call in the storage backend's own
transaction if atomicity is required.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from twinkit.core.capabilities import composed_models, persist_model
from twinkit.core.schema import PropertyKind
from twinkit.sync.engine import SyncBlock, sync

if TYPE_CHECKING:
    from twinkit.twin.twin import Twin

logger = logging.getLogger(__name__)


def save(twin: Twin, block: SyncBlock | None = None) -> Any:
    """Sync the twin graph and persist every model it touches.

    Args:
        twin: Root of the graph to save.
        block: If given, behaves as `sync(twin, block)`: nothing is written
            or persisted and the block's return value is returned.

    Returns:
        True when every persistence action succeeded. False is only possible
        with `raise_on_failed_save` disabled.

    Raises:
        PersistenceError: If a save or destroy action fails.
        BindingError: If a property cannot be written during sync.
    """
    if block is not None:
        return sync(twin, block)
    sync(twin)
    return _persist(twin)


def _persist(twin: Twin) -> bool:
    ok = True
    for model in composed_models(twin.model, twin.schema.is_composition):
        ok = persist_model(model, twin.settings) and ok

    for descriptor in twin.schema:
        if not descriptor.writes_model:
            continue
        value = twin.get(descriptor.name)
        if descriptor.kind is PropertyKind.NESTED and value is not None:
            ok = _persist(value) and ok
        elif descriptor.kind is PropertyKind.COLLECTION:
            for element in value:
                ok = _persist(element) and ok
            destroyed = value.finalize_destroys()
            if destroyed:
                logger.debug(
                    "Destroyed %d element(s) of %s.%s",
                    len(destroyed),
                    twin.schema.name,
                    descriptor.name,
                )
    return ok
