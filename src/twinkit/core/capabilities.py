"""Calling the optional model capabilities: persisted flag, save and destroy.

Capability names come from TwinSettings so models with other conventions
(`commit()`, `is_persisted`, ...) can be used without adapters.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from twinkit.config.settings import TwinSettings
from twinkit.core.types import Destroyable, HasPersisted, Model, Persistable, TwinError

logger = logging.getLogger(__name__)


class PersistenceError(TwinError):
    """Raised when a model's save or destroy action fails or is missing."""

    pass


def composed_models(source: Model | Mapping[str, Model], composition: bool) -> list[Model]:
    """List the models behind a twin source.

    Args:
        source: Single model or composition mapping.
        composition: Whether `source` is a composition mapping.

    Returns:
        The models in composition order, or the single model.
    """
    if composition:
        return [m for m in source.values() if m is not None]
    return [source]


def model_persisted(model: HasPersisted | Model, settings: TwinSettings) -> bool:
    """Read the model's persisted flag. Models without one count as not persisted."""
    flag = getattr(model, settings.persisted_attribute, False)
    if callable(flag):
        flag = flag()
    return bool(flag)


def source_persisted(
    source: Model | Mapping[str, Model], composition: bool, settings: TwinSettings
) -> bool:
    """A composition is persisted only when every composed model is."""
    models = composed_models(source, composition)
    return bool(models) and all(model_persisted(m, settings) for m in models)


def _run_action(model: Model, name: str) -> Any:
    action = getattr(model, name, None)
    if not callable(action):
        raise PersistenceError(f"{type(model).__name__} {model!r} has no {name}() action")
    return action()


def persist_model(model: Persistable | Model, settings: TwinSettings) -> bool:
    """Invoke the model's persistence action.

    Returns:
        False only when the action reported failure and failures are not raised.

    Raises:
        PersistenceError: If the action is missing, or returned False while
            `settings.raise_on_failed_save` is set.
    """
    logger.debug("Saving %s", type(model).__name__)
    result = _run_action(model, settings.save_method)
    if result is False:
        if settings.raise_on_failed_save:
            raise PersistenceError(
                f"{settings.save_method}() failed for {type(model).__name__} {model!r}"
            )
        logger.warning("%s() returned False for %r", settings.save_method, model)
        return False
    return True


def destroy_model(model: Destroyable | Model, settings: TwinSettings) -> bool:
    """Invoke the model's destroy action, with the same failure rules as `persist_model`."""
    logger.debug("Destroying %s", type(model).__name__)
    result = _run_action(model, settings.destroy_method)
    if result is False:
        if settings.raise_on_failed_save:
            raise PersistenceError(
                f"{settings.destroy_method}() failed for {type(model).__name__} {model!r}"
            )
        logger.warning("%s() returned False for %r", settings.destroy_method, model)
        return False
    return True
