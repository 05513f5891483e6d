"""Configuration settings using Pydantic Settings.

Controls the open behaviors of the twin engine and the names of the model
capabilities it calls during save.

Usage:
    from twinkit.config import TwinSettings

    # Load from environment variables (TWIN_*)
    settings = TwinSettings()

    # Or override with explicit values
    settings = TwinSettings(save_method="commit", raise_on_failed_save=False)
    twin = Twin(album_schema, album, settings=settings)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class TwinSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for twins, sync and save.

    Attributes:
        mark_identical_writes_dirty: Writing a value equal to the current one
            still marks the property changed.
        raise_on_failed_save: Raise PersistenceError when a model's save
            action returns False.
        save_method: Name of the model's zero-argument persistence action.
        destroy_method: Name of the element model's zero-argument destroy action.
        persisted_attribute: Name of the model's persisted flag (attribute or
            zero-argument method).

    Environment Variables:
        TWIN_MARK_IDENTICAL_WRITES_DIRTY
        TWIN_RAISE_ON_FAILED_SAVE
        TWIN_SAVE_METHOD
        TWIN_DESTROY_METHOD
        TWIN_PERSISTED_ATTRIBUTE
    """

    model_config = SettingsConfigDict(
        env_prefix="TWIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mark_identical_writes_dirty: bool = True
    raise_on_failed_save: bool = True
    save_method: str = "save"
    destroy_method: str = "destroy"
    persisted_attribute: str = "persisted"


@lru_cache(maxsize=1)
def get_settings() -> TwinSettings:
    """Process-wide default settings, loaded once from the environment."""
    return TwinSettings()
