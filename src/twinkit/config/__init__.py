"""Configuration module using Pydantic Settings.

Usage:
    from twinkit.config import TwinSettings, get_settings

    settings = TwinSettings(mark_identical_writes_dirty=False)
"""

from twinkit.config.settings import TwinSettings, get_settings

__all__ = [
    "TwinSettings",
    "get_settings",
]
