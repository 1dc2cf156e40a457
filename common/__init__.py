"""Common utilities shared across backend services."""

from common.utils.config import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
