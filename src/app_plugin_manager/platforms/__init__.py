"""Platform handlers."""

from typing import Dict

from app_plugin_manager.platforms.android import AndroidHandler
from app_plugin_manager.platforms.base import FileHandler, PlatformHandler
from app_plugin_manager.platforms.browser import BrowserHandler


def default_platforms() -> Dict[str, PlatformHandler]:
    """Return a fresh capability map of the built-in platforms."""
    return {
        "android": AndroidHandler(),
        "browser": BrowserHandler(),
    }
