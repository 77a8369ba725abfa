"""Platform handler capability interface."""

from pathlib import Path
from typing import Any, Callable, Dict, NamedTuple

from app_plugin_manager.errors import PluginError


class FileHandler(NamedTuple):
    """install/uninstall pair for one kind of plugin file."""

    install: Callable[..., Any]
    uninstall: Callable[..., Any]


class PlatformHandler:
    """
    Capabilities of one target platform.

    Subclasses fill in ``handlers`` with a FileHandler for every native file
    kind (source-file, header-file, lib-file, resource-file, framework). Native
    handlers are called as::

        install(entry, plugin_dir, project_dir, plugin_id, options)
        uninstall(entry, project_dir, plugin_id, options)
    """

    name = ""
    www_subdir = "www"

    def __init__(self):
        self.handlers: Dict[str, FileHandler] = {}

    def www_dir(self, project_dir) -> Path:
        return Path(project_dir) / self.www_subdir

    def handler_for(self, kind: str) -> FileHandler:
        try:
            return self.handlers[kind]
        except KeyError:
            raise PluginError(f"{self.name} does not support {kind} entries") from None
