"""Browser project file handling; only source files are supported."""

import logging
import os

from app_plugin_manager.platforms import common
from app_plugin_manager.platforms.base import FileHandler, PlatformHandler

logger = logging.getLogger(__name__)


def _source_dest(entry, plugin_id):
    return os.path.join("www", "plugins", plugin_id, os.path.basename(entry["src"]))


def _install_source(entry, plugin_dir, project_dir, plugin_id, options):
    common.copy_file(plugin_dir, entry["src"], project_dir, _source_dest(entry, plugin_id))


def _uninstall_source(entry, project_dir, plugin_id, options):
    common.remove_file_and_parents(project_dir, _source_dest(entry, plugin_id), stop_dir="www")


def _unsupported(kind):
    def install(entry, plugin_dir, project_dir, plugin_id, options):
        logger.debug("%s.install is not supported for browser", kind)

    def uninstall(entry, project_dir, plugin_id, options):
        logger.debug("%s.uninstall is not supported for browser", kind)

    return FileHandler(install, uninstall)


class BrowserHandler(PlatformHandler):
    name = "browser"

    def __init__(self):
        super().__init__()
        self.handlers = {
            "source-file": FileHandler(_install_source, _uninstall_source),
            "header-file": _unsupported("header-file"),
            "lib-file": _unsupported("lib-file"),
            "resource-file": _unsupported("resource-file"),
            "framework": _unsupported("framework"),
        }
