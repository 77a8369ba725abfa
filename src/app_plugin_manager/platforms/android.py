"""Android project file handling."""

import os

from app_plugin_manager.platforms import common
from app_plugin_manager.platforms.base import FileHandler, PlatformHandler


def _source_dest(entry):
    return os.path.join(entry.get("target-dir", "src"), os.path.basename(entry["src"]))


def _private_dest(entry, plugin_id):
    """Headers and custom frameworks are kept in a per-plugin project directory."""
    return os.path.join(plugin_id, entry.get("target-dir", ""), os.path.basename(entry["src"]))


def _install_source(entry, plugin_dir, project_dir, plugin_id, options):
    common.copy_new_file(plugin_dir, entry["src"], project_dir, _source_dest(entry))


def _uninstall_source(entry, project_dir, plugin_id, options):
    common.remove_file_and_parents(project_dir, _source_dest(entry), stop_dir="src")


def _install_private(entry, plugin_dir, project_dir, plugin_id, options):
    common.copy_file(plugin_dir, entry["src"], project_dir, _private_dest(entry, plugin_id))


def _uninstall_private(entry, project_dir, plugin_id, options):
    common.remove_file_and_parents(project_dir, _private_dest(entry, plugin_id))


def _lib_dest(entry):
    return os.path.join("libs", os.path.basename(entry["src"]))


def _install_lib(entry, plugin_dir, project_dir, plugin_id, options):
    common.copy_file(plugin_dir, entry["src"], project_dir, _lib_dest(entry))


def _uninstall_lib(entry, project_dir, plugin_id, options):
    common.remove_file(project_dir, _lib_dest(entry))


def _install_resource(entry, plugin_dir, project_dir, plugin_id, options):
    common.copy_file(plugin_dir, entry["src"], project_dir, entry["target"])


def _uninstall_resource(entry, project_dir, plugin_id, options):
    common.remove_file(project_dir, entry["target"])


class AndroidHandler(PlatformHandler):
    name = "android"
    www_subdir = os.path.join("assets", "www")

    def __init__(self):
        super().__init__()
        self.handlers = {
            "source-file": FileHandler(_install_source, _uninstall_source),
            "header-file": FileHandler(_install_private, _uninstall_private),
            "lib-file": FileHandler(_install_lib, _uninstall_lib),
            "resource-file": FileHandler(_install_resource, _uninstall_resource),
            "framework": FileHandler(_install_private, _uninstall_private),
        }
