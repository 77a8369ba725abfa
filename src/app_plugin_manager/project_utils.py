"""Project and plugin directory discovery."""

import os
from typing import List, Tuple

from app_plugin_manager.plugin_info import DESCRIPTOR_NAME

PROJECT_MARKER = "config.xml"


def find_project_dir(start_dir=None):
    """
    Find the project directory (where config.xml is located).

    Args:
        start_dir: Starting directory for search (defaults to current working directory)

    Returns:
        str: Path to project directory
    """
    if start_dir is None:
        start_dir = os.getcwd()

    current_dir = os.path.abspath(start_dir)

    # Start from the current directory and walk up
    search_dir = current_dir
    while search_dir != os.path.dirname(search_dir):  # Stop at filesystem root
        if os.path.exists(os.path.join(search_dir, PROJECT_MARKER)):
            return search_dir
        search_dir = os.path.dirname(search_dir)

    # Fallback: return current directory
    return current_dir


def scan_plugins(plugins_dir) -> List[Tuple[str, str]]:
    """
    Scan a plugins directory for plugin directories.

    Args:
        plugins_dir: Directory holding the plugins

    Returns:
        Sorted list of tuples (directory_name, plugin_path)
    """
    if not os.path.isdir(plugins_dir):
        return []

    plugins = []
    for name in sorted(os.listdir(plugins_dir)):
        plugin_path = os.path.join(plugins_dir, name)
        if name.startswith(".") or not os.path.isdir(plugin_path):
            continue
        if os.path.isfile(os.path.join(plugin_path, DESCRIPTOR_NAME)):
            plugins.append((name, plugin_path))
    return plugins
