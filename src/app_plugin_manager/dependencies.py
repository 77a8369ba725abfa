"""Dependency graph built from per-platform plugin metadata."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from app_plugin_manager.platform_json import PlatformJson
from app_plugin_manager.plugin_info import PluginInfoProvider, descriptor_path

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed graph whose edges read "depends on"."""

    def __init__(self):
        self._edges: Dict[str, List[str]] = {}

    def add(self, plugin_id: str, dependency_id: Optional[str] = None) -> None:
        deps = self._edges.setdefault(plugin_id, [])
        if dependency_id is not None:
            self._edges.setdefault(dependency_id, [])
            if dependency_id not in deps:
                deps.append(dependency_id)

    def direct_dependencies(self, plugin_id: str) -> List[str]:
        return list(self._edges.get(plugin_id, []))

    def get_chain(self, plugin_id: str) -> List[str]:
        """
        Return every plugin reachable from plugin_id, deepest dependencies first.

        Args:
            plugin_id: Plugin to start from

        Returns:
            List of ids, excluding plugin_id itself
        """
        chain: List[str] = []
        visited = {plugin_id}

        def visit(node):
            for dep in self._edges.get(node, []):
                if dep in visited:
                    continue
                visited.add(dep)
                visit(dep)
                chain.append(dep)

        visit(plugin_id)
        return chain


class DependencyInfo:
    """Snapshot of one platform's dependency state."""

    def __init__(self, graph: DependencyGraph, top_level_plugins: List[str]):
        self.graph = graph
        self.top_level_plugins = list(top_level_plugins)

    def is_top_level(self, plugin_id: str) -> bool:
        return plugin_id in self.top_level_plugins


def resolve_path(plugin_id: str, plugins_dir) -> Path:
    return Path(plugins_dir) / plugin_id


def generate_dependency_info(
    platform_json: PlatformJson,
    plugins_dir,
    provider: Optional[PluginInfoProvider] = None,
) -> DependencyInfo:
    """
    Build the dependency snapshot for one platform.

    Plugins listed in the metadata whose directory is gone are skipped.

    Args:
        platform_json: Loaded metadata of the platform
        plugins_dir: Directory holding the plugins
        provider: Optional descriptor cache shared with the caller

    Returns:
        DependencyInfo
    """
    provider = provider or PluginInfoProvider()
    graph = DependencyGraph()
    installed = list(platform_json.installed_plugins) + list(platform_json.dependent_plugins)

    for plugin_id in installed:
        plugin_dir = resolve_path(plugin_id, plugins_dir)
        if not descriptor_path(plugin_dir).exists():
            logger.debug('Plugin "%s" does not exist (%s)', plugin_id, plugin_dir)
            continue
        graph.add(plugin_id)
        for dep_id in provider.get(plugin_dir).get_dependencies():
            graph.add(plugin_id, dep_id)

    return DependencyInfo(graph, list(platform_json.installed_plugins))


def dependents(plugin_id: str, deps_info: DependencyInfo) -> List[str]:
    """Return the top-level plugins that transitively depend on plugin_id."""
    return [
        tlp
        for tlp in deps_info.top_level_plugins
        if tlp != plugin_id and plugin_id in deps_info.graph.get_chain(tlp)
    ]


def danglers(plugin_id: str, deps_info: DependencyInfo) -> List[str]:
    """
    Return the dependencies that would be left orphaned by removing plugin_id.

    A dependency dangles when it is not top-level and no top-level plugin other
    than plugin_id still reaches it.
    """
    result = []
    for dep in deps_info.graph.get_chain(plugin_id):
        if deps_info.is_top_level(dep):
            continue
        remaining = [d for d in dependents(dep, deps_info) if d != plugin_id]
        if not remaining:
            result.append(dep)
    return result
