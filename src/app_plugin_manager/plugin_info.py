"""Plugin descriptor (plugin.json) parsing."""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional

import semver

from app_plugin_manager.errors import DescriptorError

DESCRIPTOR_NAME = "plugin.json"

# Native file kinds a platform section may declare, in the order they are queued
FILE_KINDS = ("source-file", "header-file", "resource-file", "framework", "lib-file")


def descriptor_path(plugin_dir) -> Path:
    """Return the path of the descriptor inside a plugin directory."""
    return Path(plugin_dir) / DESCRIPTOR_NAME


def read_descriptor(plugin_dir) -> Dict[str, Any]:
    """
    Read and decode a plugin's plugin.json.

    Args:
        plugin_dir: Plugin directory

    Returns:
        Decoded descriptor

    Raises:
        DescriptorError: If the file is missing or not a JSON object
    """
    path = descriptor_path(plugin_dir)
    if not path.exists():
        raise DescriptorError(f"No {DESCRIPTOR_NAME} found in {plugin_dir}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DescriptorError(f"Invalid {path}: {e}") from e

    if not isinstance(data, dict):
        raise DescriptorError(f"Invalid {path}: expected an object")
    return data


class PluginInfo:
    """Parsed view of one plugin's descriptor."""

    def __init__(self, plugin_dir):
        """
        Load a plugin descriptor.

        Args:
            plugin_dir: Directory containing plugin.json
        """
        self.dir = Path(plugin_dir)
        self._data = read_descriptor(self.dir)

        plugin_id = self._data.get("id")
        if not plugin_id or not isinstance(plugin_id, str):
            raise DescriptorError(f"{descriptor_path(self.dir)} has no plugin id")
        self.id = plugin_id

        self.version: Optional[semver.Version] = None
        raw_version = self._data.get("version")
        if raw_version is not None:
            try:
                self.version = semver.Version.parse(str(raw_version))
            except ValueError as e:
                raise DescriptorError(f"Plugin {plugin_id} has invalid version '{raw_version}'") from e

    def __repr__(self):
        return f"PluginInfo({self.id})"

    def get_dependencies(self) -> List[str]:
        """Return the ids this plugin depends on, in declaration order."""
        deps = []
        for dep in self._data.get("dependencies", []):
            dep_id = dep.get("id") if isinstance(dep, dict) else dep
            if not dep_id:
                raise DescriptorError(f"Plugin {self.id} declares a dependency without an id")
            if dep_id not in deps:
                deps.append(dep_id)
        return deps

    def _platform_section(self, platform: str) -> Dict[str, Any]:
        return self._data.get("platforms", {}).get(platform) or {}

    def _checked(self, entries, kind: str, required=("src",)) -> List[Dict[str, Any]]:
        for entry in entries:
            if not isinstance(entry, dict):
                raise DescriptorError(f"Plugin {self.id} has an invalid {kind} entry: {entry!r}")
            missing = [key for key in required if not entry.get(key)]
            if missing:
                raise DescriptorError(f"Plugin {self.id} has a {kind} entry without {', '.join(missing)}")
        return list(entries)

    def get_assets(self, platform: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Return asset entries.

        Args:
            platform: When given, platform-scoped assets are appended to the shared ones

        Returns:
            List of asset entries

        Raises:
            DescriptorError: If an entry lacks src or target
        """
        assets = list(self._data.get("assets", []))
        if platform is not None:
            assets.extend(self._platform_section(platform).get("asset", []))
        return self._checked(assets, "asset", ("src", "target"))

    def get_files(self, platform: str, kind: str) -> List[Dict[str, Any]]:
        """Return the entries of one native file kind for a platform."""
        if kind == "framework":
            return self.get_frameworks(platform)
        required = ("src", "target") if kind == "resource-file" else ("src",)
        return self._checked(self._platform_section(platform).get(kind, []), kind, required)

    def get_frameworks(self, platform: str) -> List[Dict[str, Any]]:
        """Return custom framework entries; system frameworks carry no files."""
        frameworks = self._checked(self._platform_section(platform).get("framework", []), "framework")
        return [fw for fw in frameworks if fw.get("custom") in (True, "true")]


class PluginInfoProvider:
    """Caches PluginInfo objects by directory for the span of one operation."""

    def __init__(self):
        self._cache: Dict[Path, PluginInfo] = {}

    def get(self, plugin_dir) -> PluginInfo:
        key = Path(plugin_dir).resolve()
        if key not in self._cache:
            self._cache[key] = PluginInfo(plugin_dir)
        return self._cache[key]
