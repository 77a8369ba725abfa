"""Per-platform plugin metadata (<plugins_dir>/<platform>.json)."""

import json
from pathlib import Path
from typing import Dict, Any, Iterable, List


def _empty_document() -> Dict[str, Any]:
    return {
        "prepare_queue": {"installed": [], "uninstalled": []},
        "config_munge": {"files": {}},
        "installed_plugins": {},
        "dependent_plugins": {},
    }


def metadata_path(plugins_dir, platform: str) -> Path:
    return Path(plugins_dir) / f"{platform}.json"


def list_platforms_with_metadata(plugins_dir, platforms: Iterable[str]) -> List[str]:
    """Return the platforms that have a metadata file in plugins_dir."""
    return [p for p in platforms if metadata_path(plugins_dir, p).exists()]


class PlatformJson:
    """Reads and writes the metadata of one platform."""

    def __init__(self, file_path, platform: str, root: Dict[str, Any]):
        """
        Args:
            file_path: Location of the metadata file
            platform: Platform name
            root: Decoded document
        """
        self.file_path = Path(file_path)
        self.platform = platform
        self.root = root

    @classmethod
    def load(cls, plugins_dir, platform: str) -> "PlatformJson":
        """
        Load the metadata for a platform.

        Args:
            plugins_dir: Directory holding plugins and metadata files
            platform: Platform name

        Returns:
            PlatformJson, with an empty document if the file doesn't exist
        """
        file_path = metadata_path(plugins_dir, platform)
        root = _empty_document()
        if file_path.exists():
            with open(file_path, "r", encoding="utf-8") as f:
                root.update(json.load(f))
        return cls(file_path, platform, root)

    def save(self) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(self.root, f, indent=2, ensure_ascii=False)

    @property
    def installed_plugins(self) -> Dict[str, Any]:
        return self.root.setdefault("installed_plugins", {})

    @property
    def dependent_plugins(self) -> Dict[str, Any]:
        return self.root.setdefault("dependent_plugins", {})

    @property
    def prepare_queue(self) -> Dict[str, List[Dict[str, Any]]]:
        queue = self.root.setdefault("prepare_queue", {})
        queue.setdefault("installed", [])
        queue.setdefault("uninstalled", [])
        return queue

    def is_plugin_top_level(self, plugin_id: str) -> bool:
        return plugin_id in self.installed_plugins

    def is_plugin_installed(self, plugin_id: str) -> bool:
        return plugin_id in self.installed_plugins or plugin_id in self.dependent_plugins

    def is_plugin_pending_uninstall(self, plugin_id: str) -> bool:
        return any(entry.get("id") == plugin_id for entry in self.prepare_queue["uninstalled"])

    def add_uninstalled_plugin_to_prepare_queue(self, plugin_id: str, is_top_level: bool) -> None:
        """Queue a plugin so the next prepare drops its configuration."""
        self.prepare_queue["uninstalled"].append(
            {"plugin": plugin_id, "id": plugin_id, "topLevel": bool(is_top_level)}
        )

    def remove_plugin(self, plugin_id: str) -> None:
        """Remove a plugin from both the top-level and the dependent sets."""
        self.installed_plugins.pop(plugin_id, None)
        self.dependent_plugins.pop(plugin_id, None)
