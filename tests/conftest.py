"""Shared fixtures: throwaway projects with plugins and platform metadata."""

import json
from pathlib import Path

import pytest

from app_plugin_manager.platforms.base import FileHandler, PlatformHandler


def write_plugin(
    plugins_dir: Path,
    plugin_id: str,
    dependencies=(),
    platforms=None,
    assets=None,
    version="1.0.0",
) -> Path:
    """Create a plugin directory with a plugin.json and every file it references.

    Args:
        plugins_dir: Directory holding the plugins.
        plugin_id: Plugin id, also used as directory name.
        dependencies: Ids the plugin depends on.
        platforms: Mapping of platform -> {kind: [entries]}.
        assets: Shared asset entries.
        version: Descriptor version.
    """
    plugin_dir = plugins_dir / plugin_id
    plugin_dir.mkdir(parents=True)
    descriptor = {
        "id": plugin_id,
        "version": version,
        "dependencies": list(dependencies),
        "assets": list(assets or []),
        "platforms": platforms or {},
    }
    (plugin_dir / "plugin.json").write_text(json.dumps(descriptor, indent=2), encoding="utf-8")

    entries = list(descriptor["assets"])
    for section in descriptor["platforms"].values():
        for kind_entries in section.values():
            entries.extend(kind_entries)
    for entry in entries:
        src = plugin_dir / entry["src"]
        src.parent.mkdir(parents=True, exist_ok=True)
        src.write_text(f"// {plugin_id}: {entry['src']}\n", encoding="utf-8")

    return plugin_dir


def write_platform_json(plugins_dir: Path, platform: str, installed=(), dependent=()) -> Path:
    """Write <platform>.json listing top-level and dependent plugins."""
    path = plugins_dir / f"{platform}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    document = {
        "prepare_queue": {"installed": [], "uninstalled": []},
        "config_munge": {"files": {}},
        "installed_plugins": {plugin_id: {} for plugin_id in installed},
        "dependent_plugins": {plugin_id: {} for plugin_id in dependent},
    }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def read_platform_json(plugins_dir: Path, platform: str) -> dict:
    return json.loads((plugins_dir / f"{platform}.json").read_text(encoding="utf-8"))


class RecordingHandler(PlatformHandler):
    """Platform handler that records every file action instead of touching files.

    ``fail_on`` names an (operation, src) pair whose forward step raises.
    """

    name = "fake"

    def __init__(self, log, fail_on=None):
        super().__init__()
        self.log = log
        self.fail_on = fail_on
        self.handlers = {
            kind: FileHandler(self._install(kind), self._uninstall(kind))
            for kind in ("source-file", "header-file", "lib-file", "resource-file", "framework")
        }

    def _install(self, kind):
        def install(entry, plugin_dir, project_dir, plugin_id, options):
            self.log.append(("install", plugin_id, entry["src"]))

        return install

    def _uninstall(self, kind):
        def uninstall(entry, project_dir, plugin_id, options):
            if self.fail_on == ("uninstall", entry["src"]):
                raise OSError(f"cannot remove {entry['src']}")
            self.log.append(("uninstall", plugin_id, entry["src"]))

        return uninstall


def source_files(*names):
    return {"fake": {"source-file": [{"src": f"src/{name}"} for name in names]}}


@pytest.fixture
def project(tmp_path):
    """A project directory with an empty plugins directory."""
    project_dir = tmp_path / "project"
    (project_dir / "plugins").mkdir(parents=True)
    return project_dir


@pytest.fixture
def plugins_dir(project):
    return project / "plugins"


@pytest.fixture
def action_log():
    return []
