"""Prepare step: reconcile a platform project with its plugin metadata."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader

from app_plugin_manager.dependencies import resolve_path
from app_plugin_manager.platform_json import PlatformJson
from app_plugin_manager.platforms import common
from app_plugin_manager.plugin_info import PluginInfoProvider, descriptor_path

logger = logging.getLogger(__name__)

PLUGIN_LIST_NAME = "plugin_list.js"


def _installed_modules(
    platform_json: PlatformJson,
    plugins_dir,
    provider: PluginInfoProvider,
) -> List[Dict[str, Any]]:
    modules = []
    for plugin_id in list(platform_json.installed_plugins) + list(platform_json.dependent_plugins):
        plugin_dir = resolve_path(plugin_id, plugins_dir)
        if not descriptor_path(plugin_dir).exists():
            logger.debug('Plugin "%s" does not exist (%s)', plugin_id, plugin_dir)
            continue
        info = provider.get(plugin_dir)
        modules.append({
            "id": info.id,
            "version": str(info.version) if info.version else None,
            "top_level": platform_json.is_plugin_top_level(plugin_id),
            "assets": [asset["target"] for asset in info.get_assets(platform_json.platform)],
        })
    return modules


def render_plugin_list(platform: str, modules: List[Dict[str, Any]]) -> str:
    env = Environment(loader=PackageLoader("app_plugin_manager", "templates"), keep_trailing_newline=True)
    template = env.get_template(f"{PLUGIN_LIST_NAME}.j2")
    return template.render(platform=platform, plugins=modules)


def prepare(
    project_dir,
    platform: str,
    plugins_dir,
    www_dir,
    provider: Optional[PluginInfoProvider] = None,
) -> List[str]:
    """
    Drain the uninstall queue and regenerate the plugin list.

    Args:
        project_dir: Platform project directory
        platform: Platform name
        plugins_dir: Directory holding plugins and metadata files
        www_dir: Web asset directory of the platform project
        provider: Optional descriptor cache

    Returns:
        Ids of the plugins dropped from the metadata
    """
    provider = provider or PluginInfoProvider()
    www_dir = Path(www_dir)
    platform_json = PlatformJson.load(plugins_dir, platform)

    removed = []
    for entry in platform_json.prepare_queue["uninstalled"]:
        plugin_id = entry["id"]
        platform_json.remove_plugin(plugin_id)
        common.remove_file(www_dir, os.path.join("plugins", plugin_id))
        removed.append(plugin_id)
        logger.debug("Dropped %s from %s metadata", plugin_id, platform)
    platform_json.prepare_queue["uninstalled"] = []
    platform_json.save()

    www_dir.mkdir(parents=True, exist_ok=True)
    modules = _installed_modules(platform_json, plugins_dir, provider)
    (www_dir / PLUGIN_LIST_NAME).write_text(render_plugin_list(platform, modules), encoding="utf-8")
    logger.info("Prepared %s project in %s (%d plugin(s))", platform, project_dir, len(modules))
    return removed
