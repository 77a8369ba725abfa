"""List command for apm."""

from pathlib import Path

from app_plugin_manager.errors import DescriptorError
from app_plugin_manager.platform_json import PlatformJson, list_platforms_with_metadata
from app_plugin_manager.platforms import default_platforms
from app_plugin_manager.plugin_info import PluginInfo
from app_plugin_manager.project_utils import find_project_dir, scan_plugins


def register(subparsers):
    """Register the list command."""
    parser = subparsers.add_parser("list", help="List installed plugins")
    parser.add_argument("--platform", default=None, help="Only list plugins installed on this platform")
    parser.add_argument("--project", default=None, help="Project directory (defaults to auto-detect)")
    parser.add_argument("--plugins-dir", default=None, help="Plugins directory (defaults to <project>/plugins)")
    return cmd_list


def _plugin_version(plugin_path):
    try:
        version = PluginInfo(plugin_path).version
    except DescriptorError:
        return "invalid"
    return str(version) if version else "unknown"


def cmd_list(args):
    """List plugins per platform."""
    project_dir = Path(args.project).resolve() if args.project else Path(find_project_dir())
    plugins_dir = Path(args.plugins_dir).resolve() if args.plugins_dir else project_dir / "plugins"

    plugins = dict(scan_plugins(plugins_dir))
    if not plugins:
        print("No plugins installed.")
        return

    platforms = [args.platform] if args.platform else list_platforms_with_metadata(plugins_dir, default_platforms())
    metadata = {platform: PlatformJson.load(plugins_dir, platform) for platform in platforms}
    for platform, platform_json in metadata.items():
        installed = list(platform_json.installed_plugins) + list(platform_json.dependent_plugins)
        print(f"{platform} ({len(installed)}):")
        for plugin_id in installed:
            marker = "*" if platform_json.is_plugin_top_level(plugin_id) else " "
            version = _plugin_version(plugins[plugin_id]) if plugin_id in plugins else "missing"
            print(f"  {marker} {plugin_id:40} v{version}")

    orphans = [
        name for name in plugins
        if not any(platform_json.is_plugin_installed(name) for platform_json in metadata.values())
    ]
    if orphans:
        print(f"Not installed on any platform ({len(orphans)}):")
        for name in orphans:
            print(f"    {name:40} v{_plugin_version(plugins[name])}")
