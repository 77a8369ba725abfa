"""Remove command for apm."""

import sys
from pathlib import Path

from app_plugin_manager.cascade import RemovalOutcome
from app_plugin_manager.errors import PluginError
from app_plugin_manager.options import UninstallOptions
from app_plugin_manager.platform_json import list_platforms_with_metadata
from app_plugin_manager.project_utils import find_project_dir
from app_plugin_manager.uninstaller import Uninstaller, default_plugins_dir, resolve_plugin_id


def register(subparsers):
    """Register the remove command."""
    parser = subparsers.add_parser("remove", help="Remove a plugin and its unused dependencies")
    parser.add_argument("plugin", help="Plugin id, or path to the plugin directory")
    parser.add_argument(
        "--platform",
        action="append",
        dest="platforms",
        help="Platform to remove the plugin from (repeatable; defaults to every installed platform)",
    )
    parser.add_argument("--project", default=None, help="Project directory (defaults to auto-detect)")
    parser.add_argument("--plugins-dir", default=None, help="Plugins directory (defaults to <project>/plugins)")
    parser.add_argument("--www", default=None, help="Web asset directory of the platform project")
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Remove the plugin even if other installed plugins depend on it",
    )
    return cmd_remove


def cmd_remove(args):
    """Remove a plugin."""
    project_dir = Path(args.project).resolve() if args.project else Path(find_project_dir())
    plugins_dir = Path(args.plugins_dir).resolve() if args.plugins_dir else default_plugins_dir(project_dir)
    uninstaller = Uninstaller()
    options = UninstallOptions(force=args.force, www_dir=args.www)

    platforms = args.platforms or list_platforms_with_metadata(plugins_dir, uninstaller.platforms)
    if not platforms:
        print(f"No platforms with installed plugins found in {plugins_dir}.")
        return

    try:
        plugin_id = resolve_plugin_id(args.plugin)
        if not (plugins_dir / plugin_id).exists():
            print(f"Plugin {plugin_id} is not installed.")
            return

        for platform in platforms:
            uninstaller.uninstall_platform(platform, project_dir, plugin_id, plugins_dir, options)
        results = uninstaller.uninstall_plugin(plugin_id, plugins_dir, options)
    except PluginError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for result in results:
        if result.outcome is RemovalOutcome.REMOVED:
            print(f"  ✓ Removed {result.plugin_id}")
        elif result.outcome is RemovalOutcome.SKIPPED_BLOCKED:
            print(f"  - Kept {result.plugin_id}: {result.reason}")
    print(f"Removed {plugin_id}")
