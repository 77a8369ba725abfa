"""Prepare command for apm."""

import sys
from pathlib import Path

from app_plugin_manager.platforms import default_platforms
from app_plugin_manager.prepare import prepare
from app_plugin_manager.project_utils import find_project_dir


def register(subparsers):
    """Register the prepare command."""
    parser = subparsers.add_parser("prepare", help="Reconcile a platform project with its plugin metadata")
    parser.add_argument("--platform", required=True, help="Platform to prepare")
    parser.add_argument("--project", default=None, help="Project directory (defaults to auto-detect)")
    parser.add_argument("--plugins-dir", default=None, help="Plugins directory (defaults to <project>/plugins)")
    parser.add_argument("--www", default=None, help="Web asset directory of the platform project")
    return cmd_prepare


def cmd_prepare(args):
    """Run the prepare step for one platform."""
    handlers = default_platforms()
    if args.platform not in handlers:
        print(f"Error: {args.platform} not supported.", file=sys.stderr)
        sys.exit(1)

    project_dir = Path(args.project).resolve() if args.project else Path(find_project_dir())
    plugins_dir = Path(args.plugins_dir).resolve() if args.plugins_dir else project_dir / "plugins"
    www_dir = Path(args.www) if args.www else handlers[args.platform].www_dir(project_dir)

    removed = prepare(project_dir, args.platform, plugins_dir, www_dir)
    for plugin_id in removed:
        print(f"  ✓ Dropped {plugin_id}")
    print(f"Prepared {args.platform}")
