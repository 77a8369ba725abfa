"""Version command for apm."""

import tomllib
from pathlib import Path


def get_apm_version():
    """Get the version of app-plugin-manager from pyproject.toml or installed package."""
    # Development checkout: <root>/src/app_plugin_manager/commands/version.py
    package_dir = Path(__file__).parent.parent.parent.parent
    pyproject_path = package_dir / "pyproject.toml"

    if pyproject_path.exists():
        try:
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
                version = data.get("project", {}).get("version")
                if version:
                    return version
        except (OSError, tomllib.TOMLDecodeError):
            pass

    # Fallback: try to get from installed package metadata
    try:
        from importlib.metadata import version as get_package_version
        return get_package_version("app-plugin-manager")
    except Exception:
        return "unknown"


def register(subparsers):
    """Register the version command."""
    subparsers.add_parser("version", help="Show the apm version")
    return cmd_version


def cmd_version(args):
    """Display the version of app-plugin-manager."""
    print(get_apm_version())
