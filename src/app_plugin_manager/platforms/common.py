"""File helpers and asset handling shared by all platforms."""

import logging
import shutil
from pathlib import Path

from app_plugin_manager.errors import PluginError
from app_plugin_manager.platforms.base import FileHandler

logger = logging.getLogger(__name__)


def _ensure_inside(path: Path, root: Path, what: str) -> None:
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        raise PluginError(f'{what} "{path}" is located outside of "{root}"')


def copy_file(plugin_dir, src, project_dir, dest) -> Path:
    """
    Copy a file or directory from a plugin into a project.

    Args:
        plugin_dir: Plugin directory the source is relative to
        src: Source path relative to plugin_dir
        project_dir: Project directory the destination is relative to
        dest: Destination path relative to project_dir

    Returns:
        The destination path
    """
    plugin_dir = Path(plugin_dir)
    project_dir = Path(project_dir)
    src_path = plugin_dir / src
    dest_path = project_dir / dest

    if not src_path.exists():
        raise PluginError(f'"{src_path}" not found!')
    _ensure_inside(src_path, plugin_dir, "File")
    _ensure_inside(dest_path, project_dir, "Destination")

    dest_path.parent.mkdir(parents=True, exist_ok=True)
    if src_path.is_dir():
        shutil.copytree(src_path, dest_path, dirs_exist_ok=True)
    else:
        shutil.copy2(src_path, dest_path)
    return dest_path


def copy_new_file(plugin_dir, src, project_dir, dest) -> Path:
    """Like copy_file, but refuses to overwrite an existing destination."""
    dest_path = Path(project_dir) / dest
    if dest_path.exists():
        raise PluginError(f'"{dest_path}" already exists!')
    return copy_file(plugin_dir, src, project_dir, dest)


def remove_file(project_dir, dest) -> None:
    """Remove a file or directory from a project; missing targets are ignored."""
    project_dir = Path(project_dir)
    path = project_dir / dest
    _ensure_inside(path, project_dir, "Destination")
    if path.resolve() == project_dir.resolve():
        raise PluginError(f'Refusing to remove "{project_dir}" itself')

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    else:
        return
    logger.debug("Removed %s", path)


def remove_file_and_parents(base_dir, dest, stop_dir=None) -> None:
    """
    Remove a file, then every parent directory left empty, up to stop_dir.

    Args:
        base_dir: Directory dest is relative to
        dest: Relative path of the file to remove
        stop_dir: Directory (relative to base_dir) that is never removed
    """
    base_dir = Path(base_dir)
    stop = (base_dir / stop_dir).resolve() if stop_dir else base_dir.resolve()
    remove_file(base_dir, dest)

    current = (base_dir / dest).parent
    while current.resolve() != stop and current.resolve() != base_dir.resolve():
        try:
            if any(current.iterdir()):
                break
            current.rmdir()
        except FileNotFoundError:
            pass
        current = current.parent


def _install_asset(asset, plugin_dir, www_dir):
    copy_file(plugin_dir, asset["src"], www_dir, asset["target"])


def _uninstall_asset(asset, www_dir, plugin_id):
    remove_file_and_parents(www_dir, asset["target"])


asset = FileHandler(_install_asset, _uninstall_asset)
