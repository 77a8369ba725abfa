"""Plugin removal: per-platform uninstall and plugin directory cleanup."""

import dataclasses
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from app_plugin_manager import cascade
from app_plugin_manager.action_stack import ActionStack, create_action
from app_plugin_manager.dependencies import (
    DependencyInfo,
    danglers,
    dependents,
    generate_dependency_info,
    resolve_path,
)
from app_plugin_manager.errors import DependencyConflictError, PluginNotFoundError, UnsupportedPlatformError
from app_plugin_manager.hooks import BEFORE_PLUGIN_UNINSTALL, HooksRunner
from app_plugin_manager.options import UninstallOptions
from app_plugin_manager.platform_json import PlatformJson, list_platforms_with_metadata
from app_plugin_manager.platforms import common, default_platforms
from app_plugin_manager.platforms.base import PlatformHandler
from app_plugin_manager.plugin_info import FILE_KINDS, PluginInfo, PluginInfoProvider, descriptor_path
from app_plugin_manager.prepare import prepare

logger = logging.getLogger(__name__)


def default_plugins_dir(project_dir) -> Path:
    return Path(project_dir) / "plugins"


def resolve_plugin_id(plugin: str) -> str:
    """Return the id of a plugin given either its id or the path of its directory."""
    if descriptor_path(plugin).exists():
        return PluginInfo(plugin).id
    return plugin


class Uninstaller:
    """Removes plugins from platform projects and from the plugins directory."""

    def __init__(
        self,
        platforms: Optional[Dict[str, PlatformHandler]] = None,
        hooks_runner: Optional[HooksRunner] = None,
        prepare_step: Callable = prepare,
    ):
        """
        Args:
            platforms: Capability map keyed by platform name; defaults to the built-in platforms
            hooks_runner: Hook runner; defaults to one rooted at the project directory
            prepare_step: Called after each successful per-platform uninstall
        """
        self.platforms = default_platforms() if platforms is None else platforms
        self.hooks_runner = hooks_runner
        self.prepare_step = prepare_step

    def uninstall(
        self,
        platform: str,
        project_dir,
        plugin: str,
        plugins_dir=None,
        options: Optional[UninstallOptions] = None,
    ) -> List[cascade.CandidateResult]:
        """
        Uninstall a plugin from a platform project, then delete its directory and
        those of its dependencies that nothing needs anymore.

        Args:
            platform: Platform name
            project_dir: Platform project directory
            plugin: Plugin id, or path to a plugin directory
            plugins_dir: Directory holding the plugins (defaults to <project_dir>/plugins)
            options: UninstallOptions

        Returns:
            Outcome of every plugin directory considered for deletion
        """
        options = options or UninstallOptions()
        plugins_dir = Path(plugins_dir) if plugins_dir else default_plugins_dir(project_dir)
        plugin_id = resolve_plugin_id(plugin)

        if platform not in self.platforms:
            raise UnsupportedPlatformError(platform)
        if not resolve_path(plugin_id, plugins_dir).exists():
            logger.info('Plugin "%s" already removed', plugin_id)
            return []

        self.uninstall_platform(platform, project_dir, plugin_id, plugins_dir, options)
        return self.uninstall_plugin(plugin_id, plugins_dir, options)

    def uninstall_platform(
        self,
        platform: str,
        project_dir,
        plugin_id: str,
        plugins_dir=None,
        options: Optional[UninstallOptions] = None,
    ) -> None:
        """
        Remove a plugin's files from one platform project, along with the
        dependencies it leaves dangling on that platform.

        Raises:
            UnsupportedPlatformError: If the platform has no handler
            PluginNotFoundError: If the plugin directory does not exist
            DependencyConflictError: If other plugins still need it and force is not set
            ActionExecutionError: If a file action fails (the plugin's files are restored)
        """
        options = dataclasses.replace(options or UninstallOptions(), is_top_level=True)
        plugins_dir = Path(plugins_dir) if plugins_dir else default_plugins_dir(project_dir)

        if platform not in self.platforms:
            raise UnsupportedPlatformError(platform)

        plugin_dir = resolve_path(plugin_id, plugins_dir)
        if not plugin_dir.exists():
            raise PluginNotFoundError(plugin_id)

        provider = PluginInfoProvider()
        deps_info = generate_dependency_info(PlatformJson.load(plugins_dir, platform), plugins_dir, provider)
        self._run_uninstall_platform(platform, project_dir, plugin_dir, plugins_dir, options, deps_info, provider)

    def uninstall_plugin(
        self,
        plugin_id: str,
        plugins_dir,
        options: Optional[UninstallOptions] = None,
    ) -> List[cascade.CandidateResult]:
        """
        Delete a plugin directory and the directories of dependencies no platform needs.

        Raises:
            DependencyConflictError: If the plugin itself is still required and force is not set
        """
        options = options or UninstallOptions()
        logger.info('Removing "%s"', plugin_id)

        plugin_dir = resolve_path(plugin_id, plugins_dir)
        if not plugin_dir.exists():
            logger.debug('Plugin "%s" already removed (%s)', plugin_id, plugin_dir)
            return []

        platforms = list_platforms_with_metadata(plugins_dir, self.platforms)
        results = cascade.remove_cascade(plugin_id, plugins_dir, platforms, force=options.force)

        for result in results:
            if result.outcome is cascade.RemovalOutcome.FAILED_FATAL:
                raise DependencyConflictError(result.reason, result.plugin_id, result.blockers)
        return results

    def _run_uninstall_platform(
        self,
        platform: str,
        project_dir,
        plugin_dir: Path,
        plugins_dir: Path,
        options: UninstallOptions,
        deps_info: DependencyInfo,
        provider: PluginInfoProvider,
    ) -> None:
        # Nothing to do when the plugin is not really installed
        if not plugin_dir.exists():
            logger.debug("Plugin directory %s does not exist, skipping", plugin_dir)
            return

        plugin_info = provider.get(plugin_dir)
        plugin_id = plugin_info.id

        plugin_dependents = dependents(plugin_id, deps_info)
        if options.is_top_level and plugin_dependents:
            msg = f"The plugin '{plugin_id}' is required by ({', '.join(plugin_dependents)})"
            if options.force:
                logger.info("%s but forcing removal", msg)
            else:
                raise DependencyConflictError(f"{msg}, skipping uninstallation.", plugin_id, plugin_dependents)

        plugin_danglers = danglers(plugin_id, deps_info)
        if plugin_danglers:
            logger.info("Uninstalling %d dependent plugins.", len(plugin_danglers))
            # Each dangler commits its metadata before the next one starts
            for dangler in plugin_danglers:
                if not self._awaits_uninstall(platform, dangler, plugins_dir):
                    logger.debug('Plugin "%s" is already uninstalled from %s, skipping', dangler, platform)
                    continue
                dangler_options = dataclasses.replace(options, is_top_level=deps_info.is_top_level(dangler))
                self._run_uninstall_platform(
                    platform,
                    project_dir,
                    resolve_path(dangler, plugins_dir),
                    plugins_dir,
                    dangler_options,
                    deps_info,
                    provider,
                )

        hooks_runner = self.hooks_runner or HooksRunner(project_dir)
        hooks_runner.fire(BEFORE_PLUGIN_UNINSTALL, {
            "platforms": [platform],
            "plugin": {
                "id": plugin_id,
                "plugin_info": plugin_info,
                "platform": platform,
                "dir": str(plugin_dir),
            },
        })

        self._handle_uninstall(platform, plugin_info, project_dir, plugins_dir, options, provider)

    @staticmethod
    def _awaits_uninstall(platform: str, plugin_id: str, plugins_dir: Path) -> bool:
        # A dependency shared by two danglers is reached twice; the second visit finds it committed
        platform_json = PlatformJson.load(plugins_dir, platform)
        return platform_json.is_plugin_installed(plugin_id) and not platform_json.is_plugin_pending_uninstall(plugin_id)

    def _handle_uninstall(
        self,
        platform: str,
        plugin_info: PluginInfo,
        project_dir,
        plugins_dir: Path,
        options: UninstallOptions,
        provider: PluginInfoProvider,
    ) -> None:
        handler = self.platforms[platform]
        plugin_id = plugin_info.id
        plugin_dir = plugin_info.dir
        www_dir = Path(options.www_dir) if options.www_dir else handler.www_dir(project_dir)
        logger.info("Uninstalling %s from %s", plugin_id, platform)

        actions = ActionStack()
        for kind in FILE_KINDS:
            entries = plugin_info.get_files(platform, kind)
            if not entries:
                continue
            file_handler = handler.handler_for(kind)
            for entry in entries:
                actions.push(create_action(
                    file_handler.uninstall, [entry, project_dir, plugin_id, options],
                    file_handler.install, [entry, plugin_dir, project_dir, plugin_id, options],
                ))

        for asset in plugin_info.get_assets(platform):
            actions.push(create_action(
                common.asset.uninstall, [asset, www_dir, plugin_id],
                common.asset.install, [asset, plugin_dir, www_dir],
            ))

        actions.process(platform, project_dir)
        logger.debug("%s uninstalled from %s.", plugin_id, platform)

        # Queue the plugin so prepare drops its configuration
        platform_json = PlatformJson.load(plugins_dir, platform)
        platform_json.add_uninstalled_plugin_to_prepare_queue(plugin_id, options.is_top_level)
        platform_json.save()

        self.prepare_step(project_dir, platform, plugins_dir, www_dir, provider)


def uninstall(platform: str, project_dir, plugin: str, plugins_dir=None, options: Optional[UninstallOptions] = None):
    """Uninstall a plugin using the built-in platform handlers."""
    return Uninstaller().uninstall(platform, project_dir, plugin, plugins_dir, options)
