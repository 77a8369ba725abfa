"""Plugin removal engine for cross-platform application projects."""

from app_plugin_manager.cascade import CandidateResult, RemovalOutcome
from app_plugin_manager.errors import (
    ActionExecutionError,
    DependencyConflictError,
    DescriptorError,
    HookError,
    PluginError,
    PluginNotFoundError,
    UnsupportedPlatformError,
)
from app_plugin_manager.options import UninstallOptions
from app_plugin_manager.uninstaller import Uninstaller, uninstall
