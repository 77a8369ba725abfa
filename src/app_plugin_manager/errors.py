"""Exception hierarchy for plugin removal."""


class PluginError(Exception):
    """Base error for plugin operations."""


class UnsupportedPlatformError(PluginError):
    """Raised when no handler exists for the requested platform."""

    def __init__(self, platform: str):
        super().__init__(f"{platform} not supported.")
        self.platform = platform


class PluginNotFoundError(PluginError):
    """Raised when the requested plugin directory does not exist."""

    def __init__(self, plugin_id: str):
        super().__init__(f'Plugin "{plugin_id}" not found. Already uninstalled?')
        self.plugin_id = plugin_id


class DescriptorError(PluginError):
    """Raised when a plugin.json descriptor is missing or malformed."""


class DependencyConflictError(PluginError):
    """Raised when a plugin is still required by other installed plugins."""

    def __init__(self, message: str, plugin_id: str, dependents):
        super().__init__(message)
        self.plugin_id = plugin_id
        self.dependents = list(dependents)


class ActionExecutionError(PluginError):
    """Raised when a file action fails; completed actions have been undone."""

    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


class HookError(PluginError):
    """Raised when a lifecycle hook fails."""
