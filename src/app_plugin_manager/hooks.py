"""Lifecycle hook runner."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from app_plugin_manager.errors import HookError

logger = logging.getLogger(__name__)

BEFORE_PLUGIN_UNINSTALL = "before_plugin_uninstall"


class HooksRunner:
    """Fires named hooks: registered callables first, then project hook scripts."""

    def __init__(self, project_root):
        """
        Args:
            project_root: Project directory; scripts live in <project_root>/hooks/<hook>/
        """
        self.project_root = Path(project_root)
        self._callbacks: Dict[str, List[Callable[[Dict[str, Any]], Any]]] = {}

    def register(self, hook: str, callback: Callable[[Dict[str, Any]], Any]) -> None:
        self._callbacks.setdefault(hook, []).append(callback)

    def _scripts(self, hook: str) -> List[Path]:
        hook_dir = self.project_root / "hooks" / hook
        if not hook_dir.is_dir():
            return []
        return sorted(
            p for p in hook_dir.iterdir()
            if p.is_file() and not p.name.startswith(".") and os.access(p, os.X_OK)
        )

    def fire(self, hook: str, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Run every handler of a hook.

        Args:
            hook: Hook name, e.g. before_plugin_uninstall
            options: Payload describing the platform and plugin

        Raises:
            HookError: If a hook script exits non-zero
        """
        options = options or {}
        logger.debug("Running %s hook", hook)

        for callback in self._callbacks.get(hook, []):
            callback(options)

        scripts = self._scripts(hook)
        if not scripts:
            return

        plugin = options.get("plugin", {})
        env = dict(os.environ)
        env.update({
            "APM_HOOK": hook,
            "APM_PROJECT_ROOT": str(self.project_root),
            "APM_PLATFORM": str(plugin.get("platform", "")),
            "APM_PLUGIN_ID": str(plugin.get("id", "")),
            "APM_PLUGIN_DIR": str(plugin.get("dir", "")),
        })

        for script in scripts:
            logger.info("Executing hook script %s", script.relative_to(self.project_root))
            try:
                subprocess.run(
                    [str(script)],
                    cwd=self.project_root,
                    env=env,
                    check=True,
                    capture_output=True,
                    text=True,
                )
            except subprocess.CalledProcessError as e:
                message = f"Hook failed with error code {e.returncode}: {script}"
                if e.stderr:
                    message += f"\n{e.stderr.strip()}"
                raise HookError(message) from e
