"""All-or-nothing execution of paired file actions."""

import logging
from typing import Any, Callable, List, NamedTuple, Sequence

from app_plugin_manager.errors import ActionExecutionError

logger = logging.getLogger(__name__)


class Step(NamedTuple):
    run: Callable[..., Any]
    params: Sequence[Any]

    def __call__(self):
        return self.run(*self.params)


class Action(NamedTuple):
    """A forward file mutation and the mutation that undoes it."""

    handler: Step
    reverter: Step


def create_action(handler, handler_params, reverter, reverter_params) -> Action:
    return Action(Step(handler, tuple(handler_params)), Step(reverter, tuple(reverter_params)))


class ActionStack:
    """
    Ordered log of actions for one plugin on one platform.

    process() runs every forward step in push order. When one fails, the steps
    that already ran are reverted newest first and ActionExecutionError is raised
    from the original exception. A reverter that raises is logged and skipped, so
    the project may be left partially reverted in that case.
    """

    def __init__(self):
        self.stack: List[Action] = []
        self.completed: List[Action] = []
        self._processed = False

    def push(self, action: Action) -> None:
        if self._processed:
            raise RuntimeError("ActionStack has already been processed")
        self.stack.append(action)

    def process(self, platform: str, project_dir) -> None:
        """
        Run all queued actions.

        Args:
            platform: Platform name, for diagnostics
            project_dir: Platform project directory, for diagnostics

        Raises:
            ActionExecutionError: If a forward step fails
        """
        if self._processed:
            raise RuntimeError("ActionStack has already been processed")
        self._processed = True

        logger.debug("Beginning processing of action stack for %s project (%s)...", platform, project_dir)
        for index, action in enumerate(self.stack):
            try:
                action.handler()
            except Exception as e:
                logger.warning("Error during processing of action! Attempting to revert...")
                failed_reverts = self._revert()
                message = f"Action {index + 1} of {len(self.stack)} failed on {platform}: {e}"
                if failed_reverts:
                    message += f" ({failed_reverts} reversion action(s) also failed)"
                raise ActionExecutionError(message, index) from e
            self.completed.append(action)
        logger.debug("Action stack processing complete.")

    def _revert(self) -> int:
        failed = 0
        while self.completed:
            action = self.completed.pop()
            try:
                action.reverter()
            except Exception:
                failed += 1
                logger.warning("Error during reversion of action %s", action.reverter.run, exc_info=True)
        return failed
