"""Decides which plugin directories can be deleted after an uninstall."""

import enum
import logging
import shutil
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from app_plugin_manager.dependencies import dependents, generate_dependency_info, resolve_path
from app_plugin_manager.platform_json import PlatformJson
from app_plugin_manager.plugin_info import PluginInfoProvider, descriptor_path

logger = logging.getLogger(__name__)


class RemovalOutcome(enum.Enum):
    REMOVED = "removed"
    ALREADY_REMOVED = "already-removed"
    SKIPPED_BLOCKED = "skipped-blocked"
    FAILED_FATAL = "failed-fatal"


@dataclass(frozen=True)
class CandidateResult:
    plugin_id: str
    outcome: RemovalOutcome
    reason: Optional[str] = None
    blockers: Tuple[str, ...] = ()


def find_candidates(plugin_id: str, plugins_dir, provider: PluginInfoProvider) -> List[str]:
    """
    Collect the target and everything it transitively depends on.

    Dependencies come first and the target last. Dependencies whose directory
    is gone are kept as candidates but not descended into.

    Args:
        plugin_id: Target plugin
        plugins_dir: Directory holding the plugins
        provider: Descriptor cache

    Returns:
        Ordered, deduplicated candidate ids
    """
    candidates: List[str] = []

    def walk(current_id):
        plugin_dir = resolve_path(current_id, plugins_dir)
        if not descriptor_path(plugin_dir).exists():
            logger.debug('Plugin "%s" does not exist (%s)', current_id, plugin_dir)
            return
        for dep_id in provider.get(plugin_dir).get_dependencies():
            if dep_id not in candidates and dep_id != plugin_id:
                candidates.append(dep_id)
                walk(dep_id)

    walk(plugin_id)
    candidates.append(plugin_id)
    return candidates


def find_blockers(
    plugin_id: str,
    candidates: List[str],
    plugins_dir,
    platforms: Iterable[str],
    provider: PluginInfoProvider,
) -> Tuple[List[str], Dict[str, List[str]]]:
    """
    Filter candidates against every platform's view of what is still needed.

    Args:
        plugin_id: Target plugin; it never blocks, and is never protected as top-level
        candidates: Output of find_candidates
        plugins_dir: Directory holding the plugins and metadata files
        platforms: Platforms that have metadata
        provider: Descriptor cache

    Returns:
        (remaining candidates, mapping of blocked candidate -> blocking plugin ids)
    """
    remaining = list(candidates)
    blocked: Dict[str, List[str]] = {}

    for platform in platforms:
        deps_info = generate_dependency_info(PlatformJson.load(plugins_dir, platform), plugins_dir, provider)

        # Top-level plugins must always be removed explicitly by the user
        for tlp in deps_info.top_level_plugins:
            if tlp != plugin_id and tlp in remaining:
                logger.debug('Keeping "%s": it is top-level on %s', tlp, platform)
                remaining.remove(tlp)

        for candidate in remaining:
            for dependent in dependents(candidate, deps_info):
                if dependent == plugin_id:
                    continue
                blockers = blocked.setdefault(candidate, [])
                if dependent not in blockers:
                    blockers.append(dependent)

    return remaining, blocked


def delete_plugin_dir(plugin_id: str, plugins_dir) -> RemovalOutcome:
    plugin_dir = resolve_path(plugin_id, plugins_dir)
    if not plugin_dir.exists():
        logger.debug('Plugin "%s" already removed (%s)', plugin_id, plugin_dir)
        return RemovalOutcome.ALREADY_REMOVED

    if plugin_dir.is_symlink():
        plugin_dir.unlink()
    else:
        shutil.rmtree(plugin_dir)
    logger.debug('Deleted "%s"', plugin_id)
    return RemovalOutcome.REMOVED


def remove_cascade(
    plugin_id: str,
    plugins_dir,
    platforms: Iterable[str],
    force: bool = False,
    provider: Optional[PluginInfoProvider] = None,
) -> List[CandidateResult]:
    """
    Delete the directories of a plugin and of its no-longer-needed dependencies.

    A blocked dependency is skipped with a warning. A blocked target yields a
    FAILED_FATAL result and is left in place. With force, blocked plugins are
    deleted anyway.

    Args:
        plugin_id: Target plugin
        plugins_dir: Directory holding the plugins and metadata files
        platforms: Platforms that have metadata
        force: Override dependency protection
        provider: Descriptor cache

    Returns:
        One CandidateResult per candidate considered, in deletion order
    """
    provider = provider or PluginInfoProvider()
    candidates = find_candidates(plugin_id, plugins_dir, provider)
    remaining, blocked = find_blockers(plugin_id, candidates, plugins_dir, platforms, provider)

    results = []
    for candidate in remaining:
        reason = None
        blockers = tuple(blocked.get(candidate, ()))
        if blockers:
            reason = f'"{candidate}" is required by ({", ".join(blockers)})'
            if force:
                logger.info("%s but forcing removal.", reason)
            else:
                reason += " and cannot be removed (hint: use -f or --force)"
                if candidate == plugin_id:
                    results.append(CandidateResult(candidate, RemovalOutcome.FAILED_FATAL, reason, blockers))
                    break
                logger.warning(reason)
                results.append(CandidateResult(candidate, RemovalOutcome.SKIPPED_BLOCKED, reason, blockers))
                continue

        results.append(CandidateResult(candidate, delete_plugin_dir(candidate, plugins_dir), reason, blockers))

    return results
