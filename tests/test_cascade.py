"""Tests for deleting plugin directories after an uninstall."""

import logging

from app_plugin_manager.cascade import RemovalOutcome, find_blockers, find_candidates, remove_cascade
from app_plugin_manager.plugin_info import PluginInfoProvider
from tests.conftest import write_platform_json, write_plugin


def _outcomes(results):
    return {r.plugin_id: r.outcome for r in results}


class TestFindCandidates:
    def test_dependencies_first_target_last(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["b", "d"])
        write_plugin(plugins_dir, "b", dependencies=["c", "d"])
        write_plugin(plugins_dir, "c")
        write_plugin(plugins_dir, "d")

        assert find_candidates("a", plugins_dir, PluginInfoProvider()) == ["b", "c", "d", "a"]

    def test_missing_dependency_directory_does_not_abort(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["gone", "b"])
        write_plugin(plugins_dir, "b")

        assert find_candidates("a", plugins_dir, PluginInfoProvider()) == ["gone", "b", "a"]

    def test_dependency_cycle_back_to_target(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["b"])
        write_plugin(plugins_dir, "b", dependencies=["a"])

        assert find_candidates("a", plugins_dir, PluginInfoProvider()) == ["b", "a"]


class TestFindBlockers:
    def test_top_level_dependency_is_protected(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["b"])
        write_plugin(plugins_dir, "b")
        write_platform_json(plugins_dir, "android", installed=["b"])

        remaining, blocked = find_blockers("a", ["b", "a"], plugins_dir, ["android"], PluginInfoProvider())

        assert remaining == ["a"]
        assert blocked == {}

    def test_target_does_not_block_its_dependencies(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["b"])
        write_plugin(plugins_dir, "b")
        write_platform_json(plugins_dir, "android", installed=["a"], dependent=["b"])

        remaining, blocked = find_blockers("a", ["b", "a"], plugins_dir, ["android"], PluginInfoProvider())

        assert remaining == ["b", "a"]
        assert blocked == {}

    def test_blockers_merge_across_platforms(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["shared"])
        write_plugin(plugins_dir, "shared")
        write_plugin(plugins_dir, "x", dependencies=["shared"])
        write_plugin(plugins_dir, "y", dependencies=["shared"])
        write_platform_json(plugins_dir, "android", installed=["x"], dependent=["shared"])
        write_platform_json(plugins_dir, "browser", installed=["y", "x"], dependent=["shared"])

        _, blocked = find_blockers("a", ["shared", "a"], plugins_dir, ["android", "browser"], PluginInfoProvider())

        assert blocked == {"shared": ["x", "y"]}


class TestRemoveCascade:
    def test_deletes_unneeded_dependencies_and_target(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["b"])
        write_plugin(plugins_dir, "b")
        write_platform_json(plugins_dir, "android")

        results = remove_cascade("a", plugins_dir, ["android"])

        assert _outcomes(results) == {"b": RemovalOutcome.REMOVED, "a": RemovalOutcome.REMOVED}
        assert not (plugins_dir / "a").exists()
        assert not (plugins_dir / "b").exists()

    def test_blocked_dependency_is_skipped_with_warning(self, plugins_dir, caplog):
        write_plugin(plugins_dir, "a", dependencies=["shared"])
        write_plugin(plugins_dir, "shared")
        write_plugin(plugins_dir, "other", dependencies=["shared"])
        write_platform_json(plugins_dir, "android", installed=["other"], dependent=["shared"])

        with caplog.at_level(logging.WARNING):
            results = remove_cascade("a", plugins_dir, ["android"])

        assert _outcomes(results) == {"shared": RemovalOutcome.SKIPPED_BLOCKED, "a": RemovalOutcome.REMOVED}
        assert results[0].blockers == ("other",)
        assert (plugins_dir / "shared").exists()
        assert '"shared" is required by (other)' in caplog.text

    def test_blocked_target_fails_without_force(self, plugins_dir):
        write_plugin(plugins_dir, "c")
        write_plugin(plugins_dir, "d", dependencies=["c"])
        write_platform_json(plugins_dir, "android", installed=["d"], dependent=["c"])

        results = remove_cascade("c", plugins_dir, ["android"])

        assert results[-1].outcome is RemovalOutcome.FAILED_FATAL
        assert results[-1].blockers == ("d",)
        assert "hint: use -f or --force" in results[-1].reason
        assert (plugins_dir / "c").exists()

    def test_force_deletes_blocked_plugins(self, plugins_dir, caplog):
        write_plugin(plugins_dir, "c")
        write_plugin(plugins_dir, "d", dependencies=["c"])
        write_platform_json(plugins_dir, "android", installed=["d"], dependent=["c"])

        with caplog.at_level(logging.INFO):
            results = remove_cascade("c", plugins_dir, ["android"], force=True)

        assert _outcomes(results) == {"c": RemovalOutcome.REMOVED}
        assert not (plugins_dir / "c").exists()
        assert "but forcing removal" in caplog.text

    def test_missing_dependency_counts_as_already_removed(self, plugins_dir):
        write_plugin(plugins_dir, "a", dependencies=["gone"])

        results = remove_cascade("a", plugins_dir, [])

        assert _outcomes(results) == {"gone": RemovalOutcome.ALREADY_REMOVED, "a": RemovalOutcome.REMOVED}
