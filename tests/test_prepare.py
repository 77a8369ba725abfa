"""Tests for the prepare step."""

from app_plugin_manager.platform_json import PlatformJson
from app_plugin_manager.prepare import PLUGIN_LIST_NAME, prepare, render_plugin_list
from tests.conftest import read_platform_json, write_platform_json, write_plugin


class TestPrepare:
    def test_drains_uninstall_queue(self, project, plugins_dir):
        write_plugin(plugins_dir, "a")
        write_plugin(plugins_dir, "b", version="2.0.1", assets=[{"src": "www/b.js", "target": "b.js"}])
        write_platform_json(plugins_dir, "android", installed=["a", "b"])
        platform_json = PlatformJson.load(plugins_dir, "android")
        platform_json.add_uninstalled_plugin_to_prepare_queue("a", True)
        platform_json.save()
        www = project / "platforms" / "android" / "assets" / "www"
        (www / "plugins" / "a").mkdir(parents=True)

        removed = prepare(project, "android", plugins_dir, www)

        assert removed == ["a"]
        data = read_platform_json(plugins_dir, "android")
        assert list(data["installed_plugins"]) == ["b"]
        assert data["prepare_queue"]["uninstalled"] == []
        assert not (www / "plugins" / "a").exists()

        plugin_list = (www / PLUGIN_LIST_NAME).read_text()
        assert '"id": "b"' in plugin_list
        assert '"version": "2.0.1"' in plugin_list
        assert '"assets": ["b.js"]' in plugin_list
        assert '"id": "a"' not in plugin_list

    def test_skips_plugins_without_directory(self, project, plugins_dir):
        write_platform_json(plugins_dir, "browser", dependent=["gone"])

        assert prepare(project, "browser", plugins_dir, project / "www") == []
        assert "gone" not in (project / "www" / PLUGIN_LIST_NAME).read_text()

    def test_render_empty_list(self):
        rendered = render_plugin_list("browser", [])
        assert "for browser" in rendered
        assert "window.appPlugins.modules = [\n];" in rendered
