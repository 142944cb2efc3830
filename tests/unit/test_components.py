"""Test the built-in components through a full build."""

import pytest

from buildmix.components.javascript import entry_name
from buildmix.core.config import Settings
from buildmix.core.errors import ConfigurationError
from buildmix.main import run_build
from buildmix.mix import create_mix


def _fake_modules(root, *packages):
    for package in packages:
        pkg = root / "node_modules" / package
        pkg.mkdir(parents=True)
        (pkg / "package.json").write_text("{}")


def _plugins(config, name):
    return [p for p in config["plugins"] if p["plugin"] == name]


class TestEntryName:
    def test_directory_output(self):
        assert entry_name("src/app.js", "js", ".js") == "js/app"

    def test_file_output(self):
        assert entry_name("src/app.js", "dist/bundle.js", ".js") == "dist/bundle"

    def test_windows_separators(self):
        assert entry_name("src/app.scss", "public\\css\\", ".css") == "public/css/app"

    def test_empty_output(self):
        assert entry_name("src/app.js", "", ".js") == "app"


class TestScriptsAndStyles:
    async def test_js_and_sass_config(self, mix, installer):
        def configure(api):
            api.js("src/app.js", "js").sass("src/app.scss", "css")

        (config,) = await run_build(mix, configure)

        assert config["name"] == "Mix"
        assert config["mode"] == "development"
        assert config["entry"] == {
            "js/app": ["src/app.js"],
            "css/app": ["src/app.scss"],
        }
        js_rule, sass_rule = config["module"]["rules"]
        assert js_rule["use"][0]["loader"] == "babel-loader"
        assert sass_rule["test"] == "src/app.scss"
        assert installer.calls == [(["sass", "sass-loader@^12.1.0"], False)]

    async def test_several_sources_in_one_call(self, mix):
        def configure(api):
            api.js(["src/a.js", "src/b.js"], "js")

        (config,) = await run_build(mix, configure)

        assert config["entry"] == {"js/a": ["src/a.js"], "js/b": ["src/b.js"]}

    async def test_react_requires_reload(self, mix, installer):
        def configure(api):
            api.js("src/app.jsx", "js").react()

        with pytest.raises(SystemExit):
            await run_build(mix, configure)

        assert installer.calls == [
            (["react", "react-dom", "@babel/preset-react"], True)
        ]

    async def test_react_when_installed(self, mix, installer, tmp_path):
        _fake_modules(tmp_path, "react", "react-dom", "@babel/preset-react")

        def configure(api):
            api.js("src/app.jsx", "js").react()

        (config,) = await run_build(mix, configure)

        assert installer.calls == []
        assert {".jsx", ".tsx"} <= set(config["resolve"]["extensions"])
        options = config["module"]["rules"][0]["use"][0]["options"]
        assert options == {"presets": ["@babel/preset-react"]}

    async def test_babel_config_reaches_loader(self, mix):
        def configure(api):
            api.js("src/app.js", "js").babelConfig({"plugins": ["x"]})

        (config,) = await run_build(mix, configure)

        options = config["module"]["rules"][0]["use"][0]["options"]
        assert options == {"plugins": ["x"]}

    async def test_group_babel_config_stays_in_group(self, mix):
        def admin(api):
            api.js("src/admin.js", "js").babelConfig({"plugins": ["admin-only"]})

        def configure(api):
            api.js("src/app.js", "js").babelConfig({"plugins": ["shared"]})
            api.group("admin", admin)

        root, admin_config = await run_build(mix, configure)

        root_options = root["module"]["rules"][0]["use"][0]["options"]
        admin_options = admin_config["module"]["rules"][0]["use"][0]["options"]
        assert root_options == {"plugins": ["shared"]}
        assert admin_options == {"plugins": ["shared", "admin-only"]}


class TestPluginsAndTweaks:
    async def test_define_and_copy(self, mix):
        def configure(api):
            api.js("src/app.js", "js")
            api.define({"DEBUG": "false"})
            api.copy("images", "public/images").copyDirectory("fonts", "public/fonts")

        (config,) = await run_build(mix, configure)

        assert _plugins(config, "DefinePlugin") == [
            {"plugin": "DefinePlugin", "options": {"DEBUG": "false"}}
        ]
        copies = [p["options"] for p in _plugins(config, "CopyFilesPlugin")]
        assert copies == [
            {"from": ["images"], "to": "public/images", "directory": False},
            {"from": ["fonts"], "to": "public/fonts", "directory": True},
        ]

    async def test_version_adds_manifest_entries(self, mix):
        def configure(api):
            api.js("src/app.js", "js").version(["img/logo.png"])

        (config,) = await run_build(mix, configure)

        (plugin,) = _plugins(config, "ManifestPlugin")
        assert plugin["options"]["files"] == ["img/logo.png"]
        assert mix.manifest.get("/img/logo.png") == "/img/logo.png"

    async def test_option_tweaks(self, mix):
        def configure(api):
            (
                api.js("src/app.js", "js")
                .alias({"@": "src"})
                .setPublicPath("public\\")
                .setResourceRoot("/assets/")
                .sourceMaps()
                .options(processCssUrls=False)
            )

        (config,) = await run_build(mix, configure)

        assert config["resolve"]["alias"] == {"@": "src"}
        assert config["output"]["path"] == "public"
        assert config["output"]["publicPath"] == "/assets/"
        assert config["devtool"] == "eval-source-map"
        assert config["options"] == {"processCssUrls": False}

    async def test_webpack_config_and_override(self, mix):
        async def late_fragment():
            return {"target": "web"}

        def configure(api):
            api.js("src/app.js", "js")
            api.webpackConfig({"output": {"filename": "[name].[contenthash].js"}})
            api.webpackConfig(late_fragment)
            api.override(lambda config: config.__setitem__("performance", False))

        (config,) = await run_build(mix, configure)

        assert config["output"]["filename"] == "[name].[contenthash].js"
        assert config["output"]["publicPath"] == "/"
        assert config["target"] == "web"
        assert config["performance"] is False

    async def test_when(self, mix):
        def configure(api):
            api.js("src/app.js", "js")
            api.when(False, lambda a: a.define({"SKIPPED": "1"}))
            api.when(lambda: True, lambda a: a.define({"TAKEN": "1"}))

        (config,) = await run_build(mix, configure)

        (plugin,) = _plugins(config, "DefinePlugin")
        assert plugin["options"] == {"TAKEN": "1"}

    async def test_async_when_callback_is_rejected(self, mix):
        async def extra(api):
            api.js("src/extra.js", "js")

        def configure(api):
            api.js("src/app.js", "js").when(True, extra)

        with pytest.raises(ConfigurationError, match="synchronous"):
            await run_build(mix, configure)

    async def test_version_keys_follow_public_path(self, mix):
        def configure(api):
            (
                api.js("src/app.js", "js")
                .setPublicPath("public")
                .version(["public/img/logo.png"])
            )

        await run_build(mix, configure)
        mix.manifest.refresh()

        assert mix.manifest.get() == {"/img/logo.png": "/img/logo.png"}
        assert (mix.paths_root / "public" / "mix-manifest.json").is_file()


class TestNotifications:
    @pytest.fixture
    def noisy_mix(self, tmp_path, installer):
        return create_mix(Settings(context_dir=str(tmp_path)), installer)

    async def test_enabled_by_default(self, noisy_mix, installer):
        def configure(api):
            api.js("src/app.js", "js")

        (config,) = await run_build(noisy_mix, configure)

        (plugin,) = _plugins(config, "WebpackNotifierPlugin")
        assert plugin["options"]["title"] == "Mix"
        assert installer.installed == ["webpack-notifier@^1.15.0"]

    async def test_disable_notifications(self, noisy_mix):
        def configure(api):
            api.js("src/app.js", "js").disableNotifications()

        (config,) = await run_build(noisy_mix, configure)

        assert _plugins(config, "WebpackNotifierPlugin") == []

    async def test_settings_switch_turns_everything_off(self, mix, installer):
        def configure(api):
            api.js("src/app.js", "js")

        (config,) = await run_build(mix, configure)

        assert _plugins(config, "WebpackNotifierPlugin") == []
        assert installer.calls == []


class TestGroups:
    async def test_group_gets_its_own_config(self, mix):
        def configure(api):
            api.group("admin", lambda admin: admin.js("src/admin.js", "js/admin.js"))

        configs = await run_build(mix, configure)

        assert [c["name"] for c in configs] == ["admin"]
        assert configs[0]["entry"] == {"js/admin": ["src/admin.js"]}

    async def test_group_options_do_not_leak(self, mix):
        def admin(api):
            api.js("src/admin.js", "js").alias({"@admin": "src/admin"})

        def configure(api):
            api.js("src/app.js", "js").alias({"@": "src"})
            api.group("admin", admin)

        root, admin_config = await run_build(mix, configure)

        assert root["resolve"]["alias"] == {"@": "src"}
        assert admin_config["resolve"]["alias"] == {"@admin": "src/admin"}
        assert root["entry"] == {"js/app": ["src/app.js"]}
        assert admin_config["entry"] == {"js/admin": ["src/admin.js"]}
