"""Test the click CLI."""

import json

import pytest
from click.testing import CliRunner

from buildmix.cli import main

MIXFILE = """\
def configure(mix):
    mix.js("src/app.js", "js")
    mix.group("admin", lambda admin: admin.js("src/admin.js", "js/admin.js"))
"""


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MIX_NOTIFICATIONS", "false")
    monkeypatch.setattr("buildmix.main.setup_logging", lambda **kwargs: None)
    (tmp_path / "mix.config.py").write_text(MIXFILE)
    return tmp_path


class TestBuildCommand:
    def test_prints_configs(self, project):
        result = CliRunner().invoke(main, ["build"])

        assert result.exit_code == 0, result.output
        configs = json.loads(result.output)
        assert [c["name"] for c in configs] == ["Mix", "admin"]

    def test_group_filter(self, project):
        result = CliRunner().invoke(main, ["build", "--group", "adm*"])

        assert result.exit_code == 0, result.output
        assert [c["name"] for c in json.loads(result.output)] == ["admin"]

    def test_production_flag(self, project):
        result = CliRunner().invoke(main, ["build", "--production"])

        assert result.exit_code == 0, result.output
        assert {c["mode"] for c in json.loads(result.output)} == {"production"}

    def test_output_file(self, project):
        result = CliRunner().invoke(main, ["build", "--output", "configs.json"])

        assert result.exit_code == 0, result.output
        assert "Wrote 2 config(s)" in result.output
        assert len(json.loads((project / "configs.json").read_text())) == 2

    def test_missing_mixfile_is_reported(self, project):
        result = CliRunner().invoke(main, ["build", "--mixfile", "nope.py"])

        assert result.exit_code == 1
        assert "Mixfile not found" in result.output


class TestManifestCommand:
    def test_prints_sorted_manifest(self, project):
        (project / "mix-manifest.json").write_text(
            json.dumps({"/z.js": "/z.js", "/a.js": "/a.js?id=abc"})
        )

        result = CliRunner().invoke(main, ["manifest"])

        assert result.exit_code == 0, result.output
        assert list(json.loads(result.output)) == ["/a.js", "/z.js"]

    def test_missing_manifest(self, project):
        result = CliRunner().invoke(main, ["manifest"])

        assert result.exit_code == 1
        assert "No manifest" in result.output
