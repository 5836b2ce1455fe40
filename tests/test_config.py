"""Tests for config loading and project root detection."""

import json

import pytest

from substrate.config import DEFAULT_CATEGORIES, SubstrateConfig, load_config
from substrate.exceptions import ConfigError
from substrate.project import find_project_root, read_pyproject


class TestLoadConfig:

    def test_defaults_without_project(self):
        config = load_config(environ={})

        assert config.default_timeout == 180
        assert config.categories == DEFAULT_CATEGORIES
        assert config.tools.include == []
        assert config.env_file == ".env"

    def test_reads_substrate_json(self, tmp_path):
        (tmp_path / "substrate.json").write_text(json.dumps({
            "default_timeout": 30,
            "tools": {"exclude": ["search-docs"]},
            "log_sources": {"worker": "var/worker.log"},
        }))

        config = load_config(tmp_path, environ={})

        assert config.default_timeout == 30
        assert config.tools.exclude == ["search-docs"]
        assert config.log_sources == {"worker": "var/worker.log"}

    def test_environment_overrides(self, tmp_path):
        (tmp_path / "substrate.json").write_text(json.dumps({"tools": {"include": ["a:A"]}}))

        config = load_config(tmp_path, environ={
            "SUBSTRATE_TIMEOUT": "45",
            "SUBSTRATE_TOOLS_INCLUDE": "b:B, c:C,",
            "SUBSTRATE_TOOLS_EXCLUDE": "last-error",
            "SUBSTRATE_LOG_LEVEL": "debug",
            "SUBSTRATE_PYPI_URL": "http://mirror.local/pypi",
        })

        assert config.default_timeout == 45
        assert config.tools.include == ["a:A", "b:B", "c:C"]
        assert config.tools.exclude == ["last-error"]
        assert config.log_level == "DEBUG"
        assert config.pypi_url == "http://mirror.local/pypi"

    @pytest.mark.parametrize("content", ["{broken", "[1, 2]", '{"default_timeout": "soon"}'])
    def test_invalid_file(self, tmp_path, content):
        (tmp_path / "substrate.json").write_text(content)

        with pytest.raises(ConfigError):
            load_config(tmp_path, environ={})

    def test_invalid_timeout_override(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config(environ={"SUBSTRATE_TIMEOUT": "soon"})

        assert "SUBSTRATE_TIMEOUT" in exc_info.value.message


class TestSubstrateConfig:

    @pytest.mark.parametrize("given, expected", [(0, 1), (90, 90), (601, 600)])
    def test_clamp_timeout(self, given, expected):
        assert SubstrateConfig().clamp_timeout(given) == expected

    def test_clamp_respects_lower_max(self):
        assert SubstrateConfig(max_timeout=60).clamp_timeout(120) == 60

    def test_get_dotted_key(self):
        config = SubstrateConfig(tools={"exclude": ["x"]})

        assert config.get("tools.exclude") == ["x"]
        assert config.get("default_timeout") == 180

    def test_get_missing_key(self):
        with pytest.raises(KeyError):
            SubstrateConfig().get("tools.nothing")


class TestProjectRoot:

    def test_walks_up_to_marker(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_substrate_json_is_a_marker(self, tmp_path):
        (tmp_path / "substrate.json").write_text("{}")

        assert find_project_root(tmp_path) == tmp_path.resolve()

    def test_read_pyproject(self, project):
        assert read_pyproject(project)["project"]["name"] == "demo-app"

    def test_read_pyproject_missing(self, tmp_path):
        assert read_pyproject(tmp_path) == {}
