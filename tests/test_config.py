"""Tests for next_versions.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from next_versions.config import find_config, load_config
from next_versions.errors import ConfigError


class TestLoadConfig:
    def test_loads_json(self, tmp_config: Path) -> None:
        config = load_config(tmp_config)
        assert [p.name for p in config.versioned_packages] == ["app", "docs"]
        assert config.versioned_packages[1].depends_on == ["packages/*"]
        assert config.non_scope_behavior == "bump"

    def test_default_location(self, tmp_config: Path) -> None:
        config = load_config(root=tmp_config.parent)
        assert len(config.versioned_packages) == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)

    def test_invalid_non_scope_behavior(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_text(
            '{"versionedPackages": [{"name": "a"}], "nonScopeBehavior": "skip"}'
        )
        with pytest.raises(ConfigError, match="must be either 'ignore' or 'bump'"):
            load_config(path)

    def test_ignore_behavior(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_text(
            '{"versionedPackages": [{"name": "a"}], "nonScopeBehavior": "ignore"}'
        )
        assert load_config(path).non_scope_behavior == "ignore"

    def test_no_packages(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_text('{"versionedPackages": []}')
        with pytest.raises(ConfigError, match="No packages defined"):
            load_config(path)

    def test_missing_packages_key(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_text("{}")
        with pytest.raises(ConfigError, match="versionedPackages"):
            load_config(path)

    def test_non_utf8_json(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.write_bytes(b'{"versionedPackages": [{"name": "\xff"}]}')
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(path)

    def test_unreadable_path(self, tmp_path: Path) -> None:
        path = tmp_path / "release-config.json"
        path.mkdir()
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(path)


class TestPyprojectConfig:
    PYPROJECT = """\
[project]
name = "monorepo"

[tool.next-versions]
nonScopeBehavior = "ignore"

[[tool.next-versions.versionedPackages]]
name = "api"
tagPrefix = "api-v"
directory = "services/api"
dependsOn = ["libs/*"]
"""

    def test_fallback_to_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(self.PYPROJECT)

        config = load_config(root=tmp_path)

        assert config.non_scope_behavior == "ignore"
        api = config.versioned_packages[0]
        assert api.name == "api"
        assert api.tag_prefix == "api-v"
        assert api.depends_on == ["libs/*"]

    def test_json_takes_precedence(self, tmp_path: Path, tmp_config: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(self.PYPROJECT)
        assert find_config(tmp_path) == tmp_config

    def test_explicit_toml_path(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(self.PYPROJECT)
        assert load_config(path).versioned_packages[0].name == "api"

    def test_pyproject_without_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        with pytest.raises(ConfigError, match="No release-config.json"):
            load_config(root=tmp_path)

    def test_explicit_toml_without_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n')
        with pytest.raises(ConfigError, match=r"No \[tool.next-versions\] table"):
            load_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.next-versions\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_non_utf8_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_bytes(b'[tool.next-versions]\nname = "\xff"\n')
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(path)

    def test_tool_not_a_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('tool = "x"\n')
        with pytest.raises(ConfigError, match="No release-config.json"):
            load_config(root=tmp_path)

    def test_explicit_toml_tool_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('tool = "x"\n')
        with pytest.raises(ConfigError, match=r"No \[tool.next-versions\] table"):
            load_config(path)

    def test_table_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool]\nnext-versions = 3\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(path)
