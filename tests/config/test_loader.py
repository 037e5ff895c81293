"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() source precedence
- Validation errors surfacing as ConfigError
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from apidiff.config.loader import GLOBAL_CONFIG_PATH, _deep_merge, _load_yaml, load_config
from apidiff.config.models import DiffConfig, LoggingConfig
from apidiff.core.errors import ConfigError, ErrorCode


def _write_repo_config(root: Path, text: str) -> None:
    config_dir = root / ".apidiff"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(text)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("diff:\n  rename_threshold: 0.6\n")

        assert _load_yaml(yaml_file) == {"diff": {"rename_threshold": 0.6}}

    def test_returns_empty_for_yaml_null(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "null.yaml"
        yaml_file.write_text("null\n")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("diff:\n  rename_threshold: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        base = {"diff": {"rename_threshold": 0.8, "max_nesting_depth": 4}}
        override = {"diff": {"rename_threshold": 0.5}}

        assert _deep_merge(base, override) == {"diff": {"rename_threshold": 0.5, "max_nesting_depth": 4}}

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        assert _deep_merge(base, {"a": "simple"}) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    @pytest.fixture(autouse=True)
    def _no_global_config(self, tmp_path: Path) -> Any:
        with patch("apidiff.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            yield

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.logging.level == "WARNING"
        assert config.diff == DiffConfig()
        assert config.policy.name == "semver-default"

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "diff:\n  rename_threshold: 0.6\npolicy:\n  name: semver-read-only\n")

        config = load_config(tmp_path)

        assert config.diff.rename_threshold == 0.6
        assert config.policy.name == "semver-read-only"

    def test_global_config_is_overridden_by_repo(self, tmp_path: Path) -> None:
        global_path = tmp_path / "global.yaml"
        global_path.write_text("diff:\n  rename_threshold: 0.7\n  max_nesting_depth: 3\n")
        _write_repo_config(tmp_path, "diff:\n  rename_threshold: 0.6\n")

        with patch("apidiff.config.loader.GLOBAL_CONFIG_PATH", global_path):
            config = load_config(tmp_path)

        assert config.diff.rename_threshold == 0.6
        assert config.diff.max_nesting_depth == 3

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "diff:\n  rename_threshold: 0.6\n")

        with patch.dict(os.environ, {"APIDIFF__DIFF__RENAME_THRESHOLD": "0.4"}):
            config = load_config(tmp_path)

        assert config.diff.rename_threshold == 0.4

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"APIDIFF__LOGGING__LEVEL": "INFO"}):
            config = load_config(tmp_path, logging=LoggingConfig(level="ERROR"))

        assert config.logging.level == "ERROR"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "diff:\n  rename_threshold: 1.5\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.details["field"] == "diff.rename_threshold"


class TestGlobalConfigPath:
    def test_is_in_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "apidiff" in str(GLOBAL_CONFIG_PATH)
