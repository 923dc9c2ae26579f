"""Unit tests for user configuration.

Tests for the NestfixConfig model and TOML load/save.
"""

import os
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
from nestfix.core.config import (
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    NestfixConfig,
    load_config,
    save_config,
)
from pydantic import ValidationError


class TestNestfixConfig:
    """Tests for NestfixConfig model."""

    def test_defaults(self) -> None:
        """Defaults enable name matching and real runs."""
        config = NestfixConfig()

        assert config.skip_name_match is False
        assert config.dry_run is False
        assert config.log_level == "INFO"

    def test_rejects_unknown_fields(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValidationError):
            NestfixConfig(recursive=True)  # type: ignore[call-arg]

    def test_rejects_unknown_log_level(self) -> None:
        """Only known log level names are accepted."""
        with pytest.raises(ValidationError):
            NestfixConfig(log_level="TRACE")  # type: ignore[arg-type]


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        """A missing config file is not an error."""
        assert load_config(tmp_path / "config.toml") == NestfixConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values in the file override defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('skip_name_match = true\nlog_level = "DEBUG"\n')

        config = load_config(config_file)

        assert config.skip_name_match is True
        assert config.dry_run is False
        assert config.log_level == "DEBUG"

    def test_default_path_from_xdg(self, tmp_path: Path) -> None:
        """Without a path the XDG config location is read."""
        config_dir = tmp_path / "nestfix"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("dry_run = true\n")

        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            config = load_config()

        assert config.dry_run is True

    def test_invalid_toml_raises_parse_error(self, tmp_path: Path) -> None:
        """Malformed TOML raises ConfigParseError naming the file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("dry_run = [[[")

        with pytest.raises(ConfigParseError, match="Invalid TOML syntax"):
            load_config(config_file)

    def test_invalid_content_raises_validation_error(self, tmp_path: Path) -> None:
        """Wrong types raise ConfigValidationError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('dry_run = "sometimes"\n')

        with pytest.raises(ConfigValidationError, match="Invalid config content"):
            load_config(config_file)

    def test_errors_share_base_class(self, tmp_path: Path) -> None:
        """Callers can catch every failure as ConfigError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("unknown_key = 1\n")

        with pytest.raises(ConfigError):
            load_config(config_file)


class TestSaveConfig:
    """Tests for save_config function."""

    def test_writes_toml(self, tmp_path: Path) -> None:
        """The saved file contains every field."""
        config_file = tmp_path / "config.toml"

        result = save_config(NestfixConfig(dry_run=True), config_file)

        assert result == config_file
        data = tomllib.loads(config_file.read_text())
        assert data == {"skip_name_match": False, "dry_run": True, "log_level": "INFO"}

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Missing parent directories are created."""
        config_file = tmp_path / "a" / "b" / "config.toml"

        save_config(NestfixConfig(), config_file)

        assert config_file.exists()

    def test_saved_config_loads_back(self, tmp_path: Path) -> None:
        """A saved config is read back unchanged."""
        config_file = tmp_path / "config.toml"
        original = NestfixConfig(skip_name_match=True, log_level="WARNING")

        save_config(original, config_file)

        assert load_config(config_file) == original

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """The atomic write leaves only the target file."""
        save_config(NestfixConfig(), tmp_path / "config.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]

    def test_write_failure_raises_config_error(self, tmp_path: Path) -> None:
        """OS errors while writing become ConfigError."""
        with (
            patch("nestfix.core.config.os.replace", side_effect=OSError("disk full")),
            pytest.raises(ConfigError, match="Failed to write config"),
        ):
            save_config(NestfixConfig(), tmp_path / "config.toml")

        assert list(tmp_path.iterdir()) == []
