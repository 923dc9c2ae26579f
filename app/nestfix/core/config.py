"""User configuration for nestfix.

Holds defaults for the ``fix`` command so that a preferred mode (for
example always previewing first) does not have to be repeated on every
invocation. Command-line flags always take precedence.

Configuration is stored in ~/.config/nestfix/config.toml
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nestfix.core.paths import get_config_path

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class NestfixConfig(BaseModel):
    """Configuration defaults for nestfix.

    Attributes:
        skip_name_match: Merge any single nested directory, not only
            same-named ones.
        dry_run: Only report what would be merged.
        log_level: Log level used when neither --verbose nor --quiet is given.
    """

    model_config = ConfigDict(extra="forbid")

    skip_name_match: Annotated[
        bool,
        Field(description="Merge any single nested directory regardless of name"),
    ] = False
    dry_run: Annotated[
        bool,
        Field(description="Report merges without touching the filesystem"),
    ] = False
    log_level: Annotated[
        LogLevel,
        Field(description="Default log level"),
    ] = "INFO"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the config file content is invalid."""


def load_config(path: Path | None = None) -> NestfixConfig:
    """Load configuration from a TOML file.

    A missing file is not an error; the built-in defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated NestfixConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return NestfixConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return NestfixConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: NestfixConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The NestfixConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
