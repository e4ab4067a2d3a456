"""leakview settings management.

Handles:
- YAML settings file (explicit path or LEAKVIEW_CONFIG)
- LEAKVIEW_* environment variables
- Precedence: CLI > settings file > env vars > defaults
"""

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from leakview.display.context import Colors, DisplayStrings
from leakview.display.row_text import DEFAULT_DATETIME_FORMAT, default_datetime_formatter
from leakview.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEAKVIEW_CONFIG"
CONFIG_NOT_FOUND = "Config file not found"

# Colors key -> environment variable
COLOR_ENV_VARS: dict[str, str] = {
    "class_name": "LEAKVIEW_CLASS_NAME_COLOR",
    "leak": "LEAKVIEW_LEAK_COLOR",
    "reference": "LEAKVIEW_REFERENCE_COLOR",
    "extra": "LEAKVIEW_EXTRA_COLOR",
    "help": "LEAKVIEW_HELP_COLOR",
}

DATETIME_FORMAT_ENV_VAR = "LEAKVIEW_DATETIME_FORMAT"


@dataclass
class Settings:
    """leakview runtime settings."""

    colors: Colors = field(default_factory=Colors)
    strings: DisplayStrings = field(default_factory=DisplayStrings)
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    config_file_path: Path | None = None

    def format_datetime(self, millis: int) -> str:
        """Format epoch milliseconds with the configured format."""
        return default_datetime_formatter(millis, self.datetime_format)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file.

    Example file::

        colors:
          leak: "#FF0000"
          extra: 0xFF998888
        strings:
          class_has_leaked: "{} leaked"
        datetime_format: "%d/%m/%Y %H:%M"

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the YAML is malformed or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(errno.ENOENT, CONFIG_NOT_FOUND, str(path))

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}:\n{e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    for key in ("colors", "strings"):
        if key in data and not isinstance(data[key], dict):
            raise ConfigError(f"'{key}' in {path} must be a mapping")
    return data


def _colors_from_env(env_vars: Mapping[str, str]) -> dict[str, Any]:
    return {
        key: env_vars[var]
        for key, var in COLOR_ENV_VARS.items()
        if env_vars.get(var)
    }


def load_settings(
    config_file: str | Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings with precedence: CLI > settings file > env vars.

    Args:
        config_file: Path to a YAML settings file
        cli_overrides: Overrides with the same shape as the settings file
        environ: Environment to read (defaults to os.environ)

    Returns:
        Loaded Settings instance

    Raises:
        FileNotFoundError: If an explicit or LEAKVIEW_CONFIG file is missing
        ConfigError: If a value is malformed
    """
    cli_overrides = cli_overrides or {}
    env_vars = dict(os.environ if environ is None else environ)

    # Step 1: Environment variables as base
    colors_data: dict[str, Any] = _colors_from_env(env_vars)
    strings_data: dict[str, Any] = {}
    datetime_format = env_vars.get(DATETIME_FORMAT_ENV_VAR) or DEFAULT_DATETIME_FORMAT

    # Step 2: Settings file
    config_file_path: Path | None = None
    if config_file:
        config_file_path = Path(config_file)
    elif env_vars.get(CONFIG_ENV_VAR):
        config_file_path = Path(env_vars[CONFIG_ENV_VAR])

    if config_file_path is not None:
        file_data = load_config_file(config_file_path)
        logger.debug("Loaded settings from %s", config_file_path)
        colors_data.update(file_data.get("colors") or {})
        strings_data.update(file_data.get("strings") or {})
        datetime_format = file_data.get("datetime_format", datetime_format)

    # Step 3: CLI overrides
    colors_data.update(cli_overrides.get("colors") or {})
    strings_data.update(cli_overrides.get("strings") or {})
    datetime_format = cli_overrides.get("datetime_format") or datetime_format

    try:
        colors = Colors.from_dict(colors_data)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    strings = DisplayStrings.from_dict(strings_data)
    template = strings.class_has_leaked
    if "{}" not in template:
        raise ConfigError(
            f"class_has_leaked must contain '{{}}' for the class name: {template!r}"
        )
    try:
        template.format("X")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(
            f"class_has_leaked must take the class name as its only field: {template!r}"
        ) from e

    return Settings(
        colors=colors,
        strings=strings,
        datetime_format=str(datetime_format),
        config_file_path=config_file_path,
    )
