# src/bigcsv/core/config.py
"""
Configuration schema and loading for the bigcsv CLI.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction. The library API does
not need any of this: Parser takes a ReaderConfig and a worker count
directly.
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from bigcsv.parsing import ReaderConfig


class HTTPSettings(BaseModel):
    """Options for HTTP(S) sources."""

    model_config = {"extra": "forbid", "frozen": True}

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra request headers (values may use ${VAR} expansion)",
    )


class BigCSVSettings(BaseModel):
    """Top-level settings for a scan.

    Example YAML:
        workers: 8
        header: true
        reader:
          delimiter: ";"
          encoding: latin-1
        http:
          timeout: 10
          headers:
            Authorization: "Bearer ${DATA_API_TOKEN}"
    """

    model_config = {"extra": "forbid", "frozen": True}

    workers: int = Field(default=1, ge=1, description="Concurrent row workers")
    header: bool = Field(default=False, description="Skip the first record as a header")
    reader: ReaderConfig = Field(default_factory=ReaderConfig, description="CSV dialect")
    http: HTTPSettings = Field(default_factory=HTTPSettings, description="HTTP source options")


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as-is.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        return default if default is not None else match.group(0)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        if isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_expand_value(item) for item in value]
        return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lowercase_keys(config: dict[str, Any]) -> dict[str, Any]:
    """Lowercase setting names at every level except header names."""
    result: dict[str, Any] = {}
    for key, value in config.items():
        name = key.lower()
        if isinstance(value, dict) and name != "headers":
            value = _lowercase_keys(value)
        result[name] = value
    return result


def load_settings(config_path: Path) -> BigCSVSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (BIGCSV_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Nested keys use a double underscore: BIGCSV_READER__DELIMITER=";".

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated BigCSVSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="BIGCSV",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,  # the CLI loads .env itself
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _expand_env_vars(_lowercase_keys(raw_config))

    return BigCSVSettings(**raw_config)
