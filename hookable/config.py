"""Configuration management for the hook registry."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError, wrap_exception
from .logger import DEFAULT_FORMAT

ENV_PREFIX = "HOOKABLE__"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = "INFO"
    format: str = DEFAULT_FORMAT
    file_path: str | None = None
    json_format: bool = False


class RegistryConfig(BaseModel):
    """Defaults applied by a ``Hookable`` registry."""

    model_config = ConfigDict(extra="forbid")

    default_priority: int = 10
    default_accepted_args: int = Field(default=1, ge=0)
    all_hook_name: str = "all"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("all_hook_name")
    @classmethod
    def _strip_all_hook_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("all_hook_name must not be blank")
        return value


class ConfigManager:
    """Load and validate registry configuration from TOML files."""

    def __init__(self, defaults: RegistryConfig | None = None) -> None:
        self._defaults = defaults or RegistryConfig()

    @property
    def defaults(self) -> RegistryConfig:
        return self._defaults

    def load(self, path: str | Path) -> RegistryConfig:
        """Load a TOML file, merged onto defaults and environment overrides."""
        config_path = Path(path)
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise wrap_exception(
                exc,
                ConfigError,
                "failed to read configuration file",
                context={"path": str(config_path)},
            ) from exc

        # Allow the settings to live under a [hookable] table in a shared file.
        if isinstance(data.get("hookable"), dict):
            data = data["hookable"]
        return self.from_dict(data)

    def from_dict(self, data: dict[str, Any]) -> RegistryConfig:
        """Validate configuration from a dict, merged onto defaults and env vars."""
        merged = _deep_merge(self._defaults.model_dump(mode="python"), data)
        try:
            return RegistryConfig.model_validate(_apply_env_overrides(merged))
        except ValidationError as exc:
            raise wrap_exception(
                exc,
                ConfigError,
                "invalid registry configuration",
                context={"errors": exc.error_count()},
            ) from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``HOOKABLE__SECTION__KEY`` style environment overrides."""
    overridden = deepcopy(config)

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        keys = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if keys:
            _set_nested(overridden, keys, _parse_env_value(raw_value))

    return overridden


def _set_nested(root: dict[str, Any], keys: list[str], value: Any) -> None:
    current = root
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def _parse_env_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
