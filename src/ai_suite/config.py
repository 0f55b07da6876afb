"""TOML configuration for endpoints, limits, logging and state persistence."""

from __future__ import annotations

from copy import deepcopy
import logging
import os
from pathlib import Path
import tomllib
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "ai-suite"
CONFIG_PATH = CONFIG_DIR / "config.toml"
STATE_DIR = "~/.local/state/ai-suite"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _required_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field} must be a non-empty string.")
    return value.strip()


class AppConfig(BaseModel):
    """Window title and other shell metadata."""

    title: str = "AI Suite"

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value: Any) -> str:
        return _required_text(value, "title")


class ProviderConfig(BaseModel):
    """Endpoint overrides and request limits for one provider.

    Empty ``base_url`` and ``default_model`` mean "use the adapter's own".
    """

    base_url: str = ""
    default_model: str = ""
    timeout: int = Field(default=120, ge=1, le=3600)
    max_tokens: int = Field(default=1024, ge=1, le=200_000)

    @field_validator("base_url", mode="before")
    @classmethod
    def _base_url(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return ""
        url = _required_text(value, "base_url").rstrip("/")
        parsed = urlparse(url)
        if parsed.scheme.lower() not in {"http", "https"} or not parsed.hostname:
            raise ValueError("base_url must be an http(s) URL with a hostname.")
        return url

    @field_validator("default_model", mode="before")
    @classmethod
    def _default_model(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("default_model must be a string.")
        return value.strip()


class AttachmentsConfig(BaseModel):
    """Limits applied when resolving interactive attachments."""

    max_upload_bytes: int = Field(default=20 * 1024 * 1024, ge=1, le=500 * 1024 * 1024)


class CliConfig(BaseModel):
    max_file_bytes: int = Field(default=1_000_000, ge=1, le=100_000_000)


class LoggingConfig(BaseModel):
    """Log level, output format and optional log file."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = f"{STATE_DIR}/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _level(cls, value: Any) -> str:
        level = _required_text(value, "level").upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level {level!r}.")
        return level

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _log_file_path(cls, value: Any) -> str:
        return _required_text(value, "log_file_path")


class PersistenceConfig(BaseModel):
    """Where the credential-free conversation state is kept between runs."""

    enabled: bool = True
    state_path: str = f"{STATE_DIR}/state.json"

    @field_validator("state_path", mode="before")
    @classmethod
    def _state_path(cls, value: Any) -> str:
        return _required_text(value, "state_path")


class Config(BaseModel):
    app: AppConfig = AppConfig()
    openai: ProviderConfig = ProviderConfig()
    anthropic: ProviderConfig = ProviderConfig()
    attachments: AttachmentsConfig = AttachmentsConfig()
    cli: CliConfig = CliConfig()
    logging: LoggingConfig = LoggingConfig()
    persistence: PersistenceConfig = PersistenceConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Create the config directory if needed and return it."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` onto ``base``, descending into nested tables."""
    result = deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge_sections(current, value)
        else:
            result[key] = value
    return result


def _restrict_permissions(path: Path) -> None:
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning("Unable to enforce 0600 permissions for %s: %s", path, exc)


def _read_toml(path: Path) -> dict[str, Any]:
    """Return the parsed file, or an empty table when it is missing or broken."""
    if not path.exists():
        return {}
    _restrict_permissions(path)
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        LOGGER.warning("Failed to parse config at %s: %s", path, exc)
        return {}
    return data


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """Load the TOML file over the defaults and validate the result.

    Any invalid value falls back to the full default configuration rather
    than a partially applied one. ``config_path`` exists for tests.
    """
    path = config_path or CONFIG_PATH
    ensure_config_dir(path.parent)
    merged = _merge_sections(DEFAULT_CONFIG, _read_toml(path))
    try:
        return Config.model_validate(merged).model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return deepcopy(DEFAULT_CONFIG)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc
