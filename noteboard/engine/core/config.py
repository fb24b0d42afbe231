"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Board constants, autosave timing and the quote endpoint all come from
these files rather than from code.

Secrets (.env):
    QUOTES_API_KEY (optional)

Settings (YAML):
    application.yaml  - App identity and environment
    logging.yaml      - Logging configuration
    board.yaml        - Layout constants, default note extent, indicator timing
    persistence.yaml  - Autosave interval, storage file, export directory
    quotes.yaml       - Quote endpoint, payload fields, retry policy
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from noteboard.engine.core.config_schema import (
    ApplicationSchema,
    BoardSchema,
    LoggingSchema,
    PersistenceSchema,
    QuotesSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. The board itself needs none."""

    quotes_api_key: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of surfacing as a bad layout or a silent autosave.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._board = _load_validated(BoardSchema, "board.yaml")
        self._persistence = _load_validated(PersistenceSchema, "persistence.yaml")
        self._quotes = _load_validated(QuotesSchema, "quotes.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def board(self) -> BoardSchema:
        """Board layout and interaction settings."""
        return self._board

    @property
    def persistence(self) -> PersistenceSchema:
        """Autosave and export settings."""
        return self._persistence

    @property
    def quotes(self) -> QuotesSchema:
        """Quote retrieval settings."""
        return self._quotes


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_storage_path() -> Path:
    """
    Resolve the autosave file from persistence.yaml.

    Relative paths are anchored at the project root.

    Returns:
        Absolute path of the JSON store file.
    """
    configured = Path(get_app_config().persistence.storage_path)
    if configured.is_absolute():
        return configured
    return find_project_root() / configured


def get_export_dir() -> Path:
    """
    Resolve the export directory from persistence.yaml.

    Returns:
        Absolute path of the directory export files are written to.
    """
    configured = Path(get_app_config().persistence.export_dir)
    if configured.is_absolute():
        return configured
    return find_project_root() / configured
