"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (.env):
    DB_PASSWORD

Settings (YAML):
    application.yaml   - App identity, server, cors, timeouts, workspace storage
    database.yaml      - Database connection settings
    logging.yaml       - Logging configuration
    features.yaml      - Feature flags
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notekeeper.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
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
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    db_password: str = ""

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
    immediately instead of causing cryptic KeyErrors later.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        """Feature flags."""
        return self._features


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def resolve_project_path(configured_path: str) -> Path:
    """Resolve a configured path relative to the project root (absolute paths pass through)."""
    path = Path(configured_path)
    if path.is_absolute():
        return path
    return find_project_root() / path


def get_database_url() -> str:
    """
    Construct database URL from YAML config and secrets.

    SQLite drivers treat `name` as a file path relative to the project root
    (or ":memory:"). Other drivers build a host-based URL.

    Returns:
        Database connection URL string.
    """
    db = get_app_config().database
    if db.is_sqlite:
        if db.name == ":memory:":
            return f"{db.driver}:///:memory:"
        return f"{db.driver}:///{resolve_project_path(db.name)}"

    password = get_settings().db_password
    return f"{db.driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> tuple[str, float]:
    """
    Get the backend server base URL and timeout from application.yaml.

    Returns:
        Tuple of (base_url, timeout_seconds).
    """
    app = get_app_config().application
    server = app.server
    base_url = f"http://{server.host}:{server.port}"
    timeout = float(app.timeouts.external_api)
    return base_url, timeout


def get_workspace_dir() -> Path:
    """Directory backing the client-only local store."""
    return resolve_project_path(get_app_config().application.workspace.storage_dir)
