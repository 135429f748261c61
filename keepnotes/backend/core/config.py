"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Everything is read once per process and cached; the resulting objects are
immutable.

Secrets (.env):
    JWT_SECRET, DB_PASSWORD, DATABASE_URL (optional override)

Settings (YAML):
    application.yaml   - App identity, server, cors, pagination
    database.yaml      - Database connection settings
    logging.yaml       - Logging configuration
    security.yaml      - JWT and password hashing settings
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from keepnotes.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    SecuritySchema,
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

    jwt_secret: str
    db_password: str = ""
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
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
    Properties return frozen Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")

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
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security


class AuthSettings(BaseModel):
    """
    Everything the account flow needs to hash passwords and sign tokens.

    Built once from secrets and security.yaml, then handed to AccountService
    and the authentication dependency. Services never read configuration
    on their own.
    """

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 30
    bcrypt_rounds: int = 12

    model_config = ConfigDict(frozen=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings (secret + security.yaml)."""
    security = get_app_config().security
    return AuthSettings(
        jwt_secret=get_settings().jwt_secret,
        jwt_algorithm=security.jwt.algorithm,
        token_expire_days=security.jwt.token_expire_days,
        bcrypt_rounds=security.password.bcrypt_rounds,
    )


def get_database_url() -> str:
    """
    Construct the asyncpg database URL from YAML config and secrets.

    DATABASE_URL in the environment wins over the YAML connection fields.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    return f"postgresql+asyncpg://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"
