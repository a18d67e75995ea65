"""Identity engine settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. SMARTTASK_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SECRET_KEY_BYTES = 32


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. SMARTTASK_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("SMARTTASK_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Identity engine configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - the engine refuses to start without it)
    jwt_secret_key: SecretStr

    # JWT (JWT_ prefix); always signed with HS512
    jwt_issuer: str = "smart-task-ai2"
    jwt_audience: str = "smart-task-ai2-users"
    jwt_access_token_expire_minutes: int = 10

    # Refresh sessions
    session_expire_days: int = 7
    rotate_refresh_tokens: bool = False

    # Login lockout
    max_failed_login_attempts: int = 5
    account_lockout_minutes: int = 15

    # Argon2id cost parameters (64 MiB, 3 iterations, 1 lane)
    password_hash_memory_cost_kib: int = 65536
    password_hash_time_cost: int = 3
    password_hash_parallelism: int = 1

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/smarttask_identity.db"
    database_echo: bool = False

    # Logging (LOG_ prefix)
    log_level: str = "INFO"
    audit_log_name: str = "smarttask_identity.audit"

    @field_validator("jwt_secret_key")
    @classmethod
    def _validate_secret_length(cls, v: SecretStr) -> SecretStr:
        """Reject signing keys shorter than 32 bytes."""
        if len(v.get_secret_value().encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            msg = f"JWT_SECRET_KEY must be at least {MIN_SECRET_KEY_BYTES} bytes"
            raise ValueError(msg)
        return v

    @field_validator(
        "jwt_access_token_expire_minutes",
        "session_expire_days",
        "max_failed_login_attempts",
        "account_lockout_minutes",
    )
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            msg = "must be a positive integer"
            raise ValueError(msg)
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def access_token_expire(self) -> timedelta:
        """Lifetime of a minted access token."""
        return timedelta(minutes=self.jwt_access_token_expire_minutes)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def session_expire(self) -> timedelta:
        """Horizon of a refresh session."""
        return timedelta(days=self.session_expire_days)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def account_lockout(self) -> timedelta:
        """How long an account stays locked after too many failures."""
        return timedelta(minutes=self.account_lockout_minutes)

    @property
    def database_type(self) -> str:
        """Database dialect name (sqlite or postgresql)."""
        return self.database_url.split(":", 1)[0].split("+", 1)[0]


@lru_cache()
def get_settings() -> Settings:
    """Return cached engine settings.

    The required field (jwt_secret_key) must be provided via environment
    variables or a .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
