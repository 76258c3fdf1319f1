"""
Application settings loaded from environment (.env).
Single source of truth with validation at first access.
"""
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Validated configuration from env and .env file."""

    model_config = SettingsConfigDict(
        env_file=_project_root() / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    base_dir: Path = Path(__file__).resolve().parent.parent.parent

    # HTTP
    port: int = Field(default=3000, validation_alias="PORT")

    # MySQL
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_database: str = Field(default="users", validation_alias="DB_DATABASE")
    db_pool_size: int = Field(default=5, ge=1, validation_alias="DB_POOL_SIZE")

    # Ops
    log_file: str = Field(default="logs/users_backend.log", validation_alias="LOG_FILE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Password hashing (pbkdf2_sha256 iterations)
    password_hash_rounds: int = Field(default=29000, ge=1000, validation_alias="PASSWORD_HASH_ROUNDS")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> str:
        return str(v or "INFO").strip().upper()

    @property
    def log_path(self) -> Path | None:
        """Absolute request log path, or None to log to stderr."""
        if not self.log_file.strip():
            return None
        p = Path(self.log_file)
        if not p.is_absolute():
            p = self.base_dir / p
        return p


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached instance so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
