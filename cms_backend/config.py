"""
Configuration and settings for the CMS backend.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service.

    Every field can be overridden by the upper-cased environment variable of
    the same name (e.g. ``JWT_SECRET``) or by a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    environment: str = Field(default="development")

    # JSON persistence
    data_dir: Path = Field(default=Path("data"))
    backup_dir: Path = Field(default=Path("backups"))
    upload_dir: Path = Field(default=Path("uploads"))

    # Tokens / credentials
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_expire_hours: int = Field(default=24, ge=1)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Bootstrap super_admin written when admins.json is missing or corrupt
    admin_email: str = Field(default="admin@example.com")
    admin_password: str = Field(default="ChangeMe2024!")

    # Uploads
    max_file_size: int = Field(default=10 * 1024 * 1024)
    allowed_file_types: str = Field(
        default="image/jpeg,image/png,image/gif,image/webp"
    )

    frontend_url: str = Field(default="http://localhost:3000")
    display_timezone: str = Field(default="UTC")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_file_type_list(self) -> list[str]:
        return [t.strip() for t in self.allowed_file_types.split(",") if t.strip()]

    @property
    def cors_origins(self) -> list[str]:
        origins = [self.frontend_url, "http://localhost:3000", "http://127.0.0.1:3000"]
        return list(dict.fromkeys(origins))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
