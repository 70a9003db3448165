"""Application settings using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AssetStoreSettings(BaseSettings):
    """Remote asset store (image hosting) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ASSETS__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = Field(
        default="cloudinary",
        description="Asset store backend: cloudinary | memory",
    )
    cloud_name: str = Field(default="", description="Cloudinary cloud name")
    api_key: str = Field(default="", description="Cloudinary API key")
    api_secret: str = Field(default="", description="Cloudinary API secret")
    api_base_url: str = Field(
        default="https://api.cloudinary.com/v1_1",
        description="Cloudinary REST API base URL",
    )
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    default_folder: str = Field(
        default="uploads", description="Folder used when an upload names none"
    )

    retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per asset store call (1 = single attempt, no retry)",
    )
    retry_backoff: float = Field(
        default=0.5,
        ge=0,
        description="Initial backoff in seconds, doubled after each failed attempt",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


class RecordStoreSettings(BaseSettings):
    """Persistent record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDS__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = Field(
        default="filesystem",
        description="Record store backend: filesystem | memory",
    )
    path: str = Field(
        default="~/.folio/records",
        description="Root directory for the filesystem record store",
    )


class LifecycleSettings(BaseSettings):
    """Record/asset lifecycle behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="LIFECYCLE__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    orphan_ledger_enabled: bool = Field(
        default=True,
        description="Record failed asset deletions so they can be swept later",
    )


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FOLIO_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=5000, description="API server port")
    api_reload: bool = Field(default=False, description="Auto-reload on code changes")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )

    # Stores (nested)
    assets: AssetStoreSettings = Field(default_factory=AssetStoreSettings)
    records: RecordStoreSettings = Field(default_factory=RecordStoreSettings)
    lifecycle: LifecycleSettings = Field(default_factory=LifecycleSettings)


settings = Settings()
