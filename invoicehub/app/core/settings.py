"""Application configuration loaded from the environment and an optional .env file."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "InvoiceHub"
    api_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    secret_key: str = Field(default="CHANGE_ME", alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    database_url: str = Field(default="sqlite:///./invoicehub.db", alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # JSON list in the environment, e.g. CORS_ORIGINS='["https://app.example.com"]'
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="CORS_ORIGINS",
    )

    # Logo storage; bucket "local" keeps uploads on disk
    storage_bucket: str = Field(default="local", alias="STORAGE_BUCKET")
    storage_endpoint_url: str | None = Field(default=None, alias="STORAGE_ENDPOINT_URL")
    storage_access_key: str | None = Field(default=None, alias="STORAGE_ACCESS_KEY")
    storage_secret_key: str | None = Field(default=None, alias="STORAGE_SECRET_KEY")
    storage_public_url: str = Field(default="http://localhost:8000/static", alias="STORAGE_PUBLIC_URL")
    local_storage_path: str = Field(default="./storage", alias="LOCAL_STORAGE_PATH")
    logo_max_bytes: int = 2 * 1024 * 1024
    logo_max_width: int = 400
    logo_max_height: int = 200
    logo_content_types: list[str] = ["image/png", "image/jpeg", "image/svg+xml"]

    default_invoice_prefix: str = Field(default="INV", alias="DEFAULT_INVOICE_PREFIX")
    default_currency: str = Field(default="USD", alias="DEFAULT_CURRENCY")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    return Settings()
