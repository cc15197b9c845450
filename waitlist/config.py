"""Application configuration and settings."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Waitlist API"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # MongoDB
    mongodb_uri: Optional[str] = None
    mongodb_database: str = "waitlist"
    mongodb_collection: str = "emails"

    # Connection pool tuned for short-lived serverless instances
    mongodb_max_pool_size: int = 1
    mongodb_min_pool_size: int = 0
    mongodb_max_idle_time_ms: int = 10000
    mongodb_server_selection_timeout_ms: int = 5000
    mongodb_socket_timeout_ms: int = 5000
    mongodb_connect_timeout_ms: int = 5000

    # CORS
    cors_origins: list[str] = ["*"]

    @field_validator("mongodb_uri", mode="before")
    @classmethod
    def blank_uri_is_unset(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty MONGODB_URI the same as a missing one."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def mongo_client_options(self) -> dict:
        """Keyword arguments passed through to MongoClient."""
        return {
            "maxPoolSize": self.mongodb_max_pool_size,
            "minPoolSize": self.mongodb_min_pool_size,
            "maxIdleTimeMS": self.mongodb_max_idle_time_ms,
            "serverSelectionTimeoutMS": self.mongodb_server_selection_timeout_ms,
            "socketTimeoutMS": self.mongodb_socket_timeout_ms,
            "connectTimeoutMS": self.mongodb_connect_timeout_ms,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
