"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with validation.
"""
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Firebase
    firebase_project_id: Optional[str] = Field(default=None, description="Firebase / GCP project ID")
    firebase_credentials_path: Optional[str] = Field(
        default=None,
        description="Path to service account JSON (application default credentials when unset)"
    )
    firebase_storage_bucket: Optional[str] = Field(default=None, description="Cloud Storage bucket for chat media")
    storage_host: str = Field(
        default="firebasestorage.googleapis.com",
        description="Host of public storage download URLs"
    )

    # Clear chat
    clear_chat_batch_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Messages processed per page (Firestore batched write limit is 500)"
    )

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # Rate Limiting
    rate_limit_per_minute: int = Field(default=60, description="Callable rate limit per minute per client")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Uppercase the level name so logging accepts it."""
        return v.strip().upper()

    def get_allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
