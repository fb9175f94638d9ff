"""Configuration management for MediaRelay."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    ENV: str = "local"
    SERVICE_NAME: str = "mediarelay"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Shared key callers must send in the "key" form field
    AUTH_KEY: SecretStr = SecretStr("")

    # Backblaze B2 Configuration
    B2_APP_KEY_ID: str = ""
    B2_APP_KEY: SecretStr = SecretStr("")
    B2_BUCKET_ID: str = ""
    B2_BUCKET_NAME: str = ""
    B2_API_URL: str = "https://api.backblazeb2.com"

    # Upload Configuration
    UPLOAD_FOLDER: str = "Shelf"  # Object key prefix, empty = bucket root
    UPLOAD_AUTHOR: str = "gh-action"  # Sent as X-Bz-Info-Author
    REQUEST_TIMEOUT: float = 30  # seconds per B2 call
    MAX_UPLOAD_MB: int = 50

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def b2_api_url(self) -> str:
        """B2 authorization host without a trailing slash."""
        return self.B2_API_URL.rstrip("/")

    def missing_b2_settings(self) -> list[str]:
        """Names of the B2 settings that are still empty."""
        missing = []
        if not self.B2_APP_KEY_ID:
            missing.append("B2_APP_KEY_ID")
        if not self.B2_APP_KEY.get_secret_value():
            missing.append("B2_APP_KEY")
        if not self.B2_BUCKET_ID:
            missing.append("B2_BUCKET_ID")
        if not self.B2_BUCKET_NAME:
            missing.append("B2_BUCKET_NAME")
        return missing


# Singleton settings instance
settings = Settings()
