"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Literal, Optional, Union
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore"
    )

    # Application
    debug: bool = True
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    # CORS
    allowed_origins: Union[str, List[str]] = "http://localhost:3000,http://localhost:8080"
    allowed_methods: Union[str, List[str]] = "GET,POST,PUT,DELETE,OPTIONS"
    allowed_headers: Union[str, List[str]] = "*"

    # Geocoding
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "fse-compliance/0.1.0"
    geocoder_timeout_seconds: float = 10.0

    # Notifications
    notifier_backend: Literal["log", "webhook"] = "log"
    notifier_webhook_url: str = ""
    notifier_timeout_seconds: float = 10.0

    # Fixed device location, for kiosks and tablets without positioning
    device_latitude: Optional[float] = None
    device_longitude: Optional[float] = None

    @model_validator(mode='after')
    def convert_cors_lists(self):
        """Convert comma-separated strings to lists."""
        if isinstance(self.allowed_origins, str):
            self.allowed_origins = [item.strip() for item in self.allowed_origins.split(",") if item.strip()]
        if isinstance(self.allowed_methods, str):
            self.allowed_methods = [item.strip() for item in self.allowed_methods.split(",") if item.strip()]
        if isinstance(self.allowed_headers, str):
            self.allowed_headers = [item.strip() for item in self.allowed_headers.split(",") if item.strip()]
        return self

    @model_validator(mode='after')
    def check_notifier(self):
        """Require a webhook URL for the webhook backend."""
        if self.notifier_backend == "webhook" and not self.notifier_webhook_url:
            raise ValueError("notifier_webhook_url is required when notifier_backend is 'webhook'")
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
