"""
Application settings using Pydantic Settings.
Values come from environment variables or a local .env file.
"""
import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Configuration
    APP_ENV: str = "development"
    APP_NAME: str = "Call Centre Assistant"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Voice Provider (Hume EVI) Credentials
    HUME_API_KEY: str = ""
    HUME_SECRET_KEY: str = ""
    HUME_CONFIG_ID: str = ""  # Optional EVI configuration
    HUME_API_BASE_URL: str = "https://api.hume.ai"
    VOICE_TOKEN_TIMEOUT_SECONDS: float = 10.0
    REQUIRE_VOICE_TOKEN: bool = True  # Block the call manager until a token is issued

    # Response Store
    RESPONSE_STORE_BACKEND: str = "file"  # file or redis
    RESPONSES_FILE_PATH: str = "data/call_responses.json"
    RESPONSES_STORAGE_KEY: str = "callResponses"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Simulated Calls
    SIMULATED_CONNECT_DELAY_SECONDS: float = 0.5
    SIMULATED_GREETING: str = "Hello, thanks for taking our call. Do you have a moment to chat?"

    # Dashboard
    DASHBOARD_TREND_DAYS: int = 7
    DASHBOARD_RECENT_LIMIT: int = 5
    DISPLAY_TIMEZONE: str = "UTC"

    # Token Server
    TOKEN_SERVER_HOST: str = "0.0.0.0"
    TOKEN_SERVER_PORT: int = 8000

    @property
    def has_voice_credentials(self) -> bool:
        """True when both halves of the voice provider key pair are set."""
        return bool(self.HUME_API_KEY and self.HUME_SECRET_KEY)

    @field_validator("RESPONSE_STORE_BACKEND")
    @classmethod
    def validate_response_store_backend(cls, v: str) -> str:
        """Validate response store backend."""
        allowed = ["file", "redis"]
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"RESPONSE_STORE_BACKEND must be one of {allowed}, got '{v}'")
        return v

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Validate display timezone against the IANA database."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"DISPLAY_TIMEZONE must be an IANA timezone name, got '{v}'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}, got '{v}'")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
