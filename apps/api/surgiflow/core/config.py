"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Day boundaries for the theater day board
    CLINIC_TIMEZONE: str = "UTC"

    # Operative timeline: timestamps further than this in the future are rejected
    TIMELINE_FUTURE_BUFFER_MINUTES: int = 5

    # Operative timeline: newly written timestamps older than this are rejected (0 disables)
    TIMELINE_PAST_LIMIT_HOURS: int = 48

    # Day board: wheels-in later than booking start by more than this counts as delayed
    DELAYED_START_THRESHOLD_MINUTES: int = 10

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
