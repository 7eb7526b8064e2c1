"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Registration"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./registration.db"
    database_busy_timeout_seconds: float = 30.0

    # Teams
    team_max_size: int = 4

    # Attendee search: "insertion" keeps creation order, "name" sorts by last/first name
    attendee_search_strategy: str = "insertion"

    # Identity directory (user profiles)
    identity_service_url: str = ""
    identity_timeout_seconds: float = 5.0

    # SMS gateway
    sms_gateway_url: str = ""
    sms_gateway_token: str = ""
    sms_timeout_seconds: float = 10.0

    # Background jobs
    fanout_reconcile_interval_minutes: int = 10


settings = Settings()
