"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Supabase
    supabase_url: str
    supabase_service_key: str
    supabase_http_max_connections: int = 100
    supabase_http_max_keepalive_connections: int = 50
    supabase_postgrest_timeout_seconds: int = 30

    # App
    app_name: str = "Ride Hub API"
    app_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"
    api_prefix: str = "/v1"
    enable_scheduler: bool = True

    # Scheduling
    timezone: str = "UTC"
    refresh_token_purge_interval_minutes: int = 60

    # Session tokens
    jwt_secret: str
    refresh_token_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expires_minutes: int = 15
    refresh_token_expires_days: int = 30

    # Identity provider (Firebase service account as JSON string or file path)
    firebase_service_account: str | None = None
    firebase_service_account_path: str | None = None

    # Performance tuning
    slow_request_log_threshold_ms: int = 0
    slow_query_log_threshold_ms: int = 0
    user_cache_ttl_seconds: int = 30
    data_cache_max_entries: int = 5000

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100

    # Domain policy
    membership_join_toggles: bool = True
    leaderboard_count_seconds: bool = True

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def refresh_secret(self) -> str:
        """Secret used to sign refresh tokens, falling back to the JWT secret."""
        return self.refresh_token_secret or self.jwt_secret

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()  # type: ignore[call-arg]
