"""Application settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables with TOURNEY_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="TOURNEY_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_origin_regex: str | None = None  # e.g. preview deployments
    cors_max_age_seconds: int = 600
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60
    log_level: str = "INFO"
    log_format: str = "json"

    # --- Key-value store ---
    store_backend: str = "redis"  # "redis" or "memory"
    redis_url: str = "redis://localhost:6379/0"
    store_scan_batch_size: int = 500

    # --- Identity provider (Supabase-compatible auth REST API) ---
    identity_url: str = "http://localhost:54321"
    identity_service_key: str = ""
    identity_timeout_seconds: float = 10.0

    # --- Gamification ---
    xp_award_max_retries: int = 5
    leaderboard_size: int = 100

    # --- Signup ---
    signup_roles: list[str] = ["gamer", "organizer"]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
