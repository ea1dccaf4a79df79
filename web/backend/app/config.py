from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Sessions
    session_ttl_seconds: int = 2 * 60 * 60     # 2 hours of inactivity
    cleanup_interval_seconds: int = 10 * 60     # run cleanup every 10 minutes

    # Game
    default_player_count: int = 2

    # HTTP
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    log_level: str = "INFO"

    # Built board UI; empty means web/frontend/dist next to the backend
    frontend_dist: str = ""

    model_config = SettingsConfigDict(
        env_prefix="STERNHALMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
