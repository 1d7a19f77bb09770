"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from raspadinha.core.constants import PROBABILITY_EPSILON, REVEAL_THRESHOLD_PERCENT


class Settings(BaseSettings):
    """Raspadinha application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = True
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # CORS
    cors_origins: str = "*"  # Comma-separated origins; "*" for dev only

    # Game
    reveal_threshold: float = Field(default=REVEAL_THRESHOLD_PERCENT, gt=0, le=100)
    probability_epsilon: float = Field(default=PROBABILITY_EPSILON, ge=0)
    normalize_payout_tables: bool = False
    rng_seed: int | None = None  # set only for reproducible demos

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()
