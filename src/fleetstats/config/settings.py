"""Environment-driven settings for the fleetstats service.

Every field can be overridden with a FLEETSTATS_ prefixed variable, e.g.
FLEETSTATS_SIGNIFICANCE_THRESHOLD_PCT=5.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FLEETSTATS_", env_file=".env", extra="ignore")

    app_name: str = "fleetstats"

    # Aggregation defaults
    significance_threshold_pct: float = Field(default=10.0, ge=0)
    desired_tick_count: int = Field(default=4, gt=0)

    # Logging
    log_file: str = "./logs/fleetstats.log"
    log_level: str = "INFO"
    log_max_bytes: int = 10 * 1024 * 1024  # 10MB
    log_backup_count: int = 3

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 12316


@lru_cache
def get_settings() -> Settings:
    return Settings()
