from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    # Logging settings
    log_level: str = Field("INFO", description="Level for flowlog_tool loggers")

    # Worker pool settings
    max_workers: Optional[int] = Field(None, description="Maximum pool workers")
    pool_timeout_s: float = Field(
        3600.0, description="Upper bound when waiting for dispatched work"
    )
    parallel_min_lines: int = Field(
        50_000, description="Inputs smaller than this are processed in-process"
    )

    # Generator settings
    batch_size: int = Field(1000, description="Flow log records per generated batch")
    flow_log_count: int = Field(100_000, description="Flow log records to generate")
    tag_rule_count: int = Field(10_000, description="Tag rules to generate")

    # File locations
    flow_logs_path: str = Field("flow_logs.csv", description="Flow log input CSV")
    tag_rules_path: str = Field("tag_rules.csv", description="Tag rule input CSV")
    port_protocol_counts_path: str = Field(
        "port_protocol_counts.csv", description="Port/protocol count output CSV"
    )
    tag_counts_path: str = Field("tag_counts.csv", description="Tag count output CSV")

    class Config:
        env_prefix = "FLOWLOG_TOOL_"
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    """Return a singleton settings instance."""
    return Settings()


settings = get_settings()
