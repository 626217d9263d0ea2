# Browser Relay Configuration
"""
Configuration management for Browser Relay.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

# Console levels the extension emits
DEFAULT_LOG_LEVELS = ["log", "info", "warn", "error"]


class Settings(BaseSettings):
    """Browser Relay settings."""

    # Service settings
    service_name: str = "Browser Relay"
    service_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings (loopback only, no auth)
    host: str = "127.0.0.1"
    port: int = 27497

    # Database settings
    database_url: str = "sqlite:///./data/browserrelay.db"

    # Ingestion settings
    max_payload_bytes: int = 10 * 1024 * 1024  # 10 MB
    allowed_levels: List[str] = DEFAULT_LOG_LEVELS
    echo_logs: bool = True

    # Query settings
    max_query_limit: int = 1000

    # Comma separated list, empty means capture on all domains
    allowed_domains: str = ""

    # Client settings
    relay_url: str = "http://127.0.0.1:27497"
    request_timeout: float = 0.9  # seconds, below the first retry delay

    class Config:
        env_prefix = "BROWSER_RELAY_"
        env_file = ".env"

    def allowed_domain_list(self) -> List[str]:
        """Parse the allowed domains setting."""
        return [d.strip() for d in self.allowed_domains.split(",") if d.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
