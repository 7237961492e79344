"""Environment-driven settings for the API."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_LATENCY_MS = 300
DEFAULT_SERVER_URL = "http://localhost:8099"
DEFAULT_PORT = 8099


def _read_latency_ms() -> int:
    raw = os.getenv("API_LATENCY_MS")
    if raw is None or raw.strip() == "":
        return DEFAULT_LATENCY_MS
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid API_LATENCY_MS, using default", extra={"value": raw, "default": DEFAULT_LATENCY_MS})
        return DEFAULT_LATENCY_MS
    return max(value, 0)


def _read_log_level() -> str:
    raw = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if raw not in logging.getLevelNamesMapping():
        logger.warning("Invalid LOG_LEVEL, using INFO", extra={"value": raw})
        return "INFO"
    return raw


def _read_port() -> int:
    try:
        return int(os.getenv("PORT", DEFAULT_PORT))
    except ValueError:
        return DEFAULT_PORT


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    environment: deployment mode; "development" exposes stack traces
    latency_ms: artificial delay applied before each API request
    server_url: base URL advertised in the OpenAPI document
    cors_origins: "*" or a comma-separated list of origins
    """
    environment: str = "production"
    latency_ms: int = DEFAULT_LATENCY_MS
    server_url: str = DEFAULT_SERVER_URL
    cors_origins: str = "*"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def latency_seconds(self) -> float:
        return self.latency_ms / 1000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call after load_dotenv)."""
        return cls(
            environment=os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "production",
            latency_ms=_read_latency_ms(),
            server_url=os.getenv("API_SERVER_URL", DEFAULT_SERVER_URL),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            port=_read_port(),
            log_level=_read_log_level(),
        )
