"""
Runtime configuration for skybrief.

All settings come from environment variables so the same process can be
configured for local demos (no credentials, mock data) or production use.
"""

import os
from dataclasses import dataclass
from typing import Optional

# Cache
DEFAULT_CACHE_TTL_SECONDS = 300

# Provider HTTP calls are bounded per attempt
DEFAULT_HTTP_TIMEOUT = 12
MIN_HTTP_TIMEOUT = 10
MAX_HTTP_TIMEOUT = 15

# Enroute sampling
DEFAULT_ENROUTE_POINTS = 8
MIN_ENROUTE_POINTS = 2
MAX_ENROUTE_POINTS = 50

DEFAULT_MAX_WORKERS = 16

# Request limits
MAX_MULTIPLE_AIRPORTS = 10
MAX_QUICK_AIRPORTS = 5

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {value!r}")


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def clamp_enroute_points(value: Optional[int]) -> int:
    """Clamp a requested enroute sample count to the supported range."""
    if value is None:
        return DEFAULT_ENROUTE_POINTS
    return max(MIN_ENROUTE_POINTS, min(MAX_ENROUTE_POINTS, int(value)))


@dataclass
class Settings:
    """
    Process-wide settings.

    Attributes:
        cache_ttl_seconds: Time-to-live of cached reports and airports
        http_timeout: Per-attempt timeout for provider calls (10-15s)
        enroute_points: Default number of interior great-circle samples
        max_workers: Thread pool size for concurrent fetches
        checkwx_api_key: CheckWX API key (provider skipped when missing)
        avwx_api_token: AVWX token (provider skipped when missing)
        faa_client_id: FAA NOTAM API client id
        faa_client_secret: FAA NOTAM API client secret
        disable_public_api: Skip the free aviationweather.gov provider
        log_level: Logging level name
        log_format: Logging format string
    """

    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    http_timeout: int = DEFAULT_HTTP_TIMEOUT
    enroute_points: int = DEFAULT_ENROUTE_POINTS
    max_workers: int = DEFAULT_MAX_WORKERS
    checkwx_api_key: Optional[str] = None
    avwx_api_token: Optional[str] = None
    faa_client_id: Optional[str] = None
    faa_client_secret: Optional[str] = None
    disable_public_api: bool = False
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self):
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"Cache TTL must be positive, got {self.cache_ttl_seconds}")
        self.http_timeout = max(MIN_HTTP_TIMEOUT, min(MAX_HTTP_TIMEOUT, self.http_timeout))
        self.enroute_points = clamp_enroute_points(self.enroute_points)
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables."""
        return cls(
            cache_ttl_seconds=_env_int("SKYBRIEF_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
            http_timeout=_env_int("SKYBRIEF_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            enroute_points=_env_int("SKYBRIEF_ENROUTE_POINTS", DEFAULT_ENROUTE_POINTS),
            max_workers=_env_int("SKYBRIEF_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            checkwx_api_key=_env_str("CHECKWX_API_KEY"),
            avwx_api_token=_env_str("AVWX_API_TOKEN"),
            faa_client_id=_env_str("FAA_NOTAM_CLIENT_ID"),
            faa_client_secret=_env_str("FAA_NOTAM_CLIENT_SECRET"),
            disable_public_api=_env_flag("SKYBRIEF_DISABLE_PUBLIC_API"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT),
        )
