"""
Configuration helpers for the webook backend.

Every setting is read from the environment once by ``get_settings()`` so that
routers/services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    log_level: str
    database_url: str
    redis_url: str
    jwt_secret: str
    jwt_ttl_seconds: int
    code_ttl_seconds: int
    code_resend_interval_seconds: int
    code_max_attempts: int
    user_cache_ttl_seconds: int
    sms_code_template_id: str
    cache_refresh_workers: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        database_url=os.getenv("DATABASE_URL", ""),
        redis_url=os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0"),
        jwt_secret=os.getenv("JWT_SECRET", "k6CswdUm77WKcbM68UQUuxVsHSpTCwgK"),
        jwt_ttl_seconds=_int(os.getenv("JWT_TTL_SECONDS", "1800"), 1800),
        code_ttl_seconds=_int(os.getenv("CODE_TTL_SECONDS", "600"), 600),
        code_resend_interval_seconds=_int(os.getenv("CODE_RESEND_INTERVAL_SECONDS", "60"), 60),
        code_max_attempts=_int(os.getenv("CODE_MAX_ATTEMPTS", "3"), 3),
        user_cache_ttl_seconds=_int(os.getenv("USER_CACHE_TTL_SECONDS", "900"), 900),
        sms_code_template_id=os.getenv("SMS_CODE_TEMPLATE_ID", "1877556"),
        cache_refresh_workers=_int(os.getenv("CACHE_REFRESH_WORKERS", "4"), 4),
    )
