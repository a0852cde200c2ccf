"""
Core module - settings, persistence, Redis, rate limiting, email and logging.
"""

from app.core.config import Settings, get_settings, settings
from app.core.database import Base, close_db, get_db, init_db
from app.core.logging import configure_logging
from app.core.redis import close_redis, get_redis, init_redis

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "configure_logging",
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "get_redis",
    "init_redis",
    "close_redis",
]
