"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from flask import current_app, has_app_context


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def config_value(name: str, default: Any) -> Any:
    """Read a config key from the active app, or fall back outside a request."""

    if has_app_context():
        return current_app.config.get(name, default)
    return default


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    TESTING: bool = False

    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "lottosales")
    MONGODB_TIMEOUT_MS: int = _env_int("MONGODB_TIMEOUT_MS", 5000)
    CREATE_INDEXES_ON_STARTUP: bool = os.getenv("CREATE_INDEXES_ON_STARTUP", "1") not in ("0", "false", "False")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Set by the authenticating gateway in front of the API.
    OWNER_HEADER: str = os.getenv("OWNER_HEADER", "X-Owner-Id")

    # Calendar days (sales per day, results, closures) are cut in this zone.
    SHOP_TIMEZONE: str = os.getenv("SHOP_TIMEZONE", "UTC")

    VERIFY_RATE_LIMIT: int = _env_int("VERIFY_RATE_LIMIT", 10)
    VERIFY_RATE_WINDOW_SECONDS: int = _env_int("VERIFY_RATE_WINDOW_SECONDS", 60)

    BULK_DELETE_BATCH_SIZE: int = _env_int("BULK_DELETE_BATCH_SIZE", 100)
    DEFAULT_COMMISSION_RATE: float = _env_float("DEFAULT_COMMISSION_RATE", 10.0)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Configuration used by the test suite."""

    APP_ENV: str = "testing"
    TESTING: bool = True
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"
    SHOP_TIMEZONE: str = "UTC"
    VERIFY_RATE_LIMIT: int = 10
    VERIFY_RATE_WINDOW_SECONDS: int = 60
    BULK_DELETE_BATCH_SIZE: int = 100
    DEFAULT_COMMISSION_RATE: float = 10.0


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
