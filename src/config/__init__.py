"""
Configuration module.

Handles environment variables, provider credentials, and schedule settings.
"""

from src.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    REQUEST_TIMEOUT,
    WEATHER_LATITUDE,
    WEATHER_LONGITUDE,
    UNSPLASH_ACCESS_KEY,
    UNSPLASH_QUERY,
    SMTP_SERVER,
    SMTP_PORT,
    SMTP_ENABLE_SSL,
    SMTP_USERNAME,
    SMTP_PASSWORD,
    SMTP_TIMEOUT,
    EMAIL_FROM_ADDRESS,
    EMAIL_TO_ADDRESS,
    DIGEST_HOUR,
    DIGEST_MINUTE,
    SCHEDULER_INTERVAL,
    WEB_HOST,
    WEB_PORT,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "REQUEST_TIMEOUT",
    "WEATHER_LATITUDE",
    "WEATHER_LONGITUDE",
    "UNSPLASH_ACCESS_KEY",
    "UNSPLASH_QUERY",
    "SMTP_SERVER",
    "SMTP_PORT",
    "SMTP_ENABLE_SSL",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_TIMEOUT",
    "EMAIL_FROM_ADDRESS",
    "EMAIL_TO_ADDRESS",
    "DIGEST_HOUR",
    "DIGEST_MINUTE",
    "SCHEDULER_INTERVAL",
    "WEB_HOST",
    "WEB_PORT",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
