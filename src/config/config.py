"""
Configuration module for Todo Digest.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of src/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = _env_bool("DEBUG", "false")

# Root log level; DEBUG mode lowers it unless set explicitly
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()


# =============================================================================
# Network Configuration
# =============================================================================

# HTTP request timeout in seconds for weather and image providers
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "10"))


# =============================================================================
# Weather Provider (Open-Meteo, no key required)
# =============================================================================

WEATHER_LATITUDE: float = float(os.getenv("WEATHER_LATITUDE", "52.52"))
WEATHER_LONGITUDE: float = float(os.getenv("WEATHER_LONGITUDE", "13.41"))


# =============================================================================
# Image Provider (Unsplash)
# =============================================================================

# Unsplash access key, sent as "Client-ID <key>"
UNSPLASH_ACCESS_KEY: str = os.getenv("UNSPLASH_ACCESS_KEY", "")

# Search term for the random photo
UNSPLASH_QUERY: str = os.getenv("UNSPLASH_QUERY", "nature")


# =============================================================================
# Mail Transport (SMTP)
# =============================================================================

SMTP_SERVER: str = os.getenv("SMTP_SERVER", "")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))

# STARTTLS after connecting
SMTP_ENABLE_SSL: bool = _env_bool("SMTP_ENABLE_SSL", "true")

SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")

# Connect/send timeout in seconds
SMTP_TIMEOUT: int = int(os.getenv("SMTP_TIMEOUT", "30"))

EMAIL_FROM_ADDRESS: str = os.getenv("EMAIL_FROM_ADDRESS", "")
EMAIL_TO_ADDRESS: str = os.getenv("EMAIL_TO_ADDRESS", "")


# =============================================================================
# Digest Schedule
# =============================================================================

# Wall-clock trigger time for the daily digest (local time)
DIGEST_HOUR: int = int(os.getenv("DIGEST_HOUR", "6"))
DIGEST_MINUTE: int = int(os.getenv("DIGEST_MINUTE", "0"))

# How often the scheduler timer elapses, in seconds
SCHEDULER_INTERVAL: int = int(os.getenv("SCHEDULER_INTERVAL", "60"))


# =============================================================================
# Web Server
# =============================================================================

WEB_HOST: str = os.getenv("WEB_HOST", "127.0.0.1")
WEB_PORT: int = int(os.getenv("WEB_PORT", "5000"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate configuration values.

    Production requires a mail relay, both addresses and the Unsplash key.
    Range checks apply in every environment.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production():
        if not SMTP_SERVER:
            errors.append("SMTP_SERVER is required in production")
        if not EMAIL_FROM_ADDRESS:
            errors.append("EMAIL_FROM_ADDRESS is required in production")
        if not EMAIL_TO_ADDRESS:
            errors.append("EMAIL_TO_ADDRESS is required in production")
        if not UNSPLASH_ACCESS_KEY:
            errors.append("UNSPLASH_ACCESS_KEY is required in production")

    if not 1 <= SMTP_PORT <= 65535:
        errors.append("SMTP_PORT must be between 1 and 65535")

    if not 0 <= DIGEST_HOUR <= 23:
        errors.append("DIGEST_HOUR must be between 0 and 23")

    if not 0 <= DIGEST_MINUTE <= 59:
        errors.append("DIGEST_MINUTE must be between 0 and 59")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if SMTP_TIMEOUT < 1:
        errors.append("SMTP_TIMEOUT must be at least 1 second")

    if SCHEDULER_INTERVAL < 1:
        errors.append("SCHEDULER_INTERVAL must be at least 1 second")

    if not -90.0 <= WEATHER_LATITUDE <= 90.0:
        errors.append("WEATHER_LATITUDE must be between -90 and 90")

    if not -180.0 <= WEATHER_LONGITUDE <= 180.0:
        errors.append("WEATHER_LONGITUDE must be between -180 and 180")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  WEATHER: lat={WEATHER_LATITUDE}, lon={WEATHER_LONGITUDE}")
    print(f"  UNSPLASH_ACCESS_KEY: {'***' if UNSPLASH_ACCESS_KEY else '(not set)'}")
    print(f"  UNSPLASH_QUERY: {UNSPLASH_QUERY}")
    print(f"  SMTP_SERVER: {SMTP_SERVER or '(not set)'}:{SMTP_PORT} (ssl={SMTP_ENABLE_SSL})")
    print(f"  SMTP_USERNAME: {SMTP_USERNAME or '(not set)'}")
    print(f"  SMTP_PASSWORD: {'***' if SMTP_PASSWORD else '(not set)'}")
    print(f"  EMAIL_FROM_ADDRESS: {EMAIL_FROM_ADDRESS or '(not set)'}")
    print(f"  EMAIL_TO_ADDRESS: {EMAIL_TO_ADDRESS or '(not set)'}")
    print(f"  DIGEST_TIME: {DIGEST_HOUR:02d}:{DIGEST_MINUTE:02d} (check every {SCHEDULER_INTERVAL}s)")
    print(f"  WEB: {WEB_HOST}:{WEB_PORT}")
