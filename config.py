"""
Test-run configuration module.

This module defines configuration classes for the environments the ORDISS
suite runs against (development, staging, ci, production). Values are loaded
from environment variables with sensible defaults when the module is imported.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default``."""
    raw = os.environ.get(name, "")
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration with default settings."""

    NAME: str = "Development Environment"
    BASE_URL: str = os.environ.get("BASE_URL", "https://10.10.10.10:700")

    # Timeouts are in milliseconds, as Playwright expects them
    TIMEOUT: int = _env_int("TIMEOUT", 30000)
    TIMEOUTS: dict = {
        "short": 5000,
        "long": 60000,
        "navigation": 30000,
        "element": 10000,
    }

    RETRIES: int = _env_int("RETRIES", 2)
    HEADLESS: bool = _env_flag("HEADLESS", True)
    SLOW_MO: int = _env_int("SLOW_MO", 0)
    WORKERS: int = _env_int("WORKERS", 4)

    TEST_DATA_DIR: Path = Path(os.environ.get("TEST_DATA_DIR", BASE_DIR / "test-data"))
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    SUPERADMIN_USERNAME: str = os.environ.get("SUPERADMIN_USERNAME", "main.superadmin")
    SUPERADMIN_PASSWORD: str = os.environ.get("SUPERADMIN_PASSWORD", "Ordiss@SA")

    DEBUG: bool = False

    @classmethod
    def timeout_for(cls, operation: str = "default") -> int:
        """Timeout in ms for a named operation, defaulting to ``TIMEOUT``."""
        return cls.TIMEOUTS.get(operation, cls.TIMEOUT)


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True


class StagingConfig(Config):
    """Staging environment configuration."""

    NAME: str = "Staging Environment"
    BASE_URL: str = os.environ.get("STAGING_URL", "https://staging.ordiss.com")


class CIConfig(Config):
    """CI environment configuration."""

    NAME: str = "CI Environment"
    BASE_URL: str = os.environ.get("CI_BASE_URL", "https://ci.ordiss.com")
    HEADLESS: bool = True


class ProductionConfig(Config):
    """Production environment configuration."""

    NAME: str = "Production Environment"
    BASE_URL: str = os.environ.get("PROD_URL", "https://prod.ordiss.com")
    TIMEOUT: int = _env_int("TIMEOUT", 60000)


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "staging": StagingConfig,
    "ci": CIConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, staging, ci, production).
             If None, uses the ORDISS_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("ORDISS_ENV", "development")
    return config.get(env.lower(), config["default"])


def validate_config(cfg: type[Config]) -> tuple[list[str], list[str]]:
    """
    Check a configuration class before a run starts.

    Returns:
        ``(errors, warnings)``. Any error means the run cannot proceed.
    """
    errors = []
    warnings = []

    if not cfg.BASE_URL:
        errors.append("Base URL is not configured")
    if not cfg.SUPERADMIN_USERNAME or not cfg.SUPERADMIN_PASSWORD:
        errors.append("SuperAdmin user credentials not configured")

    timeouts = {"default": cfg.TIMEOUT, **cfg.TIMEOUTS}
    for key, value in timeouts.items():
        if value <= 0:
            warnings.append(f"Invalid timeout value for {key}: {value}")

    if cfg.RETRIES < 0:
        warnings.append(f"Invalid retry value: {cfg.RETRIES}")
    if cfg.WORKERS < 1:
        warnings.append(f"Invalid worker count: {cfg.WORKERS}")

    return errors, warnings


def config_summary(cfg: type[Config]) -> dict:
    """Key settings of ``cfg`` for the run log."""
    return {
        "environment": cfg.NAME,
        "base_url": cfg.BASE_URL,
        "headless": cfg.HEADLESS,
        "workers": cfg.WORKERS,
        "timeout": cfg.TIMEOUT,
        "retries": cfg.RETRIES,
        "test_data_dir": str(cfg.TEST_DATA_DIR),
    }
