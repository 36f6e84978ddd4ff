"""Application configuration"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def _get_config_value(key: str, default: str | None = None) -> str | None:
    """
    Get configuration value from environment or local.settings.json.

    Priority:
    1. Environment variable
    2. local.settings.json (Values.key)
    3. Default value

    Args:
        key: Configuration key name
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # Try environment variable first
    value = os.getenv(key)
    if value:
        return value

    # Try local.settings.json
    project_root = Path(__file__).resolve().parent.parent
    local_settings_path = project_root / "local.settings.json"

    if local_settings_path.exists():
        try:
            with open(local_settings_path) as f:
                settings = json.load(f)
                value = settings.get("Values", {}).get(key)
                if value:
                    return value
        except (json.JSONDecodeError, KeyError):
            pass

    return default


def _get_number(key: str, default: float, cast=float):
    """Read a numeric config value, falling back to the default when unparsable."""
    raw = _get_config_value(key)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid value for {key}: {raw!r} (using {default})")
        return default


def get_database_url() -> str:
    """
    Get database URL from environment or config.

    Returns:
        Database connection string (default: local SQLite file)
    """
    return _get_config_value("DATABASE_URL", default="sqlite:///streamcatalog.db")


def get_tmdb_base_url() -> str:
    """Base URL of the movie metadata API."""
    return _get_config_value("TMDB_BASE_URL", default="https://api.themoviedb.org/3")


def get_tmdb_api_key() -> str | None:
    """
    Get the metadata API key.

    Returns:
        API key or None when not configured
    """
    return _get_config_value("TMDB_API_KEY")


def get_tmdb_language() -> str:
    return _get_config_value("TMDB_LANGUAGE", default="en-US")


def get_request_timeout() -> float:
    """
    Per-request timeout (seconds) for metadata API calls.

    Returns:
        Timeout in seconds (default: 5.0)
    """
    return _get_number("TMDB_REQUEST_TIMEOUT", 5.0)


def get_request_retries() -> int:
    """Retries per metadata API call on connection errors, 429 and 5xx (default: 3)."""
    return _get_number("TMDB_MAX_RETRIES", 3, cast=int)


def get_history_limit() -> int:
    """Maximum number of watch history entries retained."""
    return _get_number("HISTORY_LIMIT", 20, cast=int)


def get_lite_mode() -> bool | None:
    """
    Manual lite-mode preference.

    Returns:
        True/False when explicitly set, None when device hints decide
    """
    value = _get_config_value("LITE_MODE")
    if value is None:
        return None
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    return None


def get_device_memory_gb() -> float | None:
    value = _get_config_value("DEVICE_MEMORY_GB")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid value for DEVICE_MEMORY_GB: {value!r}")
        return None


@dataclass(frozen=True)
class RecommendationSettings:
    """Tunable constants of the hybrid recommender."""

    content_weight: float = 0.9
    trending_weight: float = 0.5
    min_results: int = 10
    max_seeds: int = 3
    per_seed_limit: int = 5
    interest_threshold: float = 0.8
    max_retries: int = 1
    fetch_deadline: float = 10.0


def get_recommendation_settings() -> RecommendationSettings:
    """
    Build recommender settings from config, using defaults for anything unset.

    Returns:
        RecommendationSettings
    """
    defaults = RecommendationSettings()
    return RecommendationSettings(
        content_weight=_get_number("REC_CONTENT_WEIGHT", defaults.content_weight),
        trending_weight=_get_number("REC_TRENDING_WEIGHT", defaults.trending_weight),
        min_results=_get_number("REC_MIN_RESULTS", defaults.min_results, cast=int),
        max_seeds=_get_number("REC_MAX_SEEDS", defaults.max_seeds, cast=int),
        per_seed_limit=_get_number("REC_PER_SEED_LIMIT", defaults.per_seed_limit, cast=int),
        interest_threshold=_get_number(
            "REC_INTEREST_THRESHOLD", defaults.interest_threshold
        ),
        max_retries=_get_number("REC_MAX_RETRIES", defaults.max_retries, cast=int),
        fetch_deadline=_get_number("REC_FETCH_DEADLINE", defaults.fetch_deadline),
    )
