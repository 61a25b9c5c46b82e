"""Configuration for the RideCompare service."""

from typing import Dict, List, Optional
import logging
import os
from dotenv import load_dotenv

from app.models import CountryConfig

load_dotenv()

logger = logging.getLogger(__name__)


def _split_env_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings."""

    # API Settings
    API_TITLE = "RideCompare Fare Estimator"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = (
        "Side-by-side fare estimates for Uber, Bolt and Yango with country-aware pricing"
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database Settings
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ridecompare.db")

    # Empty means in-process caching only
    REDIS_URL = os.getenv("REDIS_URL", "")
    QUOTE_CACHE_TTL = int(os.getenv("QUOTE_CACHE_TTL", "60"))
    QUOTE_CACHE_MAX_ENTRIES = int(os.getenv("QUOTE_CACHE_MAX_ENTRIES", "1024"))

    # CORS Settings
    CORS_ORIGINS = _split_env_list(os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5000,http://127.0.0.1:5000",
    ))

    # External Uber price estimates, used only when a server token is set
    UBER_SERVER_TOKEN = os.getenv("UBER_SERVER_TOKEN", "")
    UBER_API_URL = os.getenv("UBER_API_URL", "https://api.uber.com")
    UBER_API_TIMEOUT = float(os.getenv("UBER_API_TIMEOUT", "5"))

    DEFAULT_COUNTRY = "US"

    # Loaded from database once per process
    _countries_cache: Optional[Dict[str, CountryConfig]] = None

    @classmethod
    def get_country_configs(cls) -> Dict[str, CountryConfig]:
        """
        Get country configs from database (with caching).
        Falls back to the built-in table if the database is unavailable.
        """
        if cls._countries_cache is None:
            from app.database import default_country_rows

            try:
                from app.database import get_db_manager

                rows = list(get_db_manager().get_all_countries().values())
            except Exception as e:
                logger.warning(f"Could not load country configs from database: {e}")
                rows = []

            if not rows:
                rows = default_country_rows()

            cls._countries_cache = {
                row["code"]: CountryConfig(**row) for row in rows
            }
        return cls._countries_cache

    @classmethod
    def reload_country_configs(cls):
        """Force reload of country configs from database."""
        cls._countries_cache = None
        cls.get_country_configs()

    @classmethod
    def resolve_country(cls, code: Optional[str] = None) -> CountryConfig:
        """
        Resolve a country code to its pricing config.

        Unknown or missing codes resolve to the default country, so this
        never fails.
        """
        configs = cls.get_country_configs()
        if code:
            config = configs.get(code.strip().upper())
            if config is not None:
                return config
        return configs.get(cls.DEFAULT_COUNTRY) or CountryConfig(
            code="US",
            name="United States",
            currency="USD",
            currency_symbol="$",
            services=["uber", "bolt"],
            price_multiplier=1.0,
        )

    @classmethod
    def uber_api_enabled(cls) -> bool:
        return bool(cls.UBER_SERVER_TOKEN)


settings = Settings()
