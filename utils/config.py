"""Configuration management for the budget comparisons service.

Provides:
- A small ``Config`` base class (dict round-tripping)
- ``AppConfig``: settings read from environment variables with defaults
- Catalog constants shared by the loader, the validators and the API
"""

import os as _os
from pathlib import Path
from typing import Any, Dict, Optional


# ── Catalog constants ─────────────────────────────────────────────────────────

UNIT_CATEGORIES = frozenset({
    "infrastructure",
    "everyday",
    "vehicles",
    "buildings",
    "misc",
    "education",
    "food",
    "transportation",
    "veterans",
    "environment",
    "public-services",
    "healthcare",
    "housing",
    "income",
})

BUDGET_TIERS = frozenset({"department", "program", "current-event"})

# Number of alternatives shown in "Try other comparisons" panels.
DISPLAYED_ALTERNATIVES = 3

# Hard cap on search results returned by any search endpoint.
MAX_SEARCH_RESULTS = 20

DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalog" / "data"


class Config:
    """Base configuration class for organizing application settings."""

    def to_dict(self) -> Dict[str, Any]:
        """Return all public attributes as a dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create a config and overlay values from *data*."""
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_PORT: API server port (default: 8000)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        APP_BASE_URL: Public base URL used in share links
            (default: http://localhost:8000)
        APP_CATALOG_DIR: Directory holding the catalog JSON tables
            (default: packaged catalog/data)
        APP_FAVORITES_PATH: JSON file backing the favorites store; unset keeps
            favorites in memory
        APP_CACHE_TTL: Seconds a memoized comparison stays cached (default: 300)
        APP_CACHE_SIZE: Maximum memoized comparisons (default: 1024)
        RATE_LIMIT_SEARCH: Max search requests per minute per IP (default: 60)
        RATE_LIMIT_DEFAULT: Max requests per minute for other endpoints (default: 120)
        TRUSTED_PROXIES: Comma-separated proxy IP addresses to trust for forwarded IPs
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*" else _split_csv(raw_origins)
        )
        self.base_url = _os.getenv("APP_BASE_URL", "http://localhost:8000").rstrip("/")
        self.catalog_dir = Path(_os.getenv("APP_CATALOG_DIR", str(DEFAULT_CATALOG_DIR)))
        raw_favorites = _os.getenv("APP_FAVORITES_PATH", "")
        self.favorites_path: Optional[Path] = Path(raw_favorites) if raw_favorites else None
        self.cache_ttl = float(_os.getenv("APP_CACHE_TTL", "300"))
        self.cache_size = int(_os.getenv("APP_CACHE_SIZE", "1024"))
        self.rate_limit_search = int(_os.getenv("RATE_LIMIT_SEARCH", "60"))
        self.rate_limit_default = int(_os.getenv("RATE_LIMIT_DEFAULT", "120"))
        self.trusted_proxies: set[str] = set(_split_csv(_os.getenv("TRUSTED_PROXIES", "")))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
