# catalog/config/settings.py

"""Central configuration for the product catalog client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the product catalog client."""

    # --- Remote source ---
    PRODUCTS_URL: str = os.getenv(
        "CATALOG_PRODUCTS_URL", "https://fakestoreapi.com/products"
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out

    # --- Connectivity probe ---
    CONNECTIVITY_URL: str = "https://fakestoreapi.com"
    CONNECTIVITY_TIMEOUT: int = 5       # Seconds before the probe gives up
    CONNECTIVITY_SLOW_MS: float = 2000.0

    # --- Local cache ---
    CACHE_TTL_SECONDS: int = 3600       # Max age of a cached product list
    CACHE_PAYLOAD_KEY: str = "CACHED_PRODUCTS"
    CACHE_META_KEY: str = "CACHED_PRODUCTS_META"

    # --- HTTP client ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Logging ---
    LOG_CONSOLE_LEVEL: str = os.getenv("CATALOG_LOG_LEVEL", "WARNING")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    CACHE_DB_PATH: Path = Path(
        os.getenv(
            "CATALOG_CACHE_DB", str(BASE_DIR / "data" / "products_cache.db")
        )
    )
    LOGS_DIR: Path = Path(
        os.getenv("CATALOG_LOGS_DIR", str(BASE_DIR / "logs"))
    )
