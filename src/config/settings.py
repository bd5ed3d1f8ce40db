# src/config/settings.py

"""Central configuration for the naftas service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the naftas service."""

    # --- Upstream requests ---
    REQUEST_TIMEOUT: int = int(
        os.getenv("NAFTAS_REQUEST_TIMEOUT", "60")
    )                                   # Seconds before a request times out
    MAX_RETRIES: int = 1                # Attempts per upstream call (1 = no retry)
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/csv;q=0.9, */*;q=0.8",
        "Accept-Language": "es-AR,es;q=0.9,en;q=0.8",
    }
    HEALTH_TIMEOUT: int = 10            # Seconds per health check
    HEALTH_SLOW_MS: float = 5000.0

    # --- Government open-data API (CKAN datastore) ---
    DATASTORE_URL: str = os.getenv(
        "NAFTAS_DATASTORE_URL",
        "http://datos.energia.gob.ar/api/3/action/datastore_search",
    )
    RESOURCE_ID: str = os.getenv(
        "NAFTAS_RESOURCE_ID", "80ac25de-a44a-4445-9215-090cf55cfda5"
    )
    DATASTORE_LIMIT: int = 40000

    # --- Same dataset as a CSV feed ---
    CSV_URL: str = os.getenv(
        "NAFTAS_CSV_URL",
        "http://datos.energia.gob.ar/dataset/"
        "1c181390-5045-475e-94dc-410429be4b17/resource/"
        "80ac25de-a44a-4445-9215-090cf55cfda5/download/"
        "precios-en-surtidor-resolucin-3142016.csv",
    )

    # --- Station aggregator (precios en surtidor) ---
    SURTIDOR_URL: str = os.getenv(
        "NAFTAS_SURTIDOR_URL",
        "https://preciosensurtidor.energia.gob.ar/ws/rest/rest/server.php",
    )
    SURTIDOR_METHOD: str = "getEmpresasAgrupadasBanderasCombustible"
    SURTIDOR_BANDERAS: list[str] = ["28", "2", "26", "4"]
    SURTIDOR_FUEL_CODES: list[int] = list(range(1, 22))
    SURTIDOR_BOUNDS_DELTA: float = 2.0  # Degrees around the zone centre

    # --- Price-increase predictions ---
    INCREASES_URL: str = os.getenv(
        "NAFTAS_INCREASES_URL",
        "https://magicloops.dev/api/loop/"
        "e55875c3-65a5-4f90-8e31-fb8b7c0311e5/run",
    )
    INCREASES_REVALIDATE: int = 60 * 60 * 24 * 20  # 20 days

    # --- Data-source strategy ---
    PRICE_SOURCE: str = os.getenv("NAFTAS_PRICE_SOURCE", "datastore")
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "datastore",
            "label": "Datos Energía (JSON API)",
            "source": "src.sources.datastore_source.DatastoreSource",
        },
        {
            "id": "csv",
            "label": "Datos Energía (CSV feed)",
            "source": "src.sources.csv_source.CsvSource",
        },
    ]

    # --- Dataset ---
    DATASET_TIMEZONE: str = "America/Argentina/Buenos_Aires"  # Naive feed dates

    # --- Domain ---
    ALLOWED_BRANDS: list[str] = ["YPF", "SHELL C.A.P.S.A.", "AXION", "PUMA"]
    LOCATION_BRAND: str = "YPF"
    FUEL_CATEGORY_ORDER: list[str] = [
        "SUPER",
        "PREMIUM",
        "GNC",
        "DIESEL",
        "DIESEL-PREMIUM",
    ]
    DEFAULT_ZONE: str = "este"
    ZONES: dict[str, tuple[float, float]] = {
        "este": (-34.573060, -58.422024),
        "sur": (-39.02496820106367, -67.57594084801558),
        "oeste": (-41.13760192273125, -71.30180540523081),
        "norte": (-24.790997533553384, -65.42015037222895),
    }
    DEFAULT_CITY: str = "CAPITAL FEDERAL"
    MIN_SEARCH_LENGTH: int = 3

    # --- Reliability of a price by age (days) ---
    RELIABILITY_LIMITED_DAYS: int = 20
    RELIABILITY_LOW_DAYS: int = 75

    # --- Attractiveness score ---
    SCORE_PRICE_WEIGHT: float = 0.6
    SCORE_RECENCY_WEIGHT: float = 0.4
    SCORE_PRICE_SCALE: float = 2.5      # Points per % below the average
    SCORE_DAY_SCALE: float = 3.0        # Points per day newer than average

    # --- API server ---
    API_HOST: str = os.getenv("NAFTAS_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("NAFTAS_API_PORT", "8000"))
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv(
            "NAFTAS_CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    CITIES_PATH: Path = BASE_DIR / "src" / "config" / "cities.json"
    PREFERENCES_PATH: Path = BASE_DIR / "data" / "preferences.json"
    LOGS_DIR: Path = Path(
        os.getenv("NAFTAS_LOGS_DIR", str(BASE_DIR / "logs"))
    )

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("NAFTAS_LOG_LEVEL", "WARNING")
