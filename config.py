"""
WakeAdvisor Application Configuration
"""
import os
from dotenv import load_dotenv
from typing import List

load_dotenv()


class Settings:
    """Application Settings"""

    # Environment
    ENV = os.getenv("ENV", "development")
    DEBUG = ENV == "development"

    # API Configuration
    API_TITLE = "WakeAdvisor API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Southbound freighter and low tide advisories for small craft"

    # Server Configuration
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5000"))
    WORKERS = int(os.getenv("WORKERS", "4"))

    # AIS Data Configuration
    AISSTREAM_API_KEY = os.getenv("AISSTREAM_API_KEY", "")
    AISSTREAM_URL = os.getenv("AISSTREAM_URL", "wss://stream.aisstream.io/v0/stream")
    AIS_MESSAGE_TYPES: List[str] = ["PositionReport", "ShipStaticData"]

    # Subscription box around the reference point: [[lat, lon], [lat, lon]]
    BBOX_MIN_LAT = float(os.getenv("BBOX_MIN_LAT", "41.0"))
    BBOX_MIN_LON = float(os.getenv("BBOX_MIN_LON", "-75.0"))
    BBOX_MAX_LAT = float(os.getenv("BBOX_MAX_LAT", "43.0"))
    BBOX_MAX_LON = float(os.getenv("BBOX_MAX_LON", "-73.0"))

    # Reference point (Kingston Point, Hudson River)
    REFERENCE_LAT = float(os.getenv("REFERENCE_LAT", "41.9275"))
    REFERENCE_LON = float(os.getenv("REFERENCE_LON", "-73.9639"))

    # Approach filter
    SOUTHBOUND_MIN = float(os.getenv("SOUTHBOUND_MIN", "160.0"))  # degrees true
    SOUTHBOUND_MAX = float(os.getenv("SOUTHBOUND_MAX", "220.0"))
    ETA_WINDOW_MIN_MINUTES = float(os.getenv("ETA_WINDOW_MIN_MINUTES", "15"))
    ETA_WINDOW_MAX_MINUTES = float(os.getenv("ETA_WINDOW_MAX_MINUTES", "50"))
    MIN_SPEED_KNOTS = float(os.getenv("MIN_SPEED_KNOTS", "0.1"))

    # Stream session timing
    SESSION_BUDGET_SECONDS = float(os.getenv("SESSION_BUDGET_SECONDS", "60"))
    MESSAGE_TIMEOUT_SECONDS = float(os.getenv("MESSAGE_TIMEOUT_SECONDS", "30"))
    OPEN_TIMEOUT_SECONDS = float(os.getenv("OPEN_TIMEOUT_SECONDS", "20"))

    # Tide Configuration (NOAA CO-OPS)
    TIDE_API_URL = os.getenv(
        "TIDE_API_URL",
        "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    )
    TIDE_STATION_ID = os.getenv("TIDE_STATION_ID", "8518962")  # Turkey Point, NY
    TIDE_LOW_THRESHOLD_FEET = float(os.getenv("TIDE_LOW_THRESHOLD_FEET", "2.0"))
    HTTP_TIMEOUT_SECONDS = int(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# Create settings instance
settings = Settings()
