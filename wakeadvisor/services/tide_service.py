"""
Tide Prediction Service
Fetches hourly tide predictions from NOAA CO-OPS
"""
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

import requests

from config import settings
from wakeadvisor.models.tide import TidePrediction

logger = logging.getLogger(__name__)


class TideService:
    """Service for NOAA tide predictions at one station"""

    def __init__(self, station_id: str = None, api_url: str = None, session: requests.Session = None):
        self.station_id = station_id or settings.TIDE_STATION_ID
        self.api_url = api_url or settings.TIDE_API_URL
        self.session = session or requests.Session()

    def build_params(self, day: date) -> Dict[str, str]:
        stamp = day.strftime("%Y%m%d")
        return {
            "product": "predictions",
            "application": "WakeAdvisor",
            "begin_date": stamp,
            "end_date": stamp,
            "datum": "MLLW",
            "station": self.station_id,
            "time_zone": "lst_ldt",
            "units": "english",
            "interval": "h",
            "format": "json",
        }

    @staticmethod
    def _is_supported(day: date, today: date) -> bool:
        return day in (today, today + timedelta(days=1))

    def get_all_predictions(self, day: date, today: Optional[date] = None) -> List[TidePrediction]:
        """All hourly predictions for a day (today or tomorrow only)"""
        today = today or datetime.now().date()
        if not self._is_supported(day, today):
            return []

        try:
            response = self.session.get(
                self.api_url,
                params=self.build_params(day),
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching tide predictions for station {self.station_id}: {e}")
            return []
        except ValueError as e:
            logger.error(f"Tide response was not JSON: {e}")
            return []

        if not isinstance(data, dict) or "error" in data:
            logger.warning(f"NOAA returned no predictions: {data.get('error') if isinstance(data, dict) else data}")
            return []

        predictions = []
        for raw in data.get("predictions") or []:
            try:
                predictions.append(self.parse_prediction(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping tide prediction {raw}: {e}")
                continue

        logger.info(f"Fetched {len(predictions)} tide predictions for {day.isoformat()}")
        return predictions

    @staticmethod
    def parse_prediction(raw: Dict) -> TidePrediction:
        # {"t": "2025-06-08 14:00", "v": "1.234"}
        return TidePrediction(
            time=datetime.strptime(raw["t"], "%Y-%m-%d %H:%M"),
            height_feet=float(raw["v"]),
        )

    def get_low_tide_windows(
        self,
        day: date,
        max_height_feet: float = None,
        now: Optional[datetime] = None,
    ) -> List[TidePrediction]:
        """Predictions at or below the low tide threshold; for today, only those still ahead"""
        threshold = max_height_feet if max_height_feet is not None else settings.TIDE_LOW_THRESHOLD_FEET
        now = now or datetime.now()

        windows = []
        for prediction in self.get_all_predictions(day, today=now.date()):
            if prediction.height_feet > threshold:
                continue
            if day == now.date() and prediction.time <= now:
                continue
            windows.append(prediction)
        return windows
