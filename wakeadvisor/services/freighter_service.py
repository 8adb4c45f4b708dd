"""
Freighter Service
Runs one AIS stream session per query and turns what it collected into a
ranked list of freighters approaching the reference point
"""
import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from config import settings
from wakeadvisor.exceptions import ConfigurationError
from wakeadvisor.models.vessel import (
    ApproachParameters,
    BearingRange,
    EtaWindow,
    FreighterApproach,
    GeoPoint,
    RawPositionReport,
)
from wakeadvisor.services.ais_stream_session import BoundingBox, SessionDeadline, StreamSession
from wakeadvisor.services.approach_filter import filter_approaches
from wakeadvisor.services.vessel_cache import VesselStateCache

logger = logging.getLogger(__name__)


class PositionAccumulator:
    """Keeps the most recent report per MMSI, by event time rather than arrival order"""

    def __init__(self):
        self._latest: Dict[int, RawPositionReport] = {}

    def add(self, report: RawPositionReport) -> None:
        current = self._latest.get(report.id)
        if current is None or report.timestamp >= current.timestamp:
            self._latest[report.id] = report

    def snapshot(self) -> List[RawPositionReport]:
        return list(self._latest.values())

    def __len__(self) -> int:
        return len(self._latest)


def default_bounding_boxes() -> List[BoundingBox]:
    return [(
        GeoPoint(latitude=settings.BBOX_MIN_LAT, longitude=settings.BBOX_MIN_LON),
        GeoPoint(latitude=settings.BBOX_MAX_LAT, longitude=settings.BBOX_MAX_LON),
    )]


def default_parameters() -> ApproachParameters:
    return ApproachParameters(
        reference_point=GeoPoint(latitude=settings.REFERENCE_LAT, longitude=settings.REFERENCE_LON),
        bearing_range=BearingRange(min_degrees=settings.SOUTHBOUND_MIN, max_degrees=settings.SOUTHBOUND_MAX),
        eta_window=EtaWindow(
            min_minutes=settings.ETA_WINDOW_MIN_MINUTES,
            max_minutes=settings.ETA_WINDOW_MAX_MINUTES,
        ),
        min_speed_knots=settings.MIN_SPEED_KNOTS,
    )


class FreighterService:
    """Answers "which freighters will pass the reference point soon?" from live AIS"""

    def __init__(
        self,
        api_key: str = None,
        bounding_boxes: Optional[Sequence[BoundingBox]] = None,
        url: str = None,
        message_timeout: float = None,
        open_timeout: float = None,
        connect=None,
    ):
        self.api_key = api_key if api_key is not None else settings.AISSTREAM_API_KEY
        self.bounding_boxes = list(bounding_boxes) if bounding_boxes else default_bounding_boxes()
        self.url = url
        self.message_timeout = message_timeout
        self.open_timeout = open_timeout
        self._connect = connect

    async def query(
        self,
        reference_point: GeoPoint,
        bearing_range: BearingRange,
        eta_window: EtaWindow,
        session_budget: float,
        min_speed_knots: float = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[FreighterApproach]:
        """
        Collect AIS reports for up to session_budget seconds and return the
        freighters approaching reference_point, soonest first.

        Returns an empty list when nothing qualifies or the stream was
        unreachable.

        Raises:
            ConfigurationError: no AISStream API key, before any connection
        """
        if not self.api_key:
            logger.error("AIS Stream API Key is not configured.")
            raise ConfigurationError("AISSTREAM_API_KEY not configured")

        params = ApproachParameters(
            reference_point=reference_point,
            bearing_range=bearing_range,
            eta_window=eta_window,
            min_speed_knots=min_speed_knots if min_speed_knots is not None else settings.MIN_SPEED_KNOTS,
        )

        cache = VesselStateCache()
        accumulator = PositionAccumulator()
        session = StreamSession(
            api_key=self.api_key,
            bounding_boxes=self.bounding_boxes,
            cache=cache,
            on_position=accumulator.add,
            url=self.url,
            message_timeout=self.message_timeout,
            open_timeout=self.open_timeout,
            connect=self._connect,
        )

        stats = await session.run(SessionDeadline(session_budget, cancel_event))
        approaches = filter_approaches(accumulator.snapshot(), cache, params)

        logger.info(
            f"AIS session {stats.state} ({stats.close_reason or 'no close reason'}): "
            f"{stats.frames_received} frames, {stats.positions} positions from {len(accumulator)} vessels, "
            f"{len(cache)} with static data, {stats.decode_errors} decode errors, "
            f"{stats.protocol_surprises} skipped, {stats.receive_timeouts} receive timeouts "
            f"-> {len(approaches)} approaching freighters"
        )
        return approaches

    async def get_southbound_freighters(
        self,
        selected_date: date,
        today: Optional[date] = None,
    ) -> List[FreighterApproach]:
        """Configured southbound query; live AIS only covers today and tomorrow"""
        today = today or datetime.now().date()
        if selected_date not in (today, today + timedelta(days=1)):
            logger.info(f"No live AIS for {selected_date.isoformat()}, returning no freighters")
            return []

        params = default_parameters()
        return await self.query(
            reference_point=params.reference_point,
            bearing_range=params.bearing_range,
            eta_window=params.eta_window,
            session_budget=settings.SESSION_BUDGET_SECONDS,
            min_speed_knots=params.min_speed_knots,
        )
