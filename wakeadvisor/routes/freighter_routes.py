"""
FastAPI Freighter & Tide Routes
API endpoints backing the day-selection page
"""
from datetime import date, datetime, timedelta
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from wakeadvisor.exceptions import ConfigurationError
from wakeadvisor.schemas import DashboardResponse, FreighterResponse, TideResponse
from wakeadvisor.services.freighter_service import FreighterService
from wakeadvisor.services.tide_service import TideService

logger = logging.getLogger(__name__)

router = APIRouter()

DAY_PATTERN = "^(today|tomorrow)$"


# ==================== DEPENDENCIES ====================

def get_freighter_service() -> FreighterService:
    return FreighterService()


def get_tide_service() -> TideService:
    return TideService()


def resolve_day(day: str) -> date:
    selected = datetime.now().date()
    if day == "tomorrow":
        selected += timedelta(days=1)
    return selected


async def _load_freighters(service: FreighterService, selected: date) -> List[FreighterResponse]:
    try:
        approaches = await service.get_southbound_freighters(selected)
    except ConfigurationError as e:
        logger.error(f"❌ Freighter lookup not configured: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return [FreighterResponse.from_approach(a) for a in approaches]


# ==================== ENDPOINTS ====================

@router.get("/freighters", response_model=List[FreighterResponse])
async def get_freighters(
    day: str = Query("today", pattern=DAY_PATTERN),
    service: FreighterService = Depends(get_freighter_service),
):
    """
    Southbound freighters expected at the reference point

    Query params:
    - day: today or tomorrow

    Example: /api/freighters?day=today
    """
    return await _load_freighters(service, resolve_day(day))


@router.get("/tides", response_model=List[TideResponse])
async def get_tides(
    day: str = Query("today", pattern=DAY_PATTERN),
    service: TideService = Depends(get_tide_service),
):
    """All hourly tide predictions for the selected day"""
    predictions = await run_in_threadpool(service.get_all_predictions, resolve_day(day))
    return [TideResponse.from_prediction(p) for p in predictions]


@router.get("/tides/low", response_model=List[TideResponse])
async def get_low_tides(
    day: str = Query("today", pattern=DAY_PATTERN),
    service: TideService = Depends(get_tide_service),
):
    """Low tide windows (at or below the configured height) for the selected day"""
    windows = await run_in_threadpool(service.get_low_tide_windows, resolve_day(day))
    return [TideResponse.from_prediction(p) for p in windows]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    day: str = Query("today", pattern=DAY_PATTERN),
    freighter_service: FreighterService = Depends(get_freighter_service),
    tide_service: TideService = Depends(get_tide_service),
):
    """Low tides and approaching freighters in one response"""
    selected = resolve_day(day)
    low_tides = await run_in_threadpool(tide_service.get_low_tide_windows, selected)
    freighters = await _load_freighters(freighter_service, selected)

    return DashboardResponse(
        day=day,
        selected_date=selected,
        freighters=freighters,
        low_tides=[TideResponse.from_prediction(p) for p in low_tides],
    )
