from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime

from wakeadvisor.models.tide import TidePrediction
from wakeadvisor.models.vessel import FreighterApproach

# Freighter Schemas
class FreighterResponse(BaseModel):
    mmsi: int
    name: Optional[str] = None
    vessel_type: str
    speed_knots: float
    distance_nm: float
    eta_minutes: float
    eta: datetime

    @classmethod
    def from_approach(cls, approach: FreighterApproach) -> "FreighterResponse":
        return cls(
            mmsi=approach.id,
            name=approach.name,
            vessel_type=approach.vessel_type,
            speed_knots=round(approach.current_speed_knots, 1),
            distance_nm=round(approach.distance_to_reference_nm, 2),
            eta_minutes=round(approach.eta_minutes, 1),
            eta=approach.eta_at_reference,
        )

# Tide Schemas
class TideResponse(BaseModel):
    time: datetime
    height_feet: float

    @classmethod
    def from_prediction(cls, prediction: TidePrediction) -> "TideResponse":
        return cls(time=prediction.time, height_feet=prediction.height_feet)

class DashboardResponse(BaseModel):
    day: str
    selected_date: date
    freighters: List[FreighterResponse]
    low_tides: List[TideResponse]
