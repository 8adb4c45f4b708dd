"""
Vessel Data Models
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GeoPoint(BaseModel):
    """Geographic point in degrees"""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class RawPositionReport(BaseModel):
    """Decoded position report; None marks an unavailable AIS field"""
    model_config = ConfigDict(frozen=True)

    id: int
    position: GeoPoint
    speed_over_ground_knots: Optional[float] = None
    course_over_ground_degrees: Optional[float] = Field(None, ge=0, lt=360)
    true_heading: Optional[int] = None
    type_code: Optional[int] = None
    name: Optional[str] = None
    timestamp: datetime


class VesselStaticAttributes(BaseModel):
    """Best-known static data for one vessel"""
    id: int
    type_code: Optional[int] = None
    name: Optional[str] = None


class FreighterApproach(BaseModel):
    """A cargo/tanker vessel predicted to pass the reference point"""
    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str] = None
    vessel_type: str = "Unknown"
    current_speed_knots: float
    distance_to_reference_nm: float
    eta_minutes: float
    eta_at_reference: datetime


class BearingRange(BaseModel):
    """Inclusive course window in degrees true. Wraps through north when min > max."""
    model_config = ConfigDict(frozen=True)

    min_degrees: float = Field(..., ge=0, lt=360)
    max_degrees: float = Field(..., ge=0, lt=360)

    @property
    def wraps(self) -> bool:
        return self.min_degrees > self.max_degrees

    def contains(self, bearing: float) -> bool:
        if self.wraps:
            return bearing >= self.min_degrees or bearing <= self.max_degrees
        return self.min_degrees <= bearing <= self.max_degrees

    @property
    def mid_degrees(self) -> float:
        span = (self.max_degrees - self.min_degrees) % 360
        return (self.min_degrees + span / 2) % 360


class EtaWindow(BaseModel):
    """Inclusive ETA window in minutes"""
    model_config = ConfigDict(frozen=True)

    min_minutes: float = Field(..., ge=0)
    max_minutes: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        if self.min_minutes > self.max_minutes:
            raise ValueError("min_minutes must not exceed max_minutes")
        return self

    def contains(self, minutes: float) -> bool:
        return self.min_minutes <= minutes <= self.max_minutes


class ApproachParameters(BaseModel):
    """Fixed inputs of the approach filter"""
    model_config = ConfigDict(frozen=True)

    reference_point: GeoPoint
    bearing_range: BearingRange
    eta_window: EtaWindow
    min_speed_knots: float = 0.1
