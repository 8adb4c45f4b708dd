"""
AISStream Message Models
Typed shapes of the decoded stream envelope and its two payloads
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class MessageKind(str, Enum):
    """AISStream MessageType values the session subscribes to"""
    POSITION_REPORT = "PositionReport"
    SHIP_STATIC_DATA = "ShipStaticData"


class PositionPayload(BaseModel):
    """Message.PositionReport after unit conversion"""
    model_config = ConfigDict(frozen=True)

    id: int
    latitude: float
    longitude: float
    speed_over_ground_knots: Optional[float] = None
    course_over_ground_degrees: Optional[float] = None
    true_heading: Optional[int] = None
    type_code: Optional[int] = None
    seconds: Optional[int] = None  # UTC second of the report, 0-59 when valid


class StaticPayload(BaseModel):
    """Message.ShipStaticData"""
    model_config = ConfigDict(frozen=True)

    id: int
    type_code: Optional[int] = None
    name: Optional[str] = None


class Envelope(BaseModel):
    """One decoded stream frame"""
    model_config = ConfigDict(frozen=True)

    kind: MessageKind
    receipt_time: datetime
    metadata_id: Optional[int] = None
    metadata_name: Optional[str] = None
    payload: Union[PositionPayload, StaticPayload]


class SessionStats(BaseModel):
    """Counters reported at the end of a stream session"""
    state: str = "disconnected"
    frames_received: int = 0
    positions: int = 0
    static_updates: int = 0
    decode_errors: int = 0
    protocol_surprises: int = 0
    receive_timeouts: int = 0
    close_reason: Optional[str] = None
