"""
AISStream frame decoding
Turns raw websocket frames into typed envelopes and normalizes AIS
fixed-point fields, mapping "not available" sentinels to None
"""
import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from wakeadvisor.exceptions import DecodeError, ProtocolSurprise
from wakeadvisor.models.messages import Envelope, MessageKind, PositionPayload, StaticPayload
from wakeadvisor.models.vessel import GeoPoint, RawPositionReport

logger = logging.getLogger(__name__)

# AIS "not available" sentinels (ITU-R M.1371)
SOG_UNAVAILABLE = 1023     # 1/10 knot
COG_UNAVAILABLE = 3600     # 1/10 degree
HEADING_UNAVAILABLE = 511
TYPE_UNAVAILABLE = 0

# "2025-06-08 19:41:54.183554458 +0000 UTC"
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_time_utc(value: str) -> datetime:
    """Parse AISStream's time_utc, truncating nanoseconds to microseconds"""
    text = value.strip()
    if text.endswith(" UTC"):
        text = text[:-4].rstrip()
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6], text, count=1)

    for fmt in ("%Y-%m-%d %H:%M:%S.%f %z", "%Y-%m-%d %H:%M:%S %z"):
        try:
            return datetime.strptime(text, fmt).astimezone(timezone.utc)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise DecodeError(f"Unparseable time_utc: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    # json.loads accepts NaN and Infinity
    if not math.isfinite(value):
        return None
    return float(value)


def _int_or_none(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


def decode_speed(raw: Any) -> Optional[float]:
    """Speed over ground from 1/10 knot units"""
    tenths = _number(raw)
    if tenths is None or tenths < 0 or tenths >= SOG_UNAVAILABLE:
        return None
    return tenths / 10.0


def decode_course(raw: Any) -> Optional[float]:
    """Course over ground from 1/10 degree units, in [0, 360)"""
    tenths = _number(raw)
    if tenths is None or tenths < 0 or tenths >= COG_UNAVAILABLE:
        return None
    return tenths / 10.0


def decode_heading(raw: Any) -> Optional[int]:
    heading = _int_or_none(raw)
    if heading is None or heading == HEADING_UNAVAILABLE or not 0 <= heading <= 359:
        return None
    return heading


def decode_type_code(raw: Any) -> Optional[int]:
    code = _int_or_none(raw)
    if code is None or code == TYPE_UNAVAILABLE or code < 0:
        return None
    return code


def clean_name(raw: Any) -> Optional[str]:
    """Strip whitespace and AIS '@' padding; empty names are unavailable"""
    if not isinstance(raw, str):
        return None
    name = raw.strip().rstrip("@").strip()
    return name or None


def _vessel_id(body: Dict, metadata: Dict, kind: MessageKind) -> int:
    vessel_id = _int_or_none(body.get("UserID"))
    if vessel_id is None:
        vessel_id = _int_or_none(metadata.get("MMSI"))
    if vessel_id is None:
        raise ProtocolSurprise(f"{kind.value} without UserID or MetaData.MMSI")
    return vessel_id


def _decode_position(body: Dict, metadata: Dict) -> PositionPayload:
    latitude = _number(body.get("Latitude"))
    longitude = _number(body.get("Longitude"))
    if latitude is None or longitude is None:
        raise ProtocolSurprise("PositionReport without Latitude/Longitude")
    # 91 / 181 are the AIS "position not available" values
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ProtocolSurprise(f"PositionReport position unavailable ({latitude}, {longitude})")

    return PositionPayload(
        id=_vessel_id(body, metadata, MessageKind.POSITION_REPORT),
        latitude=latitude,
        longitude=longitude,
        speed_over_ground_knots=decode_speed(body.get("Sog")),
        course_over_ground_degrees=decode_course(body.get("Cog")),
        true_heading=decode_heading(body.get("TrueHeading")),
        type_code=decode_type_code(body.get("ShipType")),
        seconds=_int_or_none(body.get("Timestamp")),
    )


def _decode_static(body: Dict, metadata: Dict) -> StaticPayload:
    return StaticPayload(
        id=_vessel_id(body, metadata, MessageKind.SHIP_STATIC_DATA),
        type_code=decode_type_code(body.get("Type")),
        name=clean_name(body.get("Name")),
    )


def decode(frame: Union[str, bytes]) -> Envelope:
    """
    Decode one AISStream frame.

    Raises:
        DecodeError: frame is not a JSON object or its receipt time is unreadable
        ProtocolSurprise: unknown MessageType or a missing expected field
    """
    try:
        data = json.loads(frame)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JSON frame: {e}", frame)
    if not isinstance(data, dict):
        raise DecodeError(f"Frame is not a JSON object: {type(data).__name__}", frame)

    message_type = data.get("MessageType")
    try:
        kind = MessageKind(message_type)
    except ValueError:
        raise ProtocolSurprise(f"Unrecognized MessageType: {message_type!r}", frame)

    metadata = data.get("MetaData") or {}
    if not isinstance(metadata, dict):
        raise ProtocolSurprise("MetaData is not an object", frame)

    message = data.get("Message")
    body = message.get(kind.value) if isinstance(message, dict) else None
    if not isinstance(body, dict):
        raise ProtocolSurprise(f"'{kind.value}' missing in Message object", frame)

    raw_time = metadata.get("time_utc")
    if isinstance(raw_time, str) and raw_time.strip():
        receipt_time = parse_time_utc(raw_time)
    else:
        logger.debug(f"No time_utc in {kind.value} frame, using local clock")
        receipt_time = datetime.now(timezone.utc)

    try:
        if kind is MessageKind.POSITION_REPORT:
            payload = _decode_position(body, metadata)
        else:
            payload = _decode_static(body, metadata)

        return Envelope(
            kind=kind,
            receipt_time=receipt_time,
            metadata_id=_int_or_none(metadata.get("MMSI")),
            metadata_name=clean_name(metadata.get("ShipName")),
            payload=payload,
        )
    except ValidationError as e:
        raise ProtocolSurprise(f"Invalid {kind.value} fields: {e.error_count()} error(s)", frame)


def event_time(envelope: Envelope) -> datetime:
    """
    Combine the report's UTC second with the receipt minute.
    Falls back to the receipt time when the second is missing or outside 0-59.
    """
    seconds = getattr(envelope.payload, "seconds", None)
    if seconds is None or not 0 <= seconds <= 59:
        if isinstance(envelope.payload, PositionPayload):
            logger.debug(
                f"Report second {seconds} invalid for MMSI {envelope.payload.id}, "
                f"using receipt time {envelope.receipt_time.isoformat()}"
            )
        return envelope.receipt_time
    return envelope.receipt_time.replace(second=seconds, microsecond=0)


def to_position_report(envelope: Envelope) -> RawPositionReport:
    payload = envelope.payload
    if not isinstance(payload, PositionPayload):
        raise ProtocolSurprise(f"{envelope.kind.value} envelope has no position")

    try:
        return RawPositionReport(
            id=payload.id,
            position=GeoPoint(latitude=payload.latitude, longitude=payload.longitude),
            speed_over_ground_knots=payload.speed_over_ground_knots,
            course_over_ground_degrees=payload.course_over_ground_degrees,
            true_heading=payload.true_heading,
            type_code=payload.type_code,
            name=envelope.metadata_name,
            timestamp=event_time(envelope),
        )
    except ValidationError as e:
        raise ProtocolSurprise(f"Invalid position report for MMSI {payload.id}: {e.error_count()} error(s)")
