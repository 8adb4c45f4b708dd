"""
AIS ship type classification
Maps numeric AIS ship type codes to a category and a readable name
(https://www.navcen.uscg.gov/ais-ship-types)
"""
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class VesselCategory(str, Enum):
    CARGO = "Cargo"
    TANKER = "Tanker"
    PASSENGER = "Passenger"
    FISHING = "Fishing"
    TUG = "Tug"
    PILOT = "Pilot"
    HIGH_SPEED = "High speed craft"
    PLEASURE = "Pleasure"
    SPECIAL = "Special craft"
    OTHER = "Other"
    UNKNOWN = "Unknown"


class TypeRange(NamedTuple):
    start: int
    end: int  # inclusive
    category: VesselCategory
    description: str


# Ordered by start; ranges do not overlap
SHIP_TYPE_TABLE: Tuple[TypeRange, ...] = (
    TypeRange(0, 0, VesselCategory.UNKNOWN, "Not available or no ship"),
    TypeRange(20, 29, VesselCategory.SPECIAL, "Wing in ground (WIG)"),
    TypeRange(30, 30, VesselCategory.FISHING, "Fishing"),
    TypeRange(31, 31, VesselCategory.TUG, "Towing"),
    TypeRange(32, 32, VesselCategory.TUG, "Towing: length > 200m or breadth > 25m"),
    TypeRange(33, 33, VesselCategory.SPECIAL, "Dredging or underwater ops"),
    TypeRange(34, 34, VesselCategory.SPECIAL, "Diving ops"),
    TypeRange(35, 35, VesselCategory.SPECIAL, "Military ops"),
    TypeRange(36, 36, VesselCategory.PLEASURE, "Sailing"),
    TypeRange(37, 37, VesselCategory.PLEASURE, "Pleasure Craft"),
    TypeRange(40, 49, VesselCategory.HIGH_SPEED, "High speed craft (HSC)"),
    TypeRange(50, 50, VesselCategory.PILOT, "Pilot Vessel"),
    TypeRange(51, 51, VesselCategory.SPECIAL, "Search and Rescue vessel"),
    TypeRange(52, 52, VesselCategory.TUG, "Tug"),
    TypeRange(53, 53, VesselCategory.SPECIAL, "Port Tender"),
    TypeRange(54, 54, VesselCategory.SPECIAL, "Anti-pollution equipment"),
    TypeRange(55, 55, VesselCategory.SPECIAL, "Law Enforcement"),
    TypeRange(58, 58, VesselCategory.SPECIAL, "Medical Transport"),
    TypeRange(59, 59, VesselCategory.SPECIAL, "Noncombatant ship"),
    TypeRange(60, 69, VesselCategory.PASSENGER, "Passenger"),
    TypeRange(70, 79, VesselCategory.CARGO, "Cargo"),
    TypeRange(80, 89, VesselCategory.TANKER, "Tanker"),
    TypeRange(90, 99, VesselCategory.OTHER, "Other Type"),
)

FREIGHTER_CATEGORIES = frozenset({VesselCategory.CARGO, VesselCategory.TANKER})


def lookup_type_range(type_code: Optional[int]) -> Optional[TypeRange]:
    if type_code is None:
        return None
    for entry in SHIP_TYPE_TABLE:
        if type_code < entry.start:
            break
        if type_code <= entry.end:
            return entry
    return None


def classify_ship_type(type_code: Optional[int]) -> VesselCategory:
    """Category for an AIS type code; UNKNOWN when absent, OTHER when unmapped"""
    if type_code is None:
        return VesselCategory.UNKNOWN
    entry = lookup_type_range(type_code)
    return entry.category if entry else VesselCategory.OTHER


def describe_ship_type(type_code: Optional[int]) -> str:
    if type_code is None:
        return "Unknown"
    entry = lookup_type_range(type_code)
    return entry.description if entry else f"Type {type_code}"


def is_freighter(type_code: Optional[int]) -> bool:
    return classify_ship_type(type_code) in FREIGHTER_CATEGORIES
