"""
Approach filter
Decides which vessels in a position snapshot are freighters approaching the
reference point on the configured course, and estimates when they arrive
"""
import logging
from collections import Counter
from datetime import timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from wakeadvisor.models.vessel import ApproachParameters, FreighterApproach, RawPositionReport
from wakeadvisor.services.geo_math import haversine_nm, normalize_bearing, points_south
from wakeadvisor.services.vessel_cache import VesselStateCache
from wakeadvisor.services.vessel_types import describe_ship_type, is_freighter

logger = logging.getLogger(__name__)


class RejectReason(str, Enum):
    NOT_FREIGHTER = "not_freighter"
    PASSED_REFERENCE = "passed_reference"
    COURSE_UNAVAILABLE = "course_unavailable"
    OFF_COURSE = "off_course"
    STATIONARY = "stationary"
    OUTSIDE_ETA_WINDOW = "outside_eta_window"


Decision = Tuple[Optional[FreighterApproach], Optional[RejectReason]]


def _on_approach_side(report: RawPositionReport, params: ApproachParameters) -> bool:
    # Latitude only: a southbound vessel is still approaching while north of the point
    reference_lat = params.reference_point.latitude
    if points_south(params.bearing_range.mid_degrees):
        return report.position.latitude > reference_lat
    return report.position.latitude < reference_lat


def evaluate(report: RawPositionReport, cache: VesselStateCache, params: ApproachParameters) -> Decision:
    """Run the decision sequence for one vessel, stopping at the first failed check"""
    static = cache.lookup(report.id)
    type_code = static.type_code if static and static.type_code is not None else report.type_code
    if not is_freighter(type_code):
        return None, RejectReason.NOT_FREIGHTER

    if not _on_approach_side(report, params):
        return None, RejectReason.PASSED_REFERENCE

    if report.course_over_ground_degrees is None:
        return None, RejectReason.COURSE_UNAVAILABLE
    course = normalize_bearing(report.course_over_ground_degrees)
    if not params.bearing_range.contains(course):
        return None, RejectReason.OFF_COURSE

    distance_nm = haversine_nm(report.position, params.reference_point)

    speed = report.speed_over_ground_knots
    if speed is None or speed <= params.min_speed_knots:
        return None, RejectReason.STATIONARY

    eta_minutes = distance_nm / speed * 60.0
    if not params.eta_window.contains(eta_minutes):
        return None, RejectReason.OUTSIDE_ETA_WINDOW

    name = static.name if static and static.name else report.name
    approach = FreighterApproach(
        id=report.id,
        name=name,
        vessel_type=describe_ship_type(type_code),
        current_speed_knots=speed,
        distance_to_reference_nm=distance_nm,
        eta_minutes=eta_minutes,
        eta_at_reference=report.timestamp + timedelta(minutes=eta_minutes),
    )
    return approach, None


def filter_approaches(
    snapshot: Iterable[RawPositionReport],
    cache: VesselStateCache,
    params: ApproachParameters,
) -> List[FreighterApproach]:
    """
    Approaching freighters from a latest-per-vessel snapshot,
    soonest ETA first (ties by MMSI).
    """
    approaches: List[FreighterApproach] = []
    rejected = Counter()

    for report in snapshot:
        approach, reason = evaluate(report, cache, params)
        if approach is None:
            rejected[reason.value] += 1
            continue
        logger.debug(
            f"Included MMSI {approach.id} ({approach.name}): {approach.distance_to_reference_nm:.2f} nm "
            f"at {approach.current_speed_knots} kn, ETA {approach.eta_minutes:.1f} min"
        )
        approaches.append(approach)

    approaches.sort(key=lambda a: (a.eta_at_reference, a.id))
    if rejected:
        logger.debug(f"Rejected vessels by reason: {dict(rejected)}")
    return approaches
