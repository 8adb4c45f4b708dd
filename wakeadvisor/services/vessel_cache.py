"""
Per-session cache of vessel static data (MMSI -> type code, name)
"""
import logging
import threading
from typing import Dict, Optional

from wakeadvisor.models.vessel import VesselStaticAttributes

logger = logging.getLogger(__name__)


class VesselStateCache:
    """
    In-memory static attributes keyed by MMSI.

    Fields only ever gain information: a present value replaces what was
    cached, an absent (None) value never erases a cached one.
    """

    def __init__(self):
        self._entries: Dict[int, VesselStaticAttributes] = {}
        self._lock = threading.Lock()

    def update(
        self,
        vessel_id: int,
        type_code: Optional[int] = None,
        name: Optional[str] = None,
    ) -> VesselStaticAttributes:
        """Merge static fields for a vessel and return a copy of the result"""
        with self._lock:
            entry = self._entries.get(vessel_id)
            if entry is None:
                entry = VesselStaticAttributes(id=vessel_id)
                self._entries[vessel_id] = entry

            if type_code is not None:
                entry.type_code = type_code
            if name:
                entry.name = name

            logger.debug(f"📋 Static data for MMSI {vessel_id}: Type={entry.type_code}, Name={entry.name}")
            return entry.model_copy()

    def lookup(self, vessel_id: int) -> Optional[VesselStaticAttributes]:
        with self._lock:
            entry = self._entries.get(vessel_id)
            return entry.model_copy() if entry is not None else None

    def __contains__(self, vessel_id: int) -> bool:
        with self._lock:
            return vessel_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
