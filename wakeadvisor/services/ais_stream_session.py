"""
AISStream WebSocket Session
Connects to AISStream.io, subscribes to one region and collects position
and static data reports until the session deadline, a remote close, or a
transport fault
"""
import asyncio
import json
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

import websockets

from config import settings
from wakeadvisor.exceptions import ConfigurationError, DecodeError, ProtocolSurprise, TransportError
from wakeadvisor.models.messages import MessageKind, SessionStats
from wakeadvisor.models.vessel import GeoPoint, RawPositionReport
from wakeadvisor.services import message_codec
from wakeadvisor.services.vessel_cache import VesselStateCache

logger = logging.getLogger(__name__)

BoundingBox = Tuple[GeoPoint, GeoPoint]


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    LISTENING = "listening"
    CLOSED = "closed"
    FAILED = "failed"


class SessionExpired(Exception):
    """The session deadline elapsed or its cancel event was set"""


class SessionDeadline:
    """
    Wall-clock budget for a whole session, optionally merged with an
    external cancel event. Every suspension point awaits through run().
    """

    def __init__(
        self,
        budget_seconds: float,
        cancel_event: Optional[asyncio.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._clock = clock
        self._expires_at = clock() + budget_seconds
        self._cancel_event = cancel_event

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.cancelled or self.remaining() <= 0

    async def run(self, awaitable: Awaitable, limit: Optional[float] = None):
        """
        Await within min(limit, remaining budget).

        Raises:
            SessionExpired: budget used up or cancel event set
            asyncio.TimeoutError: only the per-call limit elapsed
        """
        if self.expired:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise SessionExpired("cancelled" if self.cancelled else "deadline")

        remaining = self.remaining()
        budget_bound = limit is None or limit >= remaining
        timeout = remaining if budget_bound else limit

        task = asyncio.ensure_future(awaitable)
        waiters = {task}
        cancel_waiter = None
        if self._cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(self._cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Abandoned operation ended with {type(e).__name__}: {e}")

        if self.cancelled:
            raise SessionExpired("cancelled")
        if budget_bound:
            raise SessionExpired("deadline")
        raise asyncio.TimeoutError()


class StreamSession:
    """One subscription to AISStream.io, run to completion once"""

    def __init__(
        self,
        api_key: str,
        bounding_boxes: Sequence[BoundingBox],
        cache: VesselStateCache,
        on_position: Callable[[RawPositionReport], None],
        url: str = None,
        message_types: Sequence[str] = None,
        message_timeout: float = None,
        open_timeout: float = None,
        connect=None,
    ):
        self.api_key = api_key
        self.bounding_boxes = list(bounding_boxes)
        self.cache = cache
        self.on_position = on_position
        self.url = url or settings.AISSTREAM_URL
        self.message_types: List[str] = list(message_types or settings.AIS_MESSAGE_TYPES)
        self.message_timeout = message_timeout if message_timeout is not None else settings.MESSAGE_TIMEOUT_SECONDS
        self.open_timeout = open_timeout if open_timeout is not None else settings.OPEN_TIMEOUT_SECONDS
        self._connect = connect or websockets.connect

        self.state = SessionState.DISCONNECTED
        self.stats = SessionStats()

    def subscription_message(self) -> dict:
        return {
            "APIKey": self.api_key,
            "BoundingBoxes": [
                [[a.latitude, a.longitude], [b.latitude, b.longitude]]
                for a, b in self.bounding_boxes
            ],
            "FilterMessageTypes": self.message_types,
        }

    def _transition(self, state: SessionState):
        logger.debug(f"Stream session {self.state.value} -> {state.value}")
        self.state = state
        self.stats.state = state.value

    async def run(self, deadline: SessionDeadline) -> SessionStats:
        """
        Drive the session until it is CLOSED or FAILED.
        Only a missing API key raises; every other failure ends the session.
        """
        if not self.api_key:
            raise ConfigurationError("AISSTREAM_API_KEY not configured")
        if self.state is not SessionState.DISCONNECTED:
            raise RuntimeError("StreamSession can only be run once")

        websocket = None
        try:
            self._transition(SessionState.CONNECTING)
            websocket = await deadline.run(self._open())

            await deadline.run(self._subscribe(websocket))
            self._transition(SessionState.SUBSCRIBED)

            self._transition(SessionState.LISTENING)
            await self._listen(websocket, deadline)
            self._transition(SessionState.CLOSED)

        except SessionExpired as e:
            self.stats.close_reason = str(e)
            logger.info(f"⏱️ AIS session ended by {e} after {self.stats.frames_received} frames")
            self._transition(SessionState.CLOSED)
        except TransportError as e:
            self.stats.close_reason = f"transport error: {e}"
            logger.error(f"❌ AISStream transport error: {e}")
            self._transition(SessionState.FAILED)
        except Exception as e:
            self.stats.close_reason = f"unexpected error: {type(e).__name__}: {e}"
            logger.exception(f"❌ AIS session aborted: {e}")
            self._transition(SessionState.FAILED)
        finally:
            await self._close(websocket)

        return self.stats

    async def _open(self):
        logger.info(f"🔌 Connecting to {self.url}...")
        try:
            websocket = await self._connect(self.url, open_timeout=self.open_timeout)
        except asyncio.TimeoutError as e:
            raise TransportError("timed out during opening handshake") from e
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise TransportError(f"connect failed: {type(e).__name__}: {e}") from e
        logger.info("✅ Connected to AISStream.io")
        return websocket

    async def _subscribe(self, websocket):
        try:
            await websocket.send(json.dumps(self.subscription_message()))
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise TransportError(f"subscription send failed: {type(e).__name__}: {e}") from e
        logger.info(f"📡 Subscription sent to AISStream.io ({', '.join(self.message_types)})")

    async def _listen(self, websocket, deadline: SessionDeadline):
        while True:
            try:
                frame = await deadline.run(websocket.recv(), limit=self.message_timeout)
            except asyncio.TimeoutError:
                self.stats.receive_timeouts += 1
                logger.warning(
                    f"No AIS frame within {self.message_timeout}s "
                    f"({deadline.remaining():.0f}s of session left), still listening"
                )
                continue
            except websockets.exceptions.ConnectionClosedOK as e:
                code = e.rcvd.code if getattr(e, "rcvd", None) is not None else None
                self.stats.close_reason = f"remote close ({code})"
                logger.warning(f"🔌 AISStream closed the connection ({code})")
                return
            except (OSError, websockets.exceptions.WebSocketException) as e:
                raise TransportError(f"receive failed: {type(e).__name__}: {e}") from e

            self.handle_frame(frame)

    def handle_frame(self, frame) -> None:
        """Decode one frame and route it to the cache or the position sink"""
        self.stats.frames_received += 1
        try:
            envelope = message_codec.decode(frame)
            if envelope.kind is MessageKind.SHIP_STATIC_DATA:
                payload = envelope.payload
                self.cache.update(payload.id, type_code=payload.type_code, name=payload.name)
                self.stats.static_updates += 1
                return
            report = message_codec.to_position_report(envelope)
        except ProtocolSurprise as e:
            self.stats.protocol_surprises += 1
            logger.warning(f"Skipping AIS frame: {e}")
            return
        except DecodeError as e:
            self.stats.decode_errors += 1
            logger.warning(f"Failed to decode AIS frame: {e}")
            return

        self.stats.positions += 1
        logger.debug(
            f"Position MMSI {report.id}: {report.position.latitude:.5f},{report.position.longitude:.5f} "
            f"SOG={report.speed_over_ground_knots} COG={report.course_over_ground_degrees} "
            f"at {report.timestamp.isoformat()}"
        )
        self.on_position(report)

    async def _close(self, websocket):
        if websocket is None:
            return
        try:
            await websocket.close()
            logger.info("🛑 AISStream connection closed")
        except Exception as e:
            logger.warning(f"Error closing AISStream connection: {e}")
