import json
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from tests.fakes import EVENT_TIME, KINGSTON, FakeConnect, FakeWebSocket, make_report, position_frame, static_frame
from wakeadvisor.exceptions import ConfigurationError
from wakeadvisor.models.vessel import BearingRange, EtaWindow
from wakeadvisor.services.freighter_service import FreighterService, PositionAccumulator, default_parameters

SOUTHBOUND = BearingRange(min_degrees=160.0, max_degrees=220.0)
WINDOW = EtaWindow(min_minutes=15, max_minutes=50)

# 0.1° of latitude north of Kingston Point is ~6 nm
SIX_NM_NORTH = KINGSTON.latitude + 0.1
THREE_NM_NORTH = KINGSTON.latitude + 0.05


def make_service(ws: FakeWebSocket, api_key="test-key") -> tuple[FreighterService, FakeConnect]:
    connect = FakeConnect(ws)
    service = FreighterService(api_key=api_key, message_timeout=0.05, open_timeout=5, connect=connect)
    return service, connect


async def run_query(service: FreighterService, budget: float = 5):
    return await service.query(KINGSTON, SOUTHBOUND, WINDOW, session_budget=budget)


class TestPositionAccumulator:
    """Latest-per-vessel reduction"""

    def test_keeps_latest_by_event_time(self):
        accumulator = PositionAccumulator()
        times = [EVENT_TIME + timedelta(seconds=s) for s in (20, 50, 5, 35)]
        for ts in times:
            accumulator.add(make_report(1, KINGSTON, timestamp=ts))

        [latest] = accumulator.snapshot()
        assert latest.timestamp == max(times)
        assert len(accumulator) == 1

    def test_one_entry_per_vessel(self):
        accumulator = PositionAccumulator()
        for mmsi in (1, 2, 1, 3, 2):
            accumulator.add(make_report(mmsi, KINGSTON))
        assert sorted(r.id for r in accumulator.snapshot()) == [1, 2, 3]


class TestQuery:
    """End-to-end queries through a fake AISStream connection"""

    @pytest.mark.asyncio
    async def test_southbound_freighter_found(self):
        ws = FakeWebSocket([
            static_frame(367000001, 70, "HUDSON TRADER"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude, sog_tenths=80, cog_tenths=1800),
        ])
        service, _ = make_service(ws)

        [approach] = await run_query(service)

        assert approach.id == 367000001
        assert approach.name == "HUDSON TRADER"
        assert approach.vessel_type == "Cargo"
        assert approach.eta_minutes == pytest.approx(45.0, abs=0.05)
        reported_at = datetime(2025, 6, 8, 19, 41, 30, tzinfo=timezone.utc)
        assert approach.eta_at_reference == reported_at + timedelta(minutes=approach.eta_minutes)

    @pytest.mark.asyncio
    async def test_static_data_after_position_still_counts(self):
        ws = FakeWebSocket([
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude),
            static_frame(367000001, 82, "LATE TANKER"),
        ])
        service, _ = make_service(ws)

        [approach] = await run_query(service)
        assert approach.name == "LATE TANKER"

    @pytest.mark.asyncio
    async def test_no_vessels_returns_empty_list(self):
        service, _ = make_service(FakeWebSocket([]))
        assert await run_query(service) == []

    @pytest.mark.asyncio
    async def test_invalid_frame_mid_session(self):
        ws = FakeWebSocket([
            static_frame(367000001, 75, "FIRST"),
            "{\"MessageType\": \"PositionReport\", ",
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude),
            "not json at all",
            static_frame(367000002, 80, "SECOND"),
            position_frame(367000002, THREE_NM_NORTH, KINGSTON.longitude),
        ])
        service, _ = make_service(ws)

        result = await run_query(service)

        assert [a.name for a in result] == ["SECOND", "FIRST"]

    @pytest.mark.asyncio
    async def test_latest_report_wins(self):
        ws = FakeWebSocket([
            static_frame(367000001, 75, "MOVER"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude, seconds=40),
            # earlier event arriving later: passed and stale, must not replace
            position_frame(367000001, KINGSTON.latitude - 0.1, KINGSTON.longitude, seconds=10),
        ])
        service, _ = make_service(ws)

        [approach] = await run_query(service)
        assert approach.distance_to_reference_nm == pytest.approx(6.0, abs=0.01)

    @pytest.mark.asyncio
    async def test_eastbound_excluded(self):
        ws = FakeWebSocket([
            static_frame(367000001, 75, "CROSSING"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude, cog_tenths=900),
        ])
        service, _ = make_service(ws)
        assert await run_query(service) == []

    @pytest.mark.asyncio
    async def test_course_unavailable_excluded(self):
        ws = FakeWebSocket([
            static_frame(367000001, 75, "NO COG"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude, cog_tenths=3600),
        ])
        service, _ = make_service(ws)
        assert await run_query(service) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["Cog", "Sog", "Timestamp", "TrueHeading", "UserID"])
    async def test_non_finite_field_does_not_abort_query(self, field):
        bad = json.loads(position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude))
        bad["Message"]["PositionReport"][field] = float("nan")
        ws = FakeWebSocket([
            json.dumps(bad),
            static_frame(367000002, 70, "STEADY"),
            position_frame(367000002, SIX_NM_NORTH, KINGSTON.longitude),
        ])
        service, _ = make_service(ws)

        result = await run_query(service)

        assert [a.id for a in result] == [367000002]
        assert result[0].vessel_type == "Cargo"

    @pytest.mark.asyncio
    async def test_unexpected_receive_error_returns_collected(self):
        ws = FakeWebSocket([
            static_frame(367000001, 70, "BEFORE"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude),
            RuntimeError("cannot call recv while another coroutine is already waiting"),
        ])
        service, _ = make_service(ws)

        [approach] = await run_query(service)
        assert approach.name == "BEFORE"
        assert ws.close_calls == 1

    @pytest.mark.asyncio
    async def test_unreachable_stream_returns_empty_list(self):
        connect = FakeConnect(error=OSError("connection refused"))
        service = FreighterService(api_key="test-key", connect=connect)
        assert await run_query(service) == []
        assert len(connect.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service, connect = make_service(FakeWebSocket(), api_key="")
        with pytest.raises(ConfigurationError):
            await run_query(service)
        assert connect.calls == []

    @pytest.mark.asyncio
    async def test_each_query_starts_fresh(self):
        service, _ = make_service(FakeWebSocket([
            static_frame(367000001, 75, "ONCE"),
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude),
        ]))
        assert len(await run_query(service)) == 1

        # Same vessel without static data in the next session: type unknown, rejected
        service._connect = FakeConnect(FakeWebSocket([
            position_frame(367000001, SIX_NM_NORTH, KINGSTON.longitude),
        ]))
        assert await run_query(service) == []


class TestGetSouthboundFreighters:
    """Date gate and defaults"""

    @pytest.mark.asyncio
    async def test_other_dates_skip_stream(self):
        service, connect = make_service(FakeWebSocket())
        today = date(2025, 6, 8)
        assert await service.get_southbound_freighters(date(2025, 6, 10), today=today) == []
        assert await service.get_southbound_freighters(date(2025, 6, 7), today=today) == []
        assert connect.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offset", [0, 1])
    async def test_today_and_tomorrow_use_defaults(self, offset):
        service, _ = make_service(FakeWebSocket())
        today = date(2025, 6, 8)
        with patch.object(service, "query", new=AsyncMock(return_value=[])) as query:
            await service.get_southbound_freighters(today + timedelta(days=offset), today=today)

        kwargs = query.await_args.kwargs
        defaults = default_parameters()
        assert kwargs["reference_point"] == defaults.reference_point
        assert kwargs["bearing_range"] == defaults.bearing_range
        assert kwargs["eta_window"] == defaults.eta_window

    def test_default_parameters_match_kingston(self):
        defaults = default_parameters()
        assert defaults.reference_point == KINGSTON
        assert (defaults.bearing_range.min_degrees, defaults.bearing_range.max_degrees) == (160.0, 220.0)
        assert (defaults.eta_window.min_minutes, defaults.eta_window.max_minutes) == (15.0, 50.0)
