"""Shared test fixtures.

Approach-filter fixtures are built around Kingston Point with the default
southbound window (160-220°, ETA 15-50 min).
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.fakes import southbound_params
from wakeadvisor.models.vessel import ApproachParameters
from wakeadvisor.services.vessel_cache import VesselStateCache


# ---------- Filter fixtures ----------

@pytest.fixture()
def cache() -> VesselStateCache:
    return VesselStateCache()


@pytest.fixture()
def params() -> ApproachParameters:
    return southbound_params()


# ---------- FastAPI test client ----------

@pytest.fixture()
def api_client():
    """TestClient over the freighter router; tests set dependency overrides on client.app."""
    from wakeadvisor.routes.freighter_routes import router

    app = FastAPI()
    app.include_router(router, prefix="/api")

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
