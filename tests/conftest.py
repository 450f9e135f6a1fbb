"""Pytest fixtures for the space weather risk backend."""

from __future__ import annotations

import httpx
import pytest

from spacewx.feed import DataFeed
from spacewx.mission_log import MissionLogStore
from spacewx.models import Equipment, Measurement, UnitProfile
from spacewx.persistence import MemoryBackend
from spacewx.profile_store import UnitProfileStore
from spacewx.service import RiskService

SAMPLE_CSV = """time,kp_index,source
00:00,2.33,GFZ
03:00,3.67,GFZ
06:00,5.2,GFZ
09:00,4.0,GFZ
"""

FEED_URL = "https://feeds.example.test/space_weather_data.csv"


def make_series(*kps: float) -> list[Measurement]:
    return [Measurement(time=f"{i * 3:02d}:00", kp_index=kp) for i, kp in enumerate(kps)]


class FixedClock:
    """Deterministic stand-in for time.time()."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def profile() -> UnitProfile:
    return UnitProfile(
        unit_name="Test Wing",
        default_threshold=4.0,
        equipment=[
            Equipment(id=1, name="JDAM", sensitivity=5.0),
            Equipment(id=2, name="Recon Drone", sensitivity=6.0),
        ],
    )


@pytest.fixture
def csv_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=SAMPLE_CSV)

    return httpx.MockTransport(handler)


@pytest.fixture
def service(backend: MemoryBackend, clock: FixedClock, csv_transport: httpx.MockTransport) -> RiskService:
    feed = DataFeed(FEED_URL, interval=600, client=httpx.AsyncClient(transport=csv_transport))
    svc = RiskService(
        profiles=UnitProfileStore(backend),
        logs=MissionLogStore(backend, clock=clock),
        feed=feed,
    )
    svc.load()
    return svc
