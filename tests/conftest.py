"""
pytest configuration and fixtures for the Realty Growth Demo tests.

Everything runs on a ManualClock, a seeded random source and a counting id
factory so assertions can be exact instead of ranged.
"""
import itertools
import random

import pytest

from realty_demo.services.deferred import ManualClock
from realty_demo.services.runtime import DemoRuntime
from realty_demo.services.snapshot_storage import InMemorySnapshotStorage

RANDOM_SEED = 7


@pytest.fixture
def clock():
    """Virtual clock pinned to 2024-10-01 09:00 UTC."""
    return ManualClock()


@pytest.fixture
def rnd():
    return random.Random(RANDOM_SEED)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def storage():
    return InMemorySnapshotStorage()


@pytest.fixture
def runtime(storage, clock, rnd, id_factory):
    """Restored runtime with sample data loaded and persistence attached."""
    rt = DemoRuntime(
        storage=storage,
        storage_key="test-sample-mode",
        clock=clock,
        rnd=rnd,
        id_factory=id_factory,
    )
    rt.restore()
    yield rt
    rt.shutdown()


@pytest.fixture
def store(runtime):
    return runtime.store


@pytest.fixture
def scheduler(runtime):
    return runtime.scheduler


@pytest.fixture
def follow_ups(runtime):
    return runtime.follow_ups


@pytest.fixture
def simulator(runtime):
    return runtime.simulator


@pytest.fixture
def client(runtime):
    """HTTP client over an app bound to the test runtime (no background pump)."""
    from fastapi.testclient import TestClient

    from realty_demo.main import create_app

    return TestClient(create_app(runtime))


@pytest.fixture
def sample_lead_payload():
    """Lead form data as the lead engine submits it."""
    return {
        "name": "Harper Quinn",
        "email": "harper.quinn@example.com",
        "phone": "(415) 555-0188",
        "source": "Website",
        "location": "Pacific Heights",
        "budget": "$4M - $5M",
        "timeline": "45 days",
        "notes": "Needs a view of the bay and parking for two.",
    }
