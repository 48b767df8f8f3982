import asyncio
import os
import tempfile

# Settings are read at import time, so point uploads at a scratch dir first
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="headshot_uploads_"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.v1 import generate as generate_api
from app.api.v1 import upload as upload_api
from app.jobs.simulator import ProgressSimulator
from app.jobs.store import InMemoryJobStore
from app.main import app
from app.storage.uploads import UploadStore, upload_store

# Simulator timings shrunk from seconds to milliseconds
FAST_INTERVAL = 0.02
FAST_FAILURE_DELAY = 0.015


@pytest.fixture
def store():
    return InMemoryJobStore()


def make_simulator(store, **overrides):
    options = {
        "interval_seconds": FAST_INTERVAL,
        "failure_probability": 0.0,
        "failure_delay_seconds": FAST_FAILURE_DELAY,
    }
    options.update(overrides)
    return ProgressSimulator(store, **options)


@pytest_asyncio.fixture
async def simulator(store):
    sim = make_simulator(store)
    yield sim
    await sim.stop()


@pytest_asyncio.fixture
async def failing_simulator(store):
    sim = make_simulator(store, failure_probability=1.0)
    yield sim
    await sim.stop()


@pytest.fixture
def wire():
    """Wire a store/simulator pair into the API the way lifespan does."""
    def _wire(store, simulator):
        generate_api.set_store(store)
        generate_api.set_simulator(simulator)
    yield _wire
    generate_api.set_store(None)
    generate_api.set_simulator(None)


@pytest.fixture
def uploads(tmp_path):
    test_store = UploadStore(str(tmp_path / "uploads"))
    upload_api.set_upload_store(test_store)
    yield test_store
    upload_api.set_upload_store(upload_store)


@pytest.fixture
def api_client():
    """Factory for an AsyncClient bound to the ASGI app (no network)."""
    def _client():
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    return _client


async def wait_for_terminal(store, job_id, timeout=2.0):
    """Sleep until the job leaves processing; returns the job."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        job = store.get(job_id)
        if job is not None and job.is_terminal:
            return job
        await asyncio.sleep(0.005)
    raise AssertionError(f"Job {job_id} did not reach a terminal state within {timeout}s")
