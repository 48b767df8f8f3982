"""Headshot Studio backend - FastAPI application."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.errors import register_exception_handlers
from app.api.v1.router import api_router
from app.api.v1 import generate as generate_api
from app.jobs.simulator import ProgressSimulator
from app.jobs.store import InMemoryJobStore, JobStore
from app.storage.uploads import upload_store

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def reap_expired(store: JobStore, interval_seconds: float, ttl: timedelta) -> None:
    """Periodically drop finished jobs and stale uploads."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = store.cleanup_expired(ttl)
        if removed:
            logger.info("Reaped %d expired job(s)", removed)
        upload_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Headshot Studio backend on port %d", settings.port)
    logger.info("Upload directory: %s", settings.upload_dir)
    logger.info("Environment: %s", settings.environment)

    store = InMemoryJobStore(max_jobs=settings.max_jobs)
    simulator = ProgressSimulator.from_settings(store, settings)

    # Wire store and simulator into API endpoints
    generate_api.set_store(store)
    generate_api.set_simulator(simulator)

    reaper = asyncio.create_task(
        reap_expired(
            store,
            settings.reaper_interval_seconds,
            timedelta(hours=settings.job_ttl_hours),
        )
    )

    yield

    # Shutdown
    logger.info("Shutting down Headshot Studio backend")
    reaper.cancel()
    try:
        await reaper
    except asyncio.CancelledError:
        pass
    await simulator.stop()
    upload_store.cleanup_expired()


app = FastAPI(
    title="Headshot Studio",
    description="Upload a photo, pick a style, get a (mock) professional headshot",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router)  # All /api/* endpoints
app.mount("/uploads", StaticFiles(directory=upload_store.base_dir), name="uploads")


def run() -> None:
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
