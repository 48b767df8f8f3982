"""Generation API: start a mock headshot job and poll its status."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body
from pydantic import BaseModel, ConfigDict, Field

from app.errors import InternalError, NotFoundError, ValidationError
from app.jobs.messages import phase_message
from app.jobs.models import HeadshotStyle, JobStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# These will be set by main.py during lifespan
_store = None
_simulator = None


def set_store(store):
    global _store
    _store = store


def set_simulator(simulator):
    global _simulator
    _simulator = simulator


def get_store():
    if _store is None:
        raise InternalError("Job store not initialized")
    return _store


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Loosely typed so a wrong type is reported as a missing or invalid field
    file_id: Optional[Any] = Field(default=None, alias="fileId")
    style: Optional[Any] = None


_VALID_STYLES = [s.value for s in HeadshotStyle]


@router.post("/generate")
async def generate(payload: Any = Body(None)):
    """Create a job and hand it to the simulator. Returns without waiting.

    A missing body or a non-object body counts as an empty request.
    """
    request = GenerateRequest.model_validate(payload if isinstance(payload, dict) else {})
    if _simulator is None:
        raise InternalError("Job simulator not initialized")
    store = get_store()

    if not request.file_id or not request.style:
        raise ValidationError("Missing required fields: fileId and style")

    if request.style not in _VALID_STYLES:
        raise ValidationError("Invalid style. Must be corporate, creative, or executive")

    job_id = store.create(HeadshotStyle(request.style), file_id=str(request.file_id))
    _simulator.start(job_id)
    logger.info("Job %s started (style=%s, file=%s)", job_id, request.style, request.file_id)

    return {
        "success": True,
        "message": "Processing started",
        "generatedImageId": job_id,
    }


def job_status_payload(job_id: str) -> dict:
    """Status response for a job, in the shape the frontend polls."""
    job = get_store().get(job_id)
    if job is None:
        raise NotFoundError("Job not found")

    response = {
        "success": True,
        "status": job.status.value,
        "progress": job.progress,
        "message": phase_message(job.status, job.progress),
    }
    if job.status == JobStatus.COMPLETED and job.result_id:
        response["resultId"] = job.result_id
    return response


@router.get("/generate/status/{job_id}")
async def get_generation_status(job_id: str):
    return job_status_payload(job_id)
