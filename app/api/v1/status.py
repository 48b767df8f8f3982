"""Legacy status path.

The browser client polls ``/api/status/{job_id}``. It answers from the same
job store as ``/api/generate/status/{job_id}`` so the two can never disagree.
"""

from fastapi import APIRouter

from app.api.v1.generate import job_status_payload

router = APIRouter()


@router.get("/status/{job_id}")
async def get_status(job_id: str):
    return job_status_payload(job_id)
