"""Job record data model for simulated headshot generation."""

import secrets
import string
import time
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = (JobStatus.COMPLETED, JobStatus.FAILED)


class HeadshotStyle(str, Enum):
    CORPORATE = "corporate"
    CREATIVE = "creative"
    EXECUTIVE = "executive"


class JobRecord(BaseModel):
    """Tracks the lifecycle of one generation request.

    Only the simulator mutates a record after creation. Once ``status`` is
    terminal the record is frozen by convention: callers must check
    ``is_terminal`` before writing.
    """
    id: str
    style: HeadshotStyle
    file_id: Optional[str] = None
    status: JobStatus = JobStatus.PROCESSING
    progress: int = Field(default=0, ge=0, le=100)
    result_id: Optional[str] = None
    start_time: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_id(prefix: str) -> str:
    """Build an opaque identifier like ``job-1712345678901-k3j9x0q2z``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{millis}-{suffix}"
