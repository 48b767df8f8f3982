"""Client-side status polling and the workflow state it drives.

StatusPoller checks a job first after ``first_delay`` seconds and then every
``interval`` seconds until the job is terminal. A transport or API error
ends polling at once; there is no retry. Polling is unbounded unless
``max_attempts`` or ``deadline_seconds`` is given, in which case running
out yields a TIMEOUT outcome rather than FAILED.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from app.client.api import ApiError, HeadshotClient
from app.jobs.messages import phase_message

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Generation failed. Please try again."
STATUS_CHECK_FAILED_MESSAGE = "Status check failed"
TIMEOUT_MESSAGE = "Generation is taking too long. Please try again."


class PollOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass
class PollResult:
    outcome: PollOutcome
    progress: int
    attempts: int
    result_id: Optional[str] = None
    error_message: Optional[str] = None


class StatusPoller:
    def __init__(
        self,
        client: HeadshotClient,
        first_delay: float = 1.0,
        interval: float = 2.0,
        max_attempts: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ):
        self._client = client
        self._first_delay = first_delay
        self._interval = interval
        self._max_attempts = max_attempts
        self._deadline = deadline_seconds

    async def poll(
        self,
        job_id: str,
        on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> PollResult:
        """Poll until the job is terminal. ``on_update`` sees every status payload."""
        loop = asyncio.get_running_loop()
        started = loop.time()
        delay = self._first_delay
        progress = 0
        attempts = 0

        while True:
            await asyncio.sleep(delay)
            attempts += 1
            try:
                payload = await self._client.check_status(job_id)
            except (ApiError, httpx.HTTPError) as exc:
                logger.warning("Status check for %s failed: %s", job_id, exc)
                return PollResult(
                    PollOutcome.ERROR, progress, attempts,
                    error_message=STATUS_CHECK_FAILED_MESSAGE,
                )

            progress = payload.get("progress", progress)
            if on_update is not None:
                on_update(payload)

            status = payload.get("status")
            if status == "completed":
                return PollResult(PollOutcome.COMPLETED, progress, attempts, result_id=payload.get("resultId"))
            if status == "failed":
                return PollResult(
                    PollOutcome.FAILED, progress, attempts,
                    error_message=GENERATION_FAILED_MESSAGE,
                )

            if self._max_attempts is not None and attempts >= self._max_attempts:
                return PollResult(PollOutcome.TIMEOUT, progress, attempts, error_message=TIMEOUT_MESSAGE)
            if self._deadline is not None and loop.time() - started >= self._deadline:
                return PollResult(PollOutcome.TIMEOUT, progress, attempts, error_message=TIMEOUT_MESSAGE)

            delay = self._interval


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class SessionState:
    uploaded_file_name: Optional[str] = None
    uploaded_file_id: Optional[str] = None
    selected_style: Optional[str] = None
    generated_image_id: Optional[str] = None
    result_id: Optional[str] = None
    processing_status: ProcessingStatus = ProcessingStatus.IDLE
    progress: int = 0
    error_message: Optional[str] = None
    error_kind: Optional[PollOutcome] = None


class HeadshotSession:
    """Upload -> pick style -> generate -> poll, as the browser app does it."""

    def __init__(self, client: HeadshotClient, poller: Optional[StatusPoller] = None):
        self._client = client
        self._poller = poller or StatusPoller(client)
        self.state = SessionState()

    @property
    def status_message(self) -> str:
        if self.state.processing_status == ProcessingStatus.UPLOADING:
            return "Uploading your photo..."
        if self.state.processing_status == ProcessingStatus.PROCESSING:
            return phase_message("processing", self.state.progress)
        return "Processing..."

    async def select_file(self, filename: str, content: bytes, content_type: str) -> SessionState:
        self.state.processing_status = ProcessingStatus.UPLOADING
        self.state.error_message = None
        try:
            response = await self._client.upload_photo(filename, content, content_type)
        except ApiError as exc:
            return self._fail(exc.message)
        except httpx.HTTPError:
            return self._fail("Upload failed")

        if not response.get("success") or not response.get("fileId"):
            return self._fail(response.get("message") or "Upload failed")

        self.state.uploaded_file_name = filename
        self.state.uploaded_file_id = response["fileId"]
        self.state.processing_status = ProcessingStatus.IDLE
        return self.state

    def remove_file(self) -> None:
        self.state = SessionState()

    def select_style(self, style: str) -> None:
        self.state.selected_style = style

    async def generate(self) -> SessionState:
        if not self.state.uploaded_file_id or not self.state.selected_style:
            return self.state

        self.state.processing_status = ProcessingStatus.PROCESSING
        self.state.progress = 0
        self.state.error_kind = None
        self.state.error_message = None
        self.state.result_id = None
        try:
            response = await self._client.generate_headshot(
                self.state.uploaded_file_id, self.state.selected_style
            )
        except ApiError as exc:
            return self._fail(exc.message)
        except httpx.HTTPError:
            return self._fail("Generation failed")

        job_id = response.get("generatedImageId")
        if not response.get("success") or not job_id:
            return self._fail(response.get("message") or "Generation failed")
        self.state.generated_image_id = job_id

        result = await self._poller.poll(job_id, on_update=self._on_update)
        if result.outcome == PollOutcome.COMPLETED:
            self.state.processing_status = ProcessingStatus.COMPLETED
            self.state.result_id = result.result_id
            return self.state
        return self._fail(result.error_message, kind=result.outcome)

    def _on_update(self, payload: Dict[str, Any]) -> None:
        self.state.progress = payload.get("progress", self.state.progress)

    def _fail(self, message: str, kind: Optional[PollOutcome] = None) -> SessionState:
        self.state.processing_status = ProcessingStatus.ERROR
        self.state.error_message = message
        self.state.error_kind = kind
        return self.state
