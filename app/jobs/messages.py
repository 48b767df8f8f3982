"""User-facing phase messages derived from job status and progress.

Shared by the status endpoints and the client poller so both sides show the
same text for the same state.
"""

from app.jobs.models import JobStatus


def phase_message(status: JobStatus, progress: int) -> str:
    status = JobStatus(status)
    if status == JobStatus.COMPLETED:
        return "Your professional headshot is ready!"
    if status == JobStatus.FAILED:
        return "Processing failed. Please try again."

    if progress < 25:
        return "Analyzing your photo..."
    if progress < 50:
        return "Applying professional style..."
    if progress < 75:
        return "Enhancing details..."
    if progress < 100:
        return "Finalizing your headshot..."
    return "Processing complete!"
