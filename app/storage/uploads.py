"""Upload storage for source photos with TTL-based cleanup."""

import logging
import os
import time

from app.config import settings
from app.jobs.models import new_id

logger = logging.getLogger(__name__)


class UploadStore:
    """Keeps uploaded photos on local disk as ``<file_id><ext>``."""

    def __init__(self, base_dir: str, ttl_hours: int = 24):
        self._base_dir = base_dir
        os.makedirs(self._base_dir, exist_ok=True)
        self._ttl_seconds = ttl_hours * 3600

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def new_file_id(self) -> str:
        return new_id("upload")

    def get_path(self, file_id: str, ext: str) -> str:
        return os.path.join(self._base_dir, f"{file_id}{ext}")

    def remove(self, path: str) -> None:
        if os.path.exists(path):
            os.remove(path)

    def cleanup_expired(self) -> int:
        """Remove uploads older than TTL. Returns count of removed files."""
        now = time.time()
        removed = 0
        if not os.path.exists(self._base_dir):
            return 0
        for entry in os.listdir(self._base_dir):
            path = os.path.join(self._base_dir, entry)
            if not os.path.isfile(path):
                continue
            if now - os.path.getmtime(path) > self._ttl_seconds:
                os.remove(path)
                removed += 1
        if removed:
            logger.info("Removed %d expired upload(s)", removed)
        return removed


# Global instance
upload_store = UploadStore(settings.upload_dir, ttl_hours=settings.upload_ttl_hours)
