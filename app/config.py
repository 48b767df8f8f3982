"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Server
    environment: str = "development"  # "development" or "production"
    port: int = 3001
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Uploads
    upload_dir: str = "./uploads"
    upload_max_size: int = 10 * 1024 * 1024
    min_image_dimension: int = 512
    max_image_dimension: int = 4096
    upload_ttl_hours: int = 24

    # Job simulation
    progress_interval_ms: int = 2000
    progress_steps: List[int] = [10, 25, 50, 75, 90, 100]
    failure_probability: float = 0.05
    failure_delay_ms: int = 3000

    # Job retention
    job_ttl_hours: int = 2
    max_jobs: int = 10000
    reaper_interval_seconds: int = 300

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
