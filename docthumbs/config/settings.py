from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    metadata_store: str = "postgres"
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docthumbs"
    db_username: str = "docthumbs"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    storage_disk: str = "local"
    files_root: Path = Path("/app/files")
    temp_root: Path | None = None

    max_upload_bytes: int = 50 * 1024 * 1024
    max_thumbnail_upload_bytes: int = 5 * 1024 * 1024

    thumbnail_width: int = 200
    thumbnail_height: int = 150
    thumbnail_fit: str = "contain"
    max_image_pixels: int = 89_478_485

    pdf_rasterizer: str = "pdftoppm"
    pdftoppm_binary: str = "pdftoppm"
    pdf_render_dpi: int = 150
    pdf_render_timeout_seconds: int = 10

    thumbnail_scheduler: str = "thread"
    thumbnail_worker_threads: int = 2
    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5
