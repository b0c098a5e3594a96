from docthumbs.config.settings import Settings
from docthumbs.database.models import JobRecord
from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.database.repositories.job_repository import JobRepository
from docthumbs.logging.logger import Log
from docthumbs.processor.processor import ThumbnailProcessor
from docthumbs.worker.scheduler import mark_thumbnail_failed


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: ThumbnailProcessor,
        job_repo: JobRepository,
        store: BaseDocumentsRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._store = store
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job.id} (attempt {job.attempts + 1})", document_id=job.document_id)
        try:
            self._processor.process(job.document_id)
            self._job_repo.mark_done(job.id)
            Log.info(f"Job {job.id} completed successfully")
        except Exception as exc:
            self._handle_failure(job, exc)

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Increment attempts; mark failed if at max, otherwise back to pending."""
        Log.error(f"Job {job.id} failed: {exc}", document_id=job.document_id)
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            mark_thumbnail_failed(self._store, job.document_id)
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.increment_attempts(job.id)
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 1})")
