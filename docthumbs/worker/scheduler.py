from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor

from docthumbs.config.settings import Settings
from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.database.repositories.job_repository import JobRepository
from docthumbs.logging.logger import Log
from docthumbs.processor.processor import ThumbnailProcessor


class BaseThumbnailScheduler(ABC):
    """Hands a document to background thumbnail rendering."""

    @abstractmethod
    def schedule(self, document_id: str) -> None:
        """Queue a render for the document. Returns without waiting for it."""

    def close(self) -> None:
        """Release scheduler resources."""


class ThreadedThumbnailScheduler(BaseThumbnailScheduler):
    """Renders in an in-process thread pool, fire-and-forget."""

    def __init__(
        self,
        processor: ThumbnailProcessor,
        store: BaseDocumentsRepository,
        max_workers: int,
    ) -> None:
        self._processor = processor
        self._store = store
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="thumbnail"
        )

    def schedule(self, document_id: str) -> None:
        self._executor.submit(self._run, document_id)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _run(self, document_id: str) -> None:
        try:
            self._processor.process(document_id)
        except Exception as exc:
            Log.error(f"Thumbnail render failed: {exc}", document_id=document_id)
            mark_thumbnail_failed(self._store, document_id)


class QueuedThumbnailScheduler(BaseThumbnailScheduler):
    """Inserts a thumbnail_jobs row for the worker process to pick up."""

    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def schedule(self, document_id: str) -> None:
        job_id = self._job_repo.enqueue(document_id)
        Log.info("Thumbnail job queued", job_id=job_id, document_id=document_id)


def mark_thumbnail_failed(store: BaseDocumentsRepository, document_id: str) -> None:
    """Flag the document's thumbnail as failed, logging rather than raising."""
    try:
        store.mark_thumbnail_failed(document_id)
    except Exception as exc:
        Log.warning(f"Could not mark thumbnail failed: {exc}", document_id=document_id)


class ThumbnailSchedulerFactory:
    """Creates the background scheduler based on settings."""

    SCHEDULERS = ("thread", "queue")

    @classmethod
    def create(
        cls,
        settings: Settings,
        processor: ThumbnailProcessor,
        store: BaseDocumentsRepository,
        job_repo: JobRepository | None = None,
    ) -> BaseThumbnailScheduler:
        kind = settings.thumbnail_scheduler.lower()
        if kind == "thread":
            return ThreadedThumbnailScheduler(
                processor, store, max_workers=settings.thumbnail_worker_threads
            )
        if kind == "queue":
            if job_repo is None:
                raise ValueError("thumbnail_scheduler 'queue' requires a job repository")
            return QueuedThumbnailScheduler(job_repo)
        raise ValueError(
            f"Unknown thumbnail scheduler '{kind}'. Choose from: {list(cls.SCHEDULERS)}"
        )
