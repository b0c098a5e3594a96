from dataclasses import dataclass

from docthumbs.config.settings import Settings
from docthumbs.database.connection import Database
from docthumbs.database.factory import DocumentsRepositoryFactory
from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.database.repositories.job_repository import JobRepository
from docthumbs.documents.coordinator import DocumentCoordinator
from docthumbs.documents.quality_upgrade import QualityUpgradeChannel
from docthumbs.processor.processor import ThumbnailProcessor
from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.factory import BlobStorageFactory
from docthumbs.thumbnails.dispatcher import ThumbnailDispatcher
from docthumbs.thumbnails.factory import ThumbnailDispatcherFactory
from docthumbs.worker.scheduler import BaseThumbnailScheduler, ThumbnailSchedulerFactory


@dataclass
class Application:
    """Wired object graph handed to the web layer and the entry points."""

    settings: Settings
    store: BaseDocumentsRepository
    storage: BaseBlobStorage
    dispatcher: ThumbnailDispatcher
    processor: ThumbnailProcessor
    scheduler: BaseThumbnailScheduler
    coordinator: DocumentCoordinator
    quality_upgrade: QualityUpgradeChannel
    job_repo: JobRepository | None = None

    def close(self) -> None:
        """Wait for scheduled renders to finish. The caller closes the database."""
        self.scheduler.close()


def build_application(settings: Settings, database: Database | None = None) -> Application:
    """Build the coordinator, upgrade channel, and background pipeline from settings."""
    store = DocumentsRepositoryFactory.create(settings, database)
    storage = BlobStorageFactory.create(settings)
    dispatcher = ThumbnailDispatcherFactory.create(settings)
    processor = ThumbnailProcessor(store, storage, dispatcher)
    job_repo = (
        JobRepository(database, settings.max_job_attempts) if database is not None else None
    )
    scheduler = ThumbnailSchedulerFactory.create(settings, processor, store, job_repo)
    return Application(
        settings=settings,
        store=store,
        storage=storage,
        dispatcher=dispatcher,
        processor=processor,
        scheduler=scheduler,
        coordinator=DocumentCoordinator(
            store, storage, scheduler, max_upload_bytes=settings.max_upload_bytes
        ),
        quality_upgrade=QualityUpgradeChannel(
            store,
            storage,
            max_bytes=settings.max_thumbnail_upload_bytes,
            max_pixels=settings.max_image_pixels,
        ),
        job_repo=job_repo,
    )
