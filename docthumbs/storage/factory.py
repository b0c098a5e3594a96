from docthumbs.config.settings import Settings
from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.exceptions import UnsupportedStorageDiskError
from docthumbs.storage.local_storage import LocalBlobStorage


class BlobStorageFactory:
    """Creates the blob storage for the configured storage disk."""

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStorage:
        disk = settings.storage_disk.lower()
        if disk != "local":
            raise UnsupportedStorageDiskError(f"storage_disk '{disk}' is not supported")
        return LocalBlobStorage(files_root=settings.files_root)
