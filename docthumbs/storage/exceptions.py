class StorageError(Exception):
    """Raised when a blob cannot be written, read, or deleted."""


class UnsupportedStorageDiskError(StorageError):
    """Raised when settings name a storage disk that is not supported."""
