from abc import ABC, abstractmethod


class BaseBlobStorage(ABC):
    """Contract for blob storage keyed by relative, user-scoped paths.

    Keys look like "users/<user_id>/documents/<name>". A single write is
    atomic; nothing else is transactional.
    """

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Store data under key, replacing any existing blob.

        Raises:
            StorageError: if the blob cannot be written.
        """

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Return the blob stored under key.

        Raises:
            StorageError: if the blob is missing or unreadable.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete the blob under key.

        Returns:
            True if a blob was removed, False if it was already absent.

        Raises:
            StorageError: if an existing blob cannot be removed.
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return whether a blob is stored under key."""
