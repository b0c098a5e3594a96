from abc import ABC, abstractmethod
from datetime import datetime

from docthumbs.documents.models import (
    Document,
    DocumentUpdate,
    NewDocument,
    ThumbnailSource,
    ThumbnailSwap,
)


class BaseDocumentsRepository(ABC):
    """Contract for the document metadata store."""

    @abstractmethod
    def create(self, new_document: NewDocument) -> Document:
        """Insert a document with thumbnail pending, ordered after the user's others."""

    @abstractmethod
    def find_by_id(self, document_id: str, user_id: int | None = None) -> Document:
        """Find a document, optionally scoped to its owner.

        Raises:
            DocumentNotFoundError: if no such document exists for the user.
        """

    @abstractmethod
    def list_for_user(self, user_id: int) -> list[Document]:
        """Pinned first, then by order, then newest first."""

    @abstractmethod
    def update_metadata(
        self, document_id: str, user_id: int, changes: DocumentUpdate
    ) -> Document:
        """Apply name/tags/pin/order changes.

        Raises:
            DocumentNotFoundError: if no such document exists for the user.
        """

    @abstractmethod
    def reorder(self, user_id: int, ordered_ids: list[str]) -> None:
        """Assign order 0..n-1 following ordered_ids, all or nothing.

        Raises:
            DocumentValidationError: if ids repeat or are not all the user's documents.
        """

    @abstractmethod
    def swap_thumbnail(
        self,
        document_id: str,
        thumbnail_path: str,
        source: ThumbnailSource,
        expected_version: int | None = None,
    ) -> ThumbnailSwap:
        """Atomically repoint the document at a new thumbnail and bump its version.

        With expected_version set, the swap only happens if no other thumbnail
        write landed since that version was read.

        Raises:
            DocumentNotFoundError: if the document no longer exists.
            StaleThumbnailError: if expected_version is outdated.
        """

    @abstractmethod
    def mark_thumbnail_pending(self, document_id: str, user_id: int | None = None) -> Document:
        """Flag the document as waiting for a (re)render.

        Raises:
            DocumentNotFoundError: if no such document exists for the user.
        """

    @abstractmethod
    def mark_thumbnail_failed(self, document_id: str) -> bool:
        """Flag a pending thumbnail as failed. Returns False if nothing changed."""

    @abstractmethod
    def find_without_thumbnail(
        self, limit: int, pending_before: datetime | None = None
    ) -> list[Document]:
        """Oldest documents with no thumbnail path.

        Pending documents are skipped unless their render was requested at or
        before pending_before, in which case the render is presumed lost.
        """

    @abstractmethod
    def delete(self, document_id: str) -> str | None:
        """Delete the row and return the thumbnail path it held at that moment.

        Raises:
            DocumentNotFoundError: if the document no longer exists.
        """
