import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.documents.exceptions import DocumentNotFoundError, DocumentValidationError
from docthumbs.documents.models import Document, DocumentUpdate, NewDocument
from docthumbs.documents.paths import document_file_key
from docthumbs.documents.validation import (
    document_type_for,
    normalize_mime_type,
    sanitize_name,
    sanitize_tags,
    validate_upload,
)
from docthumbs.logging.logger import Log
from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.exceptions import StorageError
from docthumbs.thumbnails.models import THUMBNAIL_MIME_TYPE
from docthumbs.worker.scheduler import BaseThumbnailScheduler, mark_thumbnail_failed

# A pending render older than this is presumed lost with the process that ran it.
STALE_PENDING_AFTER = timedelta(minutes=15)


class DocumentCoordinator:
    """Keeps document rows, primary blobs, and thumbnail blobs consistent.

    Every operation is independent and safe to call from many threads at
    once. Thumbnail rendering is handed to the scheduler and never delays
    or fails an upload.
    """

    def __init__(
        self,
        store: BaseDocumentsRepository,
        storage: BaseBlobStorage,
        scheduler: BaseThumbnailScheduler,
        max_upload_bytes: int,
    ) -> None:
        self._store = store
        self._storage = storage
        self._scheduler = scheduler
        self._max_upload_bytes = max_upload_bytes

    def upload(
        self,
        user_id: int,
        data: bytes,
        file_name: str,
        mime_type: str | None,
        size: int | None = None,
    ) -> Document:
        """Store a new document and schedule its thumbnail.

        Raises:
            DocumentValidationError: for empty, oversized, or unnamed uploads.
            StorageError: if the primary blob cannot be written.
        """
        validate_upload(data, size, self._max_upload_bytes)
        name = sanitize_name(file_name)
        mime = normalize_mime_type(mime_type)

        file_key = document_file_key(user_id, name)
        self._storage.write(file_key, data)

        new_document = NewDocument(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            original_name=name,
            type=document_type_for(name, mime),
            mime_type=mime,
            size=len(data),
            file_path=file_key,
        )
        try:
            document = self._store.create(new_document)
        except Exception:
            self._remove_blob(file_key)
            raise

        Log.info("Document uploaded", document_id=document.id, user_id=user_id, size=document.size)
        self._schedule(document.id)
        return document

    def delete(self, user_id: int, document_id: str) -> None:
        """Remove the document, its primary blob, and every thumbnail it pointed at.

        Raises:
            DocumentNotFoundError: if the user has no such document.
            StorageError: if the primary blob exists but cannot be removed.
        """
        document = self._store.find_by_id(document_id, user_id)

        self._storage.delete(document.file_path)
        if document.thumbnail_path:
            self._remove_blob(document.thumbnail_path)

        final_thumbnail = self._store.delete(document.id)
        # A background render may have attached a thumbnail after the load.
        if final_thumbnail and final_thumbnail != document.thumbnail_path:
            self._remove_blob(final_thumbnail)

        Log.info("Document deleted", document_id=document_id, user_id=user_id)

    def update(self, user_id: int, document_id: str, changes: DocumentUpdate) -> Document:
        """Apply metadata changes. Never touches blobs or thumbnails."""
        if changes.order is not None and changes.order < 0:
            raise DocumentValidationError("Order must not be negative")
        sanitized = DocumentUpdate(
            name=sanitize_name(changes.name) if changes.name is not None else None,
            tags=sanitize_tags(changes.tags) if changes.tags is not None else None,
            is_pinned=changes.is_pinned,
            order=changes.order,
        )
        return self._store.update_metadata(document_id, user_id, sanitized)

    def reorder(self, user_id: int, ordered_ids: Iterable[str]) -> None:
        """Give the listed documents order 0..n-1 in sequence, atomically."""
        self._store.reorder(user_id, list(ordered_ids))

    def get(self, user_id: int, document_id: str) -> Document:
        return self._store.find_by_id(document_id, user_id)

    def list_documents(self, user_id: int) -> list[Document]:
        return self._store.list_for_user(user_id)

    def read_thumbnail(self, user_id: int, document_id: str) -> tuple[bytes, str]:
        """Return the current thumbnail bytes and their MIME type.

        Raises:
            DocumentNotFoundError: if the document is unknown or has no thumbnail yet.
        """
        document = self._store.find_by_id(document_id, user_id)
        if document.thumbnail_path is None:
            raise DocumentNotFoundError(f"Document {document_id} has no thumbnail")
        return self._storage.read(document.thumbnail_path), THUMBNAIL_MIME_TYPE

    def regenerate_thumbnail(self, user_id: int, document_id: str) -> Document:
        """Mark the thumbnail pending and render it again in the background."""
        document = self._store.mark_thumbnail_pending(document_id, user_id)
        self._schedule(document.id)
        return document

    def backfill_missing_thumbnails(
        self, limit: int = 100, stale_after: timedelta = STALE_PENDING_AFTER
    ) -> int:
        """Schedule renders for documents that ended up without a thumbnail.

        Failed documents are always picked up. Pending ones only once their
        render has been outstanding for longer than stale_after.
        """
        pending_before = datetime.now(timezone.utc) - stale_after
        scheduled = 0
        for document in self._store.find_without_thumbnail(limit, pending_before):
            try:
                self._store.mark_thumbnail_pending(document.id)
            except DocumentNotFoundError:
                continue
            self._schedule(document.id)
            scheduled += 1
        Log.info(f"Scheduled {scheduled} missing thumbnails")
        return scheduled

    def _schedule(self, document_id: str) -> None:
        try:
            self._scheduler.schedule(document_id)
        except Exception as exc:
            Log.error(f"Could not schedule thumbnail: {exc}", document_id=document_id)
            mark_thumbnail_failed(self._store, document_id)

    def _remove_blob(self, key: str) -> None:
        try:
            self._storage.delete(key)
        except StorageError as exc:
            Log.warning(f"Could not remove blob: {exc}", key=key)
