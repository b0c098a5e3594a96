import threading
from dataclasses import replace
from datetime import datetime, timezone

from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.documents.exceptions import (
    DocumentNotFoundError,
    DocumentValidationError,
    StaleThumbnailError,
)
from docthumbs.documents.models import (
    Document,
    DocumentUpdate,
    NewDocument,
    ThumbnailSource,
    ThumbnailStatus,
    ThumbnailSwap,
)


class InMemoryDocumentsRepository(BaseDocumentsRepository):
    """Process-local metadata store for development and tests.

    Same contract as the PostgreSQL repository; a single lock stands in for
    row locks and transactions.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, Document] = {}

    def create(self, new_document: NewDocument) -> Document:
        with self._lock:
            if new_document.id in self._documents:
                raise DocumentValidationError(f"Document {new_document.id} already exists")
            orders = [
                doc.order
                for doc in self._documents.values()
                if doc.user_id == new_document.user_id
            ]
            now = datetime.now(timezone.utc)
            document = Document(
                id=new_document.id,
                user_id=new_document.user_id,
                name=new_document.name,
                original_name=new_document.original_name,
                type=new_document.type,
                mime_type=new_document.mime_type,
                size=new_document.size,
                file_path=new_document.file_path,
                created_at=now,
                thumbnail_requested_at=now,
                order=max(orders) + 1 if orders else 0,
            )
            self._documents[document.id] = document
            return document

    def find_by_id(self, document_id: str, user_id: int | None = None) -> Document:
        with self._lock:
            return self._get(document_id, user_id)

    def list_for_user(self, user_id: int) -> list[Document]:
        with self._lock:
            owned = [doc for doc in self._documents.values() if doc.user_id == user_id]
        # Newest first inside equal (pin, order) groups.
        owned.sort(key=lambda doc: doc.created_at, reverse=True)
        owned.sort(key=lambda doc: (not doc.is_pinned, doc.order))
        return owned

    def update_metadata(
        self, document_id: str, user_id: int, changes: DocumentUpdate
    ) -> Document:
        with self._lock:
            document = self._get(document_id, user_id)
            if changes.name is not None:
                document = replace(document, name=changes.name)
            if changes.tags is not None:
                document = replace(document, tags=frozenset(changes.tags))
            if changes.is_pinned is not None:
                document = replace(document, is_pinned=changes.is_pinned)
            if changes.order is not None:
                document = replace(document, order=changes.order)
            self._documents[document_id] = document
            return document

    def reorder(self, user_id: int, ordered_ids: list[str]) -> None:
        if len(set(ordered_ids)) != len(ordered_ids):
            raise DocumentValidationError("Reorder list contains duplicate ids")

        with self._lock:
            for document_id in ordered_ids:
                document = self._documents.get(document_id)
                if document is None or document.user_id != user_id:
                    raise DocumentValidationError(
                        "Reorder list references documents the user does not own"
                    )
            for position, document_id in enumerate(ordered_ids):
                self._documents[document_id] = replace(
                    self._documents[document_id], order=position
                )

    def swap_thumbnail(
        self,
        document_id: str,
        thumbnail_path: str,
        source: ThumbnailSource,
        expected_version: int | None = None,
    ) -> ThumbnailSwap:
        with self._lock:
            current = self._get(document_id, None)
            if expected_version is not None and current.thumbnail_version != expected_version:
                raise StaleThumbnailError(
                    f"Document {document_id} thumbnail moved from version "
                    f"{expected_version} to {current.thumbnail_version}"
                )
            updated = replace(
                current,
                thumbnail_path=thumbnail_path,
                thumbnail_status=ThumbnailStatus.READY,
                thumbnail_source=source,
                thumbnail_version=current.thumbnail_version + 1,
            )
            self._documents[document_id] = updated
            return ThumbnailSwap(document=updated, previous_path=current.thumbnail_path)

    def mark_thumbnail_pending(self, document_id: str, user_id: int | None = None) -> Document:
        with self._lock:
            document = replace(
                self._get(document_id, user_id),
                thumbnail_status=ThumbnailStatus.PENDING,
                thumbnail_requested_at=datetime.now(timezone.utc),
            )
            self._documents[document_id] = document
            return document

    def mark_thumbnail_failed(self, document_id: str) -> bool:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.thumbnail_status is not ThumbnailStatus.PENDING:
                return False
            self._documents[document_id] = replace(
                document, thumbnail_status=ThumbnailStatus.FAILED
            )
            return True

    def find_without_thumbnail(
        self, limit: int, pending_before: datetime | None = None
    ) -> list[Document]:
        with self._lock:
            missing = [
                doc
                for doc in self._documents.values()
                if doc.thumbnail_path is None and not self._in_flight(doc, pending_before)
            ]
        missing.sort(key=lambda doc: doc.created_at)
        return missing[:limit]

    def delete(self, document_id: str) -> str | None:
        with self._lock:
            document = self._documents.pop(document_id, None)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document.thumbnail_path

    @staticmethod
    def _in_flight(document: Document, pending_before: datetime | None) -> bool:
        if document.thumbnail_status is not ThumbnailStatus.PENDING:
            return False
        if pending_before is None or document.thumbnail_requested_at is None:
            return True
        return document.thumbnail_requested_at > pending_before

    def _get(self, document_id: str, user_id: int | None) -> Document:
        document = self._documents.get(document_id)
        if document is None or (user_id is not None and document.user_id != user_id):
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document
