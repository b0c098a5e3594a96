from datetime import datetime
from typing import Any

from psycopg.rows import dict_row

from docthumbs.database.connection import Database
from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.documents.exceptions import (
    DocumentNotFoundError,
    DocumentValidationError,
    StaleThumbnailError,
)
from docthumbs.documents.models import (
    Document,
    DocumentType,
    DocumentUpdate,
    NewDocument,
    ThumbnailSource,
    ThumbnailStatus,
    ThumbnailSwap,
)

_COLUMNS = """
    id, user_id, name, original_name, type, mime_type, size, file_path,
    thumbnail_path, thumbnail_status, thumbnail_source, thumbnail_version,
    thumbnail_requested_at,
    tags, is_pinned, sort_order, created_at
"""


def _row_to_document(row: dict[str, Any]) -> Document:
    source = row["thumbnail_source"]
    return Document(
        id=str(row["id"]),
        user_id=row["user_id"],
        name=row["name"],
        original_name=row["original_name"],
        type=DocumentType(row["type"]),
        mime_type=row["mime_type"],
        size=row["size"],
        file_path=row["file_path"],
        created_at=row["created_at"],
        thumbnail_path=row["thumbnail_path"],
        thumbnail_status=ThumbnailStatus(row["thumbnail_status"]),
        thumbnail_source=ThumbnailSource(source) if source is not None else None,
        thumbnail_version=row["thumbnail_version"],
        thumbnail_requested_at=row["thumbnail_requested_at"],
        tags=frozenset(row["tags"] or ()),
        is_pinned=row["is_pinned"],
        order=row["sort_order"],
    )


class DocumentsRepository(BaseDocumentsRepository):
    """Database operations for the documents table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, new_document: NewDocument) -> Document:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (
                        id, user_id, name, original_name, type, mime_type,
                        size, file_path, sort_order
                    )
                    VALUES (
                        %s, %s, %s, %s, %s, %s, %s, %s,
                        (SELECT COALESCE(MAX(sort_order) + 1, 0)
                         FROM documents WHERE user_id = %s)
                    )
                    RETURNING {_COLUMNS}
                    """,
                    (
                        new_document.id,
                        new_document.user_id,
                        new_document.name,
                        new_document.original_name,
                        new_document.type.value,
                        new_document.mime_type,
                        new_document.size,
                        new_document.file_path,
                        new_document.user_id,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        return _row_to_document(row)

    def find_by_id(self, document_id: str, user_id: int | None = None) -> Document:
        query = f"SELECT {_COLUMNS} FROM documents WHERE id = %s"
        params: tuple[Any, ...] = (document_id,)
        if user_id is not None:
            query += " AND user_id = %s"
            params = (document_id, user_id)

        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def list_for_user(self, user_id: int) -> list[Document]:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE user_id = %s
                    ORDER BY is_pinned DESC, sort_order ASC, created_at DESC
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()

        return [_row_to_document(row) for row in rows]

    def update_metadata(
        self, document_id: str, user_id: int, changes: DocumentUpdate
    ) -> Document:
        assignments: list[str] = []
        values: list[Any] = []
        if changes.name is not None:
            assignments.append("name = %s")
            values.append(changes.name)
        if changes.tags is not None:
            assignments.append("tags = %s")
            values.append(sorted(changes.tags))
        if changes.is_pinned is not None:
            assignments.append("is_pinned = %s")
            values.append(changes.is_pinned)
        if changes.order is not None:
            assignments.append("sort_order = %s")
            values.append(changes.order)

        if not assignments:
            return self.find_by_id(document_id, user_id)

        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET {", ".join(assignments)}
                    WHERE id = %s AND user_id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (*values, document_id, user_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def reorder(self, user_id: int, ordered_ids: list[str]) -> None:
        if len(set(ordered_ids)) != len(ordered_ids):
            raise DocumentValidationError("Reorder list contains duplicate ids")

        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id FROM documents
                    WHERE user_id = %s AND id = ANY(%s)
                    FOR UPDATE
                    """,
                    (user_id, ordered_ids),
                )
                found = {str(row[0]) for row in cur.fetchall()}
                if found != set(ordered_ids):
                    conn.rollback()
                    raise DocumentValidationError(
                        "Reorder list references documents the user does not own"
                    )
                cur.execute(
                    """
                    UPDATE documents AS d
                    SET sort_order = v.position - 1
                    FROM unnest(%s::text[]) WITH ORDINALITY AS v(id, position)
                    WHERE d.id = v.id AND d.user_id = %s
                    """,
                    (ordered_ids, user_id),
                )
            conn.commit()

    def swap_thumbnail(
        self,
        document_id: str,
        thumbnail_path: str,
        source: ThumbnailSource,
        expected_version: int | None = None,
    ) -> ThumbnailSwap:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT thumbnail_path, thumbnail_version
                    FROM documents
                    WHERE id = %s
                    FOR UPDATE
                    """,
                    (document_id,),
                )
                current = cur.fetchone()
                if current is None:
                    conn.rollback()
                    raise DocumentNotFoundError(f"Document {document_id} not found")
                if (
                    expected_version is not None
                    and current["thumbnail_version"] != expected_version
                ):
                    conn.rollback()
                    raise StaleThumbnailError(
                        f"Document {document_id} thumbnail moved from version "
                        f"{expected_version} to {current['thumbnail_version']}"
                    )

                cur.execute(
                    f"""
                    UPDATE documents
                    SET thumbnail_path = %s,
                        thumbnail_status = %s,
                        thumbnail_source = %s,
                        thumbnail_version = thumbnail_version + 1
                    WHERE id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (
                        thumbnail_path,
                        ThumbnailStatus.READY.value,
                        source.value,
                        document_id,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        return ThumbnailSwap(
            document=_row_to_document(row),
            previous_path=current["thumbnail_path"],
        )

    def mark_thumbnail_pending(self, document_id: str, user_id: int | None = None) -> Document:
        query = f"""
            UPDATE documents
            SET thumbnail_status = %s, thumbnail_requested_at = now()
            WHERE id = %s{" AND user_id = %s" if user_id is not None else ""}
            RETURNING {_COLUMNS}
        """
        params: tuple[Any, ...] = (ThumbnailStatus.PENDING.value, document_id)
        if user_id is not None:
            params = (*params, user_id)

        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def mark_thumbnail_failed(self, document_id: str) -> bool:
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET thumbnail_status = %s
                    WHERE id = %s AND thumbnail_status = %s
                    """,
                    (
                        ThumbnailStatus.FAILED.value,
                        document_id,
                        ThumbnailStatus.PENDING.value,
                    ),
                )
                changed = cur.rowcount > 0
            conn.commit()

        return changed

    def find_without_thumbnail(
        self, limit: int, pending_before: datetime | None = None
    ) -> list[Document]:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE thumbnail_path IS NULL
                      AND (thumbnail_status <> %s OR thumbnail_requested_at <= %s)
                    ORDER BY created_at
                    LIMIT %s
                    """,
                    (ThumbnailStatus.PENDING.value, pending_before, limit),
                )
                rows = cur.fetchall()

        return [_row_to_document(row) for row in rows]

    def delete(self, document_id: str) -> str | None:
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM documents WHERE id = %s RETURNING thumbnail_path",
                    (document_id,),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return row[0]
