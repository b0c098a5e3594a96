from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DocumentType(str, Enum):
    IMAGE = "image"
    PDF = "pdf"
    DOC = "doc"
    OTHER = "other"


class ThumbnailStatus(str, Enum):
    """Lets clients tell "still rendering" apart from "no thumbnail will come"."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ThumbnailSource(str, Enum):
    RENDERED = "rendered"
    PLACEHOLDER = "placeholder"
    CLIENT = "client"


@dataclass(frozen=True)
class Document:
    """Domain model for one user-owned uploaded document."""

    id: str
    user_id: int
    name: str
    original_name: str
    type: DocumentType
    mime_type: str
    size: int
    file_path: str
    created_at: datetime
    thumbnail_path: str | None = None
    thumbnail_status: ThumbnailStatus = ThumbnailStatus.PENDING
    thumbnail_source: ThumbnailSource | None = None
    thumbnail_version: int = 0
    thumbnail_requested_at: datetime | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    is_pinned: bool = False
    order: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serializable representation returned to the web layer."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "original_name": self.original_name,
            "type": self.type.value,
            "mime_type": self.mime_type,
            "size": self.size,
            "file_path": self.file_path,
            "thumbnail_path": self.thumbnail_path,
            "thumbnail_status": self.thumbnail_status.value,
            "thumbnail_source": (
                self.thumbnail_source.value if self.thumbnail_source is not None else None
            ),
            "tags": sorted(self.tags),
            "is_pinned": self.is_pinned,
            "order": self.order,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class NewDocument:
    """Fields the coordinator supplies when creating a document row."""

    id: str
    user_id: int
    name: str
    original_name: str
    type: DocumentType
    mime_type: str
    size: int
    file_path: str


@dataclass(frozen=True)
class DocumentUpdate:
    """Metadata changes; None leaves a field unchanged."""

    name: str | None = None
    tags: frozenset[str] | None = None
    is_pinned: bool | None = None
    order: int | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.tags is None and self.is_pinned is None and self.order is None


@dataclass(frozen=True)
class ThumbnailSwap:
    """Result of repointing a document at a new thumbnail."""

    document: Document
    previous_path: str | None
