from dataclasses import dataclass
from enum import Enum

THUMBNAIL_FORMAT = "PNG"
THUMBNAIL_MIME_TYPE = "image/png"
THUMBNAIL_EXTENSION = ".png"


class MimeCategory(str, Enum):
    """Rendering category a MIME type is dispatched on."""

    IMAGE = "image"
    PDF = "pdf"
    VIDEO = "video"
    OTHER = "other"


class FitMode(str, Enum):
    CONTAIN = "contain"
    COVER = "cover"


@dataclass(frozen=True)
class TargetSize:
    """Bounding box a thumbnail must fit into."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Target size must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True, slots=True)
class RenderAttempt:
    """One invocation of a format renderer. Never shared across calls."""

    data: bytes
    mime_type: str
    category: MimeCategory
    target: TargetSize


@dataclass(frozen=True)
class RenderOutcome:
    """Result of a render attempt: thumbnail bytes, or the reason it failed."""

    ok: bool
    data: bytes = b""
    width: int = 0
    height: int = 0
    error: str = ""

    @classmethod
    def success(cls, data: bytes, width: int, height: int) -> "RenderOutcome":
        return cls(ok=True, data=data, width=width, height=height)

    @classmethod
    def failure(cls, error: str) -> "RenderOutcome":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class Thumbnail:
    """Encoded thumbnail returned by the dispatcher."""

    data: bytes
    width: int
    height: int
    category: MimeCategory
    placeholder: bool
    mime_type: str = THUMBNAIL_MIME_TYPE
