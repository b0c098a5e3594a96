"""Input checks and sanitization for the document coordinator."""

import base64
import binascii
import re
from collections.abc import Iterable
from pathlib import PurePosixPath

from docthumbs.documents.exceptions import DocumentValidationError
from docthumbs.documents.models import DocumentType

MAX_NAME_LENGTH = 255
MAX_TAG_LENGTH = 50
MAX_TAGS = 20
DEFAULT_MIME_TYPE = "application/octet-stream"

_FORBIDDEN_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")
_DATA_URL = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

_DOC_EXTENSIONS = frozenset({".doc", ".docx", ".txt", ".md", ".rtf", ".odt"})
_DOC_MIME_PREFIXES = (
    "text/",
    "application/msword",
    "application/vnd.openxmlformats-officedocument",
    "application/vnd.oasis.opendocument",
    "application/rtf",
)


def sanitize_name(name: str) -> str:
    """Strip path separators and control characters, collapse whitespace.

    Raises:
        DocumentValidationError: if nothing usable remains.
    """
    cleaned = _FORBIDDEN_NAME_CHARS.sub("", name or "")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()[:MAX_NAME_LENGTH].strip()
    if not cleaned:
        raise DocumentValidationError("File name must not be empty")
    return cleaned


def sanitize_tags(tags: Iterable[str]) -> frozenset[str]:
    """Trim, drop control characters and empty tags, cap length and count."""
    cleaned: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        value = _CONTROL_CHARS.sub("", tag.strip())[:MAX_TAG_LENGTH].strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return frozenset(cleaned[:MAX_TAGS])


def normalize_mime_type(mime_type: str | None) -> str:
    value = (mime_type or "").strip().lower()
    return value or DEFAULT_MIME_TYPE


def document_type_for(file_name: str, mime_type: str) -> DocumentType:
    """Declared type category shown in listings (image/pdf/doc/other)."""
    extension = PurePosixPath(file_name).suffix.lower()
    if mime_type.startswith("image/"):
        return DocumentType.IMAGE
    if mime_type in ("application/pdf", "application/x-pdf") or extension == ".pdf":
        return DocumentType.PDF
    if extension in _DOC_EXTENSIONS or mime_type.startswith(_DOC_MIME_PREFIXES):
        return DocumentType.DOC
    return DocumentType.OTHER


def validate_upload(data: bytes, declared_size: int | None, max_bytes: int) -> None:
    """Raises DocumentValidationError for empty, oversized, or truncated uploads."""
    if not data:
        raise DocumentValidationError("Uploaded file is empty")
    if len(data) > max_bytes:
        raise DocumentValidationError(
            f"File size {len(data)} exceeds the maximum of {max_bytes} bytes"
        )
    if declared_size is not None and declared_size != len(data):
        raise DocumentValidationError(
            f"Declared size {declared_size} does not match received {len(data)} bytes"
        )


def decode_thumbnail_payload(payload: bytes | str) -> bytes:
    """Accept raw image bytes or a base64 data URL as produced by a browser canvas."""
    if isinstance(payload, bytes):
        return payload
    match = _DATA_URL.match(payload.strip())
    if match is None:
        raise DocumentValidationError("Thumbnail must be image bytes or a base64 image data URL")
    try:
        return base64.b64decode(payload.strip()[match.end():], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DocumentValidationError(f"Invalid base64 thumbnail data: {exc}") from exc
