import re
import uuid
from pathlib import PurePosixPath

from docthumbs.thumbnails.models import THUMBNAIL_EXTENSION

_SAFE_EXTENSION = re.compile(r"^\.[a-z0-9]{1,10}$")


def document_file_key(user_id: int, file_name: str) -> str:
    """Build a unique primary file key: users/{user_id}/documents/{token}{ext}"""
    extension = PurePosixPath(file_name).suffix.lower()
    if not _SAFE_EXTENSION.match(extension):
        extension = ""
    return f"users/{user_id}/documents/{uuid.uuid4().hex}{extension}"


def thumbnail_key(user_id: int, document_id: str, high_quality: bool = False) -> str:
    """Build a unique thumbnail key: users/{user_id}/thumbnails/{document_id}-{token}[-hq].png"""
    suffix = "-hq" if high_quality else ""
    return (
        f"users/{user_id}/thumbnails/"
        f"{document_id}-{uuid.uuid4().hex}{suffix}{THUMBNAIL_EXTENSION}"
    )
