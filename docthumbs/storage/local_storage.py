import os
import uuid
from pathlib import Path

from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.exceptions import StorageError


class LocalBlobStorage(BaseBlobStorage):
    """Stores blobs as files under a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    @property
    def files_root(self) -> Path:
        return self._files_root

    def write(self, key: str, data: bytes) -> None:
        path = self.resolve(key)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {key}: {exc}") from exc

    def read(self, key: str) -> bytes:
        path = self.resolve(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise StorageError(f"File not found: {key}") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read {key}: {exc}") from exc

    def delete(self, key: str) -> bool:
        path = self.resolve(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Cannot delete {key}: {exc}") from exc
        return True

    def exists(self, key: str) -> bool:
        return self.resolve(key).is_file()

    def resolve(self, key: str) -> Path:
        """Map a key to a path under files_root, rejecting anything that escapes it."""
        relative = Path(key.lstrip("/"))
        if not key.strip() or relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._files_root / relative
