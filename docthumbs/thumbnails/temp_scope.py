import shutil
import tempfile
import uuid
from pathlib import Path
from types import TracebackType

from docthumbs.logging.logger import Log
from docthumbs.thumbnails.exceptions import TempScopeError


class TempScope:
    """Isolated working directory owned by a single render attempt.

    Use as a context manager so the directory is removed on every exit path:

        with TempScope.acquire(root) as scope:
            pdf_path = scope.write_input("input.pdf", data)
            ...
    """

    PREFIX = "thumb_"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._released = False

    @classmethod
    def acquire(cls, root: Path | None = None) -> "TempScope":
        """Create a uniquely named directory under root (system temp dir by default).

        Raises:
            TempScopeError: if the directory cannot be created.
        """
        base = root if root is not None else Path(tempfile.gettempdir())
        path = base / f"{cls.PREFIX}{uuid.uuid4().hex}"
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as exc:
            raise TempScopeError(f"Cannot create temp scope at {path}: {exc}") from exc
        return cls(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def released(self) -> bool:
        return self._released

    def write_input(self, name: str, data: bytes) -> Path:
        """Write the attempt's input file into the scope and return its path."""
        if self._released:
            raise TempScopeError(f"Temp scope {self._path} already released")
        target = self._path / Path(name).name
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise TempScopeError(f"Cannot write {target}: {exc}") from exc
        return target

    def release(self) -> None:
        """Remove the directory and its contents. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        try:
            shutil.rmtree(self._path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            Log.warning(f"Failed to remove temp scope {self._path}: {exc}")

    def __enter__(self) -> "TempScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
