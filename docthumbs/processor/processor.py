from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.documents.exceptions import DocumentNotFoundError, StaleThumbnailError
from docthumbs.documents.models import ThumbnailSource
from docthumbs.documents.paths import thumbnail_key
from docthumbs.logging.logger import Log
from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.exceptions import StorageError
from docthumbs.thumbnails.dispatcher import ThumbnailDispatcher
from docthumbs.thumbnails.models import Thumbnail


class ThumbnailProcessor:
    """Renders and attaches the thumbnail for one document.

    Pipeline: load -> read primary blob -> dispatch -> write blob -> guarded swap.

    The swap is guarded by the thumbnail version read at load time, so a render
    that finishes after the document was deleted, or after a newer thumbnail
    (such as a client quality upgrade) was attached, leaves no trace.
    """

    def __init__(
        self,
        store: BaseDocumentsRepository,
        storage: BaseBlobStorage,
        dispatcher: ThumbnailDispatcher,
    ) -> None:
        self._store = store
        self._storage = storage
        self._dispatcher = dispatcher

    def process(self, document_id: str) -> Thumbnail | None:
        """Render the document's thumbnail. Returns None when the write was discarded."""
        try:
            document = self._store.find_by_id(document_id)
        except DocumentNotFoundError:
            Log.info("Document gone before render, skipping", document_id=document_id)
            return None

        try:
            raw_bytes = self._storage.read(document.file_path)
        except StorageError:
            if not self._still_exists(document_id):
                Log.info("Document deleted during render, skipping", document_id=document_id)
                return None
            raise
        Log.debug(f"Loaded {len(raw_bytes)} bytes", document_id=document_id)

        thumbnail = self._dispatcher.render(raw_bytes, document.mime_type)
        key = thumbnail_key(document.user_id, document.id)
        self._storage.write(key, thumbnail.data)

        source = ThumbnailSource.PLACEHOLDER if thumbnail.placeholder else ThumbnailSource.RENDERED
        try:
            swap = self._store.swap_thumbnail(
                document.id,
                key,
                source,
                expected_version=document.thumbnail_version,
            )
        except (DocumentNotFoundError, StaleThumbnailError) as exc:
            Log.info(f"Discarding thumbnail: {exc}", document_id=document_id)
            self._discard(key)
            return None
        except Exception:
            self._discard(key)
            raise

        if swap.previous_path and swap.previous_path != key:
            self._discard(swap.previous_path)

        Log.info(
            "Thumbnail attached",
            document_id=document_id,
            category=thumbnail.category.value,
            source=source.value,
        )
        return thumbnail

    def _still_exists(self, document_id: str) -> bool:
        try:
            self._store.find_by_id(document_id)
        except DocumentNotFoundError:
            return False
        return True

    def _discard(self, key: str) -> None:
        try:
            self._storage.delete(key)
        except StorageError as exc:
            Log.warning(f"Could not remove thumbnail blob: {exc}", key=key)
