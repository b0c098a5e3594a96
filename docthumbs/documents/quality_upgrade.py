from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.documents.exceptions import DocumentValidationError
from docthumbs.documents.models import Document, ThumbnailSource
from docthumbs.documents.paths import thumbnail_key
from docthumbs.documents.validation import decode_thumbnail_payload
from docthumbs.logging.logger import Log
from docthumbs.storage.base import BaseBlobStorage
from docthumbs.storage.exceptions import StorageError
from docthumbs.thumbnails.exceptions import RenderError
from docthumbs.thumbnails.raster import DEFAULT_MAX_PIXELS, encode_thumbnail, open_image


class QualityUpgradeChannel:
    """Accepts client-rendered thumbnails that replace the server's version.

    Browsers can render formats the server cannot (or render them better),
    and send the result back as image bytes or a canvas data URL. An upgrade
    always wins over whatever thumbnail is attached, and any later background
    render for the same document is discarded.
    """

    def __init__(
        self,
        store: BaseDocumentsRepository,
        storage: BaseBlobStorage,
        max_bytes: int,
        max_pixels: int = DEFAULT_MAX_PIXELS,
    ) -> None:
        self._store = store
        self._storage = storage
        self._max_bytes = max_bytes
        self._max_pixels = max_pixels

    def submit(self, user_id: int, document_id: str, payload: bytes | str) -> Document:
        """Attach a client thumbnail to the document and return the updated record.

        Raises:
            DocumentValidationError: if the payload is empty, too large, or not an image.
            DocumentNotFoundError: if the user has no such document.
            StorageError: if the new thumbnail cannot be written.
        """
        data = decode_thumbnail_payload(payload)
        if not data:
            raise DocumentValidationError("Thumbnail payload is empty")
        if len(data) > self._max_bytes:
            raise DocumentValidationError(
                f"Thumbnail size {len(data)} exceeds the maximum of {self._max_bytes} bytes"
            )

        document = self._store.find_by_id(document_id, user_id)

        try:
            encoded = encode_thumbnail(open_image(data, self._max_pixels))
        except RenderError as exc:
            raise DocumentValidationError(f"Thumbnail is not a valid image: {exc}") from exc

        key = thumbnail_key(user_id, document.id, high_quality=True)
        self._storage.write(key, encoded)

        try:
            swap = self._store.swap_thumbnail(document.id, key, ThumbnailSource.CLIENT)
        except Exception:
            self._remove_blob(key)
            raise

        if swap.previous_path and swap.previous_path != key:
            self._remove_blob(swap.previous_path)

        Log.info("Thumbnail upgraded by client", document_id=document.id, user_id=user_id)
        return swap.document

    def _remove_blob(self, key: str) -> None:
        try:
            self._storage.delete(key)
        except StorageError as exc:
            Log.warning(f"Could not remove thumbnail blob: {exc}", key=key)
