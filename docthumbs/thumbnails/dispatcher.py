from docthumbs.logging.logger import Log
from docthumbs.thumbnails.models import (
    MimeCategory,
    RenderAttempt,
    TargetSize,
    Thumbnail,
)
from docthumbs.thumbnails.renderers.base import BaseRenderer
from docthumbs.thumbnails.renderers.placeholder_renderer import PlaceholderRenderer

PDF_MIME_TYPES = frozenset({"application/pdf", "application/x-pdf"})


def classify_mime(mime_type: str) -> MimeCategory:
    """Map a declared MIME type to its rendering category."""
    base_type = mime_type.split(";", 1)[0].strip().lower()
    if base_type.startswith("image/"):
        return MimeCategory.IMAGE
    if base_type in PDF_MIME_TYPES:
        return MimeCategory.PDF
    if base_type.startswith("video/"):
        return MimeCategory.VIDEO
    return MimeCategory.OTHER


class ThumbnailDispatcher:
    """Select -> attempt -> fallback -> return, for one render request at a time.

    Renderers are looked up by category; OTHER (and any category without a
    renderer) goes straight to the placeholder composer. Whatever the primary
    renderer does, render() returns a well-formed thumbnail and never raises.
    """

    def __init__(
        self,
        renderers: dict[MimeCategory, BaseRenderer],
        placeholder: PlaceholderRenderer,
        target: TargetSize,
    ) -> None:
        self._renderers = renderers
        self._placeholder = placeholder
        self._target = target

    @property
    def target(self) -> TargetSize:
        return self._target

    def render(self, data: bytes, mime_type: str) -> Thumbnail:
        category = classify_mime(mime_type)
        attempt = RenderAttempt(
            data=data,
            mime_type=mime_type,
            category=category,
            target=self._target,
        )

        renderer = self._renderers.get(category)
        if renderer is not None:
            outcome = renderer.render(attempt)
            if outcome.ok:
                return Thumbnail(
                    data=outcome.data,
                    width=outcome.width,
                    height=outcome.height,
                    category=category,
                    placeholder=False,
                )
            Log.warning(
                f"Falling back to placeholder: {outcome.error}",
                category=category.value,
                mime_type=mime_type,
            )

        fallback = self._placeholder.compose(category, data, mime_type, self._target)
        return Thumbnail(
            data=fallback.data,
            width=fallback.width,
            height=fallback.height,
            category=category,
            placeholder=True,
        )
