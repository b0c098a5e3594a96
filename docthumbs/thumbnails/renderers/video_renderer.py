from docthumbs.thumbnails.exceptions import RenderError
from docthumbs.thumbnails.models import RenderAttempt, RenderOutcome
from docthumbs.thumbnails.renderers.base import BaseRenderer


class VideoRenderer(BaseRenderer):
    """First-frame capture for videos.

    No media toolchain is bundled, so this always fails and the dispatcher
    falls back to the media placeholder. A real extractor implements _render
    with the same contract and replaces this class in ThumbnailDispatcherFactory.
    """

    name = "video"

    def _render(self, attempt: RenderAttempt) -> RenderOutcome:
        raise RenderError(f"Frame extraction is not available for {attempt.mime_type}")
