from docthumbs.thumbnails.models import FitMode, RenderAttempt, RenderOutcome
from docthumbs.thumbnails.raster import DEFAULT_MAX_PIXELS, encode_thumbnail, fit_image, open_image
from docthumbs.thumbnails.renderers.base import BaseRenderer


class ImageRenderer(BaseRenderer):
    """Resizes raster images into the thumbnail bounds using Pillow."""

    name = "image"

    def __init__(
        self,
        fit: FitMode = FitMode.CONTAIN,
        max_pixels: int = DEFAULT_MAX_PIXELS,
    ) -> None:
        self._fit = fit
        self._max_pixels = max_pixels

    def _render(self, attempt: RenderAttempt) -> RenderOutcome:
        image = open_image(attempt.data, max_pixels=self._max_pixels)
        thumb = fit_image(image, attempt.target, self._fit)
        return RenderOutcome.success(encode_thumbnail(thumb), thumb.width, thumb.height)
