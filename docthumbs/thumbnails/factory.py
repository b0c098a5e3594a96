from docthumbs.config.settings import Settings
from docthumbs.pdf.factory import PdfRasterizerFactory
from docthumbs.thumbnails.dispatcher import ThumbnailDispatcher
from docthumbs.thumbnails.models import FitMode, MimeCategory, TargetSize
from docthumbs.thumbnails.raster import configure_pixel_limit
from docthumbs.thumbnails.renderers import (
    ImageRenderer,
    PdfRenderer,
    PlaceholderRenderer,
    VideoRenderer,
)


class ThumbnailDispatcherFactory:
    """Creates a dispatcher with one renderer per category, configured from settings."""

    @classmethod
    def create(cls, settings: Settings) -> ThumbnailDispatcher:
        fit = cls._resolve_fit(settings.thumbnail_fit)
        configure_pixel_limit(settings.max_image_pixels)
        target = TargetSize(settings.thumbnail_width, settings.thumbnail_height)
        renderers = {
            MimeCategory.IMAGE: ImageRenderer(fit=fit, max_pixels=settings.max_image_pixels),
            MimeCategory.PDF: PdfRenderer(
                rasterizer=PdfRasterizerFactory.create(settings),
                dpi=settings.pdf_render_dpi,
                fit=fit,
                temp_root=settings.temp_root,
            ),
            MimeCategory.VIDEO: VideoRenderer(),
        }
        return ThumbnailDispatcher(renderers, PlaceholderRenderer(), target)

    @classmethod
    def _resolve_fit(cls, value: str) -> FitMode:
        try:
            return FitMode(value.lower())
        except ValueError:
            raise ValueError(
                f"Unknown thumbnail fit '{value}'. Choose from: {[m.value for m in FitMode]}"
            ) from None
