from pathlib import Path

from PIL import Image

from docthumbs.pdf.base import BasePdfRasterizer
from docthumbs.thumbnails.models import FitMode, RenderAttempt, RenderOutcome
from docthumbs.thumbnails.raster import encode_thumbnail, fit_image
from docthumbs.thumbnails.renderers.base import BaseRenderer
from docthumbs.thumbnails.temp_scope import TempScope


class PdfRenderer(BaseRenderer):
    """Rasterizes page 1 of a PDF inside a temp scope and fits it to the target."""

    name = "pdf"

    INPUT_FILENAME = "input.pdf"

    def __init__(
        self,
        rasterizer: BasePdfRasterizer,
        dpi: int = 150,
        fit: FitMode = FitMode.CONTAIN,
        temp_root: Path | None = None,
    ) -> None:
        self._rasterizer = rasterizer
        self._dpi = dpi
        self._fit = fit
        self._temp_root = temp_root

    def _render(self, attempt: RenderAttempt) -> RenderOutcome:
        with TempScope.acquire(self._temp_root) as scope:
            pdf_path = scope.write_input(self.INPUT_FILENAME, attempt.data)
            raster_path = self._rasterizer.rasterize(pdf_path, scope.path, self._dpi)
            with Image.open(raster_path) as page:
                page.load()
                thumb = fit_image(page, attempt.target, self._fit)
        return RenderOutcome.success(encode_thumbnail(thumb), thumb.width, thumb.height)
