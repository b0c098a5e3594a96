from docthumbs.thumbnails.exceptions import RenderError


class PdfRasterizationError(RenderError):
    """Raised when the first page of a PDF cannot be rasterized."""
