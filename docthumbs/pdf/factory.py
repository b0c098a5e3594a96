from docthumbs.config.settings import Settings
from docthumbs.pdf.base import BasePdfRasterizer
from docthumbs.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docthumbs.pdf.pdftoppm_adapter import PdftoppmAdapter
from docthumbs.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfRasterizerFactory:
    """Creates the correct PDF rasterizer based on settings."""

    ADAPTERS: dict[str, type[BasePdfRasterizer]] = {
        "pdftoppm": PdftoppmAdapter,
        "pymupdf": PyMuPdfAdapter,
        "pdfplumber": PdfPlumberAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRasterizer:
        engine = settings.pdf_rasterizer.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF rasterizer '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        if adapter_cls is PdftoppmAdapter:
            return PdftoppmAdapter(
                binary=settings.pdftoppm_binary,
                timeout_seconds=settings.pdf_render_timeout_seconds,
            )
        return adapter_cls()
