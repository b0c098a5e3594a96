from pathlib import Path

import pymupdf

from docthumbs.pdf.base import BasePdfRasterizer
from docthumbs.pdf.exceptions import PdfRasterizationError


class PyMuPdfAdapter(BasePdfRasterizer):
    """Rasterizes the first PDF page in-process using PyMuPDF."""

    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> Path:
        output = output_dir / f"{self.OUTPUT_STEM}.png"
        try:
            with pymupdf.open(pdf_path) as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise PdfRasterizationError("PDF has no pages")
                pixmap = doc.load_page(0).get_pixmap(dpi=dpi, alpha=False)
                pixmap.save(str(output))
            return output
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pymupdf rasterization failed: {exc}") from exc
