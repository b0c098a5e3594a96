from pathlib import Path

import pdfplumber

from docthumbs.pdf.base import BasePdfRasterizer
from docthumbs.pdf.exceptions import PdfRasterizationError


class PdfPlumberAdapter(BasePdfRasterizer):
    """Rasterizes the first PDF page in-process using pdfplumber."""

    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> Path:
        output = output_dir / f"{self.OUTPUT_STEM}.png"
        try:
            with pdfplumber.open(pdf_path) as pdf:
                if not pdf.pages:
                    raise PdfRasterizationError("PDF has no pages")
                page_image = pdf.pages[0].to_image(resolution=dpi)
                page_image.save(output, format="PNG")
            return output
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pdfplumber rasterization failed: {exc}") from exc
