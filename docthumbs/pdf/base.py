from abc import ABC, abstractmethod
from pathlib import Path


class BasePdfRasterizer(ABC):
    """Contract for all PDF first-page rasterization adapters."""

    OUTPUT_STEM = "page"

    @abstractmethod
    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> Path:
        """Render page 1 of the PDF to a raster image inside output_dir.

        Args:
            pdf_path: PDF file written into the render attempt's temp scope.
            output_dir: Directory the raster must be written to (the same scope).
            dpi: Rendering density.

        Returns:
            Path to the produced raster image.

        Raises:
            PdfRasterizationError: if rasterization fails for any reason.
        """
