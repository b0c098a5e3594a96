import subprocess
from pathlib import Path

from docthumbs.pdf.base import BasePdfRasterizer
from docthumbs.pdf.exceptions import PdfRasterizationError


class PdftoppmAdapter(BasePdfRasterizer):
    """Rasterizes the first PDF page with poppler's pdftoppm in a subprocess."""

    def __init__(self, binary: str = "pdftoppm", timeout_seconds: float = 10) -> None:
        self._binary = binary
        self._timeout_seconds = timeout_seconds

    def rasterize(self, pdf_path: Path, output_dir: Path, dpi: int) -> Path:
        output_prefix = output_dir / self.OUTPUT_STEM
        command = [
            self._binary,
            "-f", "1",
            "-l", "1",
            "-r", str(dpi),
            "-png",
            "-singlefile",
            str(pdf_path),
            str(output_prefix),
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PdfRasterizationError(f"{self._binary} is not installed") from exc
        except subprocess.TimeoutExpired as exc:
            raise PdfRasterizationError(
                f"{self._binary} timed out after {self._timeout_seconds}s"
            ) from exc
        except OSError as exc:
            raise PdfRasterizationError(f"{self._binary} could not be started: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise PdfRasterizationError(
                f"{self._binary} exited with {completed.returncode}: {stderr}"
            )

        output = output_prefix.with_suffix(".png")
        if not output.exists():
            raise PdfRasterizationError(f"{self._binary} produced no output at {output}")
        return output
