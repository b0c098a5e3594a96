import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from docthumbs.pdf.exceptions import PdfRasterizationError
from docthumbs.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docthumbs.pdf.pdftoppm_adapter import PdftoppmAdapter
from docthumbs.pdf.pymupdf_adapter import PyMuPdfAdapter
from docthumbs.thumbnails.exceptions import RenderError


@pytest.fixture()
def pdf_on_disk(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "input.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


class TestPdftoppmAdapter:
    @patch("docthumbs.pdf.pdftoppm_adapter.subprocess.run")
    def test_invokes_first_page_png_render(self, mock_run: MagicMock, tmp_path: Path) -> None:
        def fake_run(command: list[str], **kwargs: object) -> MagicMock:
            Path(command[-1] + ".png").write_bytes(b"png")
            return MagicMock(returncode=0, stderr=b"")

        mock_run.side_effect = fake_run
        adapter = PdftoppmAdapter(binary="pdftoppm", timeout_seconds=7)

        result = adapter.rasterize(tmp_path / "input.pdf", tmp_path, 150)

        assert result == tmp_path / "page.png"
        command = mock_run.call_args[0][0]
        assert command[:8] == ["pdftoppm", "-f", "1", "-l", "1", "-r", "150", "-png"]
        assert "-singlefile" in command
        assert mock_run.call_args.kwargs["timeout"] == 7

    @patch("docthumbs.pdf.pdftoppm_adapter.subprocess.run", side_effect=FileNotFoundError())
    def test_missing_binary(self, _mock_run: MagicMock, tmp_path: Path) -> None:
        with pytest.raises(PdfRasterizationError, match="is not installed"):
            PdftoppmAdapter().rasterize(tmp_path / "input.pdf", tmp_path, 150)

    @patch(
        "docthumbs.pdf.pdftoppm_adapter.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="pdftoppm", timeout=10),
    )
    def test_timeout(self, _mock_run: MagicMock, tmp_path: Path) -> None:
        with pytest.raises(PdfRasterizationError, match="timed out"):
            PdftoppmAdapter().rasterize(tmp_path / "input.pdf", tmp_path, 150)

    @patch("docthumbs.pdf.pdftoppm_adapter.subprocess.run")
    def test_non_zero_exit_includes_stderr(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = MagicMock(returncode=1, stderr=b"Syntax Error: broken xref")

        with pytest.raises(PdfRasterizationError, match="broken xref"):
            PdftoppmAdapter().rasterize(tmp_path / "input.pdf", tmp_path, 150)

    @patch("docthumbs.pdf.pdftoppm_adapter.subprocess.run")
    def test_missing_output(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = MagicMock(returncode=0, stderr=b"")

        with pytest.raises(PdfRasterizationError, match="produced no output"):
            PdftoppmAdapter().rasterize(tmp_path / "input.pdf", tmp_path, 150)

    def test_error_is_a_render_error(self) -> None:
        assert issubclass(PdfRasterizationError, RenderError)


class TestPyMuPdfAdapter:
    def test_rasterizes_first_page(self, pdf_on_disk: Path, tmp_path: Path) -> None:
        output = PyMuPdfAdapter().rasterize(pdf_on_disk, tmp_path, 72)

        assert output == tmp_path / "page.png"
        with Image.open(output) as image:
            assert image.size == (612, 792)

    def test_raises_on_invalid_pdf(self, tmp_path: Path) -> None:
        bad = tmp_path / "input.pdf"
        bad.write_bytes(b"not a pdf")

        with pytest.raises(PdfRasterizationError):
            PyMuPdfAdapter().rasterize(bad, tmp_path, 72)


class TestPdfPlumberAdapter:
    def test_rasterizes_first_page(self, pdf_on_disk: Path, tmp_path: Path) -> None:
        output = PdfPlumberAdapter().rasterize(pdf_on_disk, tmp_path, 72)

        with Image.open(output) as image:
            assert image.format == "PNG"
            assert image.height > image.width

    def test_raises_on_invalid_pdf(self, tmp_path: Path) -> None:
        bad = tmp_path / "input.pdf"
        bad.write_bytes(b"not a pdf")

        with pytest.raises(PdfRasterizationError):
            PdfPlumberAdapter().rasterize(bad, tmp_path, 72)
