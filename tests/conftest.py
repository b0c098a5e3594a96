import io
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docthumbs.config.settings import Settings


def make_image_bytes(
    width: int, height: int, fmt: str = "PNG", mode: str = "RGB", color: object = "#3366cc"
) -> bytes:
    """Encode a solid-color image of the given size and format."""
    buf = io.BytesIO()
    Image.new(mode, (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_image() -> Callable[..., bytes]:
    """Factory fixture wrapping make_image_bytes for tests that need custom sizes."""
    return make_image_bytes


@pytest.fixture()
def large_jpeg_bytes() -> bytes:
    """A 3000x2000 JPEG photo stand-in."""
    return make_image_bytes(3000, 2000, fmt="JPEG")


@pytest.fixture()
def small_png_bytes() -> bytes:
    """A 50x40 PNG, smaller than the default thumbnail box."""
    return make_image_bytes(50, 40)


@pytest.fixture()
def temp_root(tmp_path: Path) -> Path:
    root = tmp_path / "scratch"
    root.mkdir()
    return root


@pytest.fixture()
def files_root(tmp_path: Path) -> Path:
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture()
def memory_settings(files_root: Path, temp_root: Path) -> Settings:
    """Settings for a fully in-process application (no PostgreSQL)."""
    return Settings(
        _env_file=None,
        metadata_store="memory",
        files_root=files_root,
        temp_root=temp_root,
        pdf_rasterizer="pymupdf",
        thumbnail_scheduler="thread",
        thumbnail_worker_threads=1,
    )
