import io
from collections.abc import Callable
from unittest.mock import patch

import pytest
from PIL import Image

from docthumbs.config.settings import Settings
from docthumbs.thumbnails.exceptions import RenderError
from docthumbs.thumbnails.factory import ThumbnailDispatcherFactory
from docthumbs.thumbnails.models import FitMode, TargetSize
from docthumbs.thumbnails.raster import (
    configure_pixel_limit,
    encode_thumbnail,
    fit_image,
    normalize_mode,
    open_image,
)

BOX = TargetSize(200, 150)


class TestOpenImage:
    def test_decodes_jpeg(self, large_jpeg_bytes: bytes) -> None:
        image = open_image(large_jpeg_bytes)
        assert image.size == (3000, 2000)

    def test_rejects_empty_payload(self) -> None:
        with pytest.raises(RenderError, match="empty payload"):
            open_image(b"")

    def test_rejects_garbage(self) -> None:
        with pytest.raises(RenderError, match="Cannot decode image"):
            open_image(b"definitely not an image")

    def test_rejects_images_over_pixel_limit(self, large_jpeg_bytes: bytes) -> None:
        with pytest.raises(RenderError, match="pixel limit"):
            open_image(large_jpeg_bytes, max_pixels=1000)

    def test_limit_can_be_raised_above_pillow_default(self, make_image: Callable[..., bytes]) -> None:
        with patch.object(Image, "MAX_IMAGE_PIXELS", 1000):
            configure_pixel_limit(10_000)
            image = open_image(make_image(60, 60), max_pixels=10_000)

        assert image.size == (60, 60)

    def test_dispatcher_factory_applies_configured_limit(self) -> None:
        settings = Settings(_env_file=None, pdf_rasterizer="pymupdf", max_image_pixels=120_000_000)

        with patch.object(Image, "MAX_IMAGE_PIXELS", 1000):
            ThumbnailDispatcherFactory.create(settings)
            assert Image.MAX_IMAGE_PIXELS == 120_000_000

    def test_applies_exif_orientation(self) -> None:
        image = Image.new("RGB", (40, 20), "red")
        exif = Image.Exif()
        exif[0x0112] = 6  # rotated 90 degrees clockwise
        buf = io.BytesIO()
        image.save(buf, format="JPEG", exif=exif)

        assert open_image(buf.getvalue()).size == (20, 40)


class TestFitContain:
    def test_large_landscape_fits_width(self, large_jpeg_bytes: bytes) -> None:
        thumb = fit_image(open_image(large_jpeg_bytes), BOX)
        assert thumb.size == (200, 133)

    def test_portrait_fits_height(self, make_image: Callable[..., bytes]) -> None:
        thumb = fit_image(open_image(make_image(1000, 2000)), BOX)
        assert thumb.size == (75, 150)

    def test_never_upscales(self, small_png_bytes: bytes) -> None:
        thumb = fit_image(open_image(small_png_bytes), BOX)
        assert thumb.size == (50, 40)

    def test_does_not_modify_source(self, large_jpeg_bytes: bytes) -> None:
        source = open_image(large_jpeg_bytes)
        fit_image(source, BOX)
        assert source.size == (3000, 2000)


class TestFitCover:
    def test_fills_box_and_crops(self, large_jpeg_bytes: bytes) -> None:
        thumb = fit_image(open_image(large_jpeg_bytes), BOX, FitMode.COVER)
        assert thumb.size == (200, 150)

    def test_never_upscales(self, small_png_bytes: bytes) -> None:
        thumb = fit_image(open_image(small_png_bytes), BOX, FitMode.COVER)
        assert thumb.size == (50, 40)

    def test_crops_only_overflowing_side(self, make_image: Callable[..., bytes]) -> None:
        thumb = fit_image(open_image(make_image(400, 100)), BOX, FitMode.COVER)
        assert thumb.size == (200, 100)


class TestModes:
    def test_palette_with_transparency_becomes_rgba(self) -> None:
        image = Image.new("P", (10, 10))
        image.info["transparency"] = 0
        assert normalize_mode(image).mode == "RGBA"

    def test_cmyk_becomes_rgb(self) -> None:
        assert normalize_mode(Image.new("CMYK", (10, 10))).mode == "RGB"

    def test_encode_produces_png(self) -> None:
        data = encode_thumbnail(Image.new("L", (10, 10)))
        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        with Image.open(io.BytesIO(data)) as decoded:
            assert decoded.mode == "RGB"
