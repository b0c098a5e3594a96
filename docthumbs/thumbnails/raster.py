"""Pillow helpers shared by every renderer: decode, fit to bounds, encode."""

import io

from PIL import Image, ImageOps

from docthumbs.thumbnails.exceptions import RenderError
from docthumbs.thumbnails.models import THUMBNAIL_FORMAT, FitMode, TargetSize

DEFAULT_MAX_PIXELS = 89_478_485


def configure_pixel_limit(max_pixels: int) -> None:
    """Set Pillow's process-wide decompression bomb limit to max_pixels.

    Pillow refuses images over twice this limit while opening them, before
    open_image gets to apply its own per-call check.
    """
    Image.MAX_IMAGE_PIXELS = max_pixels


def open_image(data: bytes, max_pixels: int = DEFAULT_MAX_PIXELS) -> Image.Image:
    """Decode image bytes into a fully loaded, orientation-corrected image.

    Only the first frame of animated formats is kept.

    Raises:
        RenderError: if the bytes are not a decodable image or exceed max_pixels.
    """
    if not data:
        raise RenderError("Cannot decode image: empty payload")
    try:
        image = Image.open(io.BytesIO(data))
        width, height = image.size
        if width * height > max_pixels:
            raise RenderError(f"Image of {width}x{height} exceeds the {max_pixels} pixel limit")
        image.load()
        transposed = ImageOps.exif_transpose(image)
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"Cannot decode image: {exc}") from exc
    return transposed if transposed is not None else image


def normalize_mode(image: Image.Image) -> Image.Image:
    """Convert to RGB, or RGBA when the source carries transparency."""
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    target_mode = "RGBA" if has_alpha else "RGB"
    if image.mode == target_mode:
        return image
    return image.convert(target_mode)


def fit_image(
    image: Image.Image,
    target: TargetSize,
    fit: FitMode = FitMode.CONTAIN,
) -> Image.Image:
    """Resize into target bounds, preserving aspect ratio and never upscaling.

    CONTAIN keeps the whole picture. COVER fills as much of the box as the
    source allows and crops the overflow around the center.
    """
    image = normalize_mode(image)
    if fit == FitMode.COVER:
        return _fit_cover(image, target)
    resized = image.copy()
    resized.thumbnail((target.width, target.height), Image.Resampling.LANCZOS)
    return resized


def _fit_cover(image: Image.Image, target: TargetSize) -> Image.Image:
    src_width, src_height = image.size
    scale = min(1.0, max(target.width / src_width, target.height / src_height))
    new_width = max(1, round(src_width * scale))
    new_height = max(1, round(src_height * scale))
    resized = image.resize((new_width, new_height), Image.Resampling.LANCZOS)

    crop_width = min(target.width, new_width)
    crop_height = min(target.height, new_height)
    left = (new_width - crop_width) // 2
    top = (new_height - crop_height) // 2
    return resized.crop((left, top, left + crop_width, top + crop_height))


def encode_thumbnail(image: Image.Image) -> bytes:
    """Encode to the single thumbnail format used for all stored thumbnails."""
    buf = io.BytesIO()
    normalize_mode(image).save(buf, format=THUMBNAIL_FORMAT)
    return buf.getvalue()
