"""Deterministic placeholder thumbnails drawn with Pillow.

This is the guaranteed fallback of the pipeline: compose() always returns a
well-formed PNG of exactly the target size.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar

from PIL import Image, ImageDraw, ImageFont

from docthumbs.logging.logger import Log
from docthumbs.thumbnails.models import MimeCategory, RenderAttempt, RenderOutcome, TargetSize
from docthumbs.thumbnails.raster import encode_thumbnail
from docthumbs.thumbnails.renderers.base import BaseRenderer

BORDER_COLOR = "#e5e7eb"


@dataclass(frozen=True)
class _IconStyle:
    background: str
    accent: str
    label: str
    caption: str = ""
    caption_color: str = "#374151"


@lru_cache(maxsize=32)
def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


class PlaceholderRenderer(BaseRenderer):
    """Draws a category icon, or a text excerpt for readable text documents."""

    name = "placeholder"

    # Layout is designed on a 200x150 canvas and scaled to the target size.
    BASE_WIDTH = 200
    BASE_HEIGHT = 150

    EXCERPT_SAMPLE_BYTES = 4096
    EXCERPT_MAX_LINES = 8
    EXCERPT_LINE_CHARS = 25

    TEXT_MIME_TYPES: ClassVar[frozenset[str]] = frozenset(
        {
            "application/json",
            "application/xml",
            "application/yaml",
            "application/x-yaml",
            "application/csv",
            "application/x-sh",
            "application/javascript",
        }
    )

    STYLES: ClassVar[dict[MimeCategory, _IconStyle]] = {
        MimeCategory.IMAGE: _IconStyle(background="#f8fafc", accent="#10b981", label="IMG"),
        MimeCategory.PDF: _IconStyle(
            background="#ffffff", accent="#ef4444", label="PDF", caption="Document",
            caption_color="#6b7280",
        ),
        MimeCategory.VIDEO: _IconStyle(
            background="#000000", accent="#ffffff", label="VIDEO", caption="Media File",
            caption_color="#9ca3af",
        ),
        MimeCategory.OTHER: _IconStyle(
            background="#f0f9ff", accent="#2563eb", label="DOC", caption="Document",
        ),
    }

    def _render(self, attempt: RenderAttempt) -> RenderOutcome:
        return self.compose(attempt.category, attempt.data, attempt.mime_type, attempt.target)

    def compose(
        self,
        category: MimeCategory,
        data: bytes,
        mime_type: str,
        target: TargetSize,
    ) -> RenderOutcome:
        """Draw the placeholder for a category. Cannot fail."""
        excerpt = self.text_excerpt(data, mime_type) if category == MimeCategory.OTHER else None
        image: Image.Image | None = None
        if excerpt is not None:
            try:
                image = self._draw_text_preview(excerpt, target)
            except Exception as exc:
                Log.warning(f"Text preview drawing failed, using document icon: {exc}")
        if image is None:
            image = self._draw_icon(category, target)
        return RenderOutcome.success(encode_thumbnail(image), image.width, image.height)

    def text_excerpt(self, data: bytes, mime_type: str) -> list[str] | None:
        """Return up to EXCERPT_MAX_LINES display lines, or None if not readable text."""
        base_type = mime_type.split(";", 1)[0].strip().lower()
        if not (base_type.startswith("text/") or base_type in self.TEXT_MIME_TYPES):
            return None
        sample = data[: self.EXCERPT_SAMPLE_BYTES]
        if b"\x00" in sample:
            return None
        try:
            text = sample.decode("utf-8")
        except UnicodeDecodeError as exc:
            # The sample may end in the middle of a multi-byte character.
            if exc.start < len(sample) - 3:
                return None
            text = sample[: exc.start].decode("utf-8")

        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            return ["(empty)"]
        return [self._truncate(line) for line in lines[: self.EXCERPT_MAX_LINES]]

    def _truncate(self, line: str) -> str:
        if len(line) <= self.EXCERPT_LINE_CHARS:
            return line
        return line[: self.EXCERPT_LINE_CHARS - 3] + "..."

    def _draw_icon(self, category: MimeCategory, target: TargetSize) -> Image.Image:
        style = self.STYLES[category]
        canvas = Image.new("RGB", (target.width, target.height), style.background)
        draw = ImageDraw.Draw(canvas)
        sx = target.width / self.BASE_WIDTH
        sy = target.height / self.BASE_HEIGHT
        scale = min(sx, sy)

        def pt(x: float, y: float) -> tuple[float, float]:
            return (x * sx, y * sy)

        if category == MimeCategory.VIDEO:
            draw.polygon([pt(80, 45), pt(80, 95), pt(130, 70)], fill=style.accent)
            self._centered(draw, pt(100, 115), style.label, style.accent, round(16 * scale))
        else:
            draw.rectangle([pt(60, 20), pt(140, 115)], fill=style.accent)
            self._centered(draw, pt(100, 55), style.label, "#ffffff", round(16 * scale))
            if category == MimeCategory.PDF:
                for x1, y in ((125, 78), (115, 86), (120, 94), (110, 102)):
                    draw.rectangle([pt(75, y), pt(x1, y + 2)], fill="#ffffff")

        if style.caption:
            self._centered(draw, pt(100, 135), style.caption, style.caption_color, round(11 * scale))
        self._border(draw, target)
        return canvas

    def _draw_text_preview(self, lines: list[str], target: TargetSize) -> Image.Image:
        canvas = Image.new("RGB", (target.width, target.height), "#ffffff")
        draw = ImageDraw.Draw(canvas)
        sx = target.width / self.BASE_WIDTH
        sy = target.height / self.BASE_HEIGHT
        scale = min(sx, sy)

        draw.rectangle([(14 * sx, 14 * sy), (44 * sx, 54 * sy)], fill="#2563eb")
        font = _font(max(6, round(9 * scale)))
        y = 16.0
        for line in lines:
            if y > 118:
                break
            draw.text((54 * sx, y * sy), line, fill="#374151", font=font)
            y += 13
        self._centered(draw, (100 * sx, 138 * sy), "Text Document", "#6b7280", round(10 * scale))
        self._border(draw, target)
        return canvas

    def _centered(
        self,
        draw: ImageDraw.ImageDraw,
        center: tuple[float, float],
        text: str,
        fill: str,
        size: int,
    ) -> None:
        font = _font(max(6, size))
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = center[0] - (right - left) / 2 - left
        y = center[1] - (bottom - top) / 2 - top
        draw.text((x, y), text, fill=fill, font=font)

    def _border(self, draw: ImageDraw.ImageDraw, target: TargetSize) -> None:
        draw.rectangle([(0, 0), (target.width - 1, target.height - 1)], outline=BORDER_COLOR)
