from docthumbs.thumbnails.renderers.base import BaseRenderer
from docthumbs.thumbnails.renderers.image_renderer import ImageRenderer
from docthumbs.thumbnails.renderers.pdf_renderer import PdfRenderer
from docthumbs.thumbnails.renderers.placeholder_renderer import PlaceholderRenderer
from docthumbs.thumbnails.renderers.video_renderer import VideoRenderer

__all__ = [
    "BaseRenderer",
    "ImageRenderer",
    "PdfRenderer",
    "PlaceholderRenderer",
    "VideoRenderer",
]
