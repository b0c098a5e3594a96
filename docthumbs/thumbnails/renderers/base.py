from abc import ABC, abstractmethod

from docthumbs.logging.logger import Log
from docthumbs.thumbnails.models import RenderAttempt, RenderOutcome


class BaseRenderer(ABC):
    """Contract for all format-specific thumbnail renderers."""

    name: str = "base"

    def render(self, attempt: RenderAttempt) -> RenderOutcome:
        """Render a thumbnail for the attempt.

        Never raises: every failure is reported as RenderOutcome(ok=False).
        """
        try:
            return self._render(attempt)
        except Exception as exc:
            Log.debug(f"{self.name} renderer failed: {exc}", mime_type=attempt.mime_type)
            return RenderOutcome.failure(f"{self.name}: {exc}")

    @abstractmethod
    def _render(self, attempt: RenderAttempt) -> RenderOutcome:
        """Produce thumbnail bytes fitting attempt.target.

        Raises:
            RenderError: if the input cannot be rendered.
        """
