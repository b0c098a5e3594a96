class RenderError(Exception):
    """Raised when a format renderer cannot produce a thumbnail."""


class TempScopeError(RenderError):
    """Raised when a temporary working directory cannot be created."""
