class DocumentError(Exception):
    """Base exception for all document-related errors."""


class DocumentValidationError(DocumentError):
    """Raised when an upload, update, or thumbnail payload is malformed."""


class DocumentNotFoundError(DocumentError):
    """Raised when a document cannot be found (or is not owned by the caller)."""


class StaleThumbnailError(DocumentError):
    """Raised when a guarded thumbnail write lost to a newer thumbnail."""
