"""Custom exception types for pubbib operations."""


class PubbibError(Exception):
    """Base exception for all pubbib operations."""


class FileOperationError(PubbibError):
    """Raised when file I/O operations fail."""


class InvalidDataError(PubbibError):
    """Raised when serialized entry data fails validation."""
