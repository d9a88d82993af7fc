"""Exceptions raised by acrofill."""


class AcroFillError(Exception):
    """Base exception for acrofill errors."""
    pass


class DocumentUnreadableError(AcroFillError):
    """Raised when a source or template PDF cannot be parsed."""


class SerializationError(AcroFillError):
    """Raised when a completed document cannot be written out."""


class DocumentFlattenedError(AcroFillError):
    """Raised when a field operation targets a flattened document."""


class CatalogFormatError(AcroFillError):
    """Raised when a catalog file does not have the expected structure."""


__all__ = [
    "AcroFillError",
    "CatalogFormatError",
    "DocumentFlattenedError",
    "DocumentUnreadableError",
    "SerializationError",
]
