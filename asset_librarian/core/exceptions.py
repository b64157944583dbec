"""
Custom exceptions for Asset Librarian

Pattern: Domain-specific exceptions for proper error handling
Services raise these; the library service converts them to result dicts.
"""


class AssetLibraryError(Exception):
    """Base exception for all asset library errors"""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class StorageError(AssetLibraryError):
    """Directory or file create, copy, delete or archive failed"""
    pass


class NotFoundError(AssetLibraryError):
    """Entry with given id is not in the catalog"""
    pass


class DecodeError(AssetLibraryError):
    """Thumbnail source could not be decoded"""
    pass


class ExternalToolError(DecodeError):
    """ffmpeg, ffprobe or Blender failed, is missing, or timed out"""
    pass


class CanceledByUser(AssetLibraryError):
    """File or save dialog was dismissed"""

    def __init__(self, message: str = "Canceled by user", details: str = None):
        super().__init__(message, details)


class ValidationError(AssetLibraryError):
    """Input validation failed"""

    def __init__(self, message: str, field: str = None, value: any = None):
        self.field = field
        self.value = value
        details = f"field={field}, value={value}" if field else None
        super().__init__(message, details)


__all__ = [
    'AssetLibraryError',
    'StorageError',
    'NotFoundError',
    'DecodeError',
    'ExternalToolError',
    'CanceledByUser',
    'ValidationError',
]
