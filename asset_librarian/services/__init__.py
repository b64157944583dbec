"""
Services for Asset Librarian

Storage, catalog, media decoding and business operation services.
"""

from .content_store import ContentStore
from .catalog import Catalog
from .media_tools import MediaTools
from .preview_renderer import PreviewRenderer
from .thumbnail_generator import ThumbnailGenerator
from .ingestion import IngestionPipeline
from .export_service import ExportService
from .dialogs import FilePicker, QtFilePicker
from .library_service import LibraryService

__all__ = [
    # Storage
    'ContentStore',
    'Catalog',
    # Media
    'MediaTools',
    'PreviewRenderer',
    'ThumbnailGenerator',
    # Operations
    'IngestionPipeline',
    'ExportService',
    'FilePicker',
    'QtFilePicker',
    'LibraryService',
]
