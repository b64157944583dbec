"""
Core functionality for Asset Librarian

Contains:
- Catalog record dataclasses and asset kinds
- Stockshot sequence detection
- Custom exceptions for error handling
"""

from .exceptions import (
    AssetLibraryError,
    StorageError,
    NotFoundError,
    DecodeError,
    ExternalToolError,
    CanceledByUser,
    ValidationError,
)
from .records import (
    KIND_ASSETS,
    KIND_TEXTURES,
    KIND_STOCKSHOTS,
    ASSET_KINDS,
    STOCKSHOT_VIDEO,
    STOCKSHOT_SEQUENCE,
    BaseRecord,
    ModelRecord,
    TextureRecord,
    StockshotRecord,
    record_from_dict,
)
from .sequence_detector import StockshotSelection, detect_stockshot, sort_frames

__all__ = [
    # Exceptions
    'AssetLibraryError',
    'StorageError',
    'NotFoundError',
    'DecodeError',
    'ExternalToolError',
    'CanceledByUser',
    'ValidationError',
    # Records
    'KIND_ASSETS',
    'KIND_TEXTURES',
    'KIND_STOCKSHOTS',
    'ASSET_KINDS',
    'STOCKSHOT_VIDEO',
    'STOCKSHOT_SEQUENCE',
    'BaseRecord',
    'ModelRecord',
    'TextureRecord',
    'StockshotRecord',
    'record_from_dict',
    # Sequences
    'StockshotSelection',
    'detect_stockshot',
    'sort_frames',
]
