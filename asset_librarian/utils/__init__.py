"""
Utility functions for Asset Librarian

Helper utilities for image processing, logging, decorators, path handling.
"""

from .image_utils import (
    load_image,
    load_image_from_bytes,
    get_image_size,
    scale_image,
    save_png,
)
from .logging_config import LoggingConfig
from .decorators import timed, safe_operation
from .path_utils import (
    normalize_path,
    ensure_parent_exists,
    sanitize_filename,
)
from .validators import (
    validate_asset_name,
    validate_kind,
    validate_uuid_format,
)

__all__ = [
    # Image utilities
    'load_image',
    'load_image_from_bytes',
    'get_image_size',
    'scale_image',
    'save_png',
    # Logging
    'LoggingConfig',
    # Decorators
    'timed',
    'safe_operation',
    # Path utilities
    'normalize_path',
    'ensure_parent_exists',
    'sanitize_filename',
    # Validators
    'validate_asset_name',
    'validate_kind',
    'validate_uuid_format',
]
