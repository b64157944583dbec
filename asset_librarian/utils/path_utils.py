"""
Path utilities for Asset Librarian

Consistent path handling across OS.
"""

import os
import re
from pathlib import Path
from typing import Union


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Normalize a path for consistent handling across OS.

    - Resolves to absolute path
    - Expands user (~) and env vars

    Args:
        path: Path string or Path object

    Returns:
        Normalized Path object
    """
    if isinstance(path, str):
        path = os.path.expanduser(path)
        path = os.path.expandvars(path)
    return Path(path).resolve()


def ensure_parent_exists(path: Union[str, Path]) -> Path:
    """
    Ensure parent directory exists, create if needed.

    Args:
        path: File path whose parent should exist

    Returns:
        The original path as Path object
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    """Make a display name usable as a suggested file name"""
    # Replace invalid characters with underscore
    safe = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '_', name)
    # Remove leading/trailing spaces and dots
    safe = safe.strip(' .')
    # Collapse multiple underscores
    safe = re.sub(r'_+', '_', safe)
    return safe or 'unnamed'


__all__ = [
    'normalize_path',
    'ensure_parent_exists',
    'sanitize_filename',
]
