"""
Input validation utilities for Asset Librarian

Validation for user-supplied names and ids before catalog updates.
"""

import re
from pathlib import Path
from typing import List, Sequence, Union

from ..config import Config
from ..core.exceptions import ValidationError
from ..core.records import ASSET_KINDS

MAX_NAME_LENGTH = 255

_UUID_PATTERN = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'
)


def validate_asset_name(name: str) -> str:
    """
    Validate a display name.

    Names are never used for storage paths, so only surrounding
    whitespace is stripped.

    Args:
        name: Asset name to validate

    Returns:
        Stripped name

    Raises:
        ValidationError: If name is invalid
    """
    if name is None:
        raise ValidationError("Asset name cannot be empty", field='name')

    name = str(name).strip()

    if not name:
        raise ValidationError("Asset name cannot be blank", field='name')

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Asset name exceeds maximum length of {MAX_NAME_LENGTH}",
            field='name',
            value=name[:50] + '...'
        )

    return name


def validate_kind(kind: str) -> str:
    """
    Validate an asset kind.

    Raises:
        ValidationError: If kind is not one of ASSET_KINDS
    """
    if kind not in ASSET_KINDS:
        raise ValidationError(
            f"Invalid asset kind '{kind}'. Must be one of: {', '.join(ASSET_KINDS)}",
            field='kind',
            value=kind
        )
    return kind


def validate_source_names(paths: Sequence[Union[str, Path]]) -> List[str]:
    """
    Check that source files can be stored side by side in one entry.

    Files are stored under their base name, so two sources sharing a
    name would overwrite each other, and a source named like the
    generated thumbnail would be replaced by it.

    Args:
        paths: Source files to import

    Returns:
        Base names in input order

    Raises:
        ValidationError: On a duplicate or reserved name
    """
    names = [Path(p).name for p in paths]
    seen = set()
    for name in names:
        if name == Config.THUMBNAIL_FILENAME:
            raise ValidationError(
                f"'{name}' is reserved for the generated thumbnail; rename the file before importing",
                field='paths',
                value=name
            )
        if name in seen:
            raise ValidationError(
                f"Several selected files are named '{name}'",
                field='paths',
                value=name
            )
        seen.add(name)
    return names


def validate_uuid_format(uuid_str: str) -> bool:
    """
    Validate UUID format (8-4-4-4-12 hex digits).

    Args:
        uuid_str: String to validate as UUID

    Returns:
        True if valid UUID format, False otherwise
    """
    if not uuid_str or not isinstance(uuid_str, str):
        return False
    return bool(_UUID_PATTERN.match(uuid_str))


__all__ = [
    'validate_asset_name',
    'validate_kind',
    'validate_uuid_format',
    'validate_source_names',
    'MAX_NAME_LENGTH',
]
