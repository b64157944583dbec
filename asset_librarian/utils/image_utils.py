"""
Image utilities for loading and scaling thumbnails

Pattern: QImage helpers (no QGuiApplication needed, safe off the UI thread)
"""

from pathlib import Path
from typing import Optional, Tuple
from PyQt6.QtGui import QImage
from PyQt6.QtCore import Qt, QByteArray


def load_image(image_path: Path) -> Optional[QImage]:
    """
    Load image file as QImage

    Args:
        image_path: Path to image file

    Returns:
        QImage or None if load failed
    """
    image_path = Path(image_path)
    if not image_path.exists():
        return None

    image = QImage(str(image_path))
    if image.isNull():
        return None

    return image


def load_image_from_bytes(data: bytes) -> Optional[QImage]:
    """
    Decode encoded image bytes (PNG, JPEG, ...) into a QImage

    Returns:
        QImage or None if the data could not be decoded
    """
    if not data:
        return None

    image = QImage.fromData(QByteArray(data))
    if image.isNull():
        return None

    return image


def get_image_size(image_path: Path) -> Optional[Tuple[int, int]]:
    """
    Get image dimensions

    Args:
        image_path: Path to image file

    Returns:
        Tuple of (width, height) or None
    """
    image = load_image(image_path)
    if image is None:
        return None
    return (image.width(), image.height())


def scale_image(
    image: QImage,
    max_size: int,
    smooth: bool = True
) -> QImage:
    """
    Scale QImage to fit within max_size x max_size, keeping aspect ratio

    Images already inside the box are returned unchanged.

    Args:
        image: Source QImage
        max_size: Maximum dimension
        smooth: Use smooth scaling

    Returns:
        Scaled QImage
    """
    if image.width() <= max_size and image.height() <= max_size:
        return image

    transform_mode = Qt.TransformationMode.SmoothTransformation if smooth else Qt.TransformationMode.FastTransformation

    return image.scaled(
        max_size,
        max_size,
        Qt.AspectRatioMode.KeepAspectRatio,
        transform_mode
    )


def save_png(image: QImage, output_path: Path) -> bool:
    """
    Write a QImage as PNG

    Returns:
        True if the file was written
    """
    return image.save(str(output_path), "PNG")


__all__ = [
    'load_image',
    'load_image_from_bytes',
    'get_image_size',
    'scale_image',
    'save_png',
]
