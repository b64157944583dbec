"""
Shared helpers for Asset Librarian tests.
"""

from typing import List, Optional

from PyQt6.QtGui import QColor, QImage

from asset_librarian.services.dialogs import FilePicker


def make_image(width: int = 64, height: int = 64, color: str = 'red') -> QImage:
    image = QImage(width, height, QImage.Format.Format_RGB32)
    image.fill(QColor(color))
    return image


def write_image(path, width: int = 64, height: int = 64, color: str = 'red', fmt: str = 'PNG'):
    """Write a solid-color image file and return its path"""
    path.parent.mkdir(parents=True, exist_ok=True)
    assert make_image(width, height, color).save(str(path), fmt)
    return path


def write_bytes(path, data: bytes = b'not really an image'):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


class FakePicker(FilePicker):
    """Picker answering from queued responses; None means canceled"""

    def __init__(self, open_responses: Optional[List] = None, save_response: Optional[str] = None):
        self.open_responses = list(open_responses or [])
        self.save_response = save_response
        self.open_calls = []
        self.save_calls = []

    def pick_files(self, title, filters, multi=False):
        self.open_calls.append((title, filters, multi))
        return self.open_responses.pop(0) if self.open_responses else None

    def pick_save_path(self, title, suggested_name, filters):
        self.save_calls.append((title, suggested_name, filters))
        return self.save_response
