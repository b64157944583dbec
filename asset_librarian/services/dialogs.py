"""
File dialogs used by the library service

FilePicker is the interface the service depends on; QtFilePicker is the
QFileDialog implementation used by the desktop app. A None return means
the user dismissed the dialog.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from PyQt6.QtWidgets import QFileDialog

# (label, extensions without dot)
FileFilter = Tuple[str, Sequence[str]]


def build_filter_string(filters: Sequence[FileFilter]) -> str:
    """
    Qt name filter string.

    [('FBX', ['fbx'])] -> 'FBX (*.fbx)'
    """
    parts = []
    for label, extensions in filters:
        patterns = ' '.join(f"*.{ext}" for ext in extensions)
        parts.append(f"{label} ({patterns})")
    return ';;'.join(parts)


class FilePicker(ABC):
    """Open/save location picker"""

    @abstractmethod
    def pick_files(
        self,
        title: str,
        filters: Sequence[FileFilter],
        multi: bool = False
    ) -> Optional[List[str]]:
        """Absolute paths of the chosen files, or None if canceled"""

    @abstractmethod
    def pick_save_path(
        self,
        title: str,
        suggested_name: str,
        filters: Sequence[FileFilter]
    ) -> Optional[str]:
        """Chosen destination path, or None if canceled"""


class QtFilePicker(FilePicker):
    """QFileDialog-backed picker (needs a running QApplication)"""

    def __init__(self, parent=None):
        self._parent = parent

    def pick_files(self, title, filters, multi=False):
        filter_string = build_filter_string(filters)
        if multi:
            paths, _ = QFileDialog.getOpenFileNames(self._parent, title, "", filter_string)
            return paths or None

        path, _ = QFileDialog.getOpenFileName(self._parent, title, "", filter_string)
        return [path] if path else None

    def pick_save_path(self, title, suggested_name, filters):
        path, _ = QFileDialog.getSaveFileName(
            self._parent, title, suggested_name, build_filter_string(filters)
        )
        return path or None


__all__ = ['FilePicker', 'QtFilePicker', 'build_filter_string', 'FileFilter']
