"""
ProgressSink - one-way progress channel for long-running imports

Pattern: Qt signal observer
The ingestion pipeline pushes events; the UI layer connects and renders them.
An event is a dict {current, total, status}, or None once the import has
finished (the UI hides its progress indicator on None).
"""

from typing import Optional, Dict, Any
from PyQt6.QtCore import QObject, pyqtSignal


class ProgressSink(QObject):
    """
    Progress channel for imports

    Usage:
        sink = ProgressSink()
        sink.progress_event.connect(on_progress)   # dict or None
        sink.progress_updated.connect(bar.update)  # current, total, status
        sink.progress_finished.connect(bar.hide)
    """

    progress_event = pyqtSignal(object)  # {current, total, status} or None
    progress_updated = pyqtSignal(int, int, str)  # current, total, status
    progress_finished = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._last_event: Optional[Dict[str, Any]] = None

    @property
    def last_event(self) -> Optional[Dict[str, Any]]:
        """Most recent event pushed (None after finish)"""
        return self._last_event

    def emit_progress(self, current: int, total: int, status: str):
        """Push a progress event"""
        event = {'current': current, 'total': total, 'status': status}
        self._last_event = event
        self.progress_event.emit(event)
        self.progress_updated.emit(current, total, status)

    def emit_finished(self):
        """Push the terminating None event"""
        self._last_event = None
        self.progress_event.emit(None)
        self.progress_finished.emit()


__all__ = ['ProgressSink']
