"""
Event system for Asset Librarian

Progress channel between the ingestion pipeline and the UI.
"""

from .progress import ProgressSink

__all__ = ['ProgressSink']
