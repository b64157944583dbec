"""
Asset Librarian

A local library for 3D assets, texture sets and stockshots.
"""

__version__ = "1.0.0"
__author__ = "Asset Librarian Team"

__all__ = ['__version__', '__author__']
