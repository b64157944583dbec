"""
Configuration for Asset Librarian

Centralized app configuration with sensible defaults.
Pattern: Single source of truth for all settings.
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional, Union, Dict, Any


class Config:
    """
    Application configuration

    Features:
    - App metadata
    - Path configuration (storage root with hidden .meta folder)
    - External tool settings (ffmpeg, ffprobe, Blender)
    - Thumbnail and ingestion defaults
    """

    # ==================== APP METADATA ====================
    APP_NAME = "Asset Librarian"

    # Version: read from version.txt (injected by build system) or use fallback
    _version_file = Path(__file__).parent / "version.txt"
    if _version_file.exists():
        APP_VERSION = _version_file.read_text().strip().lstrip('v')
    else:
        APP_VERSION = "1.0.0"  # Dev/fallback version

    APP_AUTHOR = "Asset Librarian"

    # ==================== PATHS ====================
    APP_ROOT: Path = Path(__file__).parent
    LIBRARY_CONFIG_FILE = "library_path.txt"
    TOOL_SETTINGS_FILE = "tool_settings.json"
    DEFAULT_STORAGE_FOLDER = "storage"

    META_FOLDER = ".meta"           # Catalog database and logs (hidden)
    LOGS_FOLDER = "logs"
    CATALOG_DB_NAME = "catalog.db"

    # Asset kind -> storage root folder (also the catalog key)
    KIND_FOLDERS = {
        'assets': 'assets',
        'textures': 'textures',
        'stockshots': 'stockshots',
    }

    # Sub-folder created inside every 3D asset entry
    MODEL_TEXTURES_FOLDER = "textures"

    # ==================== THUMBNAILS ====================
    THUMBNAIL_FILENAME = "thumbnail.png"
    THUMBNAIL_SIZE = 512
    THUMBNAIL_FRAME_POSITION = 0.1  # 10% into a video or sequence

    # ==================== INGESTION ====================
    COPY_BATCH_SIZE = 10

    # ==================== FILE TYPES ====================
    MODEL_EXTENSIONS = ('.fbx',)
    TEXTURE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.tga', '.tiff', '.tif', '.exr', '.hdr', '.bmp')
    VIDEO_EXTENSIONS = ('.mp4', '.mov', '.avi', '.mkv', '.webm', '.m4v', '.mxf')
    SEQUENCE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.tga', '.tiff', '.tif', '.exr', '.hdr', '.dpx', '.bmp')

    # Formats QImage handles in-process; everything else (EXR, HDR, TGA, DPX)
    # goes through ffmpeg
    COMMON_IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tiff', '.tif', '.webp')
    # Formats the UI can show directly as a fallback preview
    DISPLAYABLE_EXTENSIONS = ('.png', '.jpg', '.jpeg')

    IMAGE_MIME_TYPES = {
        '.png': 'image/png',
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
        '.gif': 'image/gif',
        '.bmp': 'image/bmp',
        '.webp': 'image/webp',
    }

    # ==================== EXTERNAL TOOLS ====================
    DEFAULT_TOOL_SETTINGS: Dict[str, Any] = {
        'ffmpeg_path': 'ffmpeg',
        'ffprobe_path': 'ffprobe',
        'blender_path': 'blender',
        'ffmpeg_timeout': 60,
        'blender_timeout': 180,
    }

    # ==================== EXPORT ====================
    EXPORT_COMPRESSION_LEVEL = 9

    @classmethod
    def get_kind_folder(cls, kind: str) -> str:
        """
        Get storage folder name for an asset kind.

        Args:
            kind: Asset kind ('assets', 'textures', 'stockshots')

        Returns:
            Folder name string

        Raises:
            ValueError: If kind is unknown
        """
        try:
            return cls.KIND_FOLDERS[kind]
        except KeyError:
            raise ValueError(f"Unknown asset kind: {kind}")

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """Get user config directory in OS AppData.

        Portable mode: if portable.txt exists next to the app root,
        falls back to a local data/ folder for USB-stick deployments.
        """
        portable_marker = cls.APP_ROOT.parent / 'portable.txt'
        if portable_marker.exists():
            user_dir = cls.APP_ROOT.parent / 'data'
            user_dir.mkdir(parents=True, exist_ok=True)
            return user_dir

        # OS-specific AppData
        if sys.platform == 'win32':
            base = Path(os.environ.get('LOCALAPPDATA', Path.home() / 'AppData' / 'Local'))
        elif sys.platform == 'darwin':
            base = Path.home() / 'Library' / 'Application Support'
        else:
            base = Path(os.environ.get('XDG_DATA_HOME', Path.home() / '.local' / 'share'))

        user_dir = base / 'AssetLibrarian'
        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_library_config_path(cls) -> Path:
        """Get library path configuration file"""
        return cls.get_user_data_dir() / cls.LIBRARY_CONFIG_FILE

    @classmethod
    def load_library_path(cls) -> Path:
        """
        Load saved storage path from config file

        Returns:
            Path: Configured storage path, or the default storage folder
            inside the user data directory
        """
        config_file = cls.get_library_config_path()

        if config_file.exists():
            try:
                path_str = config_file.read_text(encoding='utf-8').strip()
                if path_str:
                    return Path(path_str)
            except OSError:
                pass

        return cls.get_user_data_dir() / cls.DEFAULT_STORAGE_FOLDER

    @classmethod
    def save_library_path(cls, path: Union[str, Path]) -> bool:
        """
        Save storage path to config file

        Args:
            path: Path to asset storage folder

        Returns:
            bool: True if saved successfully, False otherwise
        """
        try:
            config_file = cls.get_library_config_path()
            config_file.parent.mkdir(parents=True, exist_ok=True)
            config_file.write_text(str(path), encoding='utf-8')
            return True
        except OSError:
            return False

    @classmethod
    def get_tool_settings_file(cls) -> Path:
        """Get path to external tool settings file."""
        return cls.get_user_data_dir() / cls.TOOL_SETTINGS_FILE

    @classmethod
    def load_tool_settings(cls) -> Dict[str, Any]:
        """Load external tool settings, filled in with defaults."""
        settings = dict(cls.DEFAULT_TOOL_SETTINGS)
        settings_file = cls.get_tool_settings_file()
        if settings_file.exists():
            try:
                settings.update(json.loads(settings_file.read_text(encoding='utf-8')))
            except (OSError, ValueError):
                pass
        return settings

    @classmethod
    def save_tool_settings(cls, settings: Dict[str, Any]) -> bool:
        """Save external tool settings to config file."""
        try:
            settings_file = cls.get_tool_settings_file()
            settings_file.parent.mkdir(parents=True, exist_ok=True)
            settings_file.write_text(
                json.dumps(settings, indent=2),
                encoding='utf-8'
            )
            return True
        except OSError:
            return False

    @classmethod
    def get_meta_folder(cls, storage_path: Optional[Path] = None) -> Path:
        """Get the .meta folder path (inside storage root)"""
        storage_path = storage_path or cls.load_library_path()
        meta_folder = storage_path / cls.META_FOLDER
        meta_folder.mkdir(parents=True, exist_ok=True)
        return meta_folder

    @classmethod
    def get_catalog_path(cls, storage_path: Optional[Path] = None) -> Path:
        """Get full path to the catalog database (in .meta folder)"""
        return cls.get_meta_folder(storage_path) / cls.CATALOG_DB_NAME

    @classmethod
    def get_logs_directory(cls, storage_path: Optional[Path] = None) -> Path:
        """Get logs directory path (inside .meta folder)"""
        logs_dir = cls.get_meta_folder(storage_path) / cls.LOGS_FOLDER
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logs_dir


__all__ = ['Config']
