"""
LibraryService - operation boundary between the UI and the library core

Pattern: Service layer for business logic
Every operation returns a result dict instead of raising:
    {'success': True, ...}
    {'success': False, 'error': message}
    {'success': False, 'canceled': True}     # dialog dismissed
"""

import base64
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config
from ..core.exceptions import AssetLibraryError, CanceledByUser, NotFoundError
from ..core.records import (
    KIND_ASSETS,
    KIND_TEXTURES,
    KIND_STOCKSHOTS,
    STOCKSHOT_VIDEO,
    BaseRecord,
)
from ..core.sequence_detector import detect_stockshot, representative_index
from ..utils.path_utils import sanitize_filename
from ..utils.validators import validate_asset_name, validate_kind, validate_uuid_format
from .catalog import Catalog
from .content_store import ContentStore
from .dialogs import FilePicker
from .export_service import ExportService
from .ingestion import IngestionPipeline
from .thumbnail_generator import ThumbnailGenerator

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _extensions(values: Sequence[str]) -> List[str]:
    """'.fbx' -> 'fbx' for dialog filters"""
    return [value.lstrip('.') for value in values]


class LibraryService(QObject):
    """
    Centralized service for library operations

    Features:
    - List entries per kind (reconciled with storage)
    - Import (dialogs) and save (pipeline) for each kind
    - Rename, delete and zip export
    - Thumbnail lookup with fallbacks, thumbnail regeneration
    - Emits signals for UI updates

    Usage:
        service = LibraryService(store, catalog, pipeline, thumbnails, QtFilePicker())
        service.asset_added.connect(on_added)
        result = service.import_stockshot()
        if result['success']:
            service.save_stockshot(result['paths'], result['type'], result['default_name'])
    """

    # Signals for UI updates
    asset_added = pyqtSignal(str, str)  # kind, id
    asset_updated = pyqtSignal(str, str)  # kind, id
    asset_removed = pyqtSignal(str, str)  # kind, id
    operation_error = pyqtSignal(str, str)  # operation, error_message

    def __init__(
        self,
        content_store: ContentStore,
        catalog: Catalog,
        pipeline: IngestionPipeline,
        thumbnails: ThumbnailGenerator,
        file_picker: Optional[FilePicker] = None,
        parent=None
    ):
        super().__init__(parent)
        self._store = content_store
        self._catalog = catalog
        self._pipeline = pipeline
        self._thumbnails = thumbnails
        self._file_picker = file_picker

    def close(self):
        """Release the catalog connection of the calling thread"""
        self._catalog.close()

    # ==================== HELPERS ====================

    def _failure(self, operation: str, error: Exception) -> Dict[str, Any]:
        if isinstance(error, CanceledByUser):
            logger.debug(f"{operation} canceled by user")
            return {'success': False, 'canceled': True}
        logger.warning(f"{operation} failed: {error}")
        self.operation_error.emit(operation, str(error))
        return {'success': False, 'error': str(error)}

    def _pick_files(self, title: str, filters, multi: bool = False) -> List[str]:
        if self._file_picker is None:
            raise AssetLibraryError("No file picker available")
        paths = self._file_picker.pick_files(title, filters, multi)
        if not paths:
            raise CanceledByUser()
        return list(paths)

    def _pick_save_path(self, title: str, suggested_name: str, filters) -> str:
        if self._file_picker is None:
            raise AssetLibraryError("No file picker available")
        path = self._file_picker.pick_save_path(title, suggested_name, filters)
        if not path:
            raise CanceledByUser()
        return path

    @staticmethod
    def _check_id(kind: str, entry_id: str):
        # Only UUIDs name entry directories
        if not validate_uuid_format(entry_id):
            raise NotFoundError(f"{kind} entry not found", entry_id)

    def _with_thumbnail(self, kind: str, record: BaseRecord) -> BaseRecord:
        thumbnail = self._store.thumbnail_path(kind, record.id)
        record.thumbnail_path = str(thumbnail) if thumbnail.exists() else None
        return record

    def _handle_save_result(self, kind: str, key: str, result: Dict[str, Any]) -> Dict[str, Any]:
        if result['success']:
            self.asset_added.emit(kind, result[key].id)
            self._with_thumbnail(kind, result[key])
        else:
            self.operation_error.emit(f"save {kind}", result['error'])
        return result

    # ==================== LISTING ====================

    def list_entries(self, kind: str) -> List[BaseRecord]:
        """
        Records of one kind with thumbnail paths resolved.

        Returns an empty list (and logs) if the catalog can't be read.
        """
        try:
            validate_kind(kind)
            records = self._catalog.load(kind)
        except AssetLibraryError as e:
            self._failure(f"list {kind}", e)
            return []
        return [self._with_thumbnail(kind, record) for record in records]

    def get_assets(self) -> List[BaseRecord]:
        return self.list_entries(KIND_ASSETS)

    def get_textures(self) -> List[BaseRecord]:
        return self.list_entries(KIND_TEXTURES)

    def get_stockshots(self) -> List[BaseRecord]:
        return self.list_entries(KIND_STOCKSHOTS)

    # ==================== IMPORT (DIALOGS) ====================

    def import_asset(self) -> Dict[str, Any]:
        """
        Ask for one FBX and optional textures.

        Returns:
            {'success': True, 'fbx_path', 'texture_paths', 'default_name'}
        """
        try:
            fbx_path = self._pick_files(
                "Select the FBX file",
                [("FBX", _extensions(Config.MODEL_EXTENSIONS))]
            )[0]
            try:
                texture_paths = self._pick_files(
                    "Select textures (optional)",
                    [("Images", _extensions(Config.TEXTURE_EXTENSIONS))],
                    multi=True
                )
            except CanceledByUser:
                texture_paths = []
        except AssetLibraryError as e:
            return self._failure("import asset", e)

        return {
            'success': True,
            'fbx_path': fbx_path,
            'texture_paths': texture_paths,
            'default_name': Path(fbx_path).stem,
        }

    def import_textures(self) -> Dict[str, Any]:
        """
        Ask for a texture set.

        Returns:
            {'success': True, 'paths', 'default_name'}
        """
        try:
            paths = self._pick_files(
                "Select textures",
                [("Images", _extensions(Config.TEXTURE_EXTENSIONS))],
                multi=True
            )
        except AssetLibraryError as e:
            return self._failure("import textures", e)

        return {'success': True, 'paths': paths, 'default_name': Path(paths[0]).stem}

    def import_stockshot(self) -> Dict[str, Any]:
        """
        Ask for a video, one frame of a sequence, or several frames.

        Returns:
            {'success': True, 'type', 'paths', 'default_name'}
        """
        try:
            paths = self._pick_files(
                "Select a video or image sequence",
                [
                    ("Videos and images", _extensions(Config.VIDEO_EXTENSIONS + Config.SEQUENCE_EXTENSIONS)),
                    ("Videos", _extensions(Config.VIDEO_EXTENSIONS)),
                    ("Images", _extensions(Config.SEQUENCE_EXTENSIONS)),
                ],
                multi=True
            )
            selection = detect_stockshot(paths)
        except AssetLibraryError as e:
            return self._failure("import stockshot", e)

        return {
            'success': True,
            'type': selection.type,
            'paths': selection.files,
            'default_name': selection.default_name,
        }

    # ==================== SAVE (PIPELINE) ====================

    def save_asset(self, fbx_path: PathLike, texture_paths: Sequence[PathLike], name: str) -> Dict[str, Any]:
        """Store a 3D asset; see IngestionPipeline.ingest_asset"""
        result = self._pipeline.ingest_asset(fbx_path, list(texture_paths), name)
        return self._handle_save_result(KIND_ASSETS, 'asset', result)

    def save_textures(self, paths: Sequence[PathLike], name: str) -> Dict[str, Any]:
        """Store a texture set; see IngestionPipeline.ingest_textures"""
        result = self._pipeline.ingest_textures(list(paths), name)
        return self._handle_save_result(KIND_TEXTURES, 'texture', result)

    def save_stockshot(self, paths: Sequence[PathLike], stockshot_type: str, name: str) -> Dict[str, Any]:
        """Store a stockshot; see IngestionPipeline.ingest_stockshot"""
        result = self._pipeline.ingest_stockshot(list(paths), stockshot_type, name)
        return self._handle_save_result(KIND_STOCKSHOTS, 'stockshot', result)

    # ==================== RENAME / DELETE ====================

    def rename(self, kind: str, entry_id: str, new_name: str) -> Dict[str, Any]:
        """
        Change an entry's display name.

        Returns:
            {'success': True, 'record': record} or a failure dict
        """
        try:
            validate_kind(kind)
            new_name = validate_asset_name(new_name)
            record = self._catalog.rename(kind, entry_id, new_name)
        except AssetLibraryError as e:
            return self._failure(f"rename {kind}", e)

        logger.info(f"Renamed {kind} entry {entry_id} to '{new_name}'")
        self.asset_updated.emit(kind, entry_id)
        return {'success': True, 'record': self._with_thumbnail(kind, record)}

    def delete(self, kind: str, entry_id: str) -> Dict[str, Any]:
        """
        Delete an entry: directory first, then the catalog record.

        If the directory can't be removed the catalog is left unchanged.
        """
        try:
            validate_kind(kind)
            self._check_id(kind, entry_id)
            self._catalog.get(kind, entry_id)
            self._store.remove_entry(kind, entry_id)
            self._catalog.remove(kind, entry_id)
        except AssetLibraryError as e:
            return self._failure(f"delete {kind}", e)

        logger.info(f"Deleted {kind} entry {entry_id}")
        self.asset_removed.emit(kind, entry_id)
        return {'success': True}

    # ==================== EXPORT ====================

    def download(self, kind: str, entry_id: str, output_path: Optional[PathLike] = None) -> Dict[str, Any]:
        """
        Export an entry as a zip archive.

        Args:
            kind: Asset kind
            entry_id: Entry id
            output_path: Destination; asks with the save dialog when omitted

        Returns:
            {'success': True, 'path': str, 'file_count': int} or a failure dict
        """
        try:
            validate_kind(kind)
            record = self._catalog.get(kind, entry_id)
            if output_path is None:
                output_path = self._pick_save_path(
                    "Save asset",
                    f"{sanitize_filename(record.name)}.zip",
                    [("ZIP archive", ["zip"])]
                )
            output_path = Path(output_path)
            if output_path.suffix.lower() != '.zip':
                output_path = output_path.with_name(output_path.name + '.zip')

            file_count = ExportService.export_entry(
                self._store.entry_path(kind, entry_id), output_path
            )
        except AssetLibraryError as e:
            return self._failure(f"export {kind}", e)

        return {'success': True, 'path': str(output_path), 'file_count': file_count}

    # ==================== THUMBNAILS ====================

    def regenerate_thumbnail(self, kind: str, entry_id: str) -> Dict[str, Any]:
        """
        (Re)build an entry's thumbnail with the strategy for its kind.

        Returns:
            {'success': True, 'thumbnail_path': str} or a failure dict
        """
        try:
            validate_kind(kind)
            record = self._catalog.get(kind, entry_id)
            directory = self._store.entry_path(kind, entry_id)
        except AssetLibraryError as e:
            return self._failure(f"thumbnail {kind}", e)

        if kind == KIND_ASSETS:
            generated = self._thumbnails.generate_for_model(directory / record.fbx_file_name, directory)
        elif kind == KIND_TEXTURES:
            generated = bool(record.files) and self._thumbnails.generate_for_image(
                directory / record.files[0], directory
            )
        else:
            generated = self._thumbnails.generate_for_stockshot(
                record.type, [directory / f for f in record.files], directory
            )

        if not generated:
            return {'success': False, 'error': f"Thumbnail could not be generated for '{record.name}'"}

        self.asset_updated.emit(kind, entry_id)
        return {'success': True, 'thumbnail_path': str(directory / Config.THUMBNAIL_FILENAME)}

    def generate_model_thumbnail(self, entry_id: str) -> Dict[str, Any]:
        """Render the preview of a saved 3D asset"""
        return self.regenerate_thumbnail(KIND_ASSETS, entry_id)

    def get_thumbnail(self, kind: str, entry_id: str) -> Optional[str]:
        """
        Path of the image to show for an entry.

        thumbnail.png when present, otherwise the first displayable
        texture (3D assets, textures) or the representative frame
        (sequences). None when nothing can be shown.
        """
        try:
            validate_kind(kind)
            self._check_id(kind, entry_id)
            thumbnail = self._store.thumbnail_path(kind, entry_id)
            if thumbnail.exists():
                return str(thumbnail)

            if kind == KIND_ASSETS:
                return self._first_displayable(self._store.textures_path(entry_id))

            record = self._catalog.get(kind, entry_id)
            directory = self._store.entry_path(kind, entry_id)
        except AssetLibraryError as e:
            logger.debug(f"No thumbnail for {kind} {entry_id}: {e}")
            return None

        if kind == KIND_TEXTURES:
            for name in record.files:
                if Path(name).suffix.lower() in Config.DISPLAYABLE_EXTENSIONS and (directory / name).exists():
                    return str(directory / name)
            return None

        frame = self.get_stockshot_frame(entry_id)
        if frame and Path(frame).suffix.lower() in Config.DISPLAYABLE_EXTENSIONS:
            return frame
        return None

    @staticmethod
    def _first_displayable(folder: Path) -> Optional[str]:
        if not folder.is_dir():
            return None
        for candidate in sorted(folder.iterdir()):
            if candidate.is_file() and candidate.suffix.lower() in Config.DISPLAYABLE_EXTENSIONS:
                return str(candidate)
        return None

    def get_stockshot_frame(
        self,
        entry_id: str,
        position: float = Config.THUMBNAIL_FRAME_POSITION
    ) -> Optional[str]:
        """
        Path of the sequence frame at floor(frame_count * position).

        Returns None for videos, unknown ids and missing frames.
        """
        try:
            record = self._catalog.get(KIND_STOCKSHOTS, entry_id)
            directory = self._store.entry_path(KIND_STOCKSHOTS, entry_id)
        except AssetLibraryError:
            return None

        if record.type == STOCKSHOT_VIDEO or not record.files:
            return None

        index = representative_index(len(record.files), position)
        frame = directory / record.files[index]
        return str(frame) if frame.exists() else None

    @staticmethod
    def read_image_base64(image_path: PathLike) -> Optional[str]:
        """
        Read an image as a data URL for display.

        Returns:
            'data:<mime>;base64,...' or None if the file can't be read
        """
        image_path = Path(image_path)
        mime = Config.IMAGE_MIME_TYPES.get(image_path.suffix.lower(), 'image/png')
        try:
            data = image_path.read_bytes()
        except OSError:
            return None
        return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


__all__ = ['LibraryService']
