"""
IngestionPipeline - end-to-end import of source files into the library

Stages: create entry -> copy -> thumbnail -> catalog append.

Each ingest_* call returns a result dict:
    {'success': True, '<kind key>': record}
    {'success': False, 'error': message}

A failed import attempts to remove its partial entry directory
(best-effort) and never leaves a catalog record behind.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config import Config
from ..core.exceptions import ValidationError
from ..core.records import (
    KIND_ASSETS,
    KIND_TEXTURES,
    KIND_STOCKSHOTS,
    STOCKSHOT_SEQUENCE,
    STOCKSHOT_VIDEO,
    ModelRecord,
    TextureRecord,
    StockshotRecord,
)
from ..core.sequence_detector import sort_frames
from ..events.progress import ProgressSink
from ..utils.decorators import timed
from ..utils.validators import validate_asset_name, validate_source_names
from .catalog import Catalog
from .content_store import ContentStore
from .thumbnail_generator import ThumbnailGenerator

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class IngestionPipeline:
    """
    Orchestrates imports for the three asset kinds.

    Stockshot copies run in batches: files inside a batch are copied
    concurrently, batches run one after another, and a progress event
    is pushed after each batch. The progress channel always receives
    the terminating None, whether the import succeeded or not.

    Usage:
        pipeline = IngestionPipeline(store, catalog, thumbnails, progress_sink)
        result = pipeline.ingest_stockshot(frames, 'sequence', 'Explosion')
    """

    def __init__(
        self,
        content_store: ContentStore,
        catalog: Catalog,
        thumbnails: ThumbnailGenerator,
        progress: Optional[ProgressSink] = None,
        batch_size: int = Config.COPY_BATCH_SIZE
    ):
        self._store = content_store
        self._catalog = catalog
        self._thumbnails = thumbnails
        self._progress = progress
        self.batch_size = max(1, batch_size)

    # ==================== PROGRESS ====================

    def _emit_progress(self, current: int, total: int, status: str):
        if self._progress is not None:
            self._progress.emit_progress(current, total, status)

    def _emit_finished(self):
        if self._progress is not None:
            self._progress.emit_finished()

    def _fail(self, operation: str, error: Exception, directory: Optional[Path]) -> Dict[str, Any]:
        """Log, clean up the partial entry and build the failure result"""
        logger.error(f"{operation} failed: {error}", exc_info=True)
        if directory is not None:
            self._store.attempt_cleanup(directory)
        return {'success': False, 'error': str(error)}

    # ==================== 3D ASSETS ====================

    @timed
    def ingest_asset(
        self,
        fbx_path: PathLike,
        texture_paths: Sequence[PathLike],
        name: str
    ) -> Dict[str, Any]:
        """
        Import one FBX and its textures.

        The model thumbnail is not generated here; it needs the preview
        renderer and is requested separately once the asset is saved.

        Returns:
            {'success': True, 'asset': ModelRecord} or a failure dict
        """
        directory = None
        try:
            name = validate_asset_name(name)
            # The FBX and its textures live in separate folders
            validate_source_names([fbx_path])
            validate_source_names(texture_paths)
            entry_id, directory = self._store.create_entry(KIND_ASSETS)

            fbx_file_name = self._store.copy_file(directory, fbx_path)
            self._store.copy_into(self._store.textures_path(entry_id), texture_paths)

            record = ModelRecord(
                id=entry_id,
                name=name,
                fbx_file_name=fbx_file_name,
                texture_count=len(texture_paths),
            )
            self._catalog.append(KIND_ASSETS, record)

            logger.info(f"Imported asset '{name}' ({entry_id}) with {len(texture_paths)} texture(s)")
            return {'success': True, 'asset': record}

        except Exception as e:
            return self._fail("Asset import", e, directory)

    # ==================== TEXTURES ====================

    @timed
    def ingest_textures(self, paths: Sequence[PathLike], name: str) -> Dict[str, Any]:
        """
        Import a texture set; the first file becomes the thumbnail source.

        Returns:
            {'success': True, 'texture': TextureRecord} or a failure dict
        """
        directory = None
        try:
            name = validate_asset_name(name)
            if not paths:
                raise ValidationError("No texture files selected", field='paths')
            validate_source_names(paths)

            entry_id, directory = self._store.create_entry(KIND_TEXTURES)
            files = self._store.copy_into(directory, paths)

            if not self._thumbnails.generate_for_image(directory / files[0], directory):
                logger.info(f"No thumbnail for texture '{name}'")

            record = TextureRecord(
                id=entry_id,
                name=name,
                files=files,
                file_count=len(files),
            )
            self._catalog.append(KIND_TEXTURES, record)

            logger.info(f"Imported texture set '{name}' ({entry_id}) with {len(files)} file(s)")
            return {'success': True, 'texture': record}

        except Exception as e:
            return self._fail("Texture import", e, directory)

    # ==================== STOCKSHOTS ====================

    @timed
    def ingest_stockshot(
        self,
        paths: Sequence[PathLike],
        stockshot_type: str,
        name: str
    ) -> Dict[str, Any]:
        """
        Import a video or an ordered image sequence.

        Args:
            paths: Source files, already ordered by the sequence detector
            stockshot_type: 'video' or 'sequence'
            name: Display name

        Returns:
            {'success': True, 'stockshot': StockshotRecord} or a failure dict
        """
        directory = None
        try:
            name = validate_asset_name(name)
            if stockshot_type not in (STOCKSHOT_VIDEO, STOCKSHOT_SEQUENCE):
                raise ValidationError(
                    f"Invalid stockshot type '{stockshot_type}'",
                    field='type',
                    value=stockshot_type
                )
            if not paths:
                raise ValidationError("No stockshot files selected", field='paths')
            validate_source_names(paths)

            entry_id, directory = self._store.create_entry(KIND_STOCKSHOTS)
            files = self._copy_in_batches(directory, paths)

            if stockshot_type == STOCKSHOT_SEQUENCE:
                files = sort_frames(files)

            self._emit_progress(len(files), len(files), "Generating thumbnail...")
            if not self._thumbnails.generate_for_stockshot(
                stockshot_type, [directory / f for f in files], directory
            ):
                logger.info(f"No thumbnail for stockshot '{name}'")

            record = StockshotRecord(
                id=entry_id,
                name=name,
                type=stockshot_type,
                files=files,
                frame_count=1 if stockshot_type == STOCKSHOT_VIDEO else len(files),
            )
            self._catalog.append(KIND_STOCKSHOTS, record)

            logger.info(f"Imported {stockshot_type} stockshot '{name}' ({entry_id}), {len(files)} file(s)")
            return {'success': True, 'stockshot': record}

        except Exception as e:
            return self._fail("Stockshot import", e, directory)

        finally:
            self._emit_finished()

    def _copy_in_batches(self, directory: Path, paths: Sequence[PathLike]) -> List[str]:
        """Copy sequential batches of concurrent copies, reporting after each"""
        paths = list(paths)
        total = len(paths)
        copied: List[str] = []
        self._emit_progress(0, total, "Copying files...")

        for start in range(0, total, self.batch_size):
            batch = paths[start:start + self.batch_size]
            copied.extend(self._store.copy_batch(directory, batch, self.batch_size))
            self._emit_progress(len(copied), total, f"Copying files ({len(copied)}/{total})")

        return copied


__all__ = ['IngestionPipeline']
