"""
ContentStore - physical file placement for stored entries

Structure:
    storage/
    ├── assets/{id}/model.fbx, textures/, thumbnail.png
    ├── textures/{id}/files..., thumbnail.png
    └── stockshots/{id}/files..., thumbnail.png

Pattern: Service owning every file inside an entry directory.
Entry directories are named by a generated UUID, never by display name.
"""

import logging
import shutil
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence, Set, Tuple, Union

from ..config import Config
from ..core.exceptions import StorageError
from ..core.records import KIND_ASSETS

logger = logging.getLogger(__name__)


class ContentStore:
    """
    Manages per-kind root directories and the entries inside them.

    Roots are created lazily on first access.
    """

    def __init__(self, storage_path: Path):
        """
        Args:
            storage_path: Storage root containing one folder per kind
        """
        self._storage_path = Path(storage_path)

    @property
    def storage_path(self) -> Path:
        return self._storage_path

    # ==================== PATHS ====================

    def kind_root(self, kind: str) -> Path:
        """Get (and create) the root folder for a kind"""
        root = self._storage_path / Config.get_kind_folder(kind)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create storage folder {root}", str(e))
        return root

    def entry_path(self, kind: str, entry_id: str) -> Path:
        """Directory of an entry (may not exist)"""
        return self.kind_root(kind) / entry_id

    def thumbnail_path(self, kind: str, entry_id: str) -> Path:
        """Location of an entry's thumbnail (may not exist)"""
        return self.entry_path(kind, entry_id) / Config.THUMBNAIL_FILENAME

    def textures_path(self, entry_id: str) -> Path:
        """textures/ sub-folder of a 3D asset entry"""
        return self.entry_path(KIND_ASSETS, entry_id) / Config.MODEL_TEXTURES_FOLDER

    # ==================== ENTRY LIFECYCLE ====================

    def create_entry(self, kind: str) -> Tuple[str, Path]:
        """
        Create a fresh entry directory.

        Args:
            kind: Asset kind

        Returns:
            Tuple of (entry_id, directory)

        Raises:
            StorageError: If the directory could not be created
        """
        root = self.kind_root(kind)
        entry_id = str(uuid.uuid4())
        directory = root / entry_id

        try:
            directory.mkdir(parents=False, exist_ok=False)
            if kind == KIND_ASSETS:
                (directory / Config.MODEL_TEXTURES_FOLDER).mkdir()
        except OSError as e:
            raise StorageError(f"Could not create entry folder {directory}", str(e))

        logger.debug(f"Created {kind} entry {entry_id}")
        return entry_id, directory

    def copy_file(self, directory: Path, source: Union[str, Path]) -> str:
        """
        Copy one file into a directory under its base name.

        Returns:
            The stored file name

        Raises:
            StorageError: If the copy failed
        """
        source = Path(source)
        target = Path(directory) / source.name
        try:
            shutil.copy2(source, target)
        except OSError as e:
            raise StorageError(f"Could not copy {source}", str(e))
        return source.name

    def copy_into(self, directory: Path, sources: Sequence[Union[str, Path]]) -> List[str]:
        """
        Copy files one after another, preserving input order.

        Returns:
            Stored file names in input order

        Raises:
            StorageError: On the first failed copy
        """
        return [self.copy_file(directory, source) for source in sources]

    def copy_batch(
        self,
        directory: Path,
        sources: Sequence[Union[str, Path]],
        max_workers: int = Config.COPY_BATCH_SIZE
    ) -> List[str]:
        """
        Copy one batch of files concurrently.

        Every copy in the batch is allowed to settle before a failure
        is reported.

        Returns:
            Stored file names in input order

        Raises:
            StorageError: If any copy in the batch failed
        """
        if not sources:
            return []

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(sources)))) as executor:
            futures = [executor.submit(self.copy_file, directory, source) for source in sources]

        names = []
        errors = []
        for future in futures:
            try:
                names.append(future.result())
            except StorageError as e:
                errors.append(str(e))

        if errors:
            raise StorageError(
                f"{len(errors)} of {len(sources)} files failed to copy",
                "; ".join(errors)
            )
        return names

    def attempt_cleanup(self, directory: Path) -> bool:
        """
        Best-effort removal of a partially created entry.

        Never raises; a failure is logged and reported as False.
        """
        directory = Path(directory)
        if not directory.exists():
            return True
        try:
            shutil.rmtree(directory)
            logger.info(f"Cleaned up partial entry {directory.name}")
            return True
        except OSError as e:
            logger.warning(f"Cleanup of partial entry {directory} failed: {e}")
            return False

    def remove_entry(self, kind: str, entry_id: str):
        """
        Recursively delete an entry. Missing entries are a no-op.

        Raises:
            StorageError: If the directory exists but could not be removed
        """
        directory = self.entry_path(kind, entry_id)
        if not directory.exists():
            return
        try:
            shutil.rmtree(directory)
        except OSError as e:
            raise StorageError(f"Could not delete entry {entry_id}", str(e))
        logger.debug(f"Removed {kind} entry {entry_id}")

    def list_existing_ids(self, kind: str) -> Set[str]:
        """
        Entry directory names currently on disk.

        Raises:
            StorageError: If the kind root can't be listed
        """
        root = self.kind_root(kind)
        try:
            return {entry.name for entry in root.iterdir() if entry.is_dir()}
        except OSError as e:
            raise StorageError(f"Could not list {root}", str(e))


__all__ = ['ContentStore']
