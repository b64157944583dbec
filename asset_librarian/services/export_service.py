"""
ExportService - packages one stored entry into a zip archive

The archive holds every file below the entry directory except the
thumbnail, with paths relative to the entry directory. Export returns
only once the archive file is closed and flushed to disk.
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config import Config
from ..core.exceptions import StorageError
from ..utils.path_utils import ensure_parent_exists

logger = logging.getLogger(__name__)


class ExportService:
    """Service for exporting stored entries as zip archives"""

    @classmethod
    def collect_files(cls, entry_dir: Path) -> List[Tuple[Path, str]]:
        """
        Files to archive.

        Args:
            entry_dir: Entry directory

        Returns:
            List of (file_path, archive_name) tuples, sorted by archive name
        """
        entry_dir = Path(entry_dir)
        files = []
        for file_path in entry_dir.rglob('*'):
            if not file_path.is_file() or file_path.name == Config.THUMBNAIL_FILENAME:
                continue
            files.append((file_path, file_path.relative_to(entry_dir).as_posix()))
        files.sort(key=lambda item: item[1])
        return files

    @classmethod
    def export_entry(
        cls,
        entry_dir: Path,
        output_path: Path,
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> int:
        """
        Write an entry directory to a zip file.

        Args:
            entry_dir: Entry directory to package
            output_path: Destination .zip
            progress_callback: Optional callback(current, total, message)

        Returns:
            Number of files archived

        Raises:
            StorageError: If the entry is missing or writing failed.
                A partially written archive is left in place.
        """
        entry_dir = Path(entry_dir)
        output_path = Path(output_path)
        if not entry_dir.is_dir():
            raise StorageError("Entry folder not found", str(entry_dir))

        files_to_archive = cls.collect_files(entry_dir)
        total_files = len(files_to_archive)

        try:
            ensure_parent_exists(output_path)
            with open(output_path, 'wb') as output:
                with zipfile.ZipFile(
                    output,
                    'w',
                    compression=zipfile.ZIP_DEFLATED,
                    compresslevel=Config.EXPORT_COMPRESSION_LEVEL
                ) as zipf:
                    for idx, (file_path, archive_name) in enumerate(files_to_archive):
                        if progress_callback:
                            progress_callback(idx + 1, total_files, f"Exporting: {archive_name}")
                        zipf.write(file_path, archive_name)

                # Archive is finalized; make sure the bytes reached the disk
                output.flush()
                os.fsync(output.fileno())
        except (OSError, zipfile.BadZipFile) as e:
            logger.error(f"Export to {output_path} failed: {e}")
            raise StorageError(f"Could not write archive {output_path}", str(e))

        logger.info(f"Exported {total_files} file(s) to {output_path}")
        return total_files


__all__ = ['ExportService']
