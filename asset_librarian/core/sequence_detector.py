"""
Sequence detection for stockshot imports

Decides whether a selection of stills is a numbered frame sequence,
discovers sibling frames for single-file selections and orders frames
numerically (frame2 before frame10).

Equal frame numbers with different padding (shot.01 / shot.1) are
ordered by filename.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..config import Config
from .exceptions import ValidationError
from .records import STOCKSHOT_SEQUENCE, STOCKSHOT_VIDEO

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r'\d+')
_FRAME_NAME = re.compile(r'^(?P<prefix>.+)\.(?P<frame>\d+)(?P<ext>\.[^.]+)$')
_TRAILING_FRAME = re.compile(r'^(?P<prefix>.+)\.\d+$')


@dataclass
class StockshotSelection:
    """Resolved stockshot import: type, ordered source files and suggested name"""
    type: str
    files: List[str] = field(default_factory=list)
    default_name: str = ""

    @property
    def frame_count(self) -> int:
        return 1 if self.type == STOCKSHOT_VIDEO else len(self.files)


def is_video_file(path: Union[str, Path]) -> bool:
    """Check extension against the known video containers"""
    return Path(path).suffix.lower() in Config.VIDEO_EXTENSIONS


def frame_number(filename: str) -> Optional[int]:
    """
    Numeric value of the first digit run in a filename.

    Args:
        filename: File name (not a path)

    Returns:
        Integer value, or None if the name has no digits
    """
    match = _DIGIT_RUN.search(filename)
    if match is None:
        return None
    return int(match.group())


def frame_sort_key(filename: str) -> Tuple[int, int, str]:
    """Sort key: numbered names first by value, then by name; unnumbered last"""
    number = frame_number(filename)
    if number is None:
        return (1, 0, filename)
    return (0, number, filename)


def sort_frames(filenames: Sequence[str]) -> List[str]:
    """
    Order filenames by their first embedded digit run.

    Works on bare names or full paths; only the base name is inspected.
    """
    return sorted(filenames, key=lambda name: frame_sort_key(Path(name).name))


def sequence_display_name(filename: str) -> str:
    """
    Suggested display name for a sequence.

    'take.0012.exr' -> 'take', 'plate.exr' -> 'plate'
    """
    stem = Path(filename).stem
    match = _TRAILING_FRAME.match(stem)
    if match:
        return match.group('prefix')
    return stem


def find_sibling_frames(path: Union[str, Path]) -> List[str]:
    """
    Find every frame belonging to the same numbered sequence as `path`.

    The file name must look like '<prefix>.<digits><ext>'. The directory
    is scanned for '<prefix>.<any digits><ext>' with prefix and extension
    matched literally.

    Args:
        path: One frame of the sequence

    Returns:
        Ordered list of absolute frame paths, or [path] if the name
        has no frame number or the directory can't be read
    """
    path = Path(path)
    match = _FRAME_NAME.match(path.name)
    if not match:
        return [str(path)]

    pattern = re.compile(
        r'^' + re.escape(match.group('prefix')) + r'\.(\d+)' + re.escape(match.group('ext')) + r'$'
    )

    try:
        candidates = [entry for entry in path.parent.iterdir() if entry.is_file()]
    except OSError as e:
        logger.warning(f"Could not scan {path.parent} for sequence frames: {e}")
        return [str(path)]

    frames = []
    for entry in candidates:
        frame_match = pattern.match(entry.name)
        if frame_match:
            frames.append((int(frame_match.group(1)), entry.name, str(entry)))

    if not frames:
        return [str(path)]

    frames.sort(key=lambda item: (item[0], item[1]))
    return [item[2] for item in frames]


def detect_stockshot(paths: Sequence[Union[str, Path]]) -> StockshotSelection:
    """
    Classify a stockshot selection and resolve its ordered file list.

    Args:
        paths: Files chosen in the picker

    Returns:
        StockshotSelection

    Raises:
        ValidationError: If the selection is empty
    """
    paths = [str(p) for p in paths]
    if not paths:
        raise ValidationError("No files selected", field='paths', value=paths)

    first = paths[0]
    if is_video_file(first):
        return StockshotSelection(
            type=STOCKSHOT_VIDEO,
            files=[first],
            default_name=Path(first).stem,
        )

    if len(paths) > 1:
        ordered = sort_frames(paths)
    else:
        ordered = find_sibling_frames(first)
        if len(ordered) > 1:
            logger.info(f"Detected {len(ordered)} frames next to {Path(first).name}")

    return StockshotSelection(
        type=STOCKSHOT_SEQUENCE,
        files=ordered,
        default_name=sequence_display_name(Path(ordered[0]).name),
    )


def representative_index(frame_count: int, position: float = Config.THUMBNAIL_FRAME_POSITION) -> int:
    """Index of the frame used for previews: floor(count * position)"""
    if frame_count <= 1:
        return 0
    return min(int(frame_count * position), frame_count - 1)


__all__ = [
    'StockshotSelection',
    'is_video_file',
    'frame_number',
    'frame_sort_key',
    'sort_frames',
    'sequence_display_name',
    'find_sibling_frames',
    'detect_stockshot',
    'representative_index',
]
