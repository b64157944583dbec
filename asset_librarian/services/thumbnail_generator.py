"""
ThumbnailGenerator - one preview image per stored entry

Strategies by source:
- Video: frame at 10% of the duration via ffmpeg
- Wide-gamut / uncommon stills (EXR, HDR, TGA, DPX): ffmpeg Lanczos scale
- Common stills: QImage load and smooth scale, falling back to ffmpeg
- Image sequence: the frame at floor(count * 0.1) through the still path
- FBX model: rendered by the PreviewRenderer (Blender)

Public methods never raise. They return True when thumbnail.png was
written, False otherwise, and never leave a partial file behind.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from PyQt6.QtGui import QImage

from ..config import Config
from ..core.exceptions import DecodeError
from ..core.records import STOCKSHOT_VIDEO
from ..core.sequence_detector import representative_index
from ..utils.decorators import safe_operation
from ..utils.image_utils import load_image, load_image_from_bytes, scale_image, save_png
from .media_tools import MediaTools
from .preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)


class ThumbnailGenerator:
    """
    Writes thumbnail.png into entry directories.

    Usage:
        generator = ThumbnailGenerator(MediaTools(), PreviewRenderer())
        if not generator.generate_for_video(clip, entry_dir):
            # entry simply has no thumbnail
    """

    def __init__(
        self,
        media_tools: MediaTools,
        renderer: Optional[PreviewRenderer] = None,
        size: int = Config.THUMBNAIL_SIZE
    ):
        self._media_tools = media_tools
        self._renderer = renderer
        self.size = size

    # ==================== STRATEGIES ====================

    @safe_operation(default=False)
    def generate_for_image(self, source: Union[str, Path], target_dir: Path) -> bool:
        """Thumbnail from a still image"""
        image = self._decode_still(Path(source))
        return self._write(image, target_dir)

    @safe_operation(default=False)
    def generate_for_video(self, source: Union[str, Path], target_dir: Path) -> bool:
        """Thumbnail from the frame at 10% of a video"""
        data = self._media_tools.extract_frame(source, Config.THUMBNAIL_FRAME_POSITION, self.size)
        image = load_image_from_bytes(data)
        if image is None:
            raise DecodeError("Extracted frame could not be decoded", str(source))
        return self._write(image, target_dir)

    @safe_operation(default=False)
    def generate_for_sequence(self, frames: Sequence[Union[str, Path]], target_dir: Path) -> bool:
        """Thumbnail from the representative frame of an ordered sequence"""
        if not frames:
            raise DecodeError("Sequence has no frames")
        frame = Path(frames[representative_index(len(frames))])
        logger.debug(f"Sequence thumbnail from frame {frame.name}")
        image = self._decode_still(frame)
        return self._write(image, target_dir)

    @safe_operation(default=False)
    def generate_for_model(self, model_path: Union[str, Path], target_dir: Path) -> bool:
        """Thumbnail rendered from an FBX model"""
        if self._renderer is None:
            raise DecodeError("No preview renderer configured")
        data = self._renderer.render_preview(model_path)
        image = load_image_from_bytes(data)
        if image is None:
            raise DecodeError("Rendered preview could not be decoded", str(model_path))
        return self._write(image, target_dir)

    def generate_for_stockshot(
        self,
        stockshot_type: str,
        files: Sequence[Union[str, Path]],
        target_dir: Path
    ) -> bool:
        """Dispatch on stockshot type"""
        if stockshot_type == STOCKSHOT_VIDEO:
            if not files:
                return False
            return self.generate_for_video(files[0], target_dir)
        return self.generate_for_sequence(files, target_dir)

    # ==================== DECODING ====================

    def _decode_still(self, source: Path) -> QImage:
        """
        Decode a still, trying QImage first for common formats.

        Raises:
            DecodeError: If no strategy could decode the file
        """
        if source.suffix.lower() in Config.COMMON_IMAGE_EXTENSIONS:
            image = load_image(source)
            if image is not None:
                return image
            logger.debug(f"QImage could not read {source.name}, falling back to ffmpeg")

        return self._decode_with_media_tools(source)

    def _decode_with_media_tools(self, source: Path) -> QImage:
        data = self._media_tools.scale_to_fit(source, self.size, self.size)
        image = load_image_from_bytes(data)
        if image is None:
            raise DecodeError("Could not decode image", str(source))
        return image

    # ==================== OUTPUT ====================

    def _write(self, image: QImage, target_dir: Path) -> bool:
        """Scale to fit and write thumbnail.png atomically"""
        target_dir = Path(target_dir)
        target = target_dir / Config.THUMBNAIL_FILENAME
        partial = target_dir / f".{Config.THUMBNAIL_FILENAME}.partial"

        scaled = scale_image(image, self.size)
        try:
            if not save_png(scaled, partial):
                raise DecodeError("Could not encode thumbnail", str(target))
            os.replace(partial, target)
        finally:
            if partial.exists():
                partial.unlink()

        logger.debug(f"Thumbnail written: {target}")
        return True


__all__ = ['ThumbnailGenerator']
