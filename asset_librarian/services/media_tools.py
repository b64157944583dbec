"""
MediaTools - ffmpeg / ffprobe wrapper for decoding previews

Handles:
- Video duration probing
- Frame extraction at a relative position in a video
- Decode-and-scale of stills QImage can't read (EXR, HDR, TGA, DPX)

Every call runs the tool as a subprocess with a timeout and returns
PNG bytes read from stdout. Failures raise ExternalToolError.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Union

from ..config import Config
from ..core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)


class MediaTools:
    """
    Thin client around the ffmpeg command line tools.

    Usage:
        tools = MediaTools(ffmpeg_path='ffmpeg', ffprobe_path='ffprobe')
        png_bytes = tools.extract_frame('/clips/shot.mov', 0.1, 512)
    """

    def __init__(
        self,
        ffmpeg_path: str = 'ffmpeg',
        ffprobe_path: str = 'ffprobe',
        timeout: float = Config.DEFAULT_TOOL_SETTINGS['ffmpeg_timeout']
    ):
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout

    def _run(self, args: List[str]) -> bytes:
        """
        Run a tool and return its stdout.

        Raises:
            ExternalToolError: Tool missing, timed out or exited non-zero
        """
        tool = Path(args[0]).name
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise ExternalToolError(f"{tool} not found", args[0])
        except subprocess.TimeoutExpired:
            raise ExternalToolError(f"{tool} timed out", f"after {self.timeout}s")
        except OSError as e:
            raise ExternalToolError(f"{tool} could not be started", str(e))

        if result.returncode != 0:
            stderr = result.stderr.decode('utf-8', errors='replace').strip()
            raise ExternalToolError(f"{tool} exited with code {result.returncode}", stderr[-500:])

        return result.stdout

    def probe_duration(self, input_path: Union[str, Path]) -> float:
        """
        Duration of a video in seconds.

        Raises:
            ExternalToolError: If ffprobe failed or reported no duration
        """
        output = self._run([
            self.ffprobe_path,
            '-v', 'error',
            '-show_entries', 'format=duration',
            '-of', 'default=noprint_wrappers=1:nokey=1',
            str(input_path),
        ])
        text = output.decode('utf-8', errors='replace').strip()
        try:
            return float(text)
        except ValueError:
            raise ExternalToolError("ffprobe reported no duration", f"{input_path}: {text!r}")

    def extract_frame(
        self,
        input_path: Union[str, Path],
        position: float = Config.THUMBNAIL_FRAME_POSITION,
        max_width: int = Config.THUMBNAIL_SIZE
    ) -> bytes:
        """
        Grab one frame as PNG.

        Args:
            input_path: Video file
            position: Relative position in the clip (0.1 = 10%)
            max_width: Frames wider than this are scaled down, aspect kept

        Returns:
            PNG bytes
        """
        duration = self.probe_duration(input_path)
        timestamp = max(0.0, duration * position)

        data = self._run([
            self.ffmpeg_path,
            '-v', 'error',
            '-ss', f"{timestamp:.3f}",
            '-i', str(input_path),
            '-frames:v', '1',
            '-vf', f"scale='min({max_width},iw)':-2",
            '-f', 'image2pipe',
            '-vcodec', 'png',
            '-',
        ])
        if not data:
            raise ExternalToolError("ffmpeg produced no frame", str(input_path))
        return data

    def scale_to_fit(
        self,
        input_path: Union[str, Path],
        max_width: int = Config.THUMBNAIL_SIZE,
        max_height: int = Config.THUMBNAIL_SIZE
    ) -> bytes:
        """
        Decode a still and scale it to fit a box with Lanczos resampling.

        Returns:
            PNG bytes
        """
        data = self._run([
            self.ffmpeg_path,
            '-v', 'error',
            '-i', str(input_path),
            '-frames:v', '1',
            '-vf', (
                f"scale=w='min({max_width},iw)':h='min({max_height},ih)'"
                f":force_original_aspect_ratio=decrease:flags=lanczos"
            ),
            '-f', 'image2pipe',
            '-vcodec', 'png',
            '-',
        ])
        if not data:
            raise ExternalToolError("ffmpeg produced no image", str(input_path))
        return data


__all__ = ['MediaTools']
