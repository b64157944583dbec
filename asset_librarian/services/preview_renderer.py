"""
PreviewRenderer - renders FBX previews with Blender in background mode

The render itself happens in services/utils/render_preview.py, which
runs inside Blender. This side only launches Blender, waits with a
timeout and hands back the PNG bytes.
"""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Union

from ..config import Config
from ..core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)

RENDER_SCRIPT = Path(__file__).parent / "utils" / "render_preview.py"


class PreviewRenderer:
    """
    Model file in, PNG bytes out.

    Usage:
        renderer = PreviewRenderer(blender_path='/opt/blender/blender')
        png_bytes = renderer.render_preview('/library/assets/<id>/chair.fbx')
    """

    def __init__(
        self,
        blender_path: str = 'blender',
        timeout: float = Config.DEFAULT_TOOL_SETTINGS['blender_timeout'],
        size: int = Config.THUMBNAIL_SIZE
    ):
        self.blender_path = blender_path
        self.timeout = timeout
        self.size = size

    def render_preview(self, model_path: Union[str, Path]) -> bytes:
        """
        Render one preview frame of a model.

        Args:
            model_path: FBX file

        Returns:
            PNG bytes

        Raises:
            ExternalToolError: Blender missing, timed out, failed, or wrote no image
        """
        model_path = Path(model_path)
        if not model_path.exists():
            raise ExternalToolError("Model file not found", str(model_path))

        with tempfile.TemporaryDirectory(prefix="asset_librarian_render_") as temp_dir:
            output_path = Path(temp_dir) / "preview.png"
            args = [
                self.blender_path,
                '--background',
                '--factory-startup',
                '--python', str(RENDER_SCRIPT),
                '--',
                str(model_path),
                str(output_path),
                str(self.size),
            ]

            logger.info(f"Rendering preview for {model_path.name}")
            try:
                result = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout
                )
            except FileNotFoundError:
                raise ExternalToolError("Blender not found", self.blender_path)
            except subprocess.TimeoutExpired:
                raise ExternalToolError("Blender timed out", f"after {self.timeout}s")
            except OSError as e:
                raise ExternalToolError("Blender could not be started", str(e))

            if result.returncode != 0 or not output_path.exists():
                output = (result.stdout or '') + (result.stderr or '')
                raise ExternalToolError(
                    f"Blender preview render failed (code {result.returncode})",
                    output.strip()[-500:]
                )

            return output_path.read_bytes()


__all__ = ['PreviewRenderer']
