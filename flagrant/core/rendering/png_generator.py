"""
PNG Generator
=============

Pillow-based PNG encoding of rendered flag canvases, and writing the
encoded image to disk.
"""

from pathlib import Path
from typing import Union
import io

from PIL import Image  # type: ignore

from flagrant.config.logging import get_logger
from flagrant.core.errors import ImageWriteError
from flagrant.core.rendering.renderer import Canvas
from flagrant.models.schemas import COLOR_RGB

logger = get_logger(__name__)


class PNGGenerator:
    """Pillow-based PNG generator."""

    def __init__(self, optimize: bool = True):
        self.optimize = optimize
        self.logger = logger.bind(generator="pillow")

    def to_image(self, canvas: Canvas) -> Image.Image:
        """
        Convert a painted canvas to an RGB Pillow image.

        Raises:
            ImageWriteError: If some pixel was never painted
        """
        if not canvas.is_complete():
            raise ImageWriteError("Cannot encode a canvas with unpainted pixels")

        image = Image.new("RGB", (canvas.width, canvas.height))
        image.putdata([COLOR_RGB[pixel] for pixel in canvas.pixels])  # type: ignore[index]
        return image

    def encode(self, canvas: Canvas) -> bytes:
        """
        Encode a painted canvas as PNG.

        Args:
            canvas: Fully painted canvas

        Returns:
            PNG bytes

        Raises:
            ImageWriteError: If encoding fails
        """
        image = self.to_image(canvas)
        output = io.BytesIO()
        try:
            image.save(output, format="PNG", optimize=self.optimize)
        except (OSError, ValueError) as e:
            raise ImageWriteError(f"PNG encoding failed: {e}") from e

        png_bytes = output.getvalue()
        self.logger.debug(
            "PNG encoding completed",
            width=canvas.width,
            height=canvas.height,
            file_size=len(png_bytes),
        )
        return png_bytes

    def write(self, png_data: bytes, path: Union[str, Path]) -> Path:
        """
        Write PNG bytes to `path`; the file is closed on every exit path.

        Raises:
            ImageWriteError: If the file cannot be opened or written
        """
        path = Path(path)
        try:
            with open(path, "wb") as output:
                output.write(png_data)
        except OSError as e:
            self.logger.debug("PNG write failed", path=str(path), error=str(e))
            raise ImageWriteError(f"Cannot write image to {path}: {e.strerror or e}") from e

        self.logger.info("PNG written", path=str(path), file_size=len(png_data))
        return path


def generate_png(canvas: Canvas, optimize: bool = True) -> bytes:
    """Encode a painted canvas as PNG bytes."""
    return PNGGenerator(optimize=optimize).encode(canvas)


def save_png(canvas: Canvas, path: Union[str, Path]) -> Path:
    """Encode a painted canvas and write it to `path`."""
    generator = PNGGenerator()
    return generator.write(generator.encode(canvas), path)
