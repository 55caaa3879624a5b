"""
Flag Renderer
=============

Paints a resolved flag tree onto a pixel canvas by recursively partitioning
the canvas rectangle.

Conventions:
- HORIZONTAL splits divide the width: first/earlier parts are on the left.
- VERTICAL splits divide the height: first/earlier parts are on top.
- Split points are rounded half up to whole pixels. The near side gets the
  rounded size and the far side gets what remains, so the parts always tile
  the parent rectangle exactly.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from flagrant.config.logging import get_logger
from flagrant.core.errors import RenderError, UnresolvedNodeError
from flagrant.models.schemas import Axis, Bands, Color, FlagNode, Solid, Split

logger = get_logger(__name__)


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division of non-negative values, rounding .5 upwards."""
    return (2 * numerator + denominator) // (2 * denominator)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle."""
    left: int
    top: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def span(self, axis: Axis) -> int:
        """Length of the dimension divided by `axis`."""
        return self.width if axis is Axis.HORIZONTAL else self.height

    def section(self, axis: Axis, start: int, end: int) -> "Rect":
        """Sub-rectangle covering offsets [start, end) along `axis`."""
        if axis is Axis.HORIZONTAL:
            return Rect(self.left + start, self.top, end - start, self.height)
        return Rect(self.left, self.top + start, self.width, end - start)


class Canvas:
    """Row-major pixel buffer holding one color per pixel."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: List[Optional[Color]] = [None] * (width * height)
        self.painted = 0

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def fill(self, rect: Rect, color: Color) -> None:
        """Set every pixel inside `rect` to `color`."""
        if rect.area == 0:
            return
        if (
            rect.left < 0
            or rect.top < 0
            or rect.left + rect.width > self.width
            or rect.top + rect.height > self.height
        ):
            raise RenderError(
                f"Rectangle {rect} lies outside the {self.width}x{self.height} canvas"
            )

        run = [color] * rect.width
        for y in range(rect.top, rect.top + rect.height):
            start = y * self.width + rect.left
            self.pixels[start:start + rect.width] = run
        self.painted += rect.area

    def get(self, x: int, y: int) -> Optional[Color]:
        return self.pixels[y * self.width + x]

    def rows(self) -> Iterator[List[Optional[Color]]]:
        for y in range(self.height):
            yield self.pixels[y * self.width:(y + 1) * self.width]

    def is_complete(self) -> bool:
        """True once every pixel holds a color."""
        return all(pixel is not None for pixel in self.pixels)

    def color_counts(self) -> Counter:
        """Number of pixels per color (unpainted pixels count under None)."""
        return Counter(self.pixels)


class FlagRenderer:
    """Recursive painter for resolved flag trees."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="renderer")

    def render(self, node: FlagNode, canvas: Canvas) -> Canvas:
        """
        Paint `node` over the whole canvas.

        Args:
            node: Resolved flag tree
            canvas: Target canvas

        Returns:
            The painted canvas

        Raises:
            UnresolvedNodeError: If a tag or reference is still in the tree
            RenderError: If the tree does not cover the canvas exactly once
        """
        self._draw(node, canvas, canvas.bounds)

        if canvas.painted != canvas.width * canvas.height or not canvas.is_complete():
            raise RenderError(
                f"Flag covered {canvas.painted} of {canvas.width * canvas.height} pixels"
            )

        self.logger.debug("Rendered flag", width=canvas.width, height=canvas.height)
        return canvas

    def _draw(self, node: FlagNode, canvas: Canvas, rect: Rect) -> None:
        if isinstance(node, Solid):
            canvas.fill(rect, node.color)
        elif isinstance(node, Split):
            first, second = self.split_rect(rect, node.axis, node.percent)
            self._draw(node.first, canvas, first)
            self._draw(node.second, canvas, second)
        elif isinstance(node, Bands):
            parts = self.band_rects(rect, node.axis, [band.weight for band in node.bands])
            for band, part in zip(node.bands, parts):
                self._draw(band.node, canvas, part)
        else:
            raise UnresolvedNodeError(
                f"Cannot render '{node.kind}' node; tags and references must be resolved first"
            )

    @staticmethod
    def split_rect(rect: Rect, axis: Axis, percent: int) -> Tuple[Rect, Rect]:
        """Divide `rect` so the near side gets `percent` of the span."""
        span = rect.span(axis)
        cut = round_half_up(span * percent, 100)
        return rect.section(axis, 0, cut), rect.section(axis, cut, span)

    @staticmethod
    def band_rects(rect: Rect, axis: Axis, weights: List[int]) -> List[Rect]:
        """Divide `rect` into consecutive parts proportional to `weights`."""
        span = rect.span(axis)
        total = sum(weights)
        parts: List[Rect] = []
        cumulative = 0
        start = 0
        for weight in weights:
            cumulative += weight
            end = round_half_up(span * cumulative, total)
            parts.append(rect.section(axis, start, end))
            start = end
        return parts


def render_flag(node: FlagNode, width: int, height: int) -> Canvas:
    """
    Render a resolved flag tree onto a new canvas.

    Args:
        node: Resolved flag tree
        width: Canvas width in pixels
        height: Canvas height in pixels

    Returns:
        Fully painted canvas
    """
    return FlagRenderer().render(node, Canvas(width, height))
