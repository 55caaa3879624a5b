"""
Pydantic Models and Schemas
===========================

Core data models for flag definitions, rendering requests/results and
validation reports. Flag tree nodes are frozen: a sub-tree can be shared
between several places in a tree without any of them being able to mutate it.
"""

from typing import Annotated, Optional, List, Dict, Any, Tuple, Union, Literal, Iterator
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Enums
class Color(str, Enum):
    """Flag colors, keyed by their single-letter code."""
    BLUE = "b"
    GREEN = "g"
    RED = "r"
    WHITE = "w"
    YELLOW = "y"
    BLACK = "s"

    @property
    def rgb(self) -> Tuple[int, int, int]:
        """RGB triple used when writing the image."""
        return COLOR_RGB[self]

    @classmethod
    def from_letter(cls, letter: str) -> Optional["Color"]:
        """Look up a color by its letter, returning None when unknown."""
        try:
            return cls(letter)
        except ValueError:
            return None


COLOR_RGB: Dict[Color, Tuple[int, int, int]] = {
    Color.BLUE: (0, 0, 255),
    Color.GREEN: (0, 255, 0),
    Color.RED: (255, 0, 0),
    Color.WHITE: (255, 255, 255),
    Color.YELLOW: (255, 255, 0),
    Color.BLACK: (0, 0, 0),
}


class Axis(str, Enum):
    """Split direction.

    HORIZONTAL lays children out left-to-right, dividing the width.
    VERTICAL stacks children top-to-bottom, dividing the height.
    """
    HORIZONTAL = "h"
    VERTICAL = "v"


# Flag tree
class FlagNodeBase(BaseModel):
    """Base for all flag tree nodes."""

    model_config = ConfigDict(frozen=True)

    def children(self) -> Tuple["FlagNode", ...]:
        """Direct sub-trees of this node, in pre-order."""
        return ()

    def walk(self) -> Iterator["FlagNode"]:
        """Iterate over this node and all its descendants in pre-order."""
        yield self  # type: ignore[misc]
        for child in self.children():
            yield from child.walk()


class Solid(FlagNodeBase):
    """Leaf filling its whole rectangle with one color."""
    kind: Literal["solid"] = "solid"
    color: Color


class Split(FlagNodeBase):
    """Two-way division; `first` receives `percent` of the split dimension."""
    kind: Literal["split"] = "split"
    axis: Axis
    percent: int = Field(..., ge=0, le=100, description="Share of the near side")
    first: "FlagNode"
    second: "FlagNode"

    def children(self) -> Tuple["FlagNode", ...]:
        return (self.first, self.second)


class Band(BaseModel):
    """One weighted part of a Bands node."""

    model_config = ConfigDict(frozen=True)

    weight: int = Field(..., ge=0)
    node: "FlagNode"


class Bands(FlagNodeBase):
    """N-way division where each part is sized by its weight."""
    kind: Literal["bands"] = "bands"
    axis: Axis
    bands: Tuple[Band, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_total_weight(self) -> "Bands":
        if self.total_weight <= 0:
            raise ValueError("Bands need a positive total weight")
        return self

    @property
    def total_weight(self) -> int:
        return sum(band.weight for band in self.bands)

    def children(self) -> Tuple["FlagNode", ...]:
        return tuple(band.node for band in self.bands)


class Tagged(FlagNodeBase):
    """Binds `child` to `name`; renders exactly as `child`."""
    kind: Literal["tagged"] = "tagged"
    name: str = Field(..., min_length=1)
    child: "FlagNode"

    def children(self) -> Tuple["FlagNode", ...]:
        return (self.child,)


class Reference(FlagNodeBase):
    """Placeholder for the sub-tree previously tagged as `name`."""
    kind: Literal["reference"] = "reference"
    name: str = Field(..., min_length=1)


FlagNode = Annotated[
    Union[Solid, Split, Bands, Tagged, Reference], Field(discriminator="kind")
]

# Update forward references
Split.model_rebuild()
Band.model_rebuild()
Bands.model_rebuild()
Tagged.model_rebuild()


# Rendering Models
class RenderOptions(BaseModel):
    """Options for rendering a flag to PNG."""
    width: int = Field(400, gt=0, description="Canvas width in pixels")
    height: int = Field(300, gt=0, description="Canvas height in pixels")
    output_path: Optional[Path] = Field(None, description="Where to write the PNG, if anywhere")

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "RenderOptions":
        """Build options from application settings, applying non-None overrides."""
        values: Dict[str, Any] = {
            "width": settings.default_width,
            "height": settings.default_height,
            "output_path": settings.output_path,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        if values["width"] > settings.max_width or values["height"] > settings.max_height:
            raise ValueError(
                f"Canvas {values['width']}x{values['height']} exceeds maximum "
                f"{settings.max_width}x{settings.max_height}"
            )
        return cls(**values)


class RenderResult(BaseModel):
    """Result of rendering a flag definition."""
    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    width: int = Field(..., description="Image width")
    height: int = Field(..., description="Image height")
    file_size: int = Field(..., description="File size in bytes")
    output_path: Optional[Path] = Field(None, description="File the PNG was written to")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Render metadata")


class ValidationResult(BaseModel):
    """Outcome of checking a flag definition without rendering it."""
    valid: bool = Field(..., description="Whether the definition parses and resolves")
    errors: List[str] = Field(default_factory=list, description="Diagnostics")
    tags: List[str] = Field(default_factory=list, description="Tag names in declaration order")
