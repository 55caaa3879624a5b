"""
Rendering Pipeline
==================

Runs a flag definition through every stage: parse, resolve tags, render
onto a canvas, encode as PNG and optionally write the file.
"""

from typing import Optional
import time

from flagrant.config.logging import get_logger
from flagrant.config.settings import Settings, get_settings
from flagrant.core.dsl.parser import FlagParser
from flagrant.core.dsl.resolver import TagResolver
from flagrant.core.errors import FlagError, RenderError
from flagrant.core.rendering.png_generator import PNGGenerator
from flagrant.core.rendering.renderer import Canvas, FlagRenderer
from flagrant.models.schemas import FlagNode, RenderOptions, RenderResult, ValidationResult

logger = get_logger(__name__)


class FlagPipeline:
    """Text to PNG pipeline for flag definitions."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.logger = logger.bind(component="pipeline")
        self.renderer = FlagRenderer()
        self.png_generator = PNGGenerator()

    def load(self, content: str) -> FlagNode:
        """Parse and resolve a definition, returning the renderable tree."""
        tree = FlagParser().parse(content)
        return TagResolver().resolve(tree)

    def run(self, content: str, options: Optional[RenderOptions] = None) -> RenderResult:
        """
        Render a flag definition to PNG.

        Args:
            content: Flag definition text
            options: Canvas size and output path; defaults come from settings

        Returns:
            RenderResult with the PNG data and metadata

        Raises:
            FlagError: If any stage fails
        """
        start_time = time.time()

        try:
            if options is None:
                options = self._default_options()
            tree = FlagParser().parse(content)
            resolver = TagResolver()
            resolved = resolver.resolve(tree)
            canvas = self.renderer.render(resolved, Canvas(options.width, options.height))
            png_data = self.png_generator.encode(canvas)

            output_path = None
            if options.output_path is not None:
                output_path = self.png_generator.write(png_data, options.output_path)
        except FlagError as e:
            self.logger.debug("Flag rendering aborted", error=str(e), error_type=type(e).__name__)
            raise

        result = RenderResult(
            png_data=png_data,
            width=options.width,
            height=options.height,
            file_size=len(png_data),
            output_path=output_path,
            metadata={
                "nodes": sum(1 for _ in tree.walk()),
                "tags": resolver.tag_names,
                "processing_time": time.time() - start_time,
            },
        )

        self.logger.info(
            "Flag rendering completed",
            width=result.width,
            height=result.height,
            file_size=result.file_size,
        )
        return result

    def _default_options(self) -> RenderOptions:
        try:
            return RenderOptions.from_settings(self.settings)
        except ValueError as e:
            raise RenderError(f"Invalid default render options: {e}") from e

    def validate(self, content: str) -> ValidationResult:
        """
        Check that a definition parses and resolves, without rendering it.

        Args:
            content: Flag definition text

        Returns:
            ValidationResult listing the error, if any, and the declared tags
        """
        resolver = TagResolver()
        try:
            resolver.resolve(FlagParser().parse(content))
        except FlagError as e:
            return ValidationResult(valid=False, errors=[str(e)], tags=resolver.tag_names)
        return ValidationResult(valid=True, tags=resolver.tag_names)


def render_definition(content: str, options: Optional[RenderOptions] = None) -> RenderResult:
    """Render a flag definition with the global settings."""
    return FlagPipeline().run(content, options)


def load_flag(content: str) -> FlagNode:
    """Parse and resolve a flag definition."""
    return FlagPipeline().load(content)


def validate_flag(content: str) -> ValidationResult:
    """Validate a flag definition without rendering it."""
    return FlagPipeline().validate(content)
