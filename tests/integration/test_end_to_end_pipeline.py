"""
End-to-End Pipeline Tests
=========================

Flag definition text through parsing, tag resolution, rendering and PNG
output, checked at the pixel level on the decoded image.
"""

import pytest

from flagrant.core import errors
from flagrant.core.dsl.parser import MAX_DEPTH
from flagrant.core.errors import (
    ImageWriteError,
    NestingTooDeep,
    RenderError,
    UndefinedReference,
    UnknownColor,
)
from flagrant.core.pipeline import FlagPipeline, load_flag, render_definition, validate_flag
from flagrant.models.schemas import COLOR_RGB, Color, RenderOptions

from tests.data.sample_flag_definitions import (
    FRANCE,
    GERMANY,
    HALF_AND_HALF,
    HOIST_AND_FLY,
    INLINED_STRIPES,
    INVALID_DEFINITIONS,
    NESTED_TAGS,
    SOLID_RED,
    TAGGED_STRIPES,
    TRICOLOR_BANDS,
)
from tests.utils.assertions import assert_resolved_tree, assert_valid_render_result, decode_png

RED = COLOR_RGB[Color.RED]
WHITE = COLOR_RGB[Color.WHITE]
GREEN = COLOR_RGB[Color.GREEN]
BLUE = COLOR_RGB[Color.BLUE]


def pixels_in(image, left, top, width, height):
    return {
        image.getpixel((x, y))
        for x in range(left, left + width)
        for y in range(top, top + height)
    }


class TestRenderPipeline:
    """Test complete renders."""

    def test_solid_flag(self, pipeline):
        result = pipeline.run(SOLID_RED, RenderOptions(width=40, height=30))
        assert_valid_render_result(result, 40, 30)
        assert decode_png(result.png_data).getcolors() == [(1200, RED)]

    def test_default_canvas_from_settings(self, pipeline, temp_dir, test_settings):
        result = pipeline.run(SOLID_RED, RenderOptions.from_settings(
            test_settings, output_path=temp_dir / "red.png"
        ))
        assert (result.width, result.height) == (400, 300)
        assert result.output_path == temp_dir / "red.png"

    def test_hoist_and_fly(self, pipeline):
        result = pipeline.run(HOIST_AND_FLY, RenderOptions(width=400, height=300))
        image = decode_png(result.png_data)

        assert pixels_in(image, 0, 0, 133, 300) == {WHITE}
        assert pixels_in(image, 133, 0, 267, 150) == {RED}
        assert pixels_in(image, 133, 150, 267, 150) == {GREEN}

    def test_equal_thirds_stack_top_to_bottom(self, pipeline):
        result = pipeline.run(TRICOLOR_BANDS, RenderOptions(width=300, height=300))
        image = decode_png(result.png_data)

        assert pixels_in(image, 0, 0, 300, 100) == {BLUE}
        assert pixels_in(image, 0, 100, 300, 100) == {WHITE}
        assert pixels_in(image, 0, 200, 300, 100) == {RED}

    def test_equal_thirds_side_by_side(self, pipeline):
        result = pipeline.run(FRANCE, RenderOptions(width=300, height=200))
        image = decode_png(result.png_data)

        assert sorted(image.getcolors()) == sorted([(20000, BLUE), (20000, WHITE), (20000, RED)])
        assert pixels_in(image, 0, 0, 100, 200) == {BLUE}
        assert pixels_in(image, 100, 0, 100, 200) == {WHITE}
        assert pixels_in(image, 200, 0, 100, 200) == {RED}

    def test_black_band(self, pipeline):
        image = decode_png(pipeline.run(GERMANY, RenderOptions(width=30, height=30)).png_data)
        assert image.getpixel((0, 0)) == (0, 0, 0)
        assert image.getpixel((0, 29)) == COLOR_RGB[Color.YELLOW]

    def test_binary_split(self, pipeline):
        image = decode_png(pipeline.run(HALF_AND_HALF, RenderOptions(width=11, height=4)).png_data)
        # 50% of 11 rounds half up to 6
        assert pixels_in(image, 0, 0, 6, 4) == {BLUE}
        assert pixels_in(image, 6, 0, 5, 4) == {COLOR_RGB[Color.YELLOW]}

    def test_tags_render_like_inlined_definition(self, pipeline):
        options = RenderOptions(width=64, height=48)
        tagged = pipeline.run(TAGGED_STRIPES, options)
        inlined = pipeline.run(INLINED_STRIPES, options)
        assert list(decode_png(tagged.png_data).getdata()) == list(
            decode_png(inlined.png_data).getdata()
        )

    def test_metadata(self, pipeline):
        result = pipeline.run(NESTED_TAGS, RenderOptions(width=10, height=10))
        assert result.metadata["tags"] == ["cell", "half"]
        assert result.metadata["nodes"] == 9
        assert result.metadata["processing_time"] >= 0

    def test_writes_file(self, pipeline, temp_dir):
        target = temp_dir / "flag.png"
        result = pipeline.run(FRANCE, RenderOptions(width=30, height=20, output_path=target))
        assert target.read_bytes() == result.png_data

    def test_no_file_without_output_path(self, pipeline, temp_dir):
        result = pipeline.run(FRANCE, RenderOptions(width=30, height=20))
        assert result.output_path is None
        assert list(temp_dir.iterdir()) == []

    def test_deepest_allowed_nesting(self, pipeline):
        levels = MAX_DEPTH - 1
        definition = "(v (s r) " * levels + "(s w)" + " 50)" * levels
        result = pipeline.run(definition, RenderOptions(width=8, height=8))
        image = decode_png(result.png_data)
        assert pixels_in(image, 0, 0, 8, 4) == {RED}

    def test_render_definition_helper(self):
        result = render_definition(SOLID_RED, RenderOptions(width=5, height=5))
        assert_valid_render_result(result, 5, 5)


class TestPipelineFailures:
    """Every failure aborts the pipeline with a specific error."""

    @pytest.mark.parametrize("error_name,definition", list(INVALID_DEFINITIONS.items()))
    def test_invalid_definitions(self, pipeline, error_name, definition):
        with pytest.raises(getattr(errors, error_name)):
            pipeline.run(definition, RenderOptions(width=10, height=10))

    def test_undefined_reference_never_renders(self, pipeline, temp_dir):
        target = temp_dir / "flag.png"
        with pytest.raises(UndefinedReference):
            pipeline.run("(h (s r) (r nope) 50)", RenderOptions(output_path=target))
        assert not target.exists()

    def test_unknown_color(self, pipeline):
        with pytest.raises(UnknownColor, match="'p'"):
            pipeline.run("(v (s r) (s p) 50)", RenderOptions(width=10, height=10))

    def test_nesting_too_deep(self, pipeline):
        with pytest.raises(NestingTooDeep):
            pipeline.run("(t a " * 600 + "(s w)" + ")" * 600, RenderOptions(width=10, height=10))

    def test_invalid_default_options(self, test_settings, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        settings = test_settings.model_copy(update={"max_width": 100})
        with pytest.raises(RenderError, match="exceeds maximum"):
            FlagPipeline(settings).run(SOLID_RED)
        assert list(temp_dir.iterdir()) == []

    def test_unwritable_output(self, pipeline, temp_dir):
        target = temp_dir / "no" / "such" / "dir.png"
        with pytest.raises(ImageWriteError):
            pipeline.run(SOLID_RED, RenderOptions(width=10, height=10, output_path=target))


class TestLoadAndValidate:
    """Test the non-rendering entry points."""

    def test_load_flag(self):
        tree = load_flag(NESTED_TAGS)
        assert_resolved_tree(tree)

    def test_validate_valid(self):
        result = validate_flag(NESTED_TAGS)
        assert result.valid is True
        assert result.errors == []
        assert result.tags == ["cell", "half"]

    def test_validate_invalid(self):
        result = validate_flag("(h (t a (s r)) (r b) 50)")
        assert result.valid is False
        assert len(result.errors) == 1
        assert "'b'" in result.errors[0]
        assert result.tags == ["a"]

    def test_validate_syntax_error(self):
        result = validate_flag("(h (s r) (s w) 50")
        assert result.valid is False
        assert "Unclosed" in result.errors[0]
