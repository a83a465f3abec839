"""
Tests for converter.compositor

Test Coverage:
- State transitions: UNINITIALIZED -> ESTABLISHED -> FINISHED
- Width invariant: mismatched pages skipped, strip unaffected
- Height accumulation and placement offsets
- Pixel order in the finished strip
- NoValidPagesError when nothing was accepted
"""
import pytest
from PIL import Image

from webtoon_strip.converter.compositor import StripCompositor, StripState
from webtoon_strip.converter.errors import NoValidPagesError
from webtoon_strip.core.models import ImageFormat, PageRaster, PageSkip, SkipReason


def make_raster(name, width, height, color=(255, 255, 255, 255)):
    return PageRaster(name, Image.new("RGBA", (width, height), color=color), ImageFormat.PNG)


def test_initial_state():
    compositor = StripCompositor()
    assert compositor.state is StripState.UNINITIALIZED
    assert compositor.size == (0, 0)
    assert compositor.placements == ()


def test_first_page_establishes_width():
    compositor = StripCompositor()

    assert compositor.add(make_raster("001.png", 800, 1200)) is True

    assert compositor.state is StripState.ESTABLISHED
    assert compositor.width == 800
    assert compositor.height == 1200


def test_matching_pages_append_below():
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 50, 10))
    compositor.add(make_raster("002.png", 50, 20))
    compositor.add(make_raster("003.png", 50, 30))

    assert compositor.height == 60
    assert [(p.name, p.y_offset, p.height) for p in compositor.placements] == [
        ("001.png", 0, 10),
        ("002.png", 10, 20),
        ("003.png", 30, 30),
    ]


def test_mismatched_width_skipped():
    """Wrong-width page is dropped; strip size is unchanged."""
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 50, 10))

    assert compositor.add(make_raster("002.png", 60, 20)) is False

    assert compositor.size == (50, 10)
    assert compositor.page_count == 1
    assert compositor.skipped == (
        PageSkip("002.png", SkipReason.WIDTH_MISMATCH, "width 60 doesn't match common width 50"),
    )


def test_mismatch_logged(caplog):
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 50, 10))
    with caplog.at_level("WARNING", logger="webtoon_strip.converter.compositor"):
        compositor.add(make_raster("002.png", 49, 10))
    assert "Skipping 002.png: width 49 doesn't match common width 50" in caplog.text


def test_finish_stacks_pages_top_to_bottom():
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 4, 2, (255, 0, 0, 255)))
    compositor.add(make_raster("002.png", 4, 3, (0, 255, 0, 255)))
    compositor.add(make_raster("003.png", 5, 3, (9, 9, 9, 255)))  # skipped
    compositor.add(make_raster("004.png", 4, 1, (0, 0, 255, 255)))

    strip = compositor.finish()

    assert strip.size == (4, 6)
    assert strip.mode == "RGBA"
    column = [strip.getpixel((2, y)) for y in range(6)]
    assert column == [
        (255, 0, 0, 255),
        (255, 0, 0, 255),
        (0, 255, 0, 255),
        (0, 255, 0, 255),
        (0, 255, 0, 255),
        (0, 0, 255, 255),
    ]


def test_transparent_pixels_copied_not_blended():
    """Pages replace the canvas pixels, alpha included."""
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 2, 2, (10, 20, 30, 0)))
    strip = compositor.finish()
    assert strip.getpixel((0, 0)) == (10, 20, 30, 0)


def test_single_page_strip():
    compositor = StripCompositor()
    compositor.add(make_raster("only.png", 30, 70, (1, 2, 3, 255)))

    strip = compositor.finish()

    assert strip.size == (30, 70)
    assert strip.getpixel((29, 69)) == (1, 2, 3, 255)


def test_finish_without_pages_raises():
    with pytest.raises(NoValidPagesError):
        StripCompositor().finish()


def test_finish_with_only_recorded_skips_raises():
    compositor = StripCompositor()
    compositor.record_skip(PageSkip("bad.jpg", SkipReason.DECODE_FAILED, "unsupported image format"))
    with pytest.raises(NoValidPagesError):
        compositor.finish()
    assert len(compositor.skipped) == 1


def test_cannot_add_or_finish_twice():
    compositor = StripCompositor()
    compositor.add(make_raster("001.png", 4, 4))
    compositor.finish()

    assert compositor.state is StripState.FINISHED
    with pytest.raises(RuntimeError):
        compositor.add(make_raster("002.png", 4, 4))
    with pytest.raises(RuntimeError):
        compositor.finish()
