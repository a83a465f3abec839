"""
Tests for converter.encoder

Test Coverage:
- encode_strip() / encode_strip_bytes(): PNG output, lossless round trip
- write_strip(): atomic file writes, no partial files on failure
- EncodeError on sink failures
"""
from io import BytesIO
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from webtoon_strip.converter.encoder import encode_strip, encode_strip_bytes, write_strip
from webtoon_strip.converter.errors import EncodeError


@pytest.fixture
def noisy_strip():
    """RGBA image with varied pixels, including partial alpha."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(37, 23, 4), dtype=np.uint8)
    return Image.fromarray(pixels)


class FailingSink:
    """Binary sink whose writes always fail."""

    def write(self, data):
        raise OSError("connection reset")

    def flush(self):
        pass


def test_round_trip_is_lossless(noisy_strip):
    """Decoding the PNG reproduces the exact pixel grid."""
    data = encode_strip_bytes(noisy_strip)

    decoded = Image.open(BytesIO(data))
    assert decoded.format == "PNG"
    assert decoded.size == noisy_strip.size
    assert np.array_equal(np.asarray(decoded.convert("RGBA")), np.asarray(noisy_strip))


def test_encode_into_sink(noisy_strip):
    sink = BytesIO()
    encode_strip(noisy_strip, sink)
    assert sink.getvalue().startswith(b"\x89PNG\r\n\x1a\n")


def test_default_compress_level_passed_to_pillow(noisy_strip):
    with patch.object(Image.Image, "save") as mock_save:
        encode_strip(noisy_strip, BytesIO())
    assert mock_save.call_args.kwargs == {"format": "PNG", "compress_level": 6}


def test_compress_level_does_not_change_pixels(noisy_strip):
    fast = Image.open(BytesIO(encode_strip_bytes(noisy_strip, compress_level=1)))
    best = Image.open(BytesIO(encode_strip_bytes(noisy_strip, compress_level=9)))
    assert np.array_equal(np.asarray(fast), np.asarray(best))


def test_sink_failure_raises_encode_error(noisy_strip):
    with pytest.raises(EncodeError, match="error encoding PNG"):
        encode_strip(noisy_strip, FailingSink())


def test_write_strip_creates_file(tmp_path, noisy_strip):
    path = tmp_path / "out" / "book.png"

    result = write_strip(noisy_strip, path)

    assert result == path
    with Image.open(path) as written:
        assert written.size == (23, 37)
    assert list(path.parent.iterdir()) == [path]


def test_write_strip_leaves_no_partial_file(tmp_path, noisy_strip):
    """A failed encode removes the temp file and never creates the target."""
    path = tmp_path / "book.png"

    with patch.object(Image.Image, "save", side_effect=OSError("disk full")):
        with pytest.raises(EncodeError):
            write_strip(noisy_strip, path)

    assert not path.exists()
    assert list(tmp_path.iterdir()) == []


def test_write_strip_replaces_existing(tmp_path, noisy_strip):
    path = tmp_path / "book.png"
    path.write_bytes(b"old")

    write_strip(noisy_strip, path)

    assert path.read_bytes().startswith(b"\x89PNG")
