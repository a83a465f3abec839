import pytest
import sys
import zipfile
from io import BytesIO
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import webtoon_strip
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


def page_bytes(width: int, height: int, color=(255, 255, 255), fmt: str = "PNG") -> bytes:
    """Encode a solid-color page in the given Pillow format."""
    mode = "RGBA" if fmt in ("PNG", "WEBP") and len(color) == 4 else "RGB"
    img = Image.new(mode, (width, height), color=color)
    buffer = BytesIO()
    if fmt == "WEBP":
        img.save(buffer, format="WEBP", lossless=True)
    else:
        img.save(buffer, format=fmt)
    return buffer.getvalue()


def write_cbz(path: Path, entries) -> Path:
    """Write a zip archive with entries given as (name, bytes) pairs, in that storage order."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
    return path


@pytest.fixture
def make_page():
    """Factory for encoded page bytes."""
    return page_bytes


@pytest.fixture
def make_cbz(tmp_path: Path):
    """Factory writing a CBZ into tmp_path."""
    def _make(entries, name: str = "book.cbz") -> Path:
        return write_cbz(tmp_path / name, entries)
    return _make


@pytest.fixture
def sample_cbz(make_cbz, make_page):
    """Three 40px-wide pages stored out of order, plus a non-image entry."""
    return make_cbz([
        ("003.png", make_page(40, 30, (0, 0, 255))),
        ("ComicInfo.xml", b"<ComicInfo/>"),
        ("001.png", make_page(40, 10, (255, 0, 0))),
        ("002.jpg", make_page(40, 20, (0, 255, 0), fmt="JPEG")),
    ])


@pytest.fixture
def write_archive():
    """write_cbz() for archives outside tmp_path's root."""
    return write_cbz
