"""
Module: pages

Purpose:
    Provides the page-level dataclasses shared by the converter stages.
    A PageRaster is produced by the decoder, consumed by the compositor,
    and turned into either a PagePlacement (accepted) or a PageSkip.

Key Classes:
    - ImageFormat: Supported page encodings, in probing priority order
    - PageRaster: Decoded page with its source entry name
    - PagePlacement: Vertical position of an accepted page in the strip
    - SkipReason / PageSkip: Recoverable per-page outcomes

Dependencies:
    - dataclasses (std)
    - enum (std)
    - PIL.Image (TYPE_CHECKING only)

Used By:
    - converter.decoding
    - converter.compositor
    - converter.pipeline
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PIL import Image


class ImageFormat(str, Enum):
    """Supported page encodings (values are Pillow format identifiers)."""
    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"

    def __str__(self) -> str:
        return self.value


class SkipReason(str, Enum):
    """Why a candidate page was left out of the strip."""
    DECODE_FAILED = "decode_failed"
    WIDTH_MISMATCH = "width_mismatch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PageRaster:
    """
    A decoded page.

    Attributes:
        name: Archive entry name the page was read from.
        image: Decoded pixels, already converted to the canonical mode.
        format: Encoding that successfully decoded the entry.

    Example:
        >>> page = PageRaster("001.png", Image.new("RGBA", (800, 1200)), ImageFormat.PNG)
        >>> page.size
        (800, 1200)
    """
    name: str
    image: Image.Image
    format: ImageFormat

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


@dataclass(frozen=True)
class PagePlacement:
    """
    Position of an accepted page inside the strip.

    The page occupies rows [y_offset, y_offset + height).
    """
    name: str
    y_offset: int
    height: int

    def __post_init__(self) -> None:
        if self.y_offset < 0:
            raise ValueError(f"y_offset must be >= 0: {self.y_offset}")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height}")

    @property
    def bottom(self) -> int:
        """First row below this page (exclusive)."""
        return self.y_offset + self.height

    def to_dict(self) -> dict:
        return {"name": self.name, "y_offset": self.y_offset, "height": self.height}


@dataclass(frozen=True)
class PageSkip:
    """A candidate page that did not make it into the strip."""
    name: str
    reason: SkipReason
    detail: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "reason": self.reason.value, "detail": self.detail}
