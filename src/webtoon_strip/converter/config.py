"""
Module: converter.config

Purpose:
    Configuration dataclass for the conversion pipeline. Immutable
    settings for which entries count as pages, decoder priority, the
    canonical pixel mode and PNG compression effort.

Key Classes:
    - StripConfig: Main configuration for strip conversion

Dependencies:
    - dataclasses (std)
    - core.models.ImageFormat

Used By:
    - converter.pipeline: Uses StripConfig for pipeline settings
    - server.config: Embeds a StripConfig
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from webtoon_strip.core.models import ImageFormat

DEFAULT_IMAGE_EXTENSIONS: Tuple[str, ...] = (".jpg", ".jpeg", ".png", ".webp")
DEFAULT_DECODER_ORDER: Tuple[ImageFormat, ...] = (
    ImageFormat.JPEG,
    ImageFormat.PNG,
    ImageFormat.WEBP,
)
# zlib's default effort; 9 is markedly slower for little gain on page art
DEFAULT_COMPRESS_LEVEL = 6


@dataclass(frozen=True)
class StripConfig:
    """
    Configuration for strip conversion (immutable).

    Attributes:
        image_extensions: Lower-case extensions marking candidate entries.
        decoder_order: Encodings to probe, highest priority first.
        compress_level: PNG zlib level for the output (0-9, default 6).
        pixel_mode: Pillow mode every page is converted to (default "RGBA").

    Example:
        >>> config = StripConfig(compress_level=1)
        >>> config.is_candidate("pages/001.JPG")
        True
    """
    image_extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    decoder_order: Tuple[ImageFormat, ...] = DEFAULT_DECODER_ORDER
    compress_level: int = DEFAULT_COMPRESS_LEVEL
    pixel_mode: str = "RGBA"

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if not 0 <= self.compress_level <= 9:
            raise ValueError(f"compress_level must be between 0 and 9: {self.compress_level}")
        if not self.image_extensions:
            raise ValueError("image_extensions must not be empty")
        for ext in self.image_extensions:
            if not ext.startswith(".") or ext != ext.lower():
                raise ValueError(f"extensions must be lower-case and start with '.': {ext!r}")
        if not self.decoder_order:
            raise ValueError("decoder_order must not be empty")
        if len(set(self.decoder_order)) != len(self.decoder_order):
            raise ValueError(f"decoder_order contains duplicates: {self.decoder_order}")
        # Normalise plain strings ("PNG") to ImageFormat members
        object.__setattr__(
            self, "decoder_order", tuple(ImageFormat(f) for f in self.decoder_order)
        )

    def is_candidate(self, entry_name: str) -> bool:
        """Whether an archive entry name marks a page image."""
        return is_candidate_entry(entry_name, self.image_extensions)


def is_candidate_entry(
    entry_name: str,
    extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS,
) -> bool:
    """
    Check an entry name's extension against the recognised set.

    Matching is case-insensitive and looks only at the final suffix,
    so "001.PNG" matches and "001.png.txt" does not.
    """
    if entry_name.endswith("/"):
        return False
    basename = entry_name.rsplit("/", 1)[-1]
    dot = basename.rfind(".")
    if dot < 0:
        return False
    return basename[dot:].lower() in extensions
