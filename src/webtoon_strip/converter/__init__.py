"""
Module: converter

Purpose:
    CBZ to webtoon strip conversion pipeline. Reads a zip archive of
    page images, decodes each page by content, stacks same-width pages
    vertically in name order and encodes the result as PNG.

Key Functions:
    - create_webtoon_strip(): Main entry point (in-memory strip)
    - convert_archive(): Strip written to a PNG file
    - encode_strip(): PNG into any binary sink

Key Classes:
    - StripConfig: Configuration for conversion settings
    - ConversionResult: Container for conversion output

Dependencies:
    - PIL: Decoding, compositing and PNG encoding
    - zipfile (std): Archive access

Used By:
    - webtoon_strip.server.app: HTTP endpoint
    - webtoon_strip.cli: Command line
"""

from .config import StripConfig
from .encoder import encode_strip, encode_strip_bytes, write_strip
from .errors import (
    ArchiveOpenError,
    ConversionError,
    DecodeError,
    EncodeError,
    NoValidPagesError,
)
from .pipeline import ConversionResult, convert_archive, create_webtoon_strip

__all__ = [
    "ArchiveOpenError",
    "ConversionError",
    "ConversionResult",
    "DecodeError",
    "EncodeError",
    "NoValidPagesError",
    "StripConfig",
    "convert_archive",
    "create_webtoon_strip",
    "encode_strip",
    "encode_strip_bytes",
    "write_strip",
]
