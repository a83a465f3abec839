"""
Module: converter.encoder

Purpose:
    Serializes a finished strip to PNG, either into a caller-supplied
    binary sink (HTTP response body, BytesIO) or atomically to a file.

Key Functions:
    - encode_strip(): Write PNG into any binary sink
    - encode_strip_bytes(): Return PNG bytes
    - write_strip(): Atomic file write (temp file then replace)

Dependencies:
    - PIL.Image: PNG encoding

Used By:
    - converter.pipeline: convert_archive() output step
    - server.app: Response body
    - cli: convert subcommand (via pipeline)
"""

from __future__ import annotations

import logging
import tempfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from .config import DEFAULT_COMPRESS_LEVEL
from .errors import EncodeError

logger = logging.getLogger(__name__)


def encode_strip(
    image: Image.Image,
    sink: BinaryIO,
    *,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> None:
    """
    Encode the strip as PNG into a binary sink.

    Args:
        image: Finished strip
        sink: Writable binary file-like object
        compress_level: zlib effort, 0-9

    Raises:
        EncodeError: If encoding or writing to the sink fails
    """
    try:
        image.save(sink, format="PNG", compress_level=compress_level)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"error encoding PNG: {e}") from e


def encode_strip_bytes(
    image: Image.Image,
    *,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> bytes:
    """Encode the strip as PNG and return the bytes."""
    buffer = BytesIO()
    encode_strip(image, buffer, compress_level=compress_level)
    return buffer.getvalue()


def write_strip(
    image: Image.Image,
    path: Path,
    *,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> Path:
    """
    Write the strip to a PNG file atomically.

    The image is written to a temp file in the destination directory
    and then moved into place, so a failed write never leaves a
    partial PNG at path.

    Args:
        image: Finished strip
        path: Destination .png path
        compress_level: zlib effort, 0-9

    Returns:
        The destination path

    Raises:
        EncodeError: If the directory, temp file or image cannot be written
    """
    path = Path(path)
    temp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=".png",
            dir=path.parent,
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            encode_strip(image, f, compress_level=compress_level)
        # Use replace() instead of rename() for Windows compatibility
        temp_path.replace(path)
    except OSError as e:
        raise EncodeError(f"error writing {path}: {e}") from e
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

    logger.debug(f"Wrote strip {image.size[0]}x{image.size[1]} to {path}")
    return path
