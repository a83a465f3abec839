"""
Module: converter.decoding

Purpose:
    Content-based page decoding. Each entry's bytes are offered to a
    fixed, ordered list of decoders and the first one that fully decodes
    them wins. File extensions are never trusted here: archive creators
    often keep a page's old name (".jpg") after re-encoding it.

Key Functions:
    - decode_page(): Decode one entry into a PageRaster
    - sniff_format(): Report which encoding would decode the bytes
    - build_decoders(): Decoder chain for a given priority order

Key Classes:
    - PageDecoder: Abstract "try decode, return image or None" contract
    - PillowDecoder: Decoder restricted to a single Pillow format plugin

Dependencies:
    - PIL.Image: Decoding and mode conversion

Used By:
    - converter.pipeline: Decodes each candidate entry
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from typing import Iterable, Optional, Sequence, Tuple

from PIL import Image

from webtoon_strip.core.models import ImageFormat, PageRaster

from .config import DEFAULT_DECODER_ORDER
from .errors import DecodeError

logger = logging.getLogger(__name__)


class PageDecoder(ABC):
    """
    Decoder for one image encoding.

    Implementations must not raise for data they cannot handle; they
    return None so the next decoder in the chain can be tried.
    """

    format: ImageFormat

    @abstractmethod
    def try_decode(self, data: bytes) -> Optional[Image.Image]:
        """
        Decode data if it is in this decoder's encoding.

        Args:
            data: Raw entry bytes

        Returns:
            Fully loaded image, or None if the data is not a complete,
            valid image of this encoding
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.format.value})"


class PillowDecoder(PageDecoder):
    """
    Decoder backed by a single Pillow format plugin.

    Restricting Image.open() to one format means only that plugin's
    signature check and decoder run. The pixels are loaded eagerly so a
    truncated or corrupt body fails here rather than at paste time.
    """

    def __init__(self, image_format: ImageFormat) -> None:
        self.format = ImageFormat(image_format)

    def try_decode(self, data: bytes) -> Optional[Image.Image]:
        try:
            image = Image.open(BytesIO(data), formats=[self.format.value])
            image.load()
        except Exception as e:
            logger.debug(f"{self.format.value} decoder rejected data: {e}")
            return None
        return image


def build_decoders(
    order: Iterable[ImageFormat] = DEFAULT_DECODER_ORDER,
) -> Tuple[PageDecoder, ...]:
    """
    Build the decoder chain for a priority order.

    Args:
        order: Encodings to probe, highest priority first

    Returns:
        Tuple of decoders in the same order

    Example:
        >>> build_decoders()
        (PillowDecoder(JPEG), PillowDecoder(PNG), PillowDecoder(WEBP))
    """
    return tuple(PillowDecoder(fmt) for fmt in order)


DEFAULT_DECODERS: Tuple[PageDecoder, ...] = build_decoders()


def _probe(
    data: bytes,
    decoders: Sequence[PageDecoder],
) -> Tuple[Optional[ImageFormat], Optional[Image.Image]]:
    for decoder in decoders:
        image = decoder.try_decode(data)
        if image is not None:
            return decoder.format, image
    return None, None


def sniff_format(
    data: bytes,
    decoders: Sequence[PageDecoder] = DEFAULT_DECODERS,
) -> Optional[ImageFormat]:
    """
    Classify bytes by the first decoder that accepts them.

    Returns:
        The matching ImageFormat, or None if no decoder accepts the data
    """
    image_format, image = _probe(data, decoders)
    if image is not None:
        image.close()
    return image_format


# 16/32-bit integer grey modes; convert() clamps these to 255 instead of scaling
_WIDE_INTEGER_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def _reduce_to_eight_bit(image: Image.Image) -> Image.Image:
    """
    Scale a 16-bit greyscale image down to 8-bit "L" by keeping the high byte.

    Images in any other mode are returned unchanged.
    """
    if image.mode not in _WIDE_INTEGER_MODES:
        return image
    wide = image if image.mode == "I" else image.convert("I")
    reduced = wide.point(lambda v: v / 256).convert("L")
    if wide is not image:
        wide.close()
    return reduced


def decode_page(
    name: str,
    data: bytes,
    decoders: Sequence[PageDecoder] = DEFAULT_DECODERS,
    *,
    pixel_mode: str = "RGBA",
) -> PageRaster:
    """
    Decode one archive entry into a page raster.

    Decoders are tried in order and each at most once; the first success
    wins. The decoded image is converted to pixel_mode so every page in
    a strip shares one in-memory format.

    Args:
        name: Archive entry name (for logging and the raster)
        data: Raw entry bytes
        decoders: Decoder chain, highest priority first
        pixel_mode: Canonical Pillow mode for the raster

    Returns:
        PageRaster for the entry

    Raises:
        DecodeError: If no decoder accepts the data, or the decoded
            image cannot be converted to pixel_mode

    Example:
        >>> page = decode_page("001.jpg", png_bytes)
        >>> page.format
        <ImageFormat.PNG: 'PNG'>
    """
    image_format, image = _probe(data, decoders)
    if image is None:
        raise DecodeError(name, "unsupported image format")

    try:
        reduced = _reduce_to_eight_bit(image)
        if reduced is not image:
            image.close()
            image = reduced
        if image.mode != pixel_mode:
            converted = image.convert(pixel_mode)
            image.close()
            image = converted
    except (ValueError, OSError) as e:
        image.close()
        raise DecodeError(name, f"cannot convert {image_format.value} page to {pixel_mode}: {e}") from e

    logger.info(f"Successfully decoded {name} as {image_format.value.lower()}")
    return PageRaster(name=name, image=image, format=image_format)
