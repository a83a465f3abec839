"""
Module: converter.compositor

Purpose:
    Builds the webtoon strip: a single vertical image containing every
    accepted page, stacked top to bottom in the order pages arrive.

    The first accepted page fixes the strip width. Later pages of a
    different width are left out and recorded as skips; they never
    abort the conversion.

Key Classes:
    - StripState: UNINITIALIZED until the first page, then ESTABLISHED
    - StripCompositor: Append-only accumulator producing the strip

Dependencies:
    - PIL.Image: Canvas allocation and pasting
    - core.models: PageRaster, PagePlacement, PageSkip

Used By:
    - converter.pipeline: Feeds decoded pages in sorted-name order
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

from PIL import Image

from webtoon_strip.core.models import PagePlacement, PageRaster, PageSkip, SkipReason

from .errors import NoValidPagesError

logger = logging.getLogger(__name__)


class StripState(str, Enum):
    """Lifecycle of a strip."""
    UNINITIALIZED = "uninitialized"
    ESTABLISHED = "established"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


class StripCompositor:
    """
    Accumulates same-width pages into one tall image.

    Accepted pages are kept in arrival order with their y offset; the
    canvas itself is allocated once in finish(), sized to the final
    height, and each page is pasted into its own band. Nothing already
    placed is ever moved or overwritten.

    Attributes:
        pixel_mode: Mode of the output canvas (pages must already match).

    Example:
        >>> compositor = StripCompositor()
        >>> compositor.add(page_1)   # establishes width
        True
        >>> compositor.add(page_2)   # same width, appended below
        True
        >>> strip = compositor.finish()
        >>> strip.height == page_1.height + page_2.height
        True
    """

    def __init__(self, pixel_mode: str = "RGBA") -> None:
        self.pixel_mode = pixel_mode
        self._state = StripState.UNINITIALIZED
        self._width = 0
        self._height = 0
        self._pages: List[PageRaster] = []
        self._placements: List[PagePlacement] = []
        self._skipped: List[PageSkip] = []

    @property
    def state(self) -> StripState:
        return self._state

    @property
    def width(self) -> int:
        """Strip width, 0 until the first page is accepted."""
        return self._width

    @property
    def height(self) -> int:
        """Sum of the heights of accepted pages so far."""
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def placements(self) -> Tuple[PagePlacement, ...]:
        return tuple(self._placements)

    @property
    def skipped(self) -> Tuple[PageSkip, ...]:
        return tuple(self._skipped)

    @property
    def page_count(self) -> int:
        return len(self._placements)

    def add(self, page: PageRaster) -> bool:
        """
        Offer the next page in reading order.

        Args:
            page: Decoded page

        Returns:
            True if the page was appended, False if it was skipped
            because its width differs from the strip width

        Raises:
            RuntimeError: If called after finish()
        """
        if self._state is StripState.FINISHED:
            raise RuntimeError("Cannot add pages to a finished strip")

        if self._state is StripState.UNINITIALIZED:
            self._width = page.width
            self._state = StripState.ESTABLISHED
            logger.debug(f"Strip width set to {self._width} by {page.name}")
        elif page.width != self._width:
            detail = f"width {page.width} doesn't match common width {self._width}"
            logger.warning(f"Skipping {page.name}: {detail}")
            self._skipped.append(PageSkip(page.name, SkipReason.WIDTH_MISMATCH, detail))
            page.image.close()
            return False

        self._placements.append(PagePlacement(page.name, self._height, page.height))
        self._pages.append(page)
        self._height += page.height
        return True

    def record_skip(self, skip: PageSkip) -> None:
        """Record a page the caller dropped before it reached add()."""
        self._skipped.append(skip)

    def finish(self) -> Image.Image:
        """
        Produce the strip image.

        Returns:
            Image of size (width, total height) in pixel_mode

        Raises:
            NoValidPagesError: If no page was ever accepted
            RuntimeError: If the strip was already finished

        Example:
            >>> StripCompositor().finish()
            Traceback (most recent call last):
            ...
            NoValidPagesError: no valid images found with matching width in the CBZ file
        """
        if self._state is StripState.FINISHED:
            raise RuntimeError("Strip already finished")
        if self._state is StripState.UNINITIALIZED:
            raise NoValidPagesError("no valid images found with matching width in the CBZ file")

        strip = Image.new(self.pixel_mode, (self._width, self._height))
        for page, placement in zip(self._pages, self._placements):
            strip.paste(page.image, (0, placement.y_offset))
            page.image.close()

        self._pages.clear()
        self._state = StripState.FINISHED
        return strip
