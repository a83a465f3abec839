"""
Module: converter.pipeline

Purpose:
    Main pipeline orchestrator for CBZ to webtoon strip conversion.
    Archive → (per page) decode → composite → encode.

    Pages are processed strictly one after another in sorted-name order.
    A page that fails to decode or has the wrong width is skipped and
    recorded; only archive, empty-strip and encoding failures end the
    conversion.

Key Functions:
    - create_webtoon_strip(): Build the strip image in memory
    - convert_archive(): Build the strip and write it as PNG
    - default_output_path(): book.cbz -> book.png

Key Classes:
    - ConversionResult: Strip image plus per-page outcomes

Dependencies:
    - converter.archive, converter.decoding, converter.compositor,
      converter.encoder, converter.timing

Used By:
    - server.app: GET /webtoon
    - cli: convert subcommand
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from webtoon_strip.core.models import PagePlacement, PageSkip, SkipReason

from .archive import ArchiveReader
from .compositor import StripCompositor
from .config import StripConfig
from .decoding import build_decoders, decode_page
from .encoder import write_strip
from .errors import DecodeError
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """
    Result of converting one archive.

    Attributes:
        source: Archive the strip was built from.
        image: Finished strip image.
        placements: Accepted pages with their y offsets, top to bottom.
        skipped: Pages left out (decode failure or width mismatch).
        timing: Phase timings for this conversion.
        output_path: PNG path when written by convert_archive().
    """
    source: Path
    image: Image.Image
    placements: Tuple[PagePlacement, ...]
    skipped: Tuple[PageSkip, ...]
    timing: TimingLog = field(default_factory=TimingLog)
    output_path: Optional[Path] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def page_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.placements)

    @property
    def warnings(self) -> Tuple[str, ...]:
        """Human-readable line per skipped page."""
        return tuple(f"Skipped {s.name} ({s.reason}): {s.detail}" for s in self.skipped)


def create_webtoon_strip(
    archive_path: Path,
    config: Optional[StripConfig] = None,
) -> ConversionResult:
    """
    Convert a CBZ archive into one vertical strip image.

    Pipeline:
    1. Open the archive and sort its entries by name
    2. For each candidate entry (recognised image extension):
       a. Read the entry bytes
       b. Decode by content, trying decoders in priority order
       c. Offer the page to the compositor (width check)
    3. Composite accepted pages top to bottom

    Args:
        archive_path: Path to a .cbz (zip) file. The caller is expected
            to have checked that it exists.
        config: Optional conversion configuration.

    Returns:
        ConversionResult with the strip and per-page outcomes.

    Raises:
        ArchiveOpenError: If the archive cannot be opened.
        NoValidPagesError: If no page was accepted into the strip.

    Example:
        >>> result = create_webtoon_strip(Path("chapter_01.cbz"))
        >>> result.image.size
        (800, 24000)
    """
    config = config or StripConfig()
    archive_path = Path(archive_path)
    decoders = build_decoders(config.decoder_order)
    compositor = StripCompositor(pixel_mode=config.pixel_mode)
    timing_log = TimingLog()

    with timed_phase(timing_log, "open_archive"):
        archive = ArchiveReader(archive_path, config.image_extensions)

    with archive:
        for info in archive.iter_candidates():
            name = info.filename
            try:
                with timed_phase(timing_log, "decode", page=name):
                    data = archive.read_entry(info)
                    page = decode_page(name, data, decoders, pixel_mode=config.pixel_mode)
            except DecodeError as e:
                logger.warning(f"Error decoding file {name}: {e.message}")
                compositor.record_skip(PageSkip(name, SkipReason.DECODE_FAILED, e.message))
                continue

            with timed_phase(timing_log, "append", page=name):
                compositor.add(page)

    with timed_phase(timing_log, "composite"):
        image = compositor.finish()

    logger.info(
        f"Built strip {image.width}x{image.height} from {compositor.page_count} pages "
        f"of {archive_path.name} ({len(compositor.skipped)} skipped)"
    )
    logger.debug(timing_log.summary())

    return ConversionResult(
        source=archive_path,
        image=image,
        placements=compositor.placements,
        skipped=compositor.skipped,
        timing=timing_log,
    )


def default_output_path(archive_path: Path) -> Path:
    """Output PNG path beside the archive: book.cbz -> book.png."""
    archive_path = Path(archive_path)
    return archive_path.with_suffix(".png")


def convert_archive(
    archive_path: Path,
    output_path: Optional[Path] = None,
    config: Optional[StripConfig] = None,
) -> ConversionResult:
    """
    Convert a CBZ archive and write the strip as PNG.

    Args:
        archive_path: Path to a .cbz (zip) file.
        output_path: Destination PNG. Defaults to default_output_path().
        config: Optional conversion configuration.

    Returns:
        ConversionResult with output_path set.

    Raises:
        ArchiveOpenError: If the archive cannot be opened.
        NoValidPagesError: If no page was accepted into the strip.
        EncodeError: If the PNG cannot be written.
    """
    config = config or StripConfig()
    output_path = Path(output_path) if output_path else default_output_path(archive_path)

    result = create_webtoon_strip(archive_path, config)
    with timed_phase(result.timing, "encode"):
        write_strip(result.image, output_path, compress_level=config.compress_level)
    result.output_path = output_path

    logger.info(f"Wrote {output_path}")
    return result
