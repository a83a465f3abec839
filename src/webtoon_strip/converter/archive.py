"""
Module: converter.archive

Purpose:
    Read-only access to CBZ (zip) archives. Entries are always handed
    out in ascending name order so that reading order is independent of
    how the archive happens to store them.

Key Classes:
    - ArchiveReader: Context manager over an open zip archive

Dependencies:
    - zipfile (std)

Used By:
    - converter.pipeline: Enumerates candidate pages
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import DEFAULT_IMAGE_EXTENSIONS, is_candidate_entry
from .errors import ArchiveOpenError, DecodeError

logger = logging.getLogger(__name__)


class ArchiveReader:
    """
    Sorted, read-only view of a zip archive.

    The archive is opened on construction and released by close() or
    by leaving the ``with`` block, whichever path the caller exits by.

    Attributes:
        path: Path to the archive on disk.
        extensions: Extensions that mark candidate page entries.

    Example:
        >>> with ArchiveReader(Path("book.cbz")) as archive:
        ...     for name, data in archive.iter_candidates():
        ...         print(name, len(data))
    """

    def __init__(
        self,
        path: Path,
        extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS,
    ) -> None:
        self.path = Path(path)
        self.extensions = extensions
        try:
            self._zip: Optional[zipfile.ZipFile] = zipfile.ZipFile(self.path, "r")
        except (zipfile.BadZipFile, OSError, ValueError) as e:
            raise ArchiveOpenError(f"error opening CBZ file {self.path}: {e}") from e

        # Stable sort keeps duplicate names in storage order
        self._entries: List[zipfile.ZipInfo] = sorted(
            (info for info in self._zip.infolist() if not info.is_dir()),
            key=lambda info: info.filename,
        )
        logger.debug(f"Opened {self.path.name} with {len(self._entries)} entries")

    def entry_names(self) -> List[str]:
        """All file entry names, sorted ascending."""
        return [info.filename for info in self._entries]

    def candidate_names(self) -> List[str]:
        """Sorted names of entries whose extension marks them as pages."""
        return [
            info.filename
            for info in self._entries
            if is_candidate_entry(info.filename, self.extensions)
        ]

    def iter_candidates(self) -> Iterator[zipfile.ZipInfo]:
        """
        Yield the ZipInfo of each candidate entry in sorted order.

        Bytes are fetched separately with read_entry() so that one
        unreadable entry does not end the iteration.
        """
        for info in self._entries:
            if is_candidate_entry(info.filename, self.extensions):
                yield info

    def read_entry(self, info: zipfile.ZipInfo) -> bytes:
        """
        Read one entry's bytes.

        Raises:
            DecodeError: If the entry's compressed data cannot be read
                (bad CRC, corrupt stream, unsupported compression).
        """
        if self._zip is None:
            raise ValueError(f"Archive already closed: {self.path}")
        try:
            return self._zip.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError, EOFError) as e:
            raise DecodeError(info.filename, f"error reading entry: {e}") from e

    def close(self) -> None:
        """Close the archive and free resources."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    @property
    def closed(self) -> bool:
        return self._zip is None

    def __enter__(self) -> "ArchiveReader":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit - close resources."""
        self.close()
