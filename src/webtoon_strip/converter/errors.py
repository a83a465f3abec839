"""
Module: converter.errors

Purpose:
    Exception hierarchy for the conversion pipeline.

    Fatal to a conversion:
        - ArchiveOpenError: archive missing, unreadable or not a zip
        - NoValidPagesError: no page was accepted into the strip
        - EncodeError: the finished strip could not be serialized

    Recovered per page by the pipeline:
        - DecodeError: no supported decoder accepted the entry

Used By:
    - converter.archive, converter.decoding, converter.compositor,
      converter.encoder, converter.pipeline
    - server.app: Maps fatal errors to HTTP responses
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for conversion failures."""
    pass


class ArchiveOpenError(ConversionError):
    """Archive cannot be opened or is not a valid zip container."""
    pass


class DecodeError(ConversionError):
    """A single archive entry could not be decoded as a page."""

    def __init__(self, name: str, message: str = "unsupported image format") -> None:
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message


class NoValidPagesError(ConversionError):
    """No page was accepted into the strip."""
    pass


class EncodeError(ConversionError):
    """The strip could not be serialized or written."""
    pass
