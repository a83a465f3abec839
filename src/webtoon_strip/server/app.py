"""
Module: server.app

Purpose:
    FastAPI application serving webtoon strips over HTTP.

    GET /webtoon?file=<name>.cbz resolves the name against the configured
    archive directory, converts the archive and returns the strip as an
    inline PNG. Request validation and response headers live here; the
    conversion itself is converter.create_webtoon_strip().

Key Functions:
    - create_app(): Build the FastAPI app for a ServerConfig
    - resolve_archive_path(): Map a requested name to a path inside the directory
    - content_disposition(): Latin-1 safe inline Content-Disposition value

Dependencies:
    - fastapi: Routing and responses
    - converter: Conversion pipeline and PNG encoder

Used By:
    - cli: serve subcommand (run with uvicorn)
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse, Response

from webtoon_strip import __version__
from webtoon_strip.converter import (
    ConversionError,
    EncodeError,
    create_webtoon_strip,
    encode_strip_bytes,
)

from .config import ServerConfig

logger = logging.getLogger(__name__)


class InvalidArchivePathError(ValueError):
    """Requested name resolves outside the archive directory."""
    pass


def resolve_archive_path(cbz_directory: Path, filename: str) -> Path:
    """
    Resolve a requested archive name inside cbz_directory.

    The name is normalised the way a URL path is ("a/./b/../c.cbz" ->
    "a/c.cbz") before joining.

    Raises:
        InvalidArchivePathError: If the result would leave cbz_directory
    """
    cleaned = posixpath.normpath(filename.replace("\\", "/"))
    if cleaned.startswith("/") or cleaned == ".." or cleaned.startswith("../"):
        raise InvalidArchivePathError(f"Invalid file path: {filename}")

    root = cbz_directory.resolve()
    candidate = (root / cleaned).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as e:
        raise InvalidArchivePathError(f"Invalid file path: {filename}") from e
    return candidate


def content_disposition(filename: str) -> str:
    """
    Build an inline Content-Disposition header value for filename.

    Header values must be latin-1, so names outside ASCII get an
    underscore-substituted filename= fallback plus an RFC 5987
    filename*= parameter carrying the UTF-8 name.

    Example:
        >>> print(content_disposition("漫画.cbz.png"))
        inline; filename="__.cbz.png"; filename*=UTF-8''%E6%BC%AB%E7%94%BB.cbz.png
    """
    fallback = "".join(ch if " " <= ch <= "~" else "_" for ch in filename)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    value = f'inline; filename="{fallback}"'
    if not filename.isascii():
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Server configuration (defaults to ServerConfig())

    Returns:
        Configured FastAPI application

    Example:
        >>> app = create_app(ServerConfig(cbz_directory=Path("library")))
        >>> uvicorn.run(app, host="0.0.0.0", port=8080)
    """
    config = config or ServerConfig()

    app = FastAPI(
        title="webtoon-strip",
        description="Serve CBZ archives as single vertical webtoon strips",
        version=__version__,
    )
    app.state.config = config

    @app.get("/healthz")
    @app.get("/ping")
    def health():
        return {"status": "ok"}

    # Sync endpoint: FastAPI runs each request in its own worker thread
    @app.get("/webtoon")
    def webtoon(file: Optional[str] = Query(default=None)):
        if not file:
            return PlainTextResponse("File parameter is required", status_code=400)

        if posixpath.splitext(file)[1] != config.archive_extension:
            return PlainTextResponse(
                f"Invalid file extension. Only {config.archive_extension} files are allowed",
                status_code=400,
            )

        try:
            archive_path = resolve_archive_path(config.cbz_directory, file)
        except InvalidArchivePathError:
            return PlainTextResponse("Invalid file path", status_code=400)

        if not archive_path.exists():
            return PlainTextResponse("File not found", status_code=404)

        try:
            result = create_webtoon_strip(archive_path, config.strip)
        except ConversionError as e:
            logger.error(f"Error creating webtoon strip: {e}")
            return PlainTextResponse(f"Error processing file: {e}", status_code=500)

        try:
            body = encode_strip_bytes(result.image, compress_level=config.strip.compress_level)
        except EncodeError as e:
            logger.error(f"Error streaming PNG: {e}")
            return PlainTextResponse("Error sending image", status_code=500)
        finally:
            result.image.close()

        basename = posixpath.basename(file.replace("\\", "/"))
        return Response(
            content=body,
            media_type="image/png",
            headers={"Content-Disposition": content_disposition(f"{basename}.png")},
        )

    return app
