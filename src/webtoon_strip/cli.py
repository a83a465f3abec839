"""
Module: cli

Purpose:
    Command-line entry point.

        webtoon-strip convert chapter_01.cbz -o chapter_01.png
        webtoon-strip serve --port 8080 --directory ./library

Key Functions:
    - main(): Parse arguments and dispatch to a subcommand
    - configure_logging(): Root logger setup shared by both subcommands
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from webtoon_strip import __version__
from webtoon_strip.converter import ConversionError, StripConfig, convert_archive
from webtoon_strip.converter.config import DEFAULT_COMPRESS_LEVEL
from webtoon_strip.server.config import ServerConfig

logger = logging.getLogger("webtoon_strip")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging: INFO by default, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )


def _cmd_convert(args: argparse.Namespace) -> int:
    if not args.archive.exists():
        logger.error(f"File not found: {args.archive}")
        return 1

    try:
        config = StripConfig(compress_level=args.compress_level)
    except ValueError as e:
        logger.error(str(e))
        return 2

    try:
        result = convert_archive(args.archive, args.output, config)
    except ConversionError as e:
        logger.error(f"Error creating webtoon strip: {e}")
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    print(f"{result.output_path} ({result.width}x{result.height}, {len(result.placements)} pages)")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from webtoon_strip.server.app import create_app

    try:
        base = ServerConfig.from_env()
        config = ServerConfig(
            host=args.host or base.host,
            port=args.port or base.port,
            cbz_directory=args.directory or base.cbz_directory,
            strip=base.strip,
        )
    except ValueError as e:
        logger.error(str(e))
        return 2
    if not config.cbz_directory.is_dir():
        logger.error(f"Directory not found: {config.cbz_directory}")
        return 1

    logger.info(f"Server starting on port {config.port}...")
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webtoon-strip",
        description="Stack the pages of a CBZ archive into one vertical webtoon strip",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a CBZ archive to a PNG strip")
    convert.add_argument("archive", type=Path, help="Path to the .cbz archive")
    convert.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output PNG path (default: archive path with .png extension)",
    )
    convert.add_argument(
        "--compress-level",
        type=int,
        default=DEFAULT_COMPRESS_LEVEL,
        help="PNG compression level 0-9 (default: %(default)s)",
    )
    convert.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    convert.set_defaults(handler=_cmd_convert)

    serve = subparsers.add_parser("serve", help="Serve strips over HTTP at /webtoon?file=NAME.cbz")
    serve.add_argument("--host", default=None, help="Interface to bind (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on (default: 8080)")
    serve.add_argument(
        "--directory",
        type=Path,
        default=None,
        help="Directory holding .cbz files (default: current directory)",
    )
    serve.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    serve.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
