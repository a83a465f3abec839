"""
Module: server

Purpose:
    HTTP surface for the converter: GET /webtoon?file=<name>.cbz.

Key Functions:
    - create_app(): FastAPI application factory

Key Classes:
    - ServerConfig: Host, port and archive directory settings
"""

from .app import create_app, resolve_archive_path
from .config import ServerConfig

__all__ = ["ServerConfig", "create_app", "resolve_archive_path"]
