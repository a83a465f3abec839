"""
Module: server.config

Purpose:
    Configuration dataclass for the HTTP server: where to listen, which
    directory archives are served from, and the conversion settings
    used for each request.

Key Classes:
    - ServerConfig: Immutable server settings

Used By:
    - server.app: create_app()
    - cli: serve subcommand
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from webtoon_strip.converter.config import StripConfig

ENV_HOST = "WEBTOON_STRIP_HOST"
ENV_PORT = "WEBTOON_STRIP_PORT"
ENV_CBZ_DIR = "WEBTOON_STRIP_CBZ_DIR"


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the webtoon HTTP server (immutable).

    Attributes:
        host: Interface to bind (default all interfaces)
        port: TCP port (default 8080)
        cbz_directory: Directory that requested archives are resolved against
        archive_extension: Only files with this extension are served
        strip: Conversion settings used for every request
    """
    host: str = "0.0.0.0"
    port: int = 8080
    cbz_directory: Path = Path("./")
    archive_extension: str = ".cbz"
    strip: StripConfig = field(default_factory=StripConfig)

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535: {self.port}")
        if not self.archive_extension.startswith("."):
            raise ValueError(f"archive_extension must start with '.': {self.archive_extension!r}")
        object.__setattr__(self, "cbz_directory", Path(self.cbz_directory))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build a config from environment variables, falling back to defaults.

        Reads WEBTOON_STRIP_HOST, WEBTOON_STRIP_PORT and WEBTOON_STRIP_CBZ_DIR.

        Raises:
            ValueError: If WEBTOON_STRIP_PORT is not an integer in range
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        if environ.get(ENV_HOST):
            kwargs["host"] = environ[ENV_HOST]
        if environ.get(ENV_PORT):
            try:
                kwargs["port"] = int(environ[ENV_PORT])
            except ValueError as e:
                raise ValueError(f"{ENV_PORT} must be an integer: {environ[ENV_PORT]!r}") from e
        if environ.get(ENV_CBZ_DIR):
            kwargs["cbz_directory"] = Path(environ[ENV_CBZ_DIR])
        return cls(**kwargs)
