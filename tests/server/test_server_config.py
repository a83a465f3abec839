"""
Tests for server.config

Test Coverage:
- ServerConfig defaults and validation
- ServerConfig.from_env(): environment overrides
"""
from pathlib import Path

import pytest

from webtoon_strip.converter.config import StripConfig
from webtoon_strip.server.config import ServerConfig


def test_defaults():
    config = ServerConfig()
    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.cbz_directory == Path("./")
    assert config.archive_extension == ".cbz"
    assert config.strip == StripConfig()


def test_directory_coerced_to_path():
    config = ServerConfig(cbz_directory="library")  # type: ignore[arg-type]
    assert config.cbz_directory == Path("library")


@pytest.mark.parametrize("port", [0, -1, 65536])
def test_invalid_port(port):
    with pytest.raises(ValueError):
        ServerConfig(port=port)


def test_invalid_extension():
    with pytest.raises(ValueError):
        ServerConfig(archive_extension="cbz")


def test_from_env_overrides():
    config = ServerConfig.from_env({
        "WEBTOON_STRIP_HOST": "127.0.0.1",
        "WEBTOON_STRIP_PORT": "9090",
        "WEBTOON_STRIP_CBZ_DIR": "/srv/comics",
    })
    assert config.host == "127.0.0.1"
    assert config.port == 9090
    assert config.cbz_directory == Path("/srv/comics")


def test_from_env_empty_uses_defaults():
    assert ServerConfig.from_env({}) == ServerConfig()


def test_from_env_bad_port():
    with pytest.raises(ValueError, match="WEBTOON_STRIP_PORT"):
        ServerConfig.from_env({"WEBTOON_STRIP_PORT": "eighty"})
