"""Pytest fixtures and configuration for mdcopy tests.

This module provides shared fixtures for testing image classification,
loading, optimization, caching and the CLI.
"""

import os
import sys
import tempfile
from collections.abc import Callable, Generator
from io import BytesIO
from pathlib import Path

import pytest
from loguru import logger
from PIL import Image

from mdcopy.images import ImageCache, ImagePolicy

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def encode_image(img: Image.Image, fmt: str, **params) -> bytes:
    """Encode a Pillow image to bytes in the given format."""
    buffer = BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


@pytest.fixture
def encode() -> Callable[..., bytes]:
    """Return the image encoding helper."""
    return encode_image


# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def image_dir(temp_dir: Path) -> Path:
    """Create a document directory that local references resolve against."""
    docs = temp_dir / "docs"
    docs.mkdir()
    return docs


# --- Sample Image Fixtures ---


@pytest.fixture
def png_signature() -> bytes:
    """The bare 8-byte PNG signature (sniffable, not decodable)."""
    return PNG_SIGNATURE


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Create a 100x100 opaque red JPEG."""
    return encode_image(Image.new("RGB", (100, 100), color="red"), "JPEG")


@pytest.fixture
def sample_png_bytes() -> bytes:
    """Create a 100x100 opaque blue PNG."""
    return encode_image(Image.new("RGB", (100, 100), color="blue"), "PNG")


@pytest.fixture
def transparent_png_bytes() -> bytes:
    """Create a 400x200 semi-transparent RGBA PNG."""
    return encode_image(Image.new("RGBA", (400, 200), color=(255, 0, 0, 128)), "PNG")


@pytest.fixture
def write_image(image_dir: Path) -> Callable[[str, bytes], Path]:
    """Return a helper that writes bytes into the document directory."""

    def _write(name: str, data: bytes) -> Path:
        path = image_dir / name
        path.write_bytes(data)
        return path

    return _write


# --- Policy Fixtures ---


@pytest.fixture
def embed_all() -> ImagePolicy:
    """Embed local and remote images without optimization."""
    return ImagePolicy(embed_local=True, embed_remote=True)


@pytest.fixture
def embed_none() -> ImagePolicy:
    """Embed nothing."""
    return ImagePolicy(embed_local=False, embed_remote=False)


@pytest.fixture
def optimize_all() -> ImagePolicy:
    """Embed and optimize everything with a small dimension limit."""
    return ImagePolicy(
        embed_local=True,
        embed_remote=True,
        optimize_local=True,
        optimize_remote=True,
        max_dimension=100,
        quality=80,
    )


# --- Cache Fixtures ---


@pytest.fixture
def image_cache() -> Generator[ImageCache, None, None]:
    """Create an ImageCache and remove its scratch directory afterwards."""
    cache = ImageCache(fetch_timeout=5)
    yield cache
    cache.close()


# --- Logging Fixtures ---


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore loguru's default stderr handler after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


# --- Settings Isolation ---


@pytest.fixture(autouse=True)
def clean_mdcopy_env(monkeypatch):
    """Drop MDCOPY_* variables so tests see default settings."""
    for key in list(os.environ):
        if key.startswith("MDCOPY_"):
            monkeypatch.delenv(key, raising=False)
