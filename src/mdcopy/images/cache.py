"""
Image caching utilities.

One ``ImageCache`` is created per conversion run and shared by every
output renderer so that a remote image referenced from several formats is
fetched and optimized only once. Local files are never cached.
"""

import hashlib
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

import httpx
from loguru import logger

from .base import EmbeddedImage, FailurePolicy, ImagePolicy, ReferenceKind
from .errors import ImageError
from .loader import (
    DEFAULT_FETCH_TIMEOUT,
    fetch_remote_image,
    handle_load_error,
    load_image_with_fallback,
    read_local_image,
)
from .optimize import optimize_image
from .sniff import classify_reference, sniff_from_bytes


@dataclass
class _CacheEntry:
    path: Path
    optimized: bool = False


class ImageCache:
    """Deduplicates remote image fetches and optimization within one run."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        """
        Initialize the image cache.

        Args:
            client: Optional HTTP client used for every remote fetch
            fetch_timeout: HTTP request timeout in seconds when no client is given
        """
        self.client = client
        self.fetch_timeout = fetch_timeout
        self._lock = threading.Lock()
        self._entries: dict[str, _CacheEntry] = {}

        # Removed on close() or when this instance is garbage collected
        self._scratch: tempfile.TemporaryDirectory | None
        try:
            self._scratch = tempfile.TemporaryDirectory(prefix="mdcopy-")
        except OSError as e:
            logger.warning("Could not create image cache directory, caching disabled: {}", e)
            self._scratch = None
        else:
            logger.debug("ImageCache initialized: dir={}", self._scratch.name)

    def __enter__(self) -> "ImageCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, reference: str) -> bool:
        with self._lock:
            return reference in self._entries

    @property
    def scratch_dir(self) -> Path | None:
        """Directory backing the cache, or None in pass-through mode."""
        if self._scratch is None:
            return None
        return Path(self._scratch.name)

    def close(self) -> None:
        """Delete the scratch directory and forget all entries."""
        with self._lock:
            self._entries.clear()
        if self._scratch is not None:
            self._scratch.cleanup()
            logger.debug("Removed image cache directory {}", self._scratch.name)

    def get_or_load(
        self,
        reference: str,
        base_dir: Path | str,
        policy: ImagePolicy,
        failure: FailurePolicy = FailurePolicy.GRACEFUL,
    ) -> EmbeddedImage | None:
        """
        Resolve an image reference, reusing earlier remote work.

        Args:
            reference: Raw image source from the document
            base_dir: Directory that local references are relative to
            policy: Embedding and optimization settings for this run
            failure: Whether load errors propagate or degrade to None

        Returns:
            EmbeddedImage, or None if the reference should be left as-is

        Raises:
            ImageError: On load/fetch failure under the strict policy.
                Optimization failures are never raised.
        """
        kind = classify_reference(reference)
        if policy.embedding_disabled or kind is ReferenceKind.DATA_URL:
            return load_image_with_fallback(
                reference,
                base_dir,
                policy,
                failure,
                client=self.client,
                timeout=self.fetch_timeout,
            )

        if not policy.embeds(kind):
            return None

        try:
            if kind is ReferenceKind.LOCAL:
                # Re-read every time: local files may be regenerated mid-run
                image, entry = read_local_image(reference, base_dir), None
            else:
                image, entry = self._get_remote(reference)
        except ImageError as e:
            return handle_load_error(e, failure)

        if not policy.optimizes(kind) or (entry is not None and entry.optimized):
            return image
        return self._optimize(reference, image, entry, policy)

    def _get_remote(self, url: str) -> tuple[EmbeddedImage, _CacheEntry | None]:
        """Return cached bytes for a remote reference, fetching on a miss."""
        with self._lock:
            entry = self._entries.get(url)

        if entry is not None:
            try:
                data = entry.path.read_bytes()
            except OSError as e:
                logger.warning("Cached image {} unreadable, refetching: {}", entry.path, e)
            else:
                logger.debug("Image cache hit: {}", url)
                # Scratch files have no extension, so the bytes decide the type
                return EmbeddedImage(data=data, mime_type=sniff_from_bytes(data)), entry

        image = fetch_remote_image(url, client=self.client, timeout=self.fetch_timeout)
        if self._scratch is None:
            return image, None

        path = Path(self._scratch.name) / self._hash_reference(url)
        try:
            path.write_bytes(image.data)
        except OSError as e:
            logger.warning("Could not cache image {}: {}", url, e)
            return image, None

        entry = _CacheEntry(path=path)
        with self._lock:
            self._entries[url] = entry
        logger.debug("Cached image {} at {}", url, path)
        return image, entry

    def _optimize(
        self,
        reference: str,
        image: EmbeddedImage,
        entry: _CacheEntry | None,
        policy: ImagePolicy,
    ) -> EmbeddedImage:
        """Optimize bytes, falling back to the originals on any failure."""
        try:
            optimized = optimize_image(image.data, policy)
        except ImageError as e:
            logger.warning("Image optimization failed for {}, using original: {}", reference, e)
            return image

        if entry is not None:
            try:
                entry.path.write_bytes(optimized.data)
            except OSError as e:
                logger.warning("Could not update cached image {}: {}", entry.path, e)
            else:
                with self._lock:
                    entry.optimized = True
        return optimized

    @staticmethod
    def _hash_reference(reference: str) -> str:
        """Generate a 16 hex character (64-bit) file name from a reference."""
        return hashlib.sha256(reference.encode()).hexdigest()[:16]
