"""
Image loading.

Resolves a single reference to raw bytes: reads a local file or performs
one blocking HTTP GET. Nothing here is cached; see ``ImageCache`` for that.
"""

from pathlib import Path

import httpx
from loguru import logger

from .base import OCTET_STREAM, EmbeddedImage, FailurePolicy, ImagePolicy, ReferenceKind
from .errors import FetchFailedError, ImageError, InvalidImageError, NotFoundError, ReadFailedError
from .sniff import (
    classify_reference,
    normalize_remote_url,
    resolve_local_path,
    sniff_from_bytes,
    sniff_from_path_and_bytes,
)

DEFAULT_FETCH_TIMEOUT = 30.0


def fetch_remote_image(
    url: str,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> EmbeddedImage:
    """
    Fetch a remote image with a single GET request.

    Args:
        url: Absolute or protocol-relative image URL
        client: Optional HTTP client to reuse; a short-lived one is created otherwise
        timeout: Request timeout in seconds for the short-lived client

    Returns:
        EmbeddedImage with the response body and its resolved MIME type

    Raises:
        FetchFailedError: On transport errors or a non-success status
        InvalidImageError: If the body is recognizably not an image
    """
    url = normalize_remote_url(url)
    logger.debug("Fetching remote image: {}", url)

    # Malformed hosts surface as idna.IDNAError or UnicodeError, both ValueErrors
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError, ValueError) as e:
        raise FetchFailedError(url, str(e)) from e

    data = response.content
    content_type = response.headers.get("content-type", OCTET_STREAM).split(";")[0].strip()
    logger.trace("HTTP {} for {}: {} bytes, type={}", response.status_code, url, len(data), content_type)

    # An HTML error page served with 200 must not be embedded
    sniffed = sniff_from_bytes(data)
    if not sniffed.startswith("image/") and sniffed != OCTET_STREAM:
        raise InvalidImageError(url)

    mime_type = content_type if content_type.startswith("image/") else sniffed
    return EmbeddedImage(data=data, mime_type=mime_type)


def read_local_image(reference: str, base_dir: Path | str) -> EmbeddedImage:
    """
    Read a local image relative to the base directory.

    Raises:
        NotFoundError: If the file does not exist
        ReadFailedError: On any other I/O error
    """
    path = resolve_local_path(reference, base_dir)
    logger.debug("Loading local image: {}", path)

    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise NotFoundError(str(path)) from e
    except OSError as e:
        raise ReadFailedError(str(path), e.strerror or str(e)) from e
    except ValueError as e:
        # e.g. an embedded null byte in the reference
        raise ReadFailedError(str(path), str(e)) from e

    mime_type = sniff_from_path_and_bytes(path, data)
    logger.trace("Loaded {} bytes, mime type: {}", len(data), mime_type)
    return EmbeddedImage(data=data, mime_type=mime_type)


def load_image(
    reference: str,
    base_dir: Path | str,
    policy: ImagePolicy,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> EmbeddedImage | None:
    """
    Load an image reference according to the embedding policy.

    Args:
        reference: Raw image source from the document
        base_dir: Directory that local references are relative to
        policy: Embedding settings for this run
        client: Optional HTTP client for remote references
        timeout: Request timeout in seconds when no client is given

    Returns:
        EmbeddedImage, or None if the reference is skipped (embedding
        disabled for its kind, or already a data URL)

    Raises:
        ImageError: If the image could not be read or fetched
    """
    if policy.embedding_disabled:
        logger.trace("Skipping image (embedding disabled): {}", reference)
        return None

    kind = classify_reference(reference)
    if kind is ReferenceKind.DATA_URL:
        logger.trace("Skipping data URL (already embedded)")
        return None

    if not policy.embeds(kind):
        logger.trace("Skipping {} image (not embedded): {}", kind.value, reference)
        return None

    if kind is ReferenceKind.REMOTE:
        return fetch_remote_image(reference, client=client, timeout=timeout)
    return read_local_image(reference, base_dir)


def load_image_with_fallback(
    reference: str,
    base_dir: Path | str,
    policy: ImagePolicy,
    failure: FailurePolicy = FailurePolicy.GRACEFUL,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> EmbeddedImage | None:
    """Load an image, degrading to None on failure unless the policy is strict."""
    try:
        return load_image(reference, base_dir, policy, client=client, timeout=timeout)
    except ImageError as e:
        return handle_load_error(e, failure)


def handle_load_error(error: ImageError, failure: FailurePolicy) -> None:
    """Re-raise under the strict policy, otherwise log and return None."""
    if failure is FailurePolicy.STRICT:
        raise error
    logger.warning("{}", error)
    return None
