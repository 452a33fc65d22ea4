"""
Reference classification and image format sniffing.

Both are pure functions: no I/O, no errors.
"""

from pathlib import Path

from .base import OCTET_STREAM, ReferenceKind

_REMOTE_PREFIXES = ("http://", "https://", "//")

# Leading byte signatures, checked in order
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
]

_EXTENSIONS = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".bmp": "image/bmp",
}


def is_remote_url(reference: str) -> bool:
    """Check for an absolute or protocol-relative HTTP(S) URL."""
    return reference.startswith(_REMOTE_PREFIXES)


def is_data_url(reference: str) -> bool:
    """Check for an inline ``data:`` URL."""
    return reference.startswith("data:")


def classify_reference(reference: str) -> ReferenceKind:
    """
    Classify an image reference.

    Args:
        reference: Raw image source from the document

    Returns:
        REMOTE for http://, https:// and protocol-relative // URLs,
        DATA_URL for data: URLs, LOCAL for everything else.
    """
    if is_remote_url(reference):
        return ReferenceKind.REMOTE
    if is_data_url(reference):
        return ReferenceKind.DATA_URL
    return ReferenceKind.LOCAL


def normalize_remote_url(url: str) -> str:
    """Complete a protocol-relative URL to https."""
    if url.startswith("//"):
        return f"https:{url}"
    return url


def resolve_local_path(reference: str, base_dir: Path | str) -> Path:
    """Join a local reference onto the base directory."""
    return Path(base_dir) / reference


def sniff_from_bytes(data: bytes) -> str:
    """
    Detect an image MIME type from leading magic bytes.

    Args:
        data: Raw file content

    Returns:
        The detected MIME type, or application/octet-stream if unknown.
    """
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for magic, mime in _SIGNATURES:
        if data.startswith(magic):
            return mime
    return OCTET_STREAM


def sniff_from_path_and_bytes(path: Path | str, data: bytes) -> str:
    """
    Detect a MIME type, trusting content over the file extension.

    The extension is only consulted when the bytes are not recognized.
    """
    mime = sniff_from_bytes(data)
    if mime != OCTET_STREAM:
        return mime
    return _EXTENSIONS.get(Path(path).suffix.lower(), OCTET_STREAM)
