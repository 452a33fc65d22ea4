"""
Image error types.

Every failure the loader or optimizer can report is one of the subclasses
below. Messages are built in one place from a per-class template so that
renderers and the CLI can show them verbatim.
"""


class ImageError(Exception):
    """Base class for image acquisition failures."""

    template = "Image error: {reference}"

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        super().__init__(self.template.format(reference=reference, reason=reason))


class NotFoundError(ImageError):
    """Local image file does not exist."""

    template = "Image not found: {reference}"


class ReadFailedError(ImageError):
    """Local image file exists but could not be read."""

    template = "Failed to read image '{reference}': {reason}"


class FetchFailedError(ImageError):
    """Remote image could not be fetched (transport, status or body error)."""

    template = "Failed to fetch image '{reference}': {reason}"


class InvalidImageError(ImageError):
    """Bytes are not an image, or a decode/resize/encode step failed."""

    template = "Invalid image data: {reference}"
