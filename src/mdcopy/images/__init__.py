"""
Image embedding package.

Provides reference classification, format sniffing, loading, optimization
and the per-run cache shared by every output renderer.
"""

from .base import EmbeddedImage, FailurePolicy, ImagePolicy, ReferenceKind
from .cache import ImageCache
from .errors import (
    FetchFailedError,
    ImageError,
    InvalidImageError,
    NotFoundError,
    ReadFailedError,
)
from .loader import load_image, load_image_with_fallback
from .optimize import optimize_image
from .sniff import classify_reference, sniff_from_bytes, sniff_from_path_and_bytes

__all__ = [
    "EmbeddedImage",
    "FailurePolicy",
    "ImagePolicy",
    "ReferenceKind",
    "ImageCache",
    "ImageError",
    "NotFoundError",
    "ReadFailedError",
    "FetchFailedError",
    "InvalidImageError",
    "load_image",
    "load_image_with_fallback",
    "optimize_image",
    "classify_reference",
    "sniff_from_bytes",
    "sniff_from_path_and_bytes",
]
