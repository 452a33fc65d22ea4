"""
mdcopy image embedding.

Resolves image references found while converting markdown (local paths
and remote URLs) into bytes ready to embed in HTML, RTF and Markdown
output, with a per-run cache shared by every renderer.

Usage:
    # Resolve references to data URLs
    mdcopy resolve diagram.png https://example.com/logo.png --embed

    # Show effective settings
    mdcopy info
"""

__version__ = "0.1.0"

from .images import EmbeddedImage, FailurePolicy, ImageCache, ImageError, ImagePolicy

__all__ = [
    "EmbeddedImage",
    "FailurePolicy",
    "ImageCache",
    "ImageError",
    "ImagePolicy",
]
