"""
Image optimization.

Downscales oversized images and re-encodes them: PNG when the image has
transparency, JPEG at the configured quality otherwise.
"""

from io import BytesIO

from loguru import logger
from PIL import Image as PILImage

from .base import JPEG_MIME, PNG_MIME, EmbeddedImage, ImagePolicy
from .errors import InvalidImageError

_ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


def has_transparency(img: PILImage.Image) -> bool:
    """Check for an alpha band or a palette/colorkey transparency entry."""
    return img.mode in _ALPHA_MODES or "transparency" in img.info


def optimize_image(data: bytes, policy: ImagePolicy) -> EmbeddedImage:
    """
    Resize and re-encode an image.

    Args:
        data: Raw image bytes in any format Pillow can decode
        policy: Supplies max_dimension and JPEG quality

    Returns:
        EmbeddedImage as image/png (transparent input) or image/jpeg

    Raises:
        InvalidImageError: If decoding, resizing or encoding fails
    """
    try:
        img = PILImage.open(BytesIO(data))
        img.load()
    except Exception as e:
        raise InvalidImageError(f"cannot decode image: {e}") from e

    transparent = has_transparency(img)
    try:
        # Palette and exotic modes do not resample well; normalize first
        if transparent:
            if img.mode not in ("RGBA", "LA"):
                img = img.convert("RGBA")
        elif img.mode not in ("RGB", "L"):
            img = img.convert("RGB")

        width, height = img.size
        longest = max(width, height)
        if longest > policy.max_dimension:
            scale = policy.max_dimension / longest
            new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
            logger.debug("Resizing image {}x{} -> {}x{}", width, height, *new_size)
            img = img.resize(new_size, PILImage.Resampling.LANCZOS)
    except Exception as e:
        raise InvalidImageError(f"cannot resize image: {e}") from e

    output = BytesIO()
    try:
        if transparent:
            img.save(output, format="PNG", optimize=True)
            mime_type = PNG_MIME
        else:
            img.save(output, format="JPEG", quality=policy.quality, optimize=True)
            mime_type = JPEG_MIME
    except Exception as e:
        raise InvalidImageError(f"cannot encode image: {e}") from e

    optimized = output.getvalue()
    logger.debug(
        "Optimized image: {} -> {} bytes ({}, {}x{})",
        len(data),
        len(optimized),
        mime_type,
        *img.size,
    )
    return EmbeddedImage(data=optimized, mime_type=mime_type)
