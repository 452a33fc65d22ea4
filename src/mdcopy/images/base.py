"""
Data models for image embedding.

Provides the resolved image value passed to renderers and the policy
models that control what gets embedded and how it is optimized.
"""

import base64
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PNG_MIME = "image/png"
JPEG_MIME = "image/jpeg"
OCTET_STREAM = "application/octet-stream"


class ReferenceKind(str, Enum):
    """Classification of an image reference string."""

    LOCAL = "local"
    REMOTE = "remote"
    DATA_URL = "data_url"


class FailurePolicy(str, Enum):
    """What to do when an image cannot be loaded.

    STRICT propagates the error and aborts the current output format.
    GRACEFUL logs a warning and leaves the reference unembedded.
    """

    STRICT = "strict"
    GRACEFUL = "graceful"

    @classmethod
    def from_strict(cls, strict: bool) -> "FailurePolicy":
        """Map a boolean strict flag onto a policy."""
        return cls.STRICT if strict else cls.GRACEFUL


class EmbeddedImage(BaseModel):
    """Image bytes ready to be embedded in an output document."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="Raw image bytes")
    mime_type: str = Field(description="MIME type (e.g., 'image/png', 'image/jpeg')")

    def to_data_url(self) -> str:
        """Return the image as a base64 ``data:`` URL for HTML and Markdown."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def to_rtf_hex(self) -> str:
        """Return the image bytes hex-encoded for an RTF picture group."""
        return self.data.hex()

    @property
    def rtf_blip(self) -> str | None:
        """RTF picture control word, or None if RTF cannot embed this type."""
        if self.mime_type == PNG_MIME:
            return "\\pngblip"
        if self.mime_type == JPEG_MIME:
            return "\\jpegblip"
        return None


class ImagePolicy(BaseModel):
    """Embedding and optimization settings for one conversion run."""

    model_config = ConfigDict(frozen=True)

    embed_local: bool = Field(default=True, description="Embed images from local files")
    embed_remote: bool = Field(default=False, description="Embed images fetched over HTTP")
    optimize_local: bool = Field(default=False, description="Transcode embedded local images")
    optimize_remote: bool = Field(default=False, description="Transcode embedded remote images")
    max_dimension: int = Field(default=1200, ge=1, description="Maximum width or height in pixels")
    quality: int = Field(default=80, ge=1, le=100, description="JPEG quality (1-100)")

    @property
    def embedding_disabled(self) -> bool:
        """True when neither local nor remote images are embedded."""
        return not self.embed_local and not self.embed_remote

    def embeds(self, kind: ReferenceKind) -> bool:
        """Whether references of this kind are embedded."""
        if kind is ReferenceKind.LOCAL:
            return self.embed_local
        if kind is ReferenceKind.REMOTE:
            return self.embed_remote
        return False

    def optimizes(self, kind: ReferenceKind) -> bool:
        """Whether embedded references of this kind are transcoded."""
        if kind is ReferenceKind.LOCAL:
            return self.optimize_local
        if kind is ReferenceKind.REMOTE:
            return self.optimize_remote
        return False
