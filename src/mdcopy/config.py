"""Configuration management using pydantic-settings.

Loads from MDCOPY_-prefixed environment variables and .env file.
"""

from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .images.base import FailurePolicy, ImagePolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        root: Base directory for resolving relative image paths.
        strict: Abort an output format when an image cannot be embedded.
        embed_local: Embed images read from local files.
        embed_remote: Embed images fetched over HTTP(S).
        optimize_local: Resize and re-encode embedded local images.
        optimize_remote: Resize and re-encode embedded remote images.
        image_max_dimension: Maximum image dimension in pixels when optimizing.
        image_quality: JPEG compression quality (1-100).
        image_fetch_timeout: HTTP timeout for image fetching in seconds.
        log_level: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format.

    """

    model_config = SettingsConfigDict(
        env_prefix="MDCOPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    root: str | None = None

    # Failure handling
    strict: bool = False

    # Image embedding
    embed_local: bool = True
    embed_remote: bool = False
    optimize_local: bool = False
    optimize_remote: bool = False
    image_max_dimension: int = Field(default=1200, ge=1)
    image_quality: int = Field(default=80, ge=1, le=100)
    image_fetch_timeout: float = 30.0

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False

    @property
    def root_path(self) -> Path | None:
        """Return the configured root directory as a Path object.

        Returns:
            Path | None: Root directory, or None if not configured.

        """
        return Path(self.root) if self.root else None

    @property
    def failure_policy(self) -> FailurePolicy:
        """Return the failure policy implied by the strict flag."""
        return FailurePolicy.from_strict(self.strict)

    def image_policy(self) -> ImagePolicy:
        """Build the image policy for a conversion run."""
        return ImagePolicy(
            embed_local=self.embed_local,
            embed_remote=self.embed_remote,
            optimize_local=self.optimize_local,
            optimize_remote=self.optimize_remote,
            max_dimension=self.image_max_dimension,
            quality=self.image_quality,
        )


def warn_inert_optimization(policy: ImagePolicy) -> list[str]:
    """Warn about optimization flags that have no effect.

    Optimization only applies to embedded images, so enabling it for a
    class of images that is not embedded does nothing.

    Args:
        policy: The effective image policy.

    Returns:
        The warning messages that were logged.

    """
    warnings = []
    if policy.optimize_local and not policy.embed_local:
        warnings.append(
            "Local image optimization is disabled because local images are not "
            "embedded. Use --embed-local to enable"
        )
    if policy.optimize_remote and not policy.embed_remote:
        warnings.append(
            "Remote image optimization is disabled because remote images are not "
            "embedded. Use --embed-remote to enable"
        )
    for message in warnings:
        logger.warning(message)
    return warnings


def resolve_base_dir(input_path: Path | None, root: Path | None = None) -> Path:
    """Pick the directory that relative image references are resolved against.

    Args:
        input_path: Source document path, or None / "-" for stdin.
        root: Explicit root directory, which always wins.

    Returns:
        Path: The root, else the input file's directory, else the cwd.

    """
    if root is not None:
        return root
    if input_path is None or str(input_path) == "-":
        return Path.cwd()
    return input_path.parent


# Global settings instance
settings = Settings()
