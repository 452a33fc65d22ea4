"""
Tests for configuration and logging setup.

Tests Settings defaults, environment variable loading, policy building,
base directory resolution and verbosity mapping.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mdcopy.config import Settings, resolve_base_dir, warn_inert_optimization
from mdcopy.images.base import FailurePolicy, ImagePolicy
from mdcopy.logging import level_from_verbosity, setup_logging


class TestSettings:
    """Test Settings class."""

    def test_default_values(self):
        """Test that default values are set correctly."""
        settings = Settings(_env_file=None)

        assert settings.root is None
        assert settings.strict is False
        assert settings.embed_local is True
        assert settings.embed_remote is False
        assert settings.optimize_local is False
        assert settings.optimize_remote is False
        assert settings.image_max_dimension == 1200
        assert settings.image_quality == 80
        assert settings.image_fetch_timeout == 30
        assert settings.log_level == "WARNING"
        assert settings.log_json is False

    def test_root_path_property(self):
        """Test root_path returns a Path object when set."""
        settings = Settings(_env_file=None, root="./docs")

        assert isinstance(settings.root_path, Path)
        assert str(settings.root_path) == "docs"
        assert Settings(_env_file=None).root_path is None

    def test_image_policy(self):
        """Test the image policy mirrors the settings."""
        settings = Settings(
            _env_file=None,
            embed_remote=True,
            optimize_remote=True,
            image_max_dimension=640,
            image_quality=55,
        )

        policy = settings.image_policy()

        assert policy == ImagePolicy(
            embed_local=True,
            embed_remote=True,
            optimize_local=False,
            optimize_remote=True,
            max_dimension=640,
            quality=55,
        )

    def test_failure_policy(self):
        """Test the strict flag maps onto a failure policy."""
        assert Settings(_env_file=None).failure_policy is FailurePolicy.GRACEFUL
        assert Settings(_env_file=None, strict=True).failure_policy is FailurePolicy.STRICT

    def test_quality_validation(self):
        """Test out-of-range quality is rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, image_quality=0)


class TestSettingsFromEnv:
    """Test Settings loading from environment variables."""

    def test_load_from_env(self, monkeypatch):
        """Test loading settings from MDCOPY_ environment variables."""
        monkeypatch.setenv("MDCOPY_EMBED_REMOTE", "true")
        monkeypatch.setenv("MDCOPY_STRICT", "1")
        monkeypatch.setenv("MDCOPY_IMAGE_QUALITY", "60")
        monkeypatch.setenv("MDCOPY_ROOT", "/srv/docs")

        settings = Settings(_env_file=None)

        assert settings.embed_remote is True
        assert settings.strict is True
        assert settings.image_quality == 60
        assert settings.root == "/srv/docs"

    def test_unprefixed_env_ignored(self, monkeypatch):
        """Test that variables without the prefix are not picked up."""
        monkeypatch.setenv("STRICT", "true")

        assert Settings(_env_file=None).strict is False


class TestInertOptimizationWarning:
    """Test warnings for optimization without embedding."""

    def test_no_warning_by_default(self):
        """Test the default policy produces no warnings."""
        assert warn_inert_optimization(ImagePolicy()) == []

    def test_warns_for_each_class(self, log_messages):
        """Test both classes are reported when optimized but not embedded."""
        policy = ImagePolicy(
            embed_local=False, embed_remote=False, optimize_local=True, optimize_remote=True
        )

        warnings = warn_inert_optimization(policy)

        assert len(warnings) == 2
        assert "--embed-local" in warnings[0]
        assert "--embed-remote" in warnings[1]
        assert len(log_messages) == 2


class TestResolveBaseDir:
    """Test base directory resolution."""

    def test_root_wins(self):
        """Test an explicit root overrides the input location."""
        assert resolve_base_dir(Path("/a/doc.md"), Path("/root")) == Path("/root")

    def test_input_parent(self):
        """Test the input file's directory is used without a root."""
        assert resolve_base_dir(Path("/a/b/doc.md")) == Path("/a/b")

    def test_stdin_uses_cwd(self):
        """Test stdin input resolves against the current directory."""
        assert resolve_base_dir(Path("-")) == Path.cwd()
        assert resolve_base_dir(None) == Path.cwd()


class TestLogging:
    """Test logging helpers."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "expected"),
        [
            (0, False, "WARNING"),
            (1, False, "INFO"),
            (2, False, "DEBUG"),
            (3, False, "TRACE"),
            (7, False, "TRACE"),
            (2, True, "ERROR"),
        ],
    )
    def test_level_from_verbosity(self, verbose, quiet, expected):
        """Test -v counts and -q map to loguru levels."""
        assert level_from_verbosity(verbose, quiet) == expected

    def test_setup_logging_with_file(self, temp_dir):
        """Test a file sink receives messages."""
        log_file = temp_dir / "mdcopy.log"

        logger = setup_logging(level="INFO", log_file=str(log_file))
        logger.info("hello from test")
        logger.remove()

        assert "hello from test" in log_file.read_text()
