"""Tests for CLI configuration."""
from __future__ import annotations

import os
from unittest.mock import patch

import pytest


class TestLibforgeConfig:
    """Tests for LibforgeConfig."""

    def test_default_values(self) -> None:
        """Config has sensible defaults."""
        from libforge.cli.config import LibforgeConfig

        with patch.dict(os.environ, {}, clear=True):
            config = LibforgeConfig()

        assert config.source_dir == "src"
        assert config.bin_dir == "bin"
        assert config.output_dir == "dist"
        assert config.esbuild_command == "esbuild"
        assert config.declarations is True
        assert config.log_level == "WARNING"

    def test_from_environment(self) -> None:
        """Config reads from environment variables."""
        from libforge.cli.config import LibforgeConfig

        env = {
            "LIBFORGE_OUTPUT_DIR": "build",
            "LIBFORGE_ESBUILD_COMMAND": "npx esbuild",
            "LIBFORGE_TARGET": "node20",
            "LIBFORGE_DECLARATIONS": "false",
            "LIBFORGE_LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env, clear=True):
            config = LibforgeConfig()

        assert config.output_dir == "build"
        assert config.esbuild_command == "npx esbuild"
        assert config.target == "node20"
        assert config.declarations is False
        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        """Unknown log levels are rejected."""
        from pydantic import ValidationError

        from libforge.cli.config import LibforgeConfig

        with patch.dict(os.environ, {"LIBFORGE_LOG_LEVEL": "LOUD"}, clear=True):
            with pytest.raises(ValidationError, match="Invalid log level"):
                LibforgeConfig()

    @pytest.mark.parametrize("value", ["", "a/b", "..", "."])
    def test_invalid_directory(self, value: str) -> None:
        """Directory names must be a single path segment."""
        from pydantic import ValidationError

        from libforge.cli.config import LibforgeConfig

        with patch.dict(os.environ, {"LIBFORGE_SOURCE_DIR": value}, clear=True):
            with pytest.raises(ValidationError, match="Invalid directory name"):
                LibforgeConfig()

    def test_trailing_slash_stripped(self) -> None:
        """lib/ is accepted as lib."""
        from libforge.cli.config import LibforgeConfig

        with patch.dict(os.environ, {"LIBFORGE_SOURCE_DIR": "lib/"}, clear=True):
            config = LibforgeConfig()

        assert config.conventions.source_dir == "lib"

    def test_validate_layout(self) -> None:
        """Directories must differ from each other."""
        from libforge.cli.config import LibforgeConfig

        with patch.dict(os.environ, {"LIBFORGE_OUTPUT_DIR": "src"}, clear=True):
            config = LibforgeConfig()

        assert any("must differ" in e for e in config.validate_layout())

    def test_get_config_cached(self) -> None:
        """get_config returns the same instance until the cache is cleared."""
        from libforge.cli.config import clear_config_cache, get_config

        clear_config_cache()
        try:
            assert get_config() is get_config()
        finally:
            clear_config_cache()
