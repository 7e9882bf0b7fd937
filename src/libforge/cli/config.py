"""CLI configuration using Pydantic settings.

Configuration is loaded from:
1. Environment variables (LIBFORGE_* prefix)
2. .env file in current directory
3. Default values

Projects themselves need no configuration; everything about what to build
comes from package.json. These settings only locate the external tools and
name the directories.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libforge.manifest.paths import PathConventions


class LibforgeConfig(BaseSettings):
    """Configuration for the libforge CLI.

    Environment variables are prefixed with LIBFORGE_.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project layout
    source_dir: str = "src"
    bin_dir: str = "bin"
    output_dir: str = "dist"

    # External tools
    esbuild_command: str = "esbuild"
    tsc_command: str = "tsc"
    npm_command: str = "npm"
    target: str = "node16"
    declarations: bool = True

    log_level: str = "WARNING"

    @field_validator("source_dir", "bin_dir", "output_dir")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Validate a directory name is a single relative path segment."""
        name = v.strip().strip("/")
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            msg = f"Invalid directory name: {v!r}. Must be a single path segment."
            raise ValueError(msg)
        return name

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            msg = f"Invalid log level: {v}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return upper

    @property
    def conventions(self) -> PathConventions:
        """Directory layout as path conventions."""
        return PathConventions(
            source_dir=self.source_dir,
            bin_dir=self.bin_dir,
            output_dir=self.output_dir,
        )

    def validate_layout(self) -> list[str]:
        """Validate the directory names against each other.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []
        names = [self.source_dir, self.bin_dir, self.output_dir]
        if len(set(names)) != len(names):
            errors.append(
                "Source, bin and output directories must differ. "
                "Check LIBFORGE_SOURCE_DIR, LIBFORGE_BIN_DIR and LIBFORGE_OUTPUT_DIR."
            )
        return errors


@lru_cache
def get_config() -> LibforgeConfig:
    """Get the global configuration.

    Configuration is cached after first load.

    Returns:
        LibforgeConfig instance.
    """
    return LibforgeConfig()


def clear_config_cache() -> None:
    """Clear the configuration cache (for testing)."""
    get_config.cache_clear()
