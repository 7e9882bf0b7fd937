"""Tests for npm publish argument handling."""
from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest


class TestFilterPublishArgs:
    """Tests for filter_publish_args."""

    def test_allowed_flags(self) -> None:
        """Allow-listed flags and their values are forwarded."""
        from libforge.build.publish import filter_publish_args

        result = filter_publish_args(
            ["--dry-run", "--tag", "beta", "--registry=https://npm.example.com", "--provenance"]
        )

        assert result.accepted == [
            "--dry-run",
            "--tag",
            "beta",
            "--registry=https://npm.example.com",
            "--provenance",
        ]
        assert result.dropped == []

    def test_unknown_flags_dropped(self) -> None:
        """Unknown flags and stray arguments are dropped."""
        from libforge.build.publish import filter_publish_args

        result = filter_publish_args(["--force", "--otp", "123456", "stray", "-q"])

        assert result.accepted == ["--otp", "123456"]
        assert result.dropped == ["--force", "stray", "-q"]

    def test_value_flag_without_value(self) -> None:
        """A value flag followed by another flag takes no value."""
        from libforge.build.publish import filter_publish_args

        result = filter_publish_args(["--tag", "--dry-run"])

        assert result.accepted == ["--tag", "--dry-run"]

    def test_boolean_flag_does_not_take_value(self) -> None:
        """Boolean flags leave the next argument alone."""
        from libforge.build.publish import filter_publish_args

        result = filter_publish_args(["--dry-run", "extra"])

        assert result.accepted == ["--dry-run"]
        assert result.dropped == ["extra"]


class TestPublishCommand:
    """Tests for publish_command."""

    def test_scoped_package_gets_public_access(self) -> None:
        """Scoped packages publish publicly unless told otherwise."""
        from libforge.build.publish import publish_command
        from libforge.manifest.model import PackageManifest

        command = publish_command(PackageManifest(name="@acme/lib"), ["--dry-run"])

        assert command == ["npm", "publish", "--dry-run", "--access", "public"]

    def test_explicit_access_kept(self) -> None:
        """An explicit --access is not overridden."""
        from libforge.build.publish import publish_command
        from libforge.manifest.model import PackageManifest

        command = publish_command(PackageManifest(name="@acme/lib"), ["--access=restricted"])

        assert command == ["npm", "publish", "--access=restricted"]

    def test_unscoped_package(self) -> None:
        """Unscoped packages get no access flag."""
        from libforge.build.publish import publish_command
        from libforge.manifest.model import PackageManifest

        command = publish_command(PackageManifest(name="lib"), [], npm_command="pnpm --silent")

        assert command == ["pnpm", "--silent", "publish"]


class TestPublishPackage:
    """Tests for publish_package."""

    def test_runs_npm_in_output_dir(self, tmp_path: Path) -> None:
        """npm publish runs inside the output directory."""
        from libforge.build.publish import publish_package

        (tmp_path / "package.json").write_text(json.dumps({"name": "lib", "version": "1.0.0"}))

        with patch("libforge.build.publish.subprocess.run") as run:
            run.return_value = MagicMock(returncode=0)
            manifest = publish_package(tmp_path, ["--dry-run"])

        run.assert_called_once_with(["npm", "publish", "--dry-run"], cwd=tmp_path, check=False)
        assert manifest.version == "1.0.0"

    def test_failure_raises(self, tmp_path: Path) -> None:
        """A non-zero exit raises ExternalToolError."""
        from libforge.build.publish import publish_package
        from libforge.errors import ExternalToolError

        (tmp_path / "package.json").write_text(json.dumps({"name": "lib"}))

        with patch("libforge.build.publish.subprocess.run") as run:
            run.return_value = MagicMock(returncode=1)
            with pytest.raises(ExternalToolError, match="exit code 1"):
                publish_package(tmp_path, [])

    def test_missing_npm(self, tmp_path: Path) -> None:
        """A missing npm executable raises ExternalToolError."""
        from libforge.build.publish import publish_package
        from libforge.errors import ExternalToolError

        (tmp_path / "package.json").write_text(json.dumps({"name": "lib"}))

        with patch("libforge.build.publish.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(ExternalToolError) as exc_info:
                publish_package(tmp_path, [])

        assert exc_info.value.returncode == 127

    def test_requires_built_package(self, tmp_path: Path) -> None:
        """Publishing without a build raises ConfigurationError."""
        from libforge.build.publish import publish_package
        from libforge.errors import ConfigurationError

        with pytest.raises(ConfigurationError, match="libforge build"):
            publish_package(tmp_path, [])
