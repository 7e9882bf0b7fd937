"""Errors and warnings raised while building a package."""

from __future__ import annotations

from collections.abc import Sequence


class LibforgeError(Exception):
    """Base class for fatal build errors."""


class ConfigurationError(LibforgeError):
    """The project layout or package.json cannot be built as-is."""


class SecurityError(ConfigurationError):
    """A file-list entry points somewhere it must not."""


class ExternalToolError(LibforgeError):
    """An external tool (bundler, declaration generator, npm) failed."""

    def __init__(self, tool: str, returncode: int, diagnostics: str = "") -> None:
        self.tool = tool
        self.returncode = returncode
        self.diagnostics = diagnostics

        msg = f"{tool} failed with exit code {returncode}"
        if diagnostics:
            msg = f"{msg}:\n{diagnostics}"
        super().__init__(msg)


class LibforgeWarning(UserWarning):
    """Base class for recoverable build problems."""


class StalenessWarning(LibforgeWarning):
    """Declared exports point at entries that no longer exist."""

    def __init__(self, stale_keys: Sequence[str]) -> None:
        self.stale_keys = list(stale_keys)
        super().__init__(
            f"Found {len(self.stale_keys)} stale export(s) pointing to missing entries: "
            + ", ".join(self.stale_keys)
        )


class WorkspaceResolutionWarning(LibforgeWarning):
    """A workspace: dependency could not be matched to a sibling package."""


class PublishSafetyWarning(LibforgeWarning):
    """The project is set up in a way that risks publishing the wrong files."""
