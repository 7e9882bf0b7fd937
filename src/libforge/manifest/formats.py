"""Output formats."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libforge.manifest.model import PackageManifest

UMD_ENTRY = "umd"


class BundleFormat(Enum):
    """Module format passed to the bundler."""

    ESM = "esm"
    CJS = "cjs"
    UMD = "umd"


@dataclass(frozen=True, slots=True)
class FormatFlags:
    """Which formats a build produces. ESM is always on."""

    cjs: bool = False
    umd: bool = False
    esm: bool = True

    @classmethod
    def detect(cls, manifest: PackageManifest, entries: Sequence[str]) -> FormatFlags:
        """Derive formats from the authoritative manifest and library entries.

        CommonJS is built only when the manifest declares a legacy `main`
        field; UMD only when there is an entry literally named `umd`.
        """
        return cls(cjs=bool(manifest.main), umd=UMD_ENTRY in entries)

    def enabled(self) -> list[BundleFormat]:
        """Formats to build, in build order."""
        formats = [BundleFormat.ESM]
        if self.cjs:
            formats.append(BundleFormat.CJS)
        if self.umd:
            formats.append(BundleFormat.UMD)
        return formats

    def describe(self) -> str:
        """Human-readable list, e.g. `ESM, CJS`."""
        return ", ".join(f.name for f in self.enabled())
