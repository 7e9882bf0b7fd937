"""Main entry resolution."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from libforge.errors import ConfigurationError
from libforge.manifest.paths import DEFAULT_CONVENTIONS, PathConventions

if TYPE_CHECKING:
    from libforge.manifest.model import PackageManifest


def entry_for_path(
    path: str,
    entries: Sequence[str],
    conventions: PathConventions = DEFAULT_CONVENTIONS,
) -> str | None:
    """Map an export path such as `./dist/src/utils.js` back to an entry name."""
    classified = conventions.classify(path)
    if classified.root != conventions.source_dir or "/" in classified.relative:
        return None
    name = classified.relative.rsplit(".", 1)[0]
    return name if name in entries else None


def _basename_entry(path: object, entries: Sequence[str]) -> str | None:
    if not isinstance(path, str) or not path:
        return None
    stem = PurePosixPath(path).stem
    return stem if stem in entries else None


def resolve_main_entry(
    manifest: PackageManifest,
    entries: Sequence[str],
    conventions: PathConventions = DEFAULT_CONVENTIONS,
) -> str:
    """Pick the entry that `.` (and `main`/`module`/`types`) points at.

    The first rule that matches wins:

    1. `exports["."]` (string, or its `import` condition)
    2. `main` basename
    3. `module` basename
    4. an entry named `index`
    5. the only entry
    6. an entry named after the package (`@scope/name` -> `name`)
    7. the first entry alphabetically

    Args:
        manifest: Authoritative manifest.
        entries: Library entry names, sorted.
        conventions: Project directory layout.

    Returns:
        The main entry name.

    Raises:
        ConfigurationError: If there are no entries, or if rule 6 is reached
            and the package name has no usable basename.
    """
    if not entries:
        msg = "Cannot resolve a main entry without library entry points"
        raise ConfigurationError(msg)

    exports = manifest.exports
    if isinstance(exports, dict) and "." in exports:
        dot_export = exports["."]
        import_path = dot_export.get("import") if isinstance(dot_export, dict) else dot_export
        if isinstance(import_path, str):
            entry = entry_for_path(import_path, entries, conventions)
            if entry is not None:
                return entry

    for legacy_field in (manifest.main, manifest.module):
        entry = _basename_entry(legacy_field, entries)
        if entry is not None:
            return entry

    if "index" in entries:
        return "index"

    if len(entries) == 1:
        return entries[0]

    package_basename = manifest.name_basename
    if not package_basename:
        msg = f"Invalid package name: {manifest.name!r}"
        raise ConfigurationError(msg)
    if package_basename in entries:
        return package_basename

    return sorted(entries)[0]
