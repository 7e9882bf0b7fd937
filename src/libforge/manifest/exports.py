"""Export map generation.

Merges the exports a developer declared in package.json with the entries
discovered on disk. Declared exports are processed in manifest order and
each one is classified as:

- self: the `./package.json` export (always re-added at the end)
- stale: points at an entry that no longer exists; dropped and reported
- valid: expanded into a full conditional record

Anything else (paths outside the source tree, nested directories, internal
or test files) is almost certainly a typo and raises ConfigurationError.
Missing exports for discovered entries are then synthesized without
overwriting what the developer declared.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from libforge.errors import ConfigurationError
from libforge.manifest.discovery import EntryKind, entry_name, is_valid_entry_filename
from libforge.manifest.formats import UMD_ENTRY, FormatFlags
from libforge.manifest.paths import (
    DEFAULT_CONVENTIONS,
    MANIFEST_FILENAME,
    PathConventions,
    strip_dot_prefix,
)

logger = structlog.get_logger()

SELF_EXPORT_KEY = f"./{MANIFEST_FILENAME}"
SELF_EXPORT_TARGET = f"./{MANIFEST_FILENAME}"

# Conditions whose targets are always recomputed from the entry name.
_CANONICAL_CONDITIONS = ("types", "import", "require")


class ExportStatus(Enum):
    """Outcome of classifying one declared export."""

    SELF = "self"
    STALE = "stale"
    VALID = "valid"


@dataclass(frozen=True, slots=True)
class ClassifiedExport:
    """A declared export and the entry it resolves to."""

    key: str
    status: ExportStatus
    entry: str | None = None
    kind: EntryKind | None = None


@dataclass
class ExportGraph:
    """Generated export map plus the declared keys that went stale."""

    exports: dict[str, Any] = field(default_factory=dict)
    stale_keys: list[str] = field(default_factory=list)


class ExportGraphBuilder:
    """Builds the `exports` field of the distribution manifest.

    Example:
        >>> builder = ExportGraphBuilder(["index", "utils"], "index", FormatFlags())
        >>> graph = builder.build(None)
        >>> list(graph.exports)
        ['.', './index', './index.js', './utils', './utils.js', './package.json']
    """

    def __init__(
        self,
        libraries: Sequence[str],
        main_entry: str | None,
        formats: FormatFlags,
        *,
        executables: Sequence[str] = (),
        conventions: PathConventions = DEFAULT_CONVENTIONS,
    ) -> None:
        """Initialize the builder.

        Args:
            libraries: Library entry names.
            main_entry: Entry the `.` export points at; None for bin-only packages.
            formats: Enabled output formats.
            executables: Executable entry names (from the bin directory).
            conventions: Project directory layout.
        """
        self.libraries = list(libraries)
        self.executables = list(executables)
        self.main_entry = main_entry
        self.formats = formats
        self.conventions = conventions

    def build(self, declared: Any) -> ExportGraph:
        """Generate the export map.

        Args:
            declared: The authoritative manifest's `exports` value (may be None).

        Returns:
            ExportGraph with distribution-relative paths.

        Raises:
            ConfigurationError: On the first invalid declaration.
        """
        graph = ExportGraph()
        for key, value in _normalize_declared(declared).items():
            classified = self.classify(key, value)
            if classified.status is ExportStatus.SELF:
                continue
            if classified.status is ExportStatus.STALE:
                graph.stale_keys.append(key)
                continue
            graph.exports[key] = self.expand(classified, value)

        self.synthesize(graph.exports)

        if graph.stale_keys:
            logger.warning("stale_exports", keys=graph.stale_keys)
        return graph

    def classify(self, key: str, value: Any) -> ClassifiedExport:
        """Classify one declared export.

        Raises:
            ConfigurationError: If the declaration is invalid.
        """
        if key == SELF_EXPORT_KEY or (
            isinstance(value, str) and value.endswith(MANIFEST_FILENAME)
        ):
            return ClassifiedExport(key, ExportStatus.SELF)

        target = _target_path(value)
        if target is not None:
            return self._classify_path(key, target)

        if not isinstance(value, dict):
            msg = f"Export {key!r} must be a path string or a conditions object, got {value!r}"
            raise ConfigurationError(msg)

        resolved = self._entry_for_key(key)
        if resolved is None:
            msg = (
                f"Export {key!r} has no import/require path and its key does not name "
                f"an entry point. Point it at a file in {self.conventions.source_dir}/ "
                f"(e.g., './{self.conventions.source_dir}/utils.js')."
            )
            raise ConfigurationError(msg)
        name, kind = resolved
        return self._known(key, name, kind)

    def expand(self, classified: ClassifiedExport, value: Any) -> Any:
        """Expand a valid declaration into a conditional record."""
        name, kind = classified.entry, classified.kind
        if classified.status is not ExportStatus.VALID or name is None or kind is None:
            msg = f"Cannot expand export {classified.key!r} ({classified.status.value})"
            raise ValueError(msg)

        if kind is EntryKind.LIBRARY and name == UMD_ENTRY and self.formats.umd:
            return self.umd_record()

        record = self.record_for(name, kind)
        if not isinstance(value, dict):
            return record

        declared_types = value.get("types")
        expanded: dict[str, Any] = {
            "types": (
                self.conventions.to_distribution_form(declared_types)
                if isinstance(declared_types, str)
                else record["types"]
            )
        }
        for condition, target in value.items():
            if condition == "types":
                continue
            if condition in ("import", "require"):
                # Canonical targets; `require` only survives when CJS is built.
                expanded.update(
                    {c: record[c] for c in ("import", "require") if c in record}
                )
            else:
                expanded[condition] = self.conventions.to_distribution_form(target)

        for condition in _CANONICAL_CONDITIONS:
            if condition in record and condition not in expanded:
                expanded[condition] = record[condition]
        if "default" in expanded:
            # Node picks the first matching condition; `default` must stay last.
            expanded["default"] = expanded.pop("default")
        return expanded

    def synthesize(self, exports: dict[str, Any]) -> None:
        """Add exports for every discovered entry, keeping declared keys."""
        if "." not in exports and self.main_entry is not None:
            exports["."] = self.record_for(self.main_entry, EntryKind.LIBRARY)

        for name in self.libraries:
            if name == UMD_ENTRY:
                continue
            self._add_with_alias(exports, f"./{name}", self.record_for(name, EntryKind.LIBRARY))

        for name in self.executables:
            self._add_with_alias(
                exports,
                f"./{self.conventions.bin_dir}/{name}",
                self.record_for(name, EntryKind.EXECUTABLE),
            )

        if self.formats.umd:
            self._add_with_alias(exports, f"./{UMD_ENTRY}", self.umd_record())

        exports[SELF_EXPORT_KEY] = SELF_EXPORT_TARGET

    def record_for(self, name: str, kind: EntryKind) -> dict[str, str]:
        """Conditional record for an entry.

        Executables are run, never required, so they never get a `require`.
        """
        root = self.conventions.source_dir if kind is EntryKind.LIBRARY else self.conventions.bin_dir
        record = {
            "types": f"./{root}/{name}.d.ts",
            "import": f"./{root}/{name}.js",
        }
        if kind is EntryKind.LIBRARY and self.formats.cjs:
            record["require"] = f"./{root}/{name}.cjs"
        return record

    def umd_record(self) -> dict[str, str]:
        """Conditional record for the UMD bundle."""
        return {"require": f"./{self.conventions.source_dir}/{UMD_ENTRY}.js"}

    def _add_with_alias(self, exports: dict[str, Any], key: str, record: dict[str, str]) -> None:
        if key not in exports:
            exports[key] = record
        alias = f"{key}.js"
        if alias not in exports:
            existing = exports[key]
            exports[alias] = dict(existing) if isinstance(existing, dict) else existing

    def _classify_path(self, key: str, path: str) -> ClassifiedExport:
        classified = self.conventions.classify(path)
        source_dir = self.conventions.source_dir

        if classified.root is None:
            msg = (
                f"Export {key!r} points to {path!r}, which is outside {source_dir}/. "
                f"Exports must point to an entry point (e.g., './{source_dir}/utils.js')."
            )
            raise ConfigurationError(msg)

        filename = classified.relative
        if "/" in filename:
            msg = (
                f"Export {key!r} points to {path!r}, which is in a nested directory. "
                f"Only modules directly inside {classified.root}/ are entry points."
            )
            raise ConfigurationError(msg)

        if filename.endswith(".cjs"):
            filename = filename[: -len(".cjs")] + ".js"
        if not is_valid_entry_filename(filename):
            msg = (
                f"Export {key!r} references {filename!r}, which is not a valid entry point. "
                "Entry points are .ts/.js files that do not start with '_' or '.' "
                "and are not declaration or test files."
            )
            raise ConfigurationError(msg)

        kind = EntryKind.LIBRARY if classified.root == source_dir else EntryKind.EXECUTABLE
        return self._known(key, entry_name(filename), kind)

    def _known(self, key: str, name: str, kind: EntryKind) -> ClassifiedExport:
        entries = self.libraries if kind is EntryKind.LIBRARY else self.executables
        if name not in entries:
            return ClassifiedExport(key, ExportStatus.STALE, name, kind)
        return ClassifiedExport(key, ExportStatus.VALID, name, kind)

    def _entry_for_key(self, key: str) -> tuple[str, EntryKind] | None:
        if key == "." and self.main_entry is not None:
            return self.main_entry, EntryKind.LIBRARY
        if not key.startswith("./"):
            return None

        subpath = strip_dot_prefix(key)
        if subpath.endswith(".js"):
            subpath = subpath[: -len(".js")]

        bin_prefix = f"{self.conventions.bin_dir}/"
        if subpath.startswith(bin_prefix):
            name = subpath[len(bin_prefix) :]
            return (name, EntryKind.EXECUTABLE) if name and "/" not in name else None
        if subpath and "/" not in subpath:
            return subpath, EntryKind.LIBRARY
        return None


def _normalize_declared(declared: Any) -> dict[str, Any]:
    """Turn the `exports` shorthands into a subpath-keyed mapping."""
    if declared is None:
        return {}
    if isinstance(declared, str):
        return {".": declared}
    if not isinstance(declared, Mapping):
        msg = f"exports must be a string or an object, got {type(declared).__name__}"
        raise ConfigurationError(msg)
    if declared and not any(key.startswith(".") for key in declared):
        # Top-level conditions object: {"import": ..., "require": ...}
        return {".": dict(declared)}
    return dict(declared)


def _target_path(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for condition in ("import", "require"):
            target = value.get(condition)
            if isinstance(target, str):
                return target
    return None
