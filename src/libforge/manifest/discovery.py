"""Entry point discovery.

Every module directly inside the source directory is a public entry point
unless it is internal (`_helpers.ts`), hidden, a declaration file or a test.
Modules in the optional executable directory (`bin/`) are executable entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from libforge.errors import ConfigurationError

logger = structlog.get_logger()


class EntryKind(Enum):
    """How an entry point is consumed."""

    LIBRARY = "library"
    EXECUTABLE = "executable"


@dataclass(frozen=True, slots=True)
class EntryPoint:
    """A source module built as its own output file."""

    name: str
    kind: EntryKind
    source_path: Path


# Source extensions in order of preference when a stem has several.
SOURCE_EXTENSIONS = (".ts", ".js")
DECLARATION_SUFFIX = ".d.ts"

# Directory names that hold tests rather than modules.
TEST_DIRS = frozenset(["test", "tests", "__tests__", "__mocks__", "__fixtures__"])

# Stem suffixes of test modules (`utils.test.ts`, `utils.spec.ts`).
TEST_STEM_SUFFIXES = (".test", ".spec")


def is_valid_entry_filename(filename: str) -> bool:
    """Check whether a filename in the source directory is an entry point.

    Args:
        filename: Bare filename (no directory part).

    Returns:
        True if the file should be built as a public entry.
    """
    if filename.endswith(DECLARATION_SUFFIX):
        return False
    if not filename.endswith(SOURCE_EXTENSIONS):
        return False
    if filename.startswith(("_", ".")):
        return False
    stem = filename.rsplit(".", 1)[0]
    return bool(stem) and not stem.endswith(TEST_STEM_SUFFIXES)


def entry_name(filename: str) -> str:
    """Strip the source extension from an entry filename."""
    return filename.rsplit(".", 1)[0]


class EntryPointDiscoverer:
    """Finds entry points in a project's source and executable directories.

    Example:
        >>> discoverer = EntryPointDiscoverer(Path("src"), bin_dir=Path("bin"))
        >>> [e.name for e in discoverer.discover()]
        ['cli', 'index', 'utils']
    """

    def __init__(self, source_dir: Path, *, bin_dir: Path | None = None) -> None:
        """Initialize discovery.

        Args:
            source_dir: Directory holding library entries. Must exist.
            bin_dir: Optional directory holding executable entries.
        """
        self.source_dir = source_dir
        self.bin_dir = bin_dir

    def discover_libraries(self) -> list[EntryPoint]:
        """Discover library entries (empty for bin-only packages).

        Raises:
            ConfigurationError: If the source directory is missing.
        """
        if not self.source_dir.is_dir():
            msg = f"No {self.source_dir.name}/ directory found at {self.source_dir}"
            raise ConfigurationError(msg)
        return scan_directory(self.source_dir, EntryKind.LIBRARY)

    def discover_executables(self) -> list[EntryPoint]:
        """Discover executable entries (empty when there is no bin directory)."""
        if self.bin_dir is None or not self.bin_dir.is_dir():
            return []
        return scan_directory(self.bin_dir, EntryKind.EXECUTABLE)

    def discover(self) -> list[EntryPoint]:
        """Discover all entries, libraries first.

        Raises:
            ConfigurationError: If the source directory is missing, or neither
                directory holds an entry point.
        """
        libraries = self.discover_libraries()
        executables = self.discover_executables()
        if not libraries and not executables:
            searched = f"{self.source_dir.name}/"
            if self.bin_dir is not None:
                searched += f" or {self.bin_dir.name}/"
            msg = f"No entry points found in {searched}"
            raise ConfigurationError(msg)

        logger.info(
            "entries_discovered",
            libraries=[e.name for e in libraries],
            executables=[e.name for e in executables],
        )
        return libraries + executables


def scan_directory(directory: Path, kind: EntryKind) -> list[EntryPoint]:
    """Scan the immediate children of `directory` for entry points.

    Returns:
        Entries sorted by name. When `name.ts` and `name.js` both exist,
        the TypeScript source is used.
    """
    found: dict[str, Path] = {}
    for child in sorted(directory.iterdir()):
        if child.is_dir():
            if child.name in TEST_DIRS:
                logger.debug("skipped_test_directory", path=str(child))
            continue
        if not is_valid_entry_filename(child.name):
            continue

        name = entry_name(child.name)
        existing = found.get(name)
        if existing is None or _extension_rank(child) < _extension_rank(existing):
            found[name] = child

    return [EntryPoint(name=name, kind=kind, source_path=found[name]) for name in sorted(found)]


def _extension_rank(path: Path) -> int:
    return SOURCE_EXTENSIONS.index(path.suffix)
