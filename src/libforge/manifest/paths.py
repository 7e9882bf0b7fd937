"""Path conventions for package.json values.

Paths in a manifest fall into one of three categories:

- SOURCE: under the source directory (`src/...`) or the executable
  directory (`bin/...`)
- BUILD_OUTPUT: under the build output directory (`dist/...`), usually
  `dist/src/...` after a `--save` build
- OTHER: anything else (commands, docs, globs, package.json itself)

Every transform here is pure and idempotent (`f(f(x)) == f(x)`), and walks
nested lists and dicts, so repeated `--save` builds converge instead of
stacking prefixes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

MANIFEST_FILENAME = "package.json"


class PathCategory(Enum):
    """Where a manifest path points."""

    SOURCE = "source"
    BUILD_OUTPUT = "build_output"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ClassifiedPath:
    """A manifest path split into category, source root and remainder.

    Attributes:
        category: Path category.
        root: Source root the path lives under (`src` or `bin`), also set for
            build-output paths like `dist/src/x.js`. None otherwise.
        relative: Remainder after the root (or after the output directory).
    """

    category: PathCategory
    root: str | None
    relative: str

    def source_path(self) -> str | None:
        """Return `root/relative` without any prefix, or None if not source-rooted."""
        if self.root is None:
            return None
        return f"{self.root}/{self.relative}" if self.relative else self.root


def strip_dot_prefix(path: str) -> str:
    """Remove any number of leading `./` segments."""
    while path.startswith("./"):
        path = path[2:]
    return path


def _map_strings(value: Any, fn: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return fn(value)
    if isinstance(value, list):
        return [_map_strings(item, fn) for item in value]
    if isinstance(value, dict):
        return {key: _map_strings(item, fn) for key, item in value.items()}
    return value


@dataclass(frozen=True, slots=True)
class PathConventions:
    """Directory names a project is laid out with."""

    source_dir: str = "src"
    bin_dir: str = "bin"
    output_dir: str = "dist"

    @property
    def source_roots(self) -> tuple[str, str]:
        return (self.source_dir, self.bin_dir)

    def classify(self, path: str) -> ClassifiedPath:
        """Classify a manifest path."""
        parts = [part for part in path.split("/") if part not in ("", ".")]
        if not parts or path.startswith("/"):
            return ClassifiedPath(PathCategory.OTHER, None, strip_dot_prefix(path))

        if parts[0] in self.source_roots:
            return ClassifiedPath(PathCategory.SOURCE, parts[0], "/".join(parts[1:]))

        if parts[0] == self.output_dir:
            # `dist/dist/src` shows up when a tool re-prefixes an already
            # prefixed path; treat any run of output segments as one.
            index = 0
            while index < len(parts) and parts[index] == self.output_dir:
                index += 1
            rest = parts[index:]
            if rest and rest[0] in self.source_roots:
                return ClassifiedPath(PathCategory.BUILD_OUTPUT, rest[0], "/".join(rest[1:]))
            return ClassifiedPath(PathCategory.BUILD_OUTPUT, None, "/".join(rest))

        return ClassifiedPath(PathCategory.OTHER, None, strip_dot_prefix(path))

    def to_published_form(self, value: Any) -> Any:
        """Prefix bare `src/...` (or `bin/...`) references with `./`."""
        return _map_strings(value, self._published)

    def to_executable_form(self, value: Any) -> Any:
        """Rewrite paths to npm `bin` form: no `./`, no `dist/` before `src/`."""
        return _map_strings(value, self._executable)

    def to_distribution_form(self, value: Any) -> Any:
        """Rewrite paths relative to the output directory (`./dist/src/x` -> `./src/x`)."""
        return _map_strings(value, self._distribution)

    def to_build_output_form(self, value: Any) -> Any:
        """Rewrite paths relative to the project root (`./src/x` -> `./dist/src/x`)."""
        return _map_strings(value, self._build_output)

    def _published(self, path: str) -> str:
        if path.startswith("./"):
            return path
        if self.classify(path).category is PathCategory.SOURCE:
            return f"./{path}"
        return path

    def _executable(self, path: str) -> str:
        classified = self.classify(path)
        if classified.category is PathCategory.OTHER:
            return path
        source_path = classified.source_path()
        if source_path is not None:
            return source_path
        if classified.relative:
            return f"{self.output_dir}/{classified.relative}"
        return self.output_dir

    def _distribution(self, path: str) -> str:
        classified = self.classify(path)
        if classified.category is PathCategory.OTHER:
            return path
        source_path = classified.source_path()
        if source_path is not None:
            return f"./{source_path}"
        if classified.relative:
            return f"./{classified.relative}"
        return path

    def _build_output(self, path: str) -> str:
        normalized = self._distribution(path)
        classified = self.classify(normalized)
        if classified.category is PathCategory.SOURCE:
            return f"./{self.output_dir}/{strip_dot_prefix(normalized)}"
        if strip_dot_prefix(normalized) == MANIFEST_FILENAME:
            return f"./{self.output_dir}/{MANIFEST_FILENAME}"
        return path


DEFAULT_CONVENTIONS = PathConventions()


def to_published_form(value: Any) -> Any:
    """`PathConventions.to_published_form` with the default layout."""
    return DEFAULT_CONVENTIONS.to_published_form(value)


def to_executable_form(value: Any) -> Any:
    """`PathConventions.to_executable_form` with the default layout."""
    return DEFAULT_CONVENTIONS.to_executable_form(value)


def to_distribution_form(value: Any) -> Any:
    """`PathConventions.to_distribution_form` with the default layout."""
    return DEFAULT_CONVENTIONS.to_distribution_form(value)


def to_build_output_form(value: Any) -> Any:
    """`PathConventions.to_build_output_form` with the default layout."""
    return DEFAULT_CONVENTIONS.to_build_output_form(value)
