"""Resolution of `workspace:` dependency specifiers.

Monorepo tools let packages depend on siblings with `"lib": "workspace:*"`.
Those specifiers mean nothing to the registry, so the published manifest
needs the sibling's real version instead.
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path

import structlog

from libforge.errors import WorkspaceResolutionWarning

logger = structlog.get_logger()

WORKSPACE_PROTOCOL = "workspace:"

# `workspace:*` publishes as a caret range; `workspace:^`/`workspace:~` keep
# their own operator.
_RANGE_OPERATORS = {"*": "^", "^": "^", "~": "~"}

# Sibling package locations relative to the project root, checked in order.
# `{name}` is the dependency name without its scope.
CANDIDATE_LOCATIONS = (
    "../{name}/package.json",
    "../packages/{name}/package.json",
    "../../packages/{name}/package.json",
    "../libs/{name}/package.json",
)


def is_workspace_specifier(specifier: object) -> bool:
    """Check whether a dependency version uses the workspace protocol."""
    return isinstance(specifier, str) and specifier.startswith(WORKSPACE_PROTOCOL)


class WorkspaceDependencyResolver:
    """Rewrites `workspace:` specifiers against sibling package.json files.

    Reads only; each sibling version is looked up once per resolver.

    Example:
        >>> resolver = WorkspaceDependencyResolver(Path("packages/app"))
        >>> resolver.resolve("internal-lib", "workspace:*")
        '^2.3.0'
    """

    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root
        self._versions: dict[str, str | None] = {}

    def resolve(self, name: str, specifier: str) -> str:
        """Resolve one dependency specifier.

        Args:
            name: Dependency name (`internal-lib` or `@scope/internal-lib`).
            specifier: Version specifier starting with `workspace:`.

        Returns:
            A registry-compatible range, or the original specifier when the
            sibling package cannot be found.
        """
        if not is_workspace_specifier(specifier):
            return specifier

        requested = specifier[len(WORKSPACE_PROTOCOL) :]
        operator = _RANGE_OPERATORS.get(requested)
        if operator is None:
            return requested

        version = self.find_version(name)
        if version is None:
            logger.warning("workspace_dependency_unresolved", dependency=name, specifier=specifier)
            warnings.warn(
                WorkspaceResolutionWarning(
                    f"Could not find workspace package {name!r}; keeping {specifier!r}"
                ),
                stacklevel=2,
            )
            return specifier

        logger.debug("workspace_dependency_resolved", dependency=name, version=version)
        return f"{operator}{version}"

    def resolve_all(self, dependencies: dict[str, str]) -> dict[str, str]:
        """Resolve every workspace specifier in a dependency mapping."""
        return {
            name: self.resolve(name, spec) if is_workspace_specifier(spec) else spec
            for name, spec in dependencies.items()
        }

    def find_version(self, name: str) -> str | None:
        """Find the version declared by the sibling package called `name`."""
        if name not in self._versions:
            self._versions[name] = self._lookup(name)
        return self._versions[name]

    def candidate_paths(self, name: str) -> list[Path]:
        """Sibling manifest paths that may declare `name`."""
        basename = name.split("/")[-1]
        return [self.project_root / loc.format(name=basename) for loc in CANDIDATE_LOCATIONS]

    def _lookup(self, name: str) -> str | None:
        for candidate in self.candidate_paths(name):
            if not candidate.is_file():
                continue
            try:
                with candidate.open(encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.debug("workspace_manifest_unreadable", path=str(candidate), error=str(e))
                continue

            if not isinstance(data, dict) or data.get("name") != name:
                continue
            version = data.get("version")
            if isinstance(version, str) and version:
                return version
        return None
