"""Projection of the authoritative manifest onto the distribution manifest.

Only allow-listed fields make it into the published package.json. Developer
tooling configuration (devDependencies, lint/test settings, workspaces, ...)
stays behind, and `main`/`module`/`types` are recomputed from the build
rather than copied.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog

from libforge.manifest.model import PackageManifest
from libforge.manifest.paths import DEFAULT_CONVENTIONS, PathCategory, PathConventions
from libforge.manifest.workspace import WorkspaceDependencyResolver

if TYPE_CHECKING:
    from pathlib import Path

    from libforge.manifest.formats import FormatFlags

logger = structlog.get_logger()

# Scripts npm runs in a consumer's install; anything else (build, test, lint)
# references files that are not published.
LIFECYCLE_SCRIPTS = frozenset(
    [
        "preinstall",
        "install",
        "postinstall",
        "preuninstall",
        "uninstall",
        "postuninstall",
        "shrinkwrap",
    ]
)

# Fields copied verbatim.
PASSTHROUGH_FIELDS = (
    "description",
    "keywords",
    "author",
    "contributors",
    "maintainers",
    "license",
    "repository",
    "bugs",
    "homepage",
    "funding",
    "peer_dependencies_meta",
    "bundled_dependencies",
    "engines",
    "cpu",
    "os",
    "side_effects",
    "browserslist",
    "publish_config",
)

# Fields whose `workspace:` specifiers are resolved.
DEPENDENCY_FIELDS = ("dependencies", "peer_dependencies", "optional_dependencies")


class ManifestCleaner:
    """Builds the distribution manifest (everything except `exports`).

    Example:
        >>> cleaner = ManifestCleaner(project_root)
        >>> dist = cleaner.clean(manifest, "index", FormatFlags())
        >>> dist.module
        'src/index.js'
    """

    def __init__(
        self,
        project_root: Path,
        *,
        conventions: PathConventions = DEFAULT_CONVENTIONS,
        resolver: WorkspaceDependencyResolver | None = None,
    ) -> None:
        self.project_root = project_root
        self.conventions = conventions
        self.resolver = resolver or WorkspaceDependencyResolver(project_root)

    def clean(
        self,
        manifest: PackageManifest,
        main_entry: str | None,
        formats: FormatFlags,
        *,
        executables: Sequence[str] = (),
        extra_files: Sequence[str] = (),
    ) -> PackageManifest:
        """Project `manifest` onto the distribution field allow-list.

        Args:
            manifest: Authoritative manifest (not modified).
            main_entry: Resolved main entry name; None for bin-only packages.
            formats: Enabled output formats.
            executables: Executable entry names, added to `bin` when missing.
            extra_files: Auto-discovered files to list in `files`.

        Returns:
            Distribution manifest without `exports`.
        """
        source_dir = self.conventions.source_dir
        cleaned = PackageManifest(name=manifest.name, version=manifest.version)

        for attr in PASSTHROUGH_FIELDS:
            value = getattr(manifest, attr)
            if value is not None:
                setattr(cleaned, attr, value)

        for attr in DEPENDENCY_FIELDS:
            value = getattr(manifest, attr)
            if isinstance(value, dict):
                setattr(cleaned, attr, self.resolver.resolve_all(value))
            elif value is not None:
                setattr(cleaned, attr, value)

        cleaned.type = manifest.type or "module"
        if main_entry is not None:
            if formats.cjs:
                cleaned.main = f"{source_dir}/{main_entry}.cjs"
            cleaned.module = f"{source_dir}/{main_entry}.js"
            cleaned.types = f"{source_dir}/{main_entry}.d.ts"

        cleaned.bin = self.clean_bin(manifest.bin, executables)
        cleaned.scripts = self.clean_scripts(manifest.scripts)
        if manifest.files is not None:
            cleaned.files = self.clean_files(
                manifest.files,
                has_executables=bool(executables),
                extra_files=extra_files,
            )

        dropped = sorted(
            key for key in manifest.to_dict() if key not in cleaned.to_dict() and key != "exports"
        )
        if dropped:
            logger.debug("manifest_fields_dropped", fields=dropped)
        return cleaned

    def clean_scripts(self, scripts: Any) -> dict[str, str] | None:
        """Keep install lifecycle scripts only; None when nothing survives."""
        if not isinstance(scripts, dict):
            return None
        kept = {name: command for name, command in scripts.items() if name in LIFECYCLE_SCRIPTS}
        return self.conventions.to_published_form(kept) if kept else None

    def clean_bin(self, bin_field: Any, executables: Sequence[str]) -> Any:
        """Rewrite `bin` to npm's path form and add executables from the bin directory."""
        bin_dir = self.conventions.bin_dir
        if bin_field is None and not executables:
            return None
        if isinstance(bin_field, str):
            return self.conventions.to_executable_form(bin_field)

        commands = dict(bin_field) if isinstance(bin_field, dict) else {}
        for name in executables:
            commands.setdefault(name, f"{bin_dir}/{name}.js")
        return self.conventions.to_executable_form(commands)

    def clean_files(
        self,
        files: Any,
        *,
        has_executables: bool = False,
        extra_files: Sequence[str] = (),
    ) -> Any:
        """Rewrite `files` relative to the output directory.

        Build-output entries (`dist/`) are dropped because the distribution
        manifest lives inside the output directory; the built directories are
        listed instead so npm still packs them.
        """
        if not isinstance(files, list):
            return self.conventions.to_published_form(files)

        cleaned: list[Any] = []
        for entry in files:
            if (
                isinstance(entry, str)
                and self.conventions.classify(entry).category is PathCategory.BUILD_OUTPUT
            ):
                continue
            published = self.conventions.to_published_form(entry)
            if published not in cleaned:
                cleaned.append(published)

        for extra in extra_files:
            if extra not in cleaned:
                cleaned.append(extra)

        roots = [self.conventions.source_dir]
        if has_executables:
            roots.append(self.conventions.bin_dir)
        for root in roots:
            if not any(self._covers(entry, root) for entry in cleaned):
                cleaned.append(f"./{root}/")
        return cleaned

    def _covers(self, entry: Any, root: str) -> bool:
        return isinstance(entry, str) and self.conventions.classify(entry).root == root
