"""libforge: zero-config builds for npm libraries.

Derives a publishable package.json and export map from a source tree and
the developer's own package.json, then drives esbuild and tsc to produce
the output directory.

Example:
    >>> from pathlib import Path
    >>> from libforge import BuildOrchestrator
    >>>
    >>> result = BuildOrchestrator(Path("my-lib")).build(save=True)
    >>> sorted(result.distribution.exports)
    ['.', './index', './index.js', './package.json']
"""
from __future__ import annotations

from libforge.build.orchestrator import BuildOrchestrator, BuildResult
from libforge.errors import (
    ConfigurationError,
    ExternalToolError,
    LibforgeError,
    LibforgeWarning,
    PublishSafetyWarning,
    SecurityError,
    StalenessWarning,
    WorkspaceResolutionWarning,
)
from libforge.manifest import (
    EntryKind,
    EntryPoint,
    EntryPointDiscoverer,
    ExportGraph,
    ExportGraphBuilder,
    FormatFlags,
    ManifestCleaner,
    PackageManifest,
    PathConventions,
    WorkspaceDependencyResolver,
    resolve_main_entry,
)

__version__ = "0.1.0"

__all__ = [
    "BuildOrchestrator",
    "BuildResult",
    "ConfigurationError",
    "EntryKind",
    "EntryPoint",
    "EntryPointDiscoverer",
    "ExportGraph",
    "ExportGraphBuilder",
    "ExternalToolError",
    "FormatFlags",
    "LibforgeError",
    "LibforgeWarning",
    "ManifestCleaner",
    "PackageManifest",
    "PathConventions",
    "PublishSafetyWarning",
    "SecurityError",
    "StalenessWarning",
    "WorkspaceResolutionWarning",
    "__version__",
    "resolve_main_entry",
]
