"""Manifest transformation and export map generation."""

from __future__ import annotations

from libforge.manifest.cleaner import ManifestCleaner
from libforge.manifest.discovery import EntryKind, EntryPoint, EntryPointDiscoverer
from libforge.manifest.exports import ExportGraph, ExportGraphBuilder
from libforge.manifest.formats import BundleFormat, FormatFlags
from libforge.manifest.model import PackageManifest
from libforge.manifest.paths import (
    PathCategory,
    PathConventions,
    to_build_output_form,
    to_distribution_form,
    to_executable_form,
    to_published_form,
)
from libforge.manifest.resolver import resolve_main_entry
from libforge.manifest.workspace import WorkspaceDependencyResolver

__all__ = [
    "BundleFormat",
    "EntryKind",
    "EntryPoint",
    "EntryPointDiscoverer",
    "ExportGraph",
    "ExportGraphBuilder",
    "FormatFlags",
    "ManifestCleaner",
    "PackageManifest",
    "PathCategory",
    "PathConventions",
    "WorkspaceDependencyResolver",
    "resolve_main_entry",
    "to_build_output_form",
    "to_distribution_form",
    "to_executable_form",
    "to_published_form",
]
