"""Typed package.json model.

Both the authoritative manifest (edited by developers, lives at the project
root) and the distribution manifest (derived, written into the build output)
use this record. Known fields are named attributes; anything else lands in
`extras` so that round-trips through the model never lose data.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from libforge.manifest.serialization import (
    dumps_manifest,
    load_manifest_data,
    to_camel_case,
    write_manifest_data,
)

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class PackageManifest:
    """package.json contents.

    Attributes are snake_case versions of the package.json keys
    (`peer_dependencies` <-> `peerDependencies`). `None` means the key is absent.
    `key_order` remembers the order keys appeared in the source file.
    """

    name: str | None = None
    version: str | None = None
    private: bool | None = None
    description: str | None = None
    keywords: list[str] | None = None
    author: Any = None
    contributors: Any = None
    maintainers: Any = None
    license: Any = None
    repository: Any = None
    bugs: Any = None
    homepage: str | None = None
    funding: Any = None
    type: str | None = None
    main: str | None = None
    module: str | None = None
    types: str | None = None
    typings: str | None = None
    exports: Any = None
    bin: str | dict[str, str] | None = None
    files: Any = None
    scripts: dict[str, str] | None = None
    dependencies: dict[str, str] | None = None
    dev_dependencies: dict[str, str] | None = None
    peer_dependencies: dict[str, str] | None = None
    peer_dependencies_meta: dict[str, Any] | None = None
    optional_dependencies: dict[str, str] | None = None
    bundled_dependencies: Any = None
    engines: dict[str, str] | None = None
    cpu: list[str] | None = None
    os: list[str] | None = None
    side_effects: Any = None
    browserslist: Any = None
    publish_config: dict[str, Any] | None = None

    extras: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackageManifest:
        """Create a manifest from parsed package.json data."""
        known: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        for key, value in data.items():
            attr = _KEY_TO_ATTR.get(key)
            if attr is None:
                extras[key] = copy.deepcopy(value)
            else:
                known[attr] = copy.deepcopy(value)
        return cls(**known, extras=extras, key_order=list(data))

    @classmethod
    def load(cls, path: Path) -> PackageManifest:
        """Load a manifest from a package.json file."""
        return cls.from_dict(load_manifest_data(path))

    def to_dict(self) -> dict[str, Any]:
        """Convert to package.json data.

        Keys seen in the source file keep their original position; new keys
        follow in field declaration order, then unrecognized extras.
        """
        values: dict[str, Any] = {}
        for attr, key in _ATTR_TO_KEY.items():
            value = getattr(self, attr)
            if value is not None:
                values[key] = value
        values.update(self.extras)

        ordered = {key: values[key] for key in self.key_order if key in values}
        for key, value in values.items():
            ordered.setdefault(key, value)
        return copy.deepcopy(ordered)

    def to_json(self) -> str:
        """Serialize to package.json text."""
        return dumps_manifest(self.to_dict())

    def save(self, path: Path) -> None:
        """Write the manifest to `path`."""
        write_manifest_data(path, self.to_dict())

    def copy(self) -> PackageManifest:
        """Return a deep copy that can be mutated freely."""
        return copy.deepcopy(self)

    @property
    def name_basename(self) -> str:
        """Last `/` segment of the package name (`@scope/pkg` -> `pkg`)."""
        return (self.name or "").split("/")[-1]


_ATTR_TO_KEY: dict[str, str] = {
    f.name: to_camel_case(f.name)
    for f in fields(PackageManifest)
    if f.name not in ("extras", "key_order")
}
_KEY_TO_ATTR: dict[str, str] = {key: attr for attr, key in _ATTR_TO_KEY.items()}
