"""package.json serialization.

Manifests are written the way npm itself writes them:
- Two-space indentation
- Key order preserved (no sorting, package.json order is meaningful)
- Non-ASCII characters kept as-is
- A single trailing newline

Identical input produces byte-identical output, so repeated builds of an
unchanged project never produce a diff.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from libforge.errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

# Type alias for JSON-serializable values (Any is appropriate here)
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


def to_camel_case(snake_str: str) -> str:
    """Convert snake_case string to camelCase.

    Args:
        snake_str: String in snake_case format.

    Returns:
        String in camelCase format.

    Example:
        >>> to_camel_case("peer_dependencies_meta")
        "peerDependenciesMeta"
    """
    if not snake_str:
        return snake_str
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def dumps_manifest(data: dict[str, Any]) -> str:
    """Serialize a manifest mapping to package.json text."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_manifest_data(path: Path) -> dict[str, Any]:
    """Read a package.json file into a plain dict.

    Raises:
        ConfigurationError: If the file is missing or is not a JSON object.
    """
    if not path.exists():
        msg = f"No package.json found at {path}"
        raise ConfigurationError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise ConfigurationError(msg) from e

    if not isinstance(data, dict):
        msg = f"{path} must contain a JSON object, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return data


def write_manifest_data(path: Path, data: dict[str, Any]) -> None:
    """Write a manifest mapping to `path` as package.json text."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_manifest(data), encoding="utf-8")
