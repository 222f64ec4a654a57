"""
Marker file parsing: package.yml -> Package.

Keeps the mapping from the on-disk YAML layout to Package fields
explicit. Every field is optional; an empty marker file describes a
package with no enforcement at all.

Marker layout:
    enforce_dependencies: true
    enforce_privacy: true
    dependencies:
      - components/core
    public_path: app/public
    visible_to:
      - components/admin
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, FrozenSet

import yaml

from packguard.errors import DiscoveryError
from packguard.package import Package


def _flag(data: Dict[str, Any], *keys: str) -> bool:
    for key in keys:
        if key in data and data[key] is not None:
            value = data[key]
            if not isinstance(value, bool):
                raise DiscoveryError(f"'{key}' must be true or false, got {value!r}")
            return value
    return False


def _names(data: Dict[str, Any], key: str) -> FrozenSet[str]:
    value = data.get(key)
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return frozenset(value)
    raise DiscoveryError(f"'{key}' must be a string or a list of strings, got {value!r}")


def package_from_dict(name: str, d: Dict[str, Any] | None) -> Package:
    """
    Build a Package from parsed marker contents.

    `enforce_dependencies` is the canonical key; `enforce_dependency`
    is accepted as an alias. Unknown keys are ignored.
    """
    d = d or {}
    if not isinstance(d, dict):
        raise DiscoveryError(f"Package '{name}' config must be a mapping, got {type(d).__name__}")

    public_path = d.get("public_path")
    if public_path is not None and not isinstance(public_path, str):
        raise DiscoveryError(f"Package '{name}' public_path must be a string, got {public_path!r}")

    try:
        return Package(
            name=name,
            enforce_dependency=_flag(d, "enforce_dependencies", "enforce_dependency"),
            enforce_privacy=_flag(d, "enforce_privacy"),
            dependencies=_names(d, "dependencies"),
            public_path=public_path,
            visible_to=_names(d, "visible_to"),
        )
    except DiscoveryError as e:
        raise DiscoveryError(f"Package '{name}': {e}") from e


def load_package_config(path: Path) -> Dict[str, Any]:
    """Read and parse one marker file. An empty file yields an empty dict."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    except OSError as e:
        raise DiscoveryError(f"Cannot read package config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DiscoveryError(f"Malformed package config {path}: {e}") from e
