"""
PackageSet: every Package of a codebase, and lookups over them.

Built once per run from filesystem discovery, read-only afterwards.

Discovery:
    1. Expand root/<pathspec>/package.yml for every pathspec
    2. Drop markers under the vendor directory (symlinks resolved)
       and markers matching an exclude glob
    3. Name each package after its marker's directory, relative to root
    4. Append a synthetic root package if none was discovered

Lookup order:
    Packages are stored most-specific-first (longest name first), so
    a linear scan for the owning package finds nested packages before
    their ancestors and always ends at the root package.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from packguard.configuration import Configuration
from packguard.errors import DiscoveryError
from packguard.globbing import any_match, expand
from packguard.package import PACKAGE_CONFIG_FILENAME, ROOT_PACKAGE_NAME, Package
from packguard.package_config import load_package_config, package_from_dict


logger = logging.getLogger(__name__)


def index_by_specificity(packages: Sequence[Package]) -> Dict[str, Package]:
    """
    Order packages longest-name-first and index them by name.

    Raises DiscoveryError if two packages share a name.
    """
    seen = set()
    duplicates = set()
    for package in packages:
        if package.name in seen:
            duplicates.add(package.name)
        seen.add(package.name)
    if duplicates:
        raise DiscoveryError(f"Duplicate package names: {', '.join(sorted(duplicates))}")

    # root matches every path, so it goes last whatever its name length
    ordered = sorted(packages, key=lambda p: (p.root, -len(p.name)))
    return {package.name: package for package in ordered}


class PackageSet:
    """Ordered, immutable collection of Packages with ownership lookup."""

    def __init__(self, packages: Sequence[Package]):
        self._packages = index_by_specificity(packages)

    @classmethod
    def load_all_from(
        cls,
        configuration: Configuration,
        package_pathspec: Union[str, List[str], None] = None,
    ) -> "PackageSet":
        """Discover and parse every package marker under the configured root."""
        paths = cls.package_paths(configuration, package_pathspec or configuration.package_paths)
        root = configuration.root_path

        packages: List[Package] = []
        for path in paths:
            try:
                relative = path.parent.relative_to(root).as_posix()
            except ValueError as e:
                raise DiscoveryError(f"Package config {path} is outside of {root}") from e
            packages.append(package_from_dict(relative, load_package_config(path)))

        if not any(package.root for package in packages):
            logger.debug("No root %s found, adding an unconfigured root package", PACKAGE_CONFIG_FILENAME)
            packages.append(Package(name=ROOT_PACKAGE_NAME))

        package_set = cls(packages)
        logger.info("Loaded %d packages from %s", len(package_set), root)
        return package_set

    @classmethod
    def package_paths(
        cls,
        configuration: Configuration,
        package_pathspec: Union[str, List[str]],
    ) -> List[Path]:
        """
        Marker file paths selected by `package_pathspec`, minus exclusions.

        Paths are absolute and normalized; "." and ".." segments are
        collapsed but symlinks are kept as found.
        """
        pathspecs = [package_pathspec] if isinstance(package_pathspec, str) else list(package_pathspec)
        root = str(configuration.root_path)
        vendor_dir = os.path.realpath(configuration.vendor_dir)

        results: List[Path] = []
        seen = set()
        for pathspec in pathspecs:
            for match in expand(root, os.path.join(pathspec, PACKAGE_CONFIG_FILENAME)):
                path = os.path.normpath(match)
                if path in seen:
                    continue
                seen.add(path)
                if _under(os.path.realpath(path), vendor_dir):
                    logger.debug("Skipping vendored package config %s", path)
                    continue
                if any_match(configuration.exclude, Path(os.path.relpath(path, root)).as_posix()):
                    logger.debug("Skipping excluded package config %s", path)
                    continue
                results.append(Path(path))
        return results

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    @property
    def root_package(self) -> Package:
        return self._packages[ROOT_PACKAGE_NAME]

    def fetch(self, name: str) -> Optional[Package]:
        """Exact lookup by name. Unknown names return None, never an ancestor."""
        return self._packages.get(name)

    def package_from_path(self, file_path: Union[str, Path]) -> Package:
        """
        The package owning `file_path` (root-relative).

        The most specific package whose directory contains the path
        wins; the root package owns everything else.
        """
        path = Path(file_path).as_posix() if isinstance(file_path, Path) else file_path
        if path.startswith("./"):
            path = path[2:]
        for package in self._packages.values():
            if package.package_path(path):
                return package
        # Only reachable for a PackageSet built without a root package
        raise DiscoveryError(f"No package owns {path}")


def _under(path: str, directory: str) -> bool:
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)
