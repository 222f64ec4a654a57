"""
Run configuration, loaded from packguard.yml at the codebase root.

Every key is optional. A missing file means "all defaults, rooted at
the directory that was asked for".
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from packguard.errors import ConfigurationError
from packguard.globbing import validate_glob


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "packguard.yml"
DEFAULT_INCLUDE_GLOBS = ["**/*.rb", "**/*.rake"]
DEFAULT_EXCLUDE_GLOBS = ["{bin,node_modules,script,tmp,vendor}/**/*"]
DEFAULT_PACKAGE_PATHS = "**"
DEFAULT_INFLECTIONS_FILE = "config/inflections.yml"
DEFAULT_VENDOR_PATH = "vendor/bundle"
DEFAULT_JOBS = min(os.cpu_count() or 2, 4)
# Directories under a package that are treated as load paths by default
DEFAULT_LOAD_PATH_GLOBS = ["app/*", "lib"]


@dataclass
class Configuration:
    """
    Settings consumed by PackageSet discovery and RunContext.

    Properties:
        root_path: Canonical absolute path of the codebase root
        include: Globs selecting the files to check
        exclude: Globs removing files and package markers
        package_paths: Glob (or globs) locating package directories
        load_paths: Root-relative directories the resolver indexes.
            None means "discover app/* and lib under every package".
        custom_associations: Extra association macro names
        inflections_file: Root-relative path of inflection overrides
        vendor_path: Root-relative bundle directory, never scanned
        parallel: Process files on a thread pool
        jobs: Worker count when parallel
        strict_resolution: Surface symbols the resolver cannot locate
    """

    root_path: Path
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_GLOBS))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_GLOBS))
    package_paths: Union[str, List[str]] = DEFAULT_PACKAGE_PATHS
    load_paths: Optional[List[str]] = None
    custom_associations: List[str] = field(default_factory=list)
    inflections_file: str = DEFAULT_INFLECTIONS_FILE
    vendor_path: str = DEFAULT_VENDOR_PATH
    parallel: bool = True
    jobs: int = DEFAULT_JOBS
    strict_resolution: bool = False

    def __post_init__(self) -> None:
        self.root_path = Path(self.root_path).resolve()
        for pattern in self.include + self.exclude + self.package_path_list:
            validate_glob(pattern)

    @property
    def package_path_list(self) -> List[str]:
        if isinstance(self.package_paths, str):
            return [self.package_paths]
        return list(self.package_paths)

    @property
    def inflections_path(self) -> Path:
        return self.root_path / self.inflections_file

    @property
    def vendor_dir(self) -> Path:
        return self.root_path / self.vendor_path

    @classmethod
    def from_path(cls, path: Union[str, Path, None] = None) -> "Configuration":
        """
        Load configuration from `path`.

        `path` may be a directory (packguard.yml is looked up inside it)
        or the config file itself. Defaults to the working directory.
        A config file that does not exist means defaults rooted at its
        directory; a directory that does not exist is an error.
        """
        path = Path(path) if path is not None else Path.cwd()
        if path.is_dir():
            config_file = path / DEFAULT_CONFIG_FILENAME
        elif path.exists() or (path.parent.is_dir() and path.suffix in (".yml", ".yaml")):
            config_file = path
        else:
            raise ConfigurationError(f"Configuration root {path} does not exist")

        if not config_file.exists():
            logger.debug("No %s found at %s, using defaults", DEFAULT_CONFIG_FILENAME, config_file)
            return cls(root_path=config_file.parent)

        try:
            with config_file.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed configuration {config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {config_file}: {e}") from e

        return cls.from_dict(data, root_path=config_file.parent)

    @classmethod
    def from_dict(cls, d: Dict[str, Any], root_path: Union[str, Path]) -> "Configuration":
        if not isinstance(d, dict):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(d).__name__}")

        kwargs: Dict[str, Any] = {}
        for key in ("include", "exclude", "custom_associations"):
            if key in d:
                kwargs[key] = _string_list(d, key)
        if "load_paths" in d:
            kwargs["load_paths"] = _string_list(d, "load_paths")
        if "package_paths" in d:
            value = d["package_paths"]
            kwargs["package_paths"] = value if isinstance(value, str) else _string_list(d, "package_paths")
        for key in ("inflections_file", "vendor_path"):
            if key in d:
                if not isinstance(d[key], str):
                    raise ConfigurationError(f"'{key}' must be a string, got {d[key]!r}")
                kwargs[key] = d[key]
        for key in ("parallel", "strict_resolution"):
            if key in d:
                if not isinstance(d[key], bool):
                    raise ConfigurationError(f"'{key}' must be true or false, got {d[key]!r}")
                kwargs[key] = d[key]
        if "jobs" in d:
            jobs = d["jobs"]
            if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
                raise ConfigurationError(f"'jobs' must be a positive integer, got {jobs!r}")
            kwargs["jobs"] = jobs

        return cls(root_path=Path(root_path), **kwargs)


def _string_list(d: Dict[str, Any], key: str) -> List[str]:
    value = d[key]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigurationError(f"'{key}' must be a list of strings, got {value!r}")
