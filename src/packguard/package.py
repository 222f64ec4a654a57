"""
Package Model

A Package is a named subtree of the codebase with its own boundary
policy. It is identified by the root-relative path of the directory
holding its marker file, using ``/`` separators. The package at the
codebase root is named ``"."``.

ARCHITECTURAL RULE:
    Packages are immutable values.
    They know nothing about the filesystem or about other packages;
    a PackageSet owns them and answers lookups.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional


ROOT_PACKAGE_NAME = "."
DEFAULT_PUBLIC_PATH = "app/public"
PACKAGE_CONFIG_FILENAME = "package.yml"


@dataclass(frozen=True)
class Package:
    """
    Identity and boundary policy of one package.

    Properties:
        name:
            Root-relative directory path, or "." for the root package
            Example: "components/timeline"

        enforce_dependency:
            If True, references out of this package must target a
            declared dependency

        enforce_privacy:
            If True, references into this package must land in its
            public path (unless the referencing package is exempt)

        dependencies:
            Names of packages this package may reference

        public_path:
            Package-relative subtree considered public.
            None means DEFAULT_PUBLIC_PATH.

        visible_to:
            Names of packages exempt from this package's privacy policy
    """

    name: str
    enforce_dependency: bool = False
    enforce_privacy: bool = False
    dependencies: FrozenSet[str] = field(default_factory=frozenset)
    public_path: Optional[str] = None
    visible_to: FrozenSet[str] = field(default_factory=frozenset)

    def __str__(self) -> str:
        return self.name

    @property
    def root(self) -> bool:
        return self.name == ROOT_PACKAGE_NAME

    @property
    def config_path(self) -> str:
        """Root-relative path of the marker file describing this package."""
        if self.root:
            return PACKAGE_CONFIG_FILENAME
        return f"{self.name}/{PACKAGE_CONFIG_FILENAME}"

    @property
    def public_path_prefix(self) -> str:
        """
        Root-relative prefix of the public subtree, always ending in "/".

        The root package's public path is already root-relative.
        """
        unprefixed = (self.public_path or DEFAULT_PUBLIC_PATH).strip("/")
        if self.root:
            return f"{unprefixed}/"
        return f"{self.name}/{unprefixed}/"

    def package_path(self, path: str) -> bool:
        """
        True if `path` lies inside this package's directory.

        Matching happens on a directory boundary: "a/b" owns "a/b" and
        "a/b/x", never "a/bc". The root package owns every path.
        """
        if self.root:
            return True
        return path == self.name or path.startswith(self.name + "/")

    def public_path_contains(self, path: str) -> bool:
        prefix = self.public_path_prefix
        return path.startswith(prefix) or path == prefix.rstrip("/")

    def dependency_on(self, other: "Package") -> bool:
        return other.name in self.dependencies

    def visible_to_package(self, other: "Package") -> bool:
        return other.name in self.visible_to
