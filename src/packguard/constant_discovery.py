"""Symbol name -> (defining file, owning package)."""

from dataclasses import dataclass
from typing import Optional

from packguard.constant_resolver import ConstantResolver
from packguard.package import Package
from packguard.package_set import PackageSet


@dataclass(frozen=True)
class ConstantContext:
    name: str
    location: str
    package: Package


class ConstantDiscovery:
    """Combines name resolution with package ownership."""

    def __init__(self, constant_resolver: ConstantResolver, packages: PackageSet):
        self.resolver = constant_resolver
        self.packages = packages

    def package_from_path(self, path: str) -> Package:
        return self.packages.package_from_path(path)

    def context_for(self, symbol_name: str, namespace_path: str = "") -> Optional[ConstantContext]:
        """
        Where `symbol_name` is defined and which package owns that file.

        None when the resolver cannot locate the symbol (external or
        dynamically defined names).
        """
        resolved = self.resolver.resolve(symbol_name, namespace_path)
        if resolved is None:
            return None
        return ConstantContext(
            name=resolved.name,
            location=resolved.location,
            package=self.packages.package_from_path(resolved.location),
        )
