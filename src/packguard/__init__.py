"""
packguard: static enforcement of package boundaries.

A codebase is split into named, possibly nested packages, each marked
by a ``package.yml`` file. For every reference to a namespaced symbol,
packguard works out:
    - which package contains the referencing file
    - which package defines the referenced symbol
    - whether that cross-package reference is allowed

Two independent policies are evaluated:
    - dependency: a package may only reference packages it declares
    - privacy: a package may only be referenced through its public path

Parsing source grammars and reporting are left to collaborators.
"""

from packguard.checkers import DependencyChecker, PrivacyChecker, ReferenceChecker
from packguard.configuration import Configuration
from packguard.errors import (
    ConfigurationError,
    DiscoveryError,
    FileProcessingError,
    PackguardError,
)
from packguard.model import Offense, Reference, RunResult, SourceLocation, ViolationType
from packguard.package import Package
from packguard.package_set import PackageSet
from packguard.run_context import RunContext

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "ConfigurationError",
    "DependencyChecker",
    "DiscoveryError",
    "FileProcessingError",
    "Offense",
    "Package",
    "PackageSet",
    "PackguardError",
    "PrivacyChecker",
    "Reference",
    "ReferenceChecker",
    "RunContext",
    "RunResult",
    "SourceLocation",
    "ViolationType",
]
