"""
Records flowing through a check run.

    RawUsage      - a symbol name seen at a source location
    Reference     - a usage attributed to its referencing and defining packages
    Offense       - a boundary violation raised for one Reference
    FileError     - a file that could not be processed
    RunResult     - everything a run over many files produced

These are plain data. Creating them has no side effects, and nothing
here knows how they are produced or reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from packguard.package import Package


@dataclass(frozen=True)
class SourceLocation:
    """A root-relative file path and a 1-based line number."""

    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class RawUsage:
    """
    A candidate symbol usage found by an inspector.

    Properties:
        symbol_name:
            The name as written, e.g. "Sales::Order" or "::Order"

        location:
            Where it was written

        namespace_path:
            Lexical namespace the usage appears in, e.g. "Sales::Admin".
            Empty string at top level.
    """

    symbol_name: str
    location: SourceLocation
    namespace_path: str = ""


@dataclass(frozen=True)
class Reference:
    """
    A symbol usage attributed to the package that makes it and,
    when resolvable, to the package that defines the symbol.
    """

    referencing_package: Package
    symbol_name: str
    source_location: SourceLocation
    resolved_definition_location: Optional[str] = None
    referenced_package: Optional[Package] = None


class ViolationType(Enum):
    """Kinds of boundary violation."""
    DEPENDENCY = "dependency"
    PRIVACY = "privacy"


@dataclass(frozen=True)
class Offense:
    """A boundary violation tied to one Reference."""

    kind: ViolationType
    message: str
    location: SourceLocation
    reference: Reference

    def __str__(self) -> str:
        return f"{self.location}\n{self.message}"


@dataclass(frozen=True)
class FileError:
    """A file the run could not process. Never an Offense."""

    file: str
    message: str


@dataclass(frozen=True)
class UnresolvedUsage:
    """A usage whose defining file could not be located."""

    symbol_name: str
    location: SourceLocation
    referencing_package: Package


@dataclass
class FileResult:
    """Outcome of processing a single file."""

    file: str
    offenses: List[Offense] = field(default_factory=list)
    unresolved: List[UnresolvedUsage] = field(default_factory=list)


@dataclass
class RunResult:
    """
    Outcome of a run over many files.

    Offenses keep source order within each file; files appear in the
    order they were submitted.

    `cancelled` is set when the run was stopped before every file was
    checked; the results then cover a prefix of the files only.
    """

    offenses: List[Offense] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)
    unresolved: List[UnresolvedUsage] = field(default_factory=list)
    cancelled: bool = False

    def add(self, result: FileResult) -> None:
        self.offenses.extend(result.offenses)
        self.unresolved.extend(result.unresolved)

    @property
    def ok(self) -> bool:
        return not self.offenses and not self.errors and not self.cancelled
