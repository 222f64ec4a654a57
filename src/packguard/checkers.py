"""
Boundary checkers and the chain that runs them.

A checker is a pure function of a Reference: it either returns one
Offense or None. The ReferenceChecker runs every configured checker,
in order, and keeps every Offense produced; it never stops early, so
one Reference may yield both a dependency and a privacy offense.

Checkers only ever see resolved References (referenced_package set).
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Type

from packguard.model import Offense, Reference, ViolationType


class Checker(ABC):
    """Base class for boundary checkers."""

    violation_type: ViolationType

    @abstractmethod
    def invalid_reference(self, reference: Reference) -> bool:
        ...

    @abstractmethod
    def message(self, reference: Reference) -> str:
        ...

    def check(self, reference: Reference) -> Optional[Offense]:
        if reference.referenced_package is None:
            return None
        if not self.invalid_reference(reference):
            return None
        return Offense(
            kind=self.violation_type,
            message=self.message(reference),
            location=reference.source_location,
            reference=reference,
        )


class DependencyChecker(Checker):
    """
    Fires when a package that enforces dependencies references another
    package it has not declared as a dependency.
    """

    violation_type = ViolationType.DEPENDENCY

    def invalid_reference(self, reference: Reference) -> bool:
        source = reference.referencing_package
        target = reference.referenced_package
        if not source.enforce_dependency:
            return False
        if source == target:
            return False
        return not source.dependency_on(target)

    def message(self, reference: Reference) -> str:
        source = reference.referencing_package
        target = reference.referenced_package
        return (
            f"Dependency violation: {reference.symbol_name} belongs to '{target}', "
            f"but '{source.config_path}' does not specify a dependency on '{target}'.\n"
            "Are we missing an abstraction?\n"
            "Is the code making the reference, and the referenced symbol, in the right packages?\n\n"
            f"Inference details: this is a reference to {reference.symbol_name} "
            f"which seems to be defined in {reference.resolved_definition_location}."
        )


class PrivacyChecker(Checker):
    """
    Fires when a reference lands outside the public path of a package
    that enforces privacy, unless the referencing package is listed in
    its visible_to.
    """

    violation_type = ViolationType.PRIVACY

    def invalid_reference(self, reference: Reference) -> bool:
        source = reference.referencing_package
        target = reference.referenced_package
        if not target.enforce_privacy:
            return False
        if source == target:
            return False
        location = reference.resolved_definition_location
        if location is not None and target.public_path_contains(location):
            return False
        return not target.visible_to_package(source)

    def message(self, reference: Reference) -> str:
        source = reference.referencing_package
        target = reference.referenced_package
        return (
            f"Privacy violation: '{reference.symbol_name}' is private to '{target}' "
            f"but referenced from '{source}'.\n"
            f"Is there a public entrypoint in '{target.public_path_prefix}' that you can use instead?\n\n"
            f"Inference details: this is a reference to {reference.symbol_name} "
            f"which seems to be defined in {reference.resolved_definition_location}."
        )


DEFAULT_CHECKERS: List[Type[Checker]] = [DependencyChecker, PrivacyChecker]


class ReferenceChecker:
    """Runs an ordered list of checkers against each Reference."""

    def __init__(self, checkers: Sequence[Checker]):
        self.checkers = list(checkers)

    def call(self, reference: Reference) -> List[Offense]:
        offenses: List[Offense] = []
        for checker in self.checkers:
            offense = checker.check(reference)
            if offense is not None:
                offenses.append(offense)
        return offenses

    __call__ = call
