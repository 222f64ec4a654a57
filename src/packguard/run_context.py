"""
RunContext: composition root of a check run.

Wires configuration, inflection, name resolution and the PackageSet
into the per-file pipeline:

    file -> RawUsages -> References -> Offenses

The PackageSet and resolver index are built once, before any file is
processed, and only read afterwards. Each file is processed
independently, so files can be spread over a thread pool and the
results concatenated.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Type, Union

from packguard.checkers import DEFAULT_CHECKERS, Checker, ReferenceChecker
from packguard.configuration import DEFAULT_LOAD_PATH_GLOBS, Configuration
from packguard.constant_discovery import ConstantDiscovery
from packguard.constant_resolver import ConstantResolver
from packguard.file_processor import FileProcessor
from packguard.globbing import any_match, expand
from packguard.inflector import Inflector
from packguard.inspectors import AssociationInspector, ConstantNameInspector, SymbolInspector
from packguard.model import FileError, FileResult, Offense, Reference, RunResult, UnresolvedUsage
from packguard.package_set import PackageSet


logger = logging.getLogger(__name__)

# seconds between cancel checks while waiting on a worker
CANCEL_POLL_INTERVAL = 0.05


class RunContext:
    """Holds the context of a run across many files."""

    def __init__(
        self,
        configuration: Configuration,
        inflector: Optional[Inflector] = None,
        checker_classes: Sequence[Type[Checker]] = DEFAULT_CHECKERS,
        package_set: Optional[PackageSet] = None,
    ):
        self.configuration = configuration
        self.inflector = inflector or Inflector()
        self.checker_classes = list(checker_classes)
        self._package_set = package_set
        self._resolver: Optional[ConstantResolver] = None
        self._context_provider: Optional[ConstantDiscovery] = None
        self._file_processor: Optional[FileProcessor] = None

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> "RunContext":
        inflector = Inflector.from_file(configuration.inflections_path)
        return cls(configuration=configuration, inflector=inflector)

    @property
    def root_path(self) -> Path:
        return self.configuration.root_path

    @property
    def package_set(self) -> PackageSet:
        if self._package_set is None:
            self._package_set = PackageSet.load_all_from(
                self.configuration, package_pathspec=self.configuration.package_paths
            )
        return self._package_set

    @property
    def load_paths(self) -> List[str]:
        """Configured load paths, or app/* and lib under every package."""
        if self.configuration.load_paths is not None:
            return list(self.configuration.load_paths)

        root = str(self.root_path)
        load_paths: List[str] = []
        for package in self.package_set:
            base = "" if package.root else package.name + "/"
            for pattern in DEFAULT_LOAD_PATH_GLOBS:
                for path in expand(root, base + pattern):
                    relative = Path(path).relative_to(self.root_path).as_posix()
                    if Path(path).is_dir() and relative not in load_paths:
                        load_paths.append(relative)
        return load_paths

    @property
    def resolver(self) -> ConstantResolver:
        if self._resolver is None:
            self._resolver = ConstantResolver(
                root_path=self.root_path,
                load_paths=self.load_paths,
                inflector=self.inflector,
            )
        return self._resolver

    @property
    def context_provider(self) -> ConstantDiscovery:
        if self._context_provider is None:
            self._context_provider = ConstantDiscovery(
                constant_resolver=self.resolver,
                packages=self.package_set,
            )
        return self._context_provider

    @property
    def file_processor(self) -> FileProcessor:
        if self._file_processor is None:
            self._file_processor = FileProcessor(
                root_path=self.root_path,
                inspectors=self.constant_name_inspectors,
            )
        return self._file_processor

    @property
    def constant_name_inspectors(self) -> List[SymbolInspector]:
        return [
            ConstantNameInspector(),
            AssociationInspector(
                inflector=self.inflector,
                custom_associations=self.configuration.custom_associations,
            ),
        ]

    def checkers(self) -> List[Checker]:
        return [checker_class() for checker_class in self.checker_classes]

    def prepare(self) -> None:
        """Build everything shared between files. Idempotent."""
        self.context_provider.resolver.build_index()

    def process_file(self, file: Union[str, Path]) -> List[Offense]:
        """Offenses found in one file, in source order."""
        return self._process(file).offenses

    def _process(self, file: Union[str, Path]) -> FileResult:
        usages = self.file_processor.call(file)
        relative = self.file_processor.relative_path(file)
        referencing_package = self.package_set.package_from_path(relative)
        reference_checker = ReferenceChecker(self.checkers())
        result = FileResult(file=relative)

        for usage in usages:
            context = self.context_provider.context_for(usage.symbol_name, usage.namespace_path)
            if context is None:
                if self.configuration.strict_resolution:
                    logger.warning("Unresolved symbol %s at %s", usage.symbol_name, usage.location)
                    result.unresolved.append(UnresolvedUsage(
                        symbol_name=usage.symbol_name,
                        location=usage.location,
                        referencing_package=referencing_package,
                    ))
                else:
                    logger.debug("Dropping unresolved symbol %s at %s", usage.symbol_name, usage.location)
                continue

            reference = Reference(
                referencing_package=referencing_package,
                symbol_name=context.name,
                source_location=usage.location,
                resolved_definition_location=context.location,
                referenced_package=context.package,
            )
            result.offenses.extend(reference_checker.call(reference))

        return result

    def process_files(
        self,
        files: Iterable[Union[str, Path]],
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> RunResult:
        """
        Check many files.

        A file that fails is recorded in RunResult.errors and the run
        carries on. Results are merged in the order files were given.

        Setting `cancel`, or running longer than `timeout` seconds, stops
        the run: no further file is started, results of files still in
        flight are discarded and RunResult.cancelled is set.
        """
        files = list(files)
        self.prepare()
        run_result = RunResult()
        deadline = time.monotonic() + timeout if timeout is not None else None

        def stopped() -> bool:
            if cancel is not None and cancel.is_set():
                return True
            return deadline is not None and time.monotonic() >= deadline

        if self.configuration.parallel and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.configuration.jobs) as executor:
                futures = [executor.submit(self._process, file) for file in files]
                for file, future in zip(files, futures):
                    if not self._wait(future, stopped):
                        executor.shutdown(wait=False, cancel_futures=True)
                        run_result.cancelled = True
                        break
                    self._collect(run_result, file, future.result)
        else:
            for file in files:
                if stopped():
                    run_result.cancelled = True
                    break
                self._collect(run_result, file, partial(self._process, file))

        if run_result.cancelled:
            logger.warning("Run stopped before all %d files were checked", len(files))
        logger.info(
            "Checked %d files: %d offenses, %d errors",
            len(files), len(run_result.offenses), len(run_result.errors),
        )
        return run_result

    @staticmethod
    def _wait(future: Future, stopped: Callable[[], bool]) -> bool:
        """Wait for `future` to finish. False if the run was stopped first."""
        while not stopped():
            done, _ = wait([future], timeout=CANCEL_POLL_INTERVAL)
            if done:
                return not stopped()
        return False

    def _collect(self, run_result: RunResult, file: Union[str, Path], outcome: Callable[[], FileResult]) -> None:
        try:
            run_result.add(outcome())
        except Exception as e:
            logger.warning("Failed to process %s: %s", file, e)
            run_result.errors.append(FileError(file=str(file), message=str(e)))

    def find_files(self) -> List[str]:
        """Root-relative files matched by `include` and not by `exclude`."""
        root = str(self.root_path)
        files: List[str] = []
        for pattern in self.configuration.include:
            for path in expand(root, pattern):
                if not Path(path).is_file():
                    continue
                relative = Path(path).relative_to(self.root_path).as_posix()
                if any_match(self.configuration.exclude, relative):
                    continue
                if relative not in files:
                    files.append(relative)
        return files
