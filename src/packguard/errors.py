"""
Exception hierarchy for packguard.

Fatal errors (configuration, discovery) propagate to the caller.
FileProcessingError is the only one recovered from, at the per-file
boundary of a run.
"""


class PackguardError(Exception):
    """Base class for all packguard errors."""
    pass


class ConfigurationError(PackguardError):
    """Raised when the run configuration or one of its globs is malformed."""
    pass


class DiscoveryError(PackguardError):
    """Raised when the package set cannot be built from the filesystem."""
    pass


class FileProcessingError(PackguardError):
    """Raised when a single source file cannot be read or inspected."""

    def __init__(self, file: str, message: str):
        super().__init__(f"{file}: {message}")
        self.file = file
        self.message = message
