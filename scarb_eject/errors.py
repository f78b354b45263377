"""Exception hierarchy for scarb-eject.

Every failure that aborts a run derives from :class:`EjectError` so the CLI
can report it with a single message and a non-zero exit code.
"""

from __future__ import annotations


class EjectError(Exception):
    """Base class for all errors that abort an eject run."""

    pass


class UnknownPackage(EjectError):
    """Raised when a package id or selector is not present in the graph."""

    def __init__(self, package_id: str, context: str = "package graph") -> None:
        self.package_id = package_id
        super().__init__(f"package `{package_id}` not found in {context}")


class MissingSourceRoot(EjectError):
    """Raised when a reachable package declares no source directories."""

    def __init__(self, package_name: str) -> None:
        self.package_name = package_name
        super().__init__(f"package `{package_name}` has no source roots")


class DuplicateCrateName(EjectError):
    """Raised when two distinct packages would produce the same crate name."""

    def __init__(self, crate_name: str, first_id: str, second_id: str) -> None:
        self.crate_name = crate_name
        self.first_id = first_id
        self.second_id = second_id
        super().__init__(
            f"crate name `{crate_name}` is used by both `{first_id}` and "
            f"`{second_id}`"
        )


class InvalidCrateName(EjectError):
    """Raised when a package name is not usable as a crate identifier."""

    def __init__(self, crate_name: str, package_id: str) -> None:
        self.crate_name = crate_name
        self.package_id = package_id
        super().__init__(
            f"package `{package_id}` has invalid crate name `{crate_name}`"
        )


class PathResolutionFailure(EjectError):
    """Raised when a source root cannot be rendered for the output location."""

    pass


class SinkWriteFailure(EjectError):
    """Raised when the descriptor cannot be written to its destination."""

    pass


class MetadataError(EjectError):
    """Raised when Scarb metadata cannot be obtained or interpreted."""

    pass


class PackageSelectionError(EjectError):
    """Raised when the main package cannot be chosen unambiguously."""

    pass


__all__ = [
    "DuplicateCrateName",
    "EjectError",
    "InvalidCrateName",
    "MetadataError",
    "MissingSourceRoot",
    "PackageSelectionError",
    "PathResolutionFailure",
    "SinkWriteFailure",
    "UnknownPackage",
]
