"""Exception definitions module."""

from cbomkit.core.exceptions.errors import (
    CBOMKitError,
    CBOMSerializationError,
    ClientDisconnectedError,
    ConfigurationError,
    DetectorLoadError,
    GitError,
    InvalidExcludePatternError,
    MissingBuildArtifactsError,
    ModuleScanError,
    UnreadableFileError,
)

__all__ = [
    "CBOMKitError",
    "CBOMSerializationError",
    "ClientDisconnectedError",
    "ConfigurationError",
    "DetectorLoadError",
    "GitError",
    "InvalidExcludePatternError",
    "MissingBuildArtifactsError",
    "ModuleScanError",
    "UnreadableFileError",
]
