"""Custom exception definitions for CBOMkit."""

from typing import Any


class CBOMKitError(Exception):
    """Base exception for all CBOMkit errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ClientDisconnectedError(CBOMKitError):
    """Raised when the progress sink can no longer reach its client."""


class UnreadableFileError(CBOMKitError):
    """Raised when a source file cannot be decoded with any supported encoding."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unreadable file error.

        Args:
            message: Error message.
            file_path: Path of the file that could not be read.
            details: Additional error details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)


class CBOMSerializationError(CBOMKitError):
    """Raised when a CBOM cannot be converted to or from JSON, or written."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize serialization error.

        Args:
            message: Error message.
            operation: Operation that failed (build/parse/write/read).
            details: Additional error details.
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class MissingBuildArtifactsError(CBOMKitError):
    """Raised when a scan requires prior build output and none was supplied."""

    def __init__(
        self,
        message: str,
        language: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize missing build artifacts error.

        Args:
            message: Error message.
            language: Language whose scan was refused.
            details: Additional error details.
        """
        details = details or {}
        if language:
            details["language"] = language
        super().__init__(message, details)


class InvalidExcludePatternError(CBOMKitError):
    """Raised when an exclude pattern is not a valid regular expression."""

    def __init__(
        self,
        message: str,
        pattern: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid exclude pattern error.

        Args:
            message: Error message.
            pattern: The offending pattern.
            details: Additional error details.
        """
        details = details or {}
        if pattern is not None:
            details["pattern"] = pattern
        super().__init__(message, details)


class ConfigurationError(CBOMKitError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class GitError(CBOMKitError):
    """Exception raised when git provenance cannot be read."""

    def __init__(
        self,
        message: str,
        repo_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize Git error.

        Args:
            message: Error message.
            repo_path: Path of the repository involved.
            details: Additional error details.
        """
        details = details or {}
        if repo_path:
            details["repo_path"] = repo_path
        super().__init__(message, details)


class DetectorLoadError(CBOMKitError):
    """Raised when a detector reference cannot be imported or instantiated."""


class ModuleScanError(CBOMKitError):
    """Raised when a detector fails on a module."""

    def __init__(
        self,
        message: str,
        module: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize module scan error.

        Args:
            message: Error message.
            module: Identifier of the module being scanned.
            details: Additional error details.
        """
        details = details or {}
        if module is not None:
            details["module"] = module
        super().__init__(message, details)
