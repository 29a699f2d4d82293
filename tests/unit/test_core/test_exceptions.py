"""Tests for the exception hierarchy."""

from cbomkit.core.exceptions import (
    CBOMKitError,
    CBOMSerializationError,
    ClientDisconnectedError,
    InvalidExcludePatternError,
    MissingBuildArtifactsError,
    ModuleScanError,
)


class TestErrors:
    """Tests for error details and formatting."""

    def test_message_only(self) -> None:
        """Test an error without details."""
        error = ClientDisconnectedError("Client disconnected")

        assert str(error) == "Client disconnected"
        assert isinstance(error, CBOMKitError)

    def test_details_in_string(self) -> None:
        """Test that details are appended to the message."""
        error = InvalidExcludePatternError("Invalid exclude pattern", pattern="(")

        assert error.details == {"pattern": "("}
        assert str(error) == "Invalid exclude pattern - Details: {'pattern': '('}"

    def test_keyword_details_merge(self) -> None:
        """Test that keyword arguments are merged into details."""
        error = CBOMSerializationError("boom", operation="write", details={"error": "disk full"})

        assert error.details == {"error": "disk full", "operation": "write"}

    def test_module_and_language(self) -> None:
        """Test scan related errors."""
        assert ModuleScanError("failed", module="core").details == {"module": "core"}
        assert MissingBuildArtifactsError("missing", language="java").details == {"language": "java"}
