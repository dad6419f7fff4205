"""
Unit tests for API response models.
"""

import pytest
from pydantic import ValidationError

from fileops.models import ErrorResponse, HealthResponse, MessageResponse


class TestErrorResponse:
    """Test cases for ErrorResponse."""

    def test_serializes_with_file_path_alias(self):
        """Test the error payload uses the filePath key."""
        payload = ErrorResponse(error="File not found", operation="download", file_path="/tmp/x.zip")

        assert payload.model_dump(by_alias=True, exclude_none=True) == {
            "error": "File not found",
            "operation": "download",
            "filePath": "/tmp/x.zip",
        }

    def test_accepts_alias_on_input(self):
        """Test the model can be built from a serialized payload."""
        payload = ErrorResponse.model_validate({"error": "Permission denied", "filePath": "/srv"})
        assert payload.file_path == "/srv"

    def test_generic_error_omits_context(self):
        """Test errors without context serialize to the error message only."""
        payload = ErrorResponse(error="An unexpected error occurred")
        assert payload.model_dump(by_alias=True, exclude_none=True) == {
            "error": "An unexpected error occurred"
        }

    def test_error_is_required(self):
        """Test the error message is mandatory."""
        with pytest.raises(ValidationError):
            ErrorResponse()


def test_message_and_health_responses():
    """Test the success payloads."""
    assert MessageResponse(message="Folder deleted successfully").model_dump() == {
        "message": "Folder deleted successfully"
    }
    assert HealthResponse().model_dump() == {"status": "healthy"}
