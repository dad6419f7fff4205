"""
Custom exceptions for file system operations.

Raw failures raised while running an operation are translated into a
``FileOperationError`` exactly once, by the dispatcher in ``file_manager``.
"""

import errno
from enum import Enum
from typing import Any, Dict


class FileSystemError(Exception):
    """Base exception for file system operations."""
    pass


class InvalidOperationError(FileSystemError):
    """Raised when an operation name is not one the dispatcher knows."""

    def __init__(self, message: str = "Invalid file operation"):
        super().__init__(message)


class SinkRequiredError(FileSystemError):
    """Raised when a download is requested without an output sink."""

    def __init__(self, message: str = "Response object is required for download"):
        super().__init__(message)


class MissingDataError(FileSystemError):
    """Raised when a write is requested without any data."""

    def __init__(self, message: str = "Data is required for write"):
        super().__init__(message)


class ErrorKind(Enum):
    """Classification of the failures an operation can surface."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    INVALID_OPERATION = "invalid_operation"
    SINK_REQUIRED = "sink_required"
    OTHER = "other"


ERRNO_KINDS = {
    errno.ENOENT: ErrorKind.NOT_FOUND,
    errno.EACCES: ErrorKind.PERMISSION_DENIED,
    errno.ENOTDIR: ErrorKind.NOT_A_DIRECTORY,
    errno.EISDIR: ErrorKind.IS_A_DIRECTORY,
}

ERROR_MESSAGES = {
    ErrorKind.NOT_FOUND: "File not found",
    ErrorKind.PERMISSION_DENIED: "Permission denied",
    ErrorKind.NOT_A_DIRECTORY: "Not a directory",
    ErrorKind.IS_A_DIRECTORY: "Is a directory, not a file",
}


def classify_error(error: BaseException) -> ErrorKind:
    """
    Classify a raw failure.

    OS errors are classified by their ``errno``; the dispatcher's own
    request errors map to their dedicated kinds.

    Args:
        error: The exception to classify

    Returns:
        Matching ErrorKind, ``ErrorKind.OTHER`` when nothing matches
    """
    if isinstance(error, InvalidOperationError):
        return ErrorKind.INVALID_OPERATION
    if isinstance(error, SinkRequiredError):
        return ErrorKind.SINK_REQUIRED
    if isinstance(error, OSError) and error.errno is not None:
        return ERRNO_KINDS.get(error.errno, ErrorKind.OTHER)
    return ErrorKind.OTHER


def format_error_message(error: BaseException) -> str:
    """Human-readable message for a raw failure."""
    message = ERROR_MESSAGES.get(classify_error(error))
    if message is not None:
        return message
    return str(error) or type(error).__name__


class FileOperationError(FileSystemError):
    """
    Normalized error surfaced by every failing file operation.

    Carries the human-readable message, the name of the operation that
    failed, the path involved and the original exception.
    """

    def __init__(self, original_error: BaseException, operation: str, file_path: str):
        self.kind = classify_error(original_error)
        self.message = format_error_message(original_error)
        self.operation = operation
        self.file_path = file_path
        self.original_error = original_error
        super().__init__(self.message)

    @classmethod
    def wrap(cls, error: BaseException, operation: str, file_path: Any) -> "FileOperationError":
        """Build a normalized error for ``error`` raised by ``operation`` on ``file_path``."""
        wrapped = cls(error, operation, str(file_path))
        wrapped.__cause__ = error
        return wrapped

    def to_dict(self) -> Dict[str, str]:
        """Serialize to the error payload returned by the HTTP layer."""
        return {
            "error": self.message,
            "operation": self.operation,
            "filePath": self.file_path,
        }

    def __repr__(self) -> str:
        return (
            f"FileOperationError(message={self.message!r}, "
            f"operation={self.operation!r}, file_path={self.file_path!r})"
        )
