"""
File system operations module.

This module provides a single asynchronous dispatcher for reading, writing,
deleting and streaming files, and the normalized error it raises.
"""

from .file_manager import FileManager
from .operations import (
    Operation,
    FileOptions,
    OperationRequest,
    ReadRequest,
    WriteRequest,
    DeleteRequest,
    DeleteFolderRequest,
    DownloadRequest,
    build_request,
)
from .sinks import DownloadSink, ASGIDownloadSink
from .exceptions import (
    FileSystemError,
    FileOperationError,
    InvalidOperationError,
    SinkRequiredError,
    MissingDataError,
    ErrorKind,
)

__all__ = [
    "FileManager",
    "Operation",
    "FileOptions",
    "OperationRequest",
    "ReadRequest",
    "WriteRequest",
    "DeleteRequest",
    "DeleteFolderRequest",
    "DownloadRequest",
    "build_request",
    "DownloadSink",
    "ASGIDownloadSink",
    "FileSystemError",
    "FileOperationError",
    "InvalidOperationError",
    "SinkRequiredError",
    "MissingDataError",
    "ErrorKind"
]
