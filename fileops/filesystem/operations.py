"""
Request models for the file operation dispatcher.

Each operation has its own request type carrying only the fields that
operation needs: a write always has data, a download always has a sink.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from .exceptions import InvalidOperationError, MissingDataError, SinkRequiredError
from .sinks import DownloadSink


class Operation(Enum):
    """File operations supported by the dispatcher."""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    DELETE_FOLDER = "deleteFolder"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class FileOptions:
    """Optional pre-conditions and encoding switches for an operation."""
    ensure_exists: bool = False
    mkdir: bool = False
    binary: bool = False

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]]) -> "FileOptions":
        """Build options from a plain mapping; ``ensureExists`` is accepted as an alias."""
        if not options:
            return cls()
        ensure_exists = options.get("ensure_exists", options.get("ensureExists", False))
        return cls(
            ensure_exists=bool(ensure_exists),
            mkdir=bool(options.get("mkdir", False)),
            binary=bool(options.get("binary", False)),
        )


@dataclass(frozen=True)
class OperationRequest:
    """Base for all operation requests."""
    operation: ClassVar[Operation]

    file_path: str


@dataclass(frozen=True)
class ReadRequest(OperationRequest):
    """Load a whole file as text, or as bytes when ``options.binary`` is set."""
    operation: ClassVar[Operation] = Operation.READ

    options: FileOptions = field(default_factory=FileOptions)


@dataclass(frozen=True)
class WriteRequest(OperationRequest):
    """Create or overwrite a file with ``data``."""
    operation: ClassVar[Operation] = Operation.WRITE

    data: Union[str, bytes]
    options: FileOptions = field(default_factory=FileOptions)


@dataclass(frozen=True)
class DeleteRequest(OperationRequest):
    """Remove a single file."""
    operation: ClassVar[Operation] = Operation.DELETE

    options: FileOptions = field(default_factory=FileOptions)


@dataclass(frozen=True)
class DeleteFolderRequest(OperationRequest):
    """Remove a directory and everything below it."""
    operation: ClassVar[Operation] = Operation.DELETE_FOLDER

    options: FileOptions = field(default_factory=FileOptions)


@dataclass(frozen=True)
class DownloadRequest(OperationRequest):
    """Stream a file's bytes into ``sink``."""
    operation: ClassVar[Operation] = Operation.DOWNLOAD

    sink: DownloadSink
    options: FileOptions = field(default_factory=FileOptions)

    def __post_init__(self) -> None:
        if self.sink is None:
            raise SinkRequiredError()


REQUEST_TYPES: Dict[Operation, type] = {
    Operation.READ: ReadRequest,
    Operation.WRITE: WriteRequest,
    Operation.DELETE: DeleteRequest,
    Operation.DELETE_FOLDER: DeleteFolderRequest,
    Operation.DOWNLOAD: DownloadRequest,
}


def parse_operation(operation: Union[str, Operation]) -> Operation:
    """
    Resolve an operation name to an Operation.

    Raises:
        InvalidOperationError: If the name is not a known operation
    """
    if isinstance(operation, Operation):
        return operation
    try:
        return Operation(operation)
    except ValueError:
        raise InvalidOperationError() from None


def build_request(
    operation: Union[str, Operation],
    file_path: Any,
    options: Union[FileOptions, Mapping[str, Any], None] = None,
    data: Union[str, bytes, None] = None,
    sink: Optional[DownloadSink] = None,
) -> OperationRequest:
    """
    Turn a loose operation config into a typed request.

    Args:
        operation: Operation name (``read``, ``write``, ``delete``,
            ``deleteFolder``, ``download``) or Operation member
        file_path: Path of the file or directory (``str`` or path-like)
        options: FileOptions or a mapping of option flags
        data: Content to write (write only)
        sink: Output sink (download only)

    Returns:
        The request variant for ``operation``

    Raises:
        InvalidOperationError: Unknown operation name
        MissingDataError: Write without data
        SinkRequiredError: Download without a sink
        TypeError: Path that is neither a string nor path-like
    """
    op = parse_operation(operation)
    if not isinstance(options, FileOptions):
        options = FileOptions.from_dict(options)
    file_path = os.fspath(file_path)
    if not isinstance(file_path, str):
        raise TypeError(f"file path must be str or os.PathLike[str], not {type(file_path).__name__}")

    if op is Operation.WRITE:
        if data is None:
            raise MissingDataError()
        return WriteRequest(file_path=file_path, data=data, options=options)
    if op is Operation.DOWNLOAD:
        return DownloadRequest(file_path=file_path, sink=sink, options=options)
    return REQUEST_TYPES[op](file_path=file_path, options=options)
