"""
File operation dispatcher.

``FileManager`` is the single entry point for reading, writing, deleting and
streaming files. Every failure it surfaces is a ``FileOperationError``.
"""

import asyncio
import logging
import os
import shutil
import sys
from typing import Any, Dict, Mapping, Optional, Union

import aiofiles
import aiofiles.os
from starlette.responses import FileResponse

from .exceptions import FileOperationError, InvalidOperationError
from .operations import (
    DeleteFolderRequest,
    DeleteRequest,
    DownloadRequest,
    FileOptions,
    Operation,
    OperationRequest,
    ReadRequest,
    WriteRequest,
    build_request,
)
from .sinks import DownloadSink

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

TEXT_ENCODING = "utf-8"


def _ignore_missing(func, path, exc) -> None:
    """rmtree error hook skipping entries that disappeared mid-removal."""
    if isinstance(exc, tuple):
        exc = exc[1]
    if isinstance(exc, FileNotFoundError):
        return
    raise exc


def _remove_tree(path: str) -> None:
    if os.path.islink(path):
        os.unlink(path)
        return
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_ignore_missing)
    else:
        shutil.rmtree(path, onerror=_ignore_missing)


class FileManager:
    """
    Runs file operations behind one asynchronous interface.

    Paths are resolved to absolute form before use. Optional pre-conditions
    (existence check, parent directory creation) run before the operation
    itself, and any failure is normalized exactly once.
    """

    # Operation -> handler method
    HANDLERS = {
        Operation.READ: "_read",
        Operation.WRITE: "_write",
        Operation.DELETE: "_delete",
        Operation.DELETE_FOLDER: "_delete_folder",
        Operation.DOWNLOAD: "_download",
    }

    # Operations honouring options.ensure_exists / options.mkdir
    ENSURE_EXISTS_OPERATIONS = (Operation.READ, Operation.DOWNLOAD)
    MKDIR_OPERATIONS = (Operation.WRITE,)

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize FileManager.

        Args:
            chunk_size: Size of the chunks a download is streamed in
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    async def perform_operation(
        self,
        operation: Union[str, Operation],
        file_path: Any,
        options: Union[FileOptions, Mapping[str, Any], None] = None,
        data: Union[str, bytes, None] = None,
        sink: Optional[DownloadSink] = None,
    ) -> Any:
        """
        Perform a file operation described by a loose config.

        Args:
            operation: ``read``, ``write``, ``delete``, ``deleteFolder`` or ``download``
            file_path: Path of the file or directory
            options: ``ensure_exists``/``ensureExists``, ``mkdir`` and ``binary`` flags
            data: Content to write (write only)
            sink: Output sink to stream into (download only)

        Returns:
            The operation result, see ``execute``

        Raises:
            FileOperationError: If the operation fails for any reason
        """
        try:
            request = build_request(operation, file_path, options=options, data=data, sink=sink)
        except Exception as error:
            name = operation.value if isinstance(operation, Operation) else str(operation)
            raise self._normalize(error, name, file_path) from error

        return await self.execute(request)

    async def execute(self, request: OperationRequest) -> Any:
        """
        Run a typed operation request.

        Returns:
            read: file contents (``str``, or ``bytes`` with ``options.binary``)
            write: ``"File written successfully"``
            delete: ``"File deleted successfully"``
            deleteFolder: ``"Folder deleted successfully"``
            download: ``None`` once the sink has been fully written

        Raises:
            FileOperationError: If the operation fails for any reason
        """
        operation = getattr(request, "operation", None)
        name = operation.value if isinstance(operation, Operation) else str(operation)

        try:
            full_path = self._resolve_path(request.file_path)
            options = getattr(request, "options", FileOptions())

            if options.ensure_exists and operation in self.ENSURE_EXISTS_OPERATIONS:
                await self._check_exists(full_path, "ensureExists")

            if options.mkdir and operation in self.MKDIR_OPERATIONS:
                await aiofiles.os.makedirs(os.path.dirname(full_path), exist_ok=True)

            handler_name = self.HANDLERS.get(operation)
            if handler_name is None:
                raise InvalidOperationError()

            return await getattr(self, handler_name)(request, full_path)

        except FileOperationError as error:
            logger.warning(f"{error.operation} failed for {error.file_path}: {error.message}")
            raise
        except Exception as error:
            raise self._normalize(error, name, getattr(request, "file_path", "")) from error

    def _resolve_path(self, file_path: Union[str, os.PathLike]) -> str:
        """Absolute form of ``file_path``; symlinks are left alone."""
        return os.path.abspath(os.fspath(file_path))

    def _normalize(self, error: BaseException, operation: str, file_path: Any) -> FileOperationError:
        wrapped = FileOperationError.wrap(error, operation, file_path)
        logger.warning(f"{operation} failed for {wrapped.file_path}: {wrapped.message}")
        return wrapped

    async def _check_exists(self, full_path: str, operation: str) -> None:
        """
        Verify that ``full_path`` exists.

        Raises:
            FileOperationError: Tagged with ``operation`` when the path is missing
        """
        try:
            await aiofiles.os.stat(full_path)
        except Exception as error:
            raise FileOperationError.wrap(error, operation, full_path) from error

    async def _read(self, request: ReadRequest, full_path: str) -> Union[str, bytes]:
        if request.options.binary:
            async with aiofiles.open(full_path, "rb") as f:
                content = await f.read()
        else:
            async with aiofiles.open(full_path, "r", encoding=TEXT_ENCODING, newline="") as f:
                content = await f.read()
        logger.debug(f"Read file: {full_path}")
        return content

    async def _write(self, request: WriteRequest, full_path: str) -> str:
        data = request.data
        if request.options.binary:
            if isinstance(data, str):
                data = data.encode(TEXT_ENCODING)
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(data)
        else:
            if isinstance(data, (bytes, bytearray)):
                data = bytes(data).decode(TEXT_ENCODING)
            async with aiofiles.open(full_path, "w", encoding=TEXT_ENCODING, newline="") as f:
                await f.write(data)
        logger.info(f"Wrote file: {full_path}")
        return "File written successfully"

    async def _delete(self, request: DeleteRequest, full_path: str) -> str:
        await self._check_exists(full_path, Operation.DELETE.value)
        await aiofiles.os.remove(full_path)
        logger.info(f"Deleted file: {full_path}")
        return "File deleted successfully"

    async def _delete_folder(self, request: DeleteFolderRequest, full_path: str) -> str:
        await self._check_exists(full_path, Operation.DELETE_FOLDER.value)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _remove_tree, full_path)
        logger.info(f"Deleted folder: {full_path}")
        return "Folder deleted successfully"

    async def _download(self, request: DownloadRequest, full_path: str) -> None:
        sink = request.sink
        sent = 0
        async with aiofiles.open(full_path, "rb") as f:
            stat_result = os.fstat(f.fileno())
            try:
                await sink.start(self._download_headers(full_path, stat_result))
                while True:
                    chunk = await f.read(self.chunk_size)
                    if not chunk:
                        break
                    await sink.write(chunk)
                    sent += len(chunk)
                await sink.finish()
            except Exception:
                await sink.abort()
                raise

        logger.info(f"Streamed file: {full_path} ({sent} bytes)")

    def _download_headers(self, full_path: str, stat_result: os.stat_result) -> Dict[str, str]:
        """Attachment headers Starlette would send for ``full_path``."""
        response = FileResponse(
            full_path,
            filename=os.path.basename(full_path),
            stat_result=stat_result,
        )
        headers = dict(response.headers)
        # Chunks are streamed whole; byte ranges are not served.
        headers.pop("accept-ranges", None)
        return headers


def check_handlers(handlers: Dict[Operation, str]) -> None:
    """Fail unless every Operation has a handler."""
    missing = set(Operation) - set(handlers)
    if missing:
        raise RuntimeError(f"No FileManager handler for: {sorted(op.value for op in missing)}")


check_handlers(FileManager.HANDLERS)
