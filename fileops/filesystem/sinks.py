"""
Output sinks for streamed downloads.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, Optional

from starlette.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)


class DownloadSink(ABC):
    """
    Destination a download writes a file's bytes into.

    A sink is started once with the transfer headers, receives the body in
    chunks and is finished when the transfer completes. A sink aborted after
    a failure accepts no further writes.
    """

    def __init__(self):
        self.started = False
        self.finished = False
        self.aborted = False

    async def start(self, headers: Dict[str, str], status_code: int = 200) -> None:
        """Open the transfer with the given status and headers."""
        if self.started:
            raise RuntimeError("Download sink already started")
        # Marked before the attempt: a failed start still used the channel.
        self.started = True
        await self._start(headers, status_code)

    async def write(self, chunk: bytes) -> None:
        """Send a chunk of the body."""
        if not self.started:
            raise RuntimeError("Download sink not started")
        if self.finished or self.aborted:
            raise RuntimeError("Download sink already closed")
        await self._write(chunk)

    async def finish(self) -> None:
        """Complete the transfer."""
        if not self.started:
            raise RuntimeError("Download sink not started")
        if self.aborted:
            raise RuntimeError("Download sink already closed")
        if not self.finished:
            await self._finish()
            self.finished = True

    async def abort(self) -> None:
        """Stop a transfer that failed part way."""
        if self.started and not self.finished and not self.aborted:
            self.aborted = True
            await self._abort()

    @abstractmethod
    async def _start(self, headers: Dict[str, str], status_code: int) -> None:
        pass

    @abstractmethod
    async def _write(self, chunk: bytes) -> None:
        pass

    @abstractmethod
    async def _finish(self) -> None:
        pass

    async def _abort(self) -> None:
        pass


class ASGIDownloadSink(DownloadSink):
    """
    Sink writing an HTTP response to an ASGI connection.

    The response is a Starlette ``StreamingResponse`` fed from a one-slot
    queue, so every chunk waits for the previous one to be sent.
    """

    def __init__(self, scope: Scope, receive: Receive, send: Send):
        super().__init__()
        self._scope = scope
        self._receive = receive
        self._send = send
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._task: Optional[asyncio.Task] = None

    async def _body(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                break
            yield chunk

    async def _put(self, item: Optional[bytes]) -> None:
        """Queue ``item`` for the response, surfacing a failed response instead."""
        if self._task.done():
            self._task.result()
            raise RuntimeError("Download response ended before the body was sent")

        put = asyncio.ensure_future(self._queue.put(item))
        done, _ = await asyncio.wait({put, self._task}, return_when=asyncio.FIRST_COMPLETED)
        if put not in done:
            put.cancel()
            self._task.result()
            raise RuntimeError("Download response ended before the body was sent")

    async def _start(self, headers: Dict[str, str], status_code: int) -> None:
        response = StreamingResponse(self._body(), status_code=status_code, headers=headers)
        self._task = asyncio.create_task(response(self._scope, self._receive, self._send))

    async def _write(self, chunk: bytes) -> None:
        await self._put(chunk)

    async def _finish(self) -> None:
        await self._put(None)
        await self._task
        logger.debug("Finished streaming download response")

    async def _abort(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        # The caller raises the transfer error; the task's outcome is only collected.
        await asyncio.gather(self._task, return_exceptions=True)
        logger.debug("Aborted streaming download response")
