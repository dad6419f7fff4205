"""
FastAPI application exposing the file operations over HTTP.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send

from .config import Settings, get_settings
from .filesystem import ASGIDownloadSink, FileManager, FileOperationError, Operation
from .models import ErrorResponse, HealthResponse, MessageResponse

logger = logging.getLogger(__name__)


def error_response(error: BaseException) -> JSONResponse:
    """500 response describing a failed operation."""
    if isinstance(error, FileOperationError):
        logger.error(f"FileOperationError: {error.message}")
        payload = ErrorResponse(
            error=error.message, operation=error.operation, file_path=error.file_path
        )
    else:
        logger.error(f"Unexpected error: {error!r}")
        payload = ErrorResponse(error="An unexpected error occurred")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=payload.model_dump(by_alias=True, exclude_none=True),
    )


class DownloadResponse(Response):
    """
    Response streaming a file through the dispatcher's download operation.

    The response owns the ASGI ``send`` channel and hands it to the
    dispatcher as a sink. Failures before the first byte is sent turn into a
    500 error payload; failures after that can only drop the connection.
    """

    def __init__(self, file_manager: FileManager, file_path: str):
        super().__init__()
        self.file_manager = file_manager
        self.file_path = file_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        sink = ASGIDownloadSink(scope, receive, send)
        try:
            await self.file_manager.perform_operation(
                Operation.DOWNLOAD, self.file_path, sink=sink
            )
        except Exception as error:
            if sink.started:
                logger.error(f"Download of {self.file_path} failed mid-stream: {error}")
                raise
            await error_response(error)(scope, receive, send)
            return

        if self.background is not None:
            await self.background()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_file_manager(request: Request) -> FileManager:
    return request.app.state.file_manager


def create_app(
    settings: Optional[Settings] = None,
    file_manager: Optional[FileManager] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings, loaded from the environment when omitted
        file_manager: Dispatcher to use, built from ``settings`` when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    file_manager = file_manager or FileManager(chunk_size=settings.chunk_size)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"File operations API starting (download: {settings.download_path}, "
            f"folder: {settings.folder_path})"
        )
        yield
        logger.info("File operations API shutting down")

    app = FastAPI(title="File Operations API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.file_manager = file_manager

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse()

    @app.get("/download-file", responses={500: {"model": ErrorResponse}})
    async def download_file(
        settings: Settings = Depends(get_app_settings),
        file_manager: FileManager = Depends(get_file_manager),
    ):
        """Stream the configured file as an attachment."""
        return DownloadResponse(file_manager, settings.download_path)

    @app.delete(
        "/delete-folder",
        response_model=MessageResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def delete_folder(
        settings: Settings = Depends(get_app_settings),
        file_manager: FileManager = Depends(get_file_manager),
    ):
        """Delete the configured folder and everything below it."""
        try:
            await file_manager.perform_operation(Operation.DELETE_FOLDER, settings.folder_path)
        except Exception as error:
            return error_response(error)
        return MessageResponse(message="Folder deleted successfully")

    return app


app = create_app()
