"""
Tests for the file operations FastAPI application.
"""

import asyncio
import errno
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock
import pytest
from fastapi.testclient import TestClient

from fileops.config import Settings
from fileops.filesystem import FileManager, FileOperationError
from fileops.main import DownloadResponse, app, create_app


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def settings(temp_dir):
    """Settings pointing at files inside the temporary directory."""
    return Settings(
        download_path=os.path.join(temp_dir, "file.zip"),
        folder_path=os.path.join(temp_dir, "folder"),
        chunk_size=8,
    )


@pytest.fixture
def client(settings):
    """Test client for an app built from the temporary settings."""
    with TestClient(create_app(settings)) as client:
        yield client


def test_health_check():
    """Test the health check endpoint."""
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_download_file(client, settings):
    """Test downloading the configured file streams it as an attachment."""
    content = b"PK\x03\x04" + b"zip payload " * 10
    Path(settings.download_path).write_bytes(content)

    response = client.get("/download-file")

    assert response.status_code == 200
    assert response.content == content
    assert response.headers["content-length"] == str(len(content))
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == 'attachment; filename="file.zip"'


def test_download_missing_file(client, settings):
    """Test a missing download returns the structured error payload."""
    response = client.get("/download-file")

    assert response.status_code == 500
    assert response.json() == {
        "error": "File not found",
        "operation": "download",
        "filePath": settings.download_path,
    }


def test_delete_folder(client, settings):
    """Test deleting the configured folder removes the tree."""
    folder = Path(settings.folder_path)
    (folder / "nested").mkdir(parents=True)
    (folder / "nested" / "file.txt").write_text("content")

    response = client.delete("/delete-folder")

    assert response.status_code == 200
    assert response.json() == {"message": "Folder deleted successfully"}
    assert not folder.exists()


def test_delete_missing_folder(client, settings):
    """Test deleting a missing folder returns the structured error payload."""
    response = client.delete("/delete-folder")

    assert response.status_code == 500
    assert response.json() == {
        "error": "File not found",
        "operation": "deleteFolder",
        "filePath": os.path.abspath(settings.folder_path),
    }


@pytest.mark.parametrize("method, url", [
    ("get", "/download-file"),
    ("delete", "/delete-folder"),
])
def test_unexpected_error(settings, method, url):
    """Test errors that were not normalized get the generic payload."""
    file_manager = FileManager()
    file_manager.perform_operation = AsyncMock(side_effect=RuntimeError("boom"))

    with TestClient(create_app(settings, file_manager=file_manager)) as client:
        response = getattr(client, method)(url)

    assert response.status_code == 500
    assert response.json() == {"error": "An unexpected error occurred"}


@pytest.mark.asyncio
async def test_download_broken_connection(settings):
    """Test a connection lost while sending headers gets no error response."""
    Path(settings.download_path).write_bytes(b"payload")
    messages = []

    async def receive():
        await asyncio.Event().wait()

    async def send(message):
        messages.append(message)
        raise OSError(errno.EPIPE, "Broken pipe")

    scope = {"type": "http", "asgi": {"spec_version": "2.4"}}
    response = DownloadResponse(FileManager(), settings.download_path)

    with pytest.raises(FileOperationError) as exc_info:
        await response(scope, receive, send)

    assert exc_info.value.operation == "download"
    assert [message["type"] for message in messages] == ["http.response.start"]
