#!/usr/bin/env python3
"""
Demonstration of the file operation dispatcher.

Writes, reads, streams and deletes files inside a temporary directory and
shows the normalized errors returned for failing operations.
"""

import asyncio
import shutil
import tempfile
from pathlib import Path

from fileops.filesystem import DownloadSink, FileManager, FileOperationError


class PrintingSink(DownloadSink):
    """Sink printing what a download sends."""

    async def _start(self, headers, status_code):
        print(f"   Status: {status_code}")
        for name, value in headers.items():
            print(f"   {name}: {value}")

    async def _write(self, chunk):
        print(f"   Chunk: {chunk!r}")

    async def _finish(self):
        print("   Transfer complete")


async def demo_file_manager():
    """Demonstrate FileManager operations."""
    print("=== FileManager Demo ===")

    temp_dir = tempfile.mkdtemp(prefix="fileops_demo_")
    print(f"Using temporary directory: {temp_dir}")
    root = Path(temp_dir)

    try:
        fm = FileManager(chunk_size=16)

        print("\n1. Writing into missing directories:")
        target = root / "a" / "b" / "c.txt"
        result = await fm.perform_operation(
            "write", target, data="hi\nfrom the demo\n", options={"mkdir": True}
        )
        print(f"   {result}")

        print("\n2. Reading the file back:")
        content = await fm.perform_operation("read", target)
        print(f"   Content: {content!r}")

        print("\n3. Streaming the file:")
        await fm.perform_operation("download", target, sink=PrintingSink())

        print("\n4. Deleting the file:")
        print(f"   {await fm.perform_operation('delete', target)}")

        print("\n5. Deleting the folder tree:")
        print(f"   {await fm.perform_operation('deleteFolder', root / 'a')}")

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        print(f"\nCleaned up temporary directory: {temp_dir}")


async def demo_errors():
    """Demonstrate normalized errors."""
    print("\n=== Error Demo ===")

    fm = FileManager()
    failing = [
        ("read", "/nonexistent/file.txt", {"ensureExists": True}),
        ("delete", "/nonexistent/file.txt", None),
        ("deleteFolder", "/nonexistent/folder", None),
        ("rename", "/nonexistent/file.txt", None),
    ]

    for operation, path, options in failing:
        try:
            await fm.perform_operation(operation, path, options=options)
        except FileOperationError as e:
            print(f"   {operation}: {e.to_dict()}")


async def main():
    """Run all demonstrations."""
    await demo_file_manager()
    await demo_errors()


if __name__ == "__main__":
    asyncio.run(main())
