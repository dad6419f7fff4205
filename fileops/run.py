#!/usr/bin/env python3
"""Main entry point for the file operations API server."""

import argparse
import logging
import sys
from typing import List, Optional

from fileops.config import ConfigurationError, Settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="File Operations API server")
    parser.add_argument("--host", help="Interface to bind (default: FILEOPS_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: FILEOPS_PORT or 3000)")
    parser.add_argument("--log-level", help="Logging level (default: FILEOPS_LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command line overrides applied."""
    settings = Settings.from_env()
    return Settings(
        download_path=settings.download_path,
        folder_path=settings.folder_path,
        chunk_size=settings.chunk_size,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=args.log_level or settings.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Configure logging and serve the API until interrupted."""
    args = parse_args(argv)
    try:
        settings = load_settings(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    import uvicorn
    from fileops.main import create_app

    app = create_app(settings)
    logging.getLogger("fileops").info(f"Server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
