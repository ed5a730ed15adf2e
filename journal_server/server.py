#!/usr/bin/env python3
"""CLI entrypoint for running the journal API with Uvicorn."""

import argparse
import logging
import os

import uvicorn

from .config import get_settings


def _parse_args(argv=None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Journal summary server")
    parser.add_argument("--host", default=settings.server_host, help=f"Host to bind (default: {settings.server_host})")
    parser.add_argument(
        "--port", type=int, default=settings.server_port, help=f"Port to bind (default: {settings.server_port})"
    )
    parser.add_argument("--data-dir", default=None, help=f"SQLite and entry log directory (default: {settings.data_dir})")
    parser.add_argument("--log-level", default=None, help="Log level for the journal.server logger")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)

    # The app is imported by string, so overrides travel through the environment.
    if args.data_dir:
        os.environ["JOURNAL_DATA_DIR"] = args.data_dir
    if args.log_level:
        os.environ["JOURNAL_LOG_LEVEL"] = args.log_level
    get_settings.cache_clear()

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)

    uvicorn.run(
        "journal_server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
