"""
Administrative entry point.

Usage:
  voter-api --version
  voter-api start [--port 3000] [--host 127.0.0.1] [--file-path data/voters.json]
  voter-api restore [--target data/voters.json.bak] [--destination data/voters.json]
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import uvicorn

from . import __version__
from .config import get_settings
from .errors import StorageError
from .main import create_app
from .provider import get_repository
from .storage import JsonVoterStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(
        prog="voter-api",
        description="Voter registration store: administrative commands",
    )
    ap.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command")

    start = sub.add_parser("start", help="Start the HTTP server")
    start.add_argument(
        "-p", "--port", type=int, default=settings.port, help="The port on which to start the server"
    )
    start.add_argument("--host", default=settings.host, help="Interface to bind")
    start.add_argument(
        "-f", "--file-path", default=settings.db_path, help="The file path to the JSON DB"
    )

    restore = sub.add_parser("restore", help="Restore the snapshot file from a backup file")
    restore.add_argument(
        "-t", "--target", default=settings.backup_path, help="Backup file to restore from"
    )
    restore.add_argument(
        "-f", "--destination", default=settings.db_path, help="The file path to the JSON DB"
    )
    return ap


def start(host: str, port: int, file_path: str) -> None:
    settings = replace(get_settings(), db_path=file_path)
    app = create_app(get_repository(settings))
    logger.info(f"Starting voter API on http://{host}:{port} ({settings.backend} backend)")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def restore(target: str, destination: str) -> None:
    store = JsonVoterStore(destination)
    store.restore(target)
    print(f"Restored {destination} from {target}")


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=get_settings().log_level)

    try:
        if args.command == "start":
            start(args.host, args.port, args.file_path)
            return 0
        if args.command == "restore":
            restore(args.target, args.destination)
            return 0
    except StorageError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    ap.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
