#!/usr/bin/env python3
"""CLI for certificate share service management tasks.

Usage:
    python -m cli <command>

Commands:
    import-csv <path>  Import participants from a name,date CSV file
    serve              Run the web server under uvicorn
"""

import argparse
import os
import sys
from pathlib import Path

from core.config import clear_settings_cache, get_settings
from core.errors import StorageError, UserInputError
from core.logger import configure_logging, get_logger

logger = get_logger(__name__)

IMPORT_USAGE = """\
Usage: certshare import-csv <path-to-csv>
CSV format: name,date
Example:    Jane Doe,2026-02-13"""


def cmd_import_csv(csv_path: str | None) -> int:
    """Import participants from a CSV file and print their links."""
    from repositories.participant_repository import ParticipantRepository
    from services.certificates_service import build_cert_url, build_claim_url
    from services.import_service import import_csv

    if not csv_path:
        print(IMPORT_USAGE, file=sys.stderr)
        return 1

    settings = get_settings()
    repo = ParticipantRepository(settings.data_file_path)

    try:
        result = import_csv(Path(csv_path), repo)
    except UserInputError as e:
        print(str(e), file=sys.stderr)
        return 1
    except StorageError as e:
        logger.error("import.storage_failed", error=str(e))
        return 1

    if not result.participants:
        print("No participants found in CSV.")
        return 0

    print(f"\nImported {result.imported_count} participant(s):\n")
    for participant in result.participants:
        print(f"  {participant.name}")
        print(f"  Public:  {build_cert_url(participant, settings)}")
        print(f"  Claim:   {build_claim_url(participant, settings)}")
        print()
    return 0


def cmd_serve(host: str, port: int | None, reload: bool) -> int:
    """Run the web server.

    An explicit ``--port`` is exported as ``PORT`` so the app (and reload
    workers) derive the default BASE_URL from the port actually bound.
    """
    import uvicorn

    if port is not None:
        os.environ["PORT"] = str(port)
        clear_settings_cache()

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=host,
        port=settings.port,
        reload=reload,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Certificate share service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser(
        "import-csv",
        help="Import participants from a name,date CSV file",
    )
    # Optional so a missing path gets the usage text and exit status 1
    import_parser.add_argument("path", nargs="?", help="Path to the CSV file")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the web server",
    )
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if args.command == "import-csv":
        return cmd_import_csv(args.path)
    elif args.command == "serve":
        return cmd_serve(args.host, args.port, args.reload)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
