"""Command line interface.

Usage:
    # Import the open dataset into the database
    feiras import --file DEINFO_AB_FEIRASLIVRES_2014.csv

    # Import with 16 workers and a latin-1 encoded file
    feiras import --file feiras.csv --pool-size 16 --encoding latin-1

    # Serve the REST API
    feiras serve --port 8080
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from app.core.config import get_settings
from app.core.database import create_engine, get_session_maker
from app.core.logging import configure_logging, get_logger
from app.features.importer import ImportFileError, run_import
from app.features.markets.repository import MarketRepository

logger = get_logger(__name__)


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an integer: {value}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="feiras",
        description="Street market (feiras livres) registry: CSV import and REST API",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import a CSV into the database")
    import_parser.add_argument(
        "-f",
        "--file",
        type=Path,
        required=True,
        help="CSV file path that should be imported",
    )
    import_parser.add_argument(
        "-d",
        "--database-url",
        default=None,
        help="Database URL (default: DATABASE_URL)",
    )
    import_parser.add_argument(
        "-p",
        "--pool-size",
        type=positive_int,
        default=None,
        help="Number of concurrent upsert workers (default: IMPORT_POOL_SIZE)",
    )
    import_parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding of the CSV file (default: utf-8)",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the REST API server")
    serve_parser.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default: API_PORT)",
    )

    return parser


async def import_command(args: argparse.Namespace) -> int:
    """Run the import and print its report and duration.

    Returns:
        Process exit code.
    """
    pool_size = args.pool_size or get_settings().import_pool_size
    engine = create_engine(args.database_url, pool_size=pool_size)
    repository = MarketRepository(get_session_maker(engine))
    start = time.perf_counter()

    try:
        report = await run_import(
            args.file,
            repository,
            pool_size=pool_size,
            encoding=args.encoding,
        )
    except ImportFileError as e:
        logger.error("cli.import_failed", error=str(e), error_type=type(e).__name__)
        print(f"could not import: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print(report, end="")
    print(f"{time.perf_counter() - start:.3f}s")
    return 0


def serve_command(args: argparse.Namespace) -> int:
    """Serve the API with uvicorn until interrupted."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging()

    if args.command == "import":
        return asyncio.run(import_command(args))
    return serve_command(args)


if __name__ == "__main__":
    sys.exit(main())
