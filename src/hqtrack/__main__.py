"""Command-line entry point: ``hqtrack`` / ``python -m hqtrack``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import Any

from hqtrack.config import HqConfig
from hqtrack.exceptions import HqError
from hqtrack.server import run_server

_logger = logging.getLogger("hqtrack")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hqtrack",
        description="Ingest *HQ GPS terminal reports into a location store.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listening port (default: $PORT).",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: $HQ_HOST or 0.0.0.0).",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Store URL, e.g. mysql://user:pass@db/tracking or memory:// (default: $DATABASE_URL).",
    )
    parser.add_argument(
        "--idle-timeout",
        type=float,
        default=None,
        help="Seconds without a complete frame before a connection is closed.",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the locations table on startup.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.host is not None:
        overrides["host"] = args.host
    if args.database_url is not None:
        overrides["database_url"] = args.database_url
    if args.idle_timeout is not None:
        overrides["idle_timeout"] = args.idle_timeout
    if args.create_schema:
        overrides["create_schema"] = True
    return overrides


async def _serve(config: HqConfig) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    assert task is not None
    for signum in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signum, task.cancel)

    with contextlib.suppress(asyncio.CancelledError):
        await run_server(config)
    _logger.info("Server stopped")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = HqConfig.from_env(**_overrides(args))
        asyncio.run(_serve(config))
    except HqError as exc:
        print(f"hqtrack: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
